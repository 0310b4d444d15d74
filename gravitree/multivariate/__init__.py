"""
Weighted multivariate statistics.

Provides the moment, spectrum and distance primitives of a distance-based
clustering workflow, matching R's numerical conventions.

Public API:
    wcov(x, w)                   - Weighted center and ML covariance
    eigen(cov)                   - Symmetric eigendecomposition, largest first
    mahalanobis(x, center, cov)  - Squared Mahalanobis distances
"""

from gravitree.multivariate.design import MultivariateDesign
from gravitree.multivariate.solution import (
    MomentsParams,
    MomentsSolution,
    SpectrumParams,
    SpectrumSolution,
    MahalanobisParams,
    MahalanobisSolution,
)
from gravitree.multivariate.solvers import (
    wcov,
    eigen,
    mahalanobis,
)

__all__ = [
    "wcov",
    "eigen",
    "mahalanobis",
    "MultivariateDesign",
    "MomentsParams",
    "MomentsSolution",
    "SpectrumParams",
    "SpectrumSolution",
    "MahalanobisParams",
    "MahalanobisSolution",
]
