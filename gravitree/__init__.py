"""
gravitree: numeric primitives for distance-based clustering.

Weighted moments, ordered symmetric spectra, Mahalanobis distances and
compact pairwise-distance storage, following R's numerical conventions.

Submodules:
    multivariate: wcov(), eigen(), mahalanobis()
    dist: as_dist(), as_matrix(), DistVector
"""

__version__ = "0.1.0"

from gravitree import multivariate
from gravitree import dist

__all__ = [
    "__version__",
    "multivariate",
    "dist",
]
