"""
Compact pairwise-distance storage.

Public API:
    as_dist(m)       - Strict lower triangle of a square matrix as a DistVector
    as_matrix(dist)  - Dense symmetric matrix back from a DistVector
"""

from gravitree.dist.solution import DistVector
from gravitree.dist.solvers import as_dist, as_matrix

__all__ = [
    "as_dist",
    "as_matrix",
    "DistVector",
]
