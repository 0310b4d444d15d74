"""
Numerical precision constants and utilities.

Provides float64 machine epsilon and the conditioning helpers used to decide
whether a matrix can be inverted reliably.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


# Machine epsilon for float64
EPSILON_64: float = np.finfo(np.float64).eps  # ~2.22e-16


def condition_number(A: NDArray[np.floating[Any]]) -> float:
    """
    Compute the 2-norm condition number of a matrix using SVD.

    Args:
        A: Input matrix

    Returns:
        Condition number (ratio of largest to smallest singular value).
        Returns inf if the matrix is singular, including the zero matrix.
    """
    if A.size == 0:
        return 1.0
    s = np.linalg.svd(A, compute_uv=False)
    if s[-1] == 0:
        return np.inf
    return float(s[0] / s[-1])


def reciprocal_condition(A: NDArray[np.floating[Any]]) -> float:
    """
    Reciprocal condition number, 0.0 for an exactly singular matrix.

    Compared against machine epsilon this is the singularity test
    R's solve() applies before inverting.
    """
    return 1.0 / condition_number(A)
