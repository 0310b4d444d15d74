"""
Conversions between dense square matrices and DistVector.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from gravitree.core.exceptions import ValidationError
from gravitree.core.validation import check_array, check_square
from gravitree.dist._common import lower_pairs
from gravitree.dist.solution import DistVector


def as_dist(
    m: ArrayLike,
    *,
    labels: list[str] | tuple[str, ...] | None = None,
) -> DistVector:
    """
    Compact lower-triangle representation of a square matrix.

    Emits m[i, j] for column j = 0..n-2 (outer) and row i = j+1..n-1
    (inner), the order of R's as.dist() and of SciPy's condensed form.
    Only the strict lower triangle is read; the matrix is not checked for
    symmetry. Missing values (NaN) are carried over, as in R.

    Parameters
    ----------
    m : array-like
        Square n x n matrix, typically pairwise distances. A DataFrame
        supplies labels from its columns.
    labels : sequence of str, optional
        Names of the n objects.

    Returns
    -------
    DistVector of length n*(n-1)/2. Empty for n <= 1.

    Raises
    ------
    DimensionError
        m is not a square 2D matrix.
    """
    if hasattr(m, 'values') and not isinstance(m, np.ndarray):
        if labels is None and hasattr(m, 'columns'):
            labels = [str(c) for c in m.columns]
        m = m.values
    arr = check_array(m, "m")
    check_square(arr, "m")

    n = arr.shape[0]
    rows, cols = lower_pairs(n)
    values = arr[rows, cols]

    return DistVector(
        values=values,
        size=n,
        diag=False,
        upper=False,
        labels=tuple(str(lbl) for lbl in labels) if labels is not None else None,
    )


def as_matrix(dist: DistVector) -> np.ndarray:
    """
    Dense symmetric matrix of a DistVector, zero diagonal. Matches R as.matrix(dist).
    """
    if not isinstance(dist, DistVector):
        raise ValidationError(
            f"dist: expected DistVector, got {type(dist).__name__}"
        )
    return dist.to_matrix()
