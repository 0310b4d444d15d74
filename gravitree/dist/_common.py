"""
Offset arithmetic for the compact lower-triangle layout.

Pairs (i, j) with i > j are stored column by column: all of column 0
(rows 1..n-1), then column 1 (rows 2..n-1), and so on. Column j starts at
offset j*n - j*(j+1)/2.
"""

from __future__ import annotations

import numpy as np

from gravitree.core.exceptions import ValidationError


def n_pairs(size: int) -> int:
    """Number of strictly-lower-triangle entries of a size x size matrix."""
    return size * (size - 1) // 2 if size > 1 else 0


def column_start(j: int, size: int) -> int:
    """Offset of the first entry (row j+1) of column j."""
    return j * size - j * (j + 1) // 2


def pair_offset(i: int, j: int, size: int) -> int:
    """
    Linear offset of the unordered pair {i, j}.

    Raises:
        ValidationError: If i == j or either index is out of range.
    """
    for name, k in (("i", i), ("j", j)):
        if not 0 <= k < size:
            raise ValidationError(f"{name}: index {k} out of range for size {size}")
    if i == j:
        raise ValidationError(f"diagonal pair ({i}, {j}) is not stored")
    if i < j:
        i, j = j, i
    return column_start(j, size) + (i - j - 1)


def offset_pair(k: int, size: int) -> tuple[int, int]:
    """
    Inverse of pair_offset: the (i, j) with i > j stored at offset k.

    Raises:
        ValidationError: If k is out of range.
    """
    total = n_pairs(size)
    if not 0 <= k < total:
        raise ValidationError(f"offset {k} out of range for {total} stored pairs")
    j = 0
    while column_start(j + 1, size) <= k:
        j += 1
    return j + 1 + (k - column_start(j, size)), j


def lower_pairs(size: int) -> tuple[np.ndarray, np.ndarray]:
    """Row and column indices of every stored pair, in storage order."""
    # triu_indices enumerates (row, col) row-major; read transposed that is
    # the column-major walk of the lower triangle
    cols, rows = np.triu_indices(size, k=1)
    return rows, cols
