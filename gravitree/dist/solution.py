"""
DistVector: compact storage of a symmetric pairwise matrix.

Holds the strictly-lower-triangle entries of an n x n matrix together with
the metadata needed to address them, mirroring the attributes of an R
"dist" object (Size, Diag, Upper, Labels). The storage order is the same
as SciPy's condensed distance form, so values can be passed to
scipy.cluster.hierarchy routines unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from gravitree.core.exceptions import DimensionError
from gravitree.dist._common import n_pairs, pair_offset, offset_pair, lower_pairs


@dataclass(frozen=True, eq=False)
class DistVector:
    """
    Strict lower triangle of a square matrix, stored column by column.

    Attributes:
        values: Flat entries, length size*(size-1)/2
        size: Dimension n of the original matrix
        diag: Whether the diagonal is stored (always False)
        upper: Whether the upper triangle is stored (always False)
        labels: Optional names of the n objects
    """
    values: NDArray[np.floating[Any]]
    size: int
    diag: bool = False
    upper: bool = False
    labels: tuple[str, ...] | None = None

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64)
        values.setflags(write=False)
        object.__setattr__(self, 'values', values)

        expected = n_pairs(self.size)
        if self.values.shape != (expected,):
            raise DimensionError(
                f"values: expected shape ({expected},) for size {self.size}, "
                f"got {self.values.shape}"
            )
        if self.labels is not None and len(self.labels) != self.size:
            raise DimensionError(
                f"labels: expected {self.size} labels, got {len(self.labels)}"
            )

    def __len__(self) -> int:
        return len(self.values)

    def offset(self, i: int, j: int) -> int:
        """Linear offset of the pair {i, j} (i != j, order irrelevant)."""
        return pair_offset(i, j, self.size)

    def index(self, k: int) -> tuple[int, int]:
        """Row and column (i > j) of the entry stored at offset k."""
        return offset_pair(k, self.size)

    def __getitem__(self, key) -> float:
        """dist[k] for a stored offset, dist[i, j] for a pair (0 on the diagonal)."""
        if isinstance(key, tuple):
            i, j = key
            if i == j and 0 <= i < self.size:
                return 0.0
            return float(self.values[self.offset(i, j)])
        return float(self.values[key])

    def to_matrix(self) -> NDArray[np.floating[Any]]:
        """Dense symmetric n x n matrix with a zero diagonal."""
        out = np.zeros((self.size, self.size), dtype=self.values.dtype)
        rows, cols = lower_pairs(self.size)
        out[rows, cols] = self.values
        out[cols, rows] = self.values
        return out

    def __repr__(self) -> str:
        return f"DistVector(size={self.size}, n_pairs={len(self.values)})"
