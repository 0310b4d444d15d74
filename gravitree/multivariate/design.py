"""
MultivariateDesign: data wrapper for weighted multivariate statistics.

Wraps an observation matrix and its observation weights, validating both
once so the backends can assume clean float64 input. Follows the Design
pattern used across the package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from gravitree.core.exceptions import ValidationError, DimensionError
from gravitree.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_weights,
)


@dataclass(frozen=True)
class MultivariateDesign:
    """
    Design for weighted multivariate statistics.

    Wraps a data matrix (n observations x p variables) and a weight vector
    of length n. Immutable after construction.

    Construction:
        MultivariateDesign.from_array(x)
        MultivariateDesign.from_array(x, weights=w)
    """
    _data: NDArray[np.floating[Any]]
    _weights: NDArray[np.floating[Any]]
    _weight_sum: float
    _n: int
    _p: int
    _columns: tuple[str, ...] | None

    @classmethod
    def from_array(cls, data, weights: ArrayLike | None = None) -> MultivariateDesign:
        """
        Build MultivariateDesign from array-like data.

        Parameters
        ----------
        data : array-like
            1D or 2D data matrix. Can be a numpy array, a pandas DataFrame,
            or any array-like with a .values attribute. 1D input is reshaped
            to (n, 1).
        weights : array-like, optional
            Non-negative observation weights with a positive sum, one per
            row of data. None gives every observation the same weight.
        """
        if hasattr(data, 'values') and not isinstance(data, np.ndarray):
            columns = tuple(str(c) for c in data.columns) if hasattr(data, 'columns') else None
            data_array = check_array(data.values, "x")
        else:
            columns = None
            data_array = check_array(data, "x")

        if data_array.ndim == 1:
            data_array = data_array.reshape(-1, 1)

        return cls._build(data_array, weights, columns=columns)

    @classmethod
    def _build(
        cls,
        data: NDArray,
        weights: ArrayLike | None,
        columns: tuple[str, ...] | None = None,
    ) -> MultivariateDesign:
        """Internal builder with validation."""
        if data.ndim != 2:
            raise DimensionError(
                f"x: must be 2D (observations x variables), got {data.ndim}D"
            )

        n, p = data.shape

        if n < 1:
            raise ValidationError(f"x: need at least 1 observation, got {n}")

        if p < 1:
            raise ValidationError(f"x: need at least 1 variable, got {p}")

        check_finite(data, "x")

        if weights is None:
            w = np.ones(n, dtype=np.float64)
        else:
            w = check_array(weights, "w")
            check_1d(w, "w")
            if w.shape[0] != n:
                raise DimensionError(
                    f"w: length {w.shape[0]} does not match number of observations in x ({n})"
                )
            check_finite(w, "w")

        ws = check_weights(w, "w")

        return cls(
            _data=data, _weights=w, _weight_sum=ws,
            _n=n, _p=p, _columns=columns,
        )

    @property
    def data(self) -> NDArray[np.floating[Any]]:
        """Data matrix (n x p)."""
        return self._data

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Raw observation weights, shape (n,)."""
        return self._weights

    @property
    def weight_sum(self) -> float:
        """Sum of the observation weights (always > 0)."""
        return self._weight_sum

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of variables."""
        return self._p

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Column names, or None if not available."""
        return self._columns

    @property
    def is_weighted(self) -> bool:
        """Whether the weights differ between observations."""
        return bool(np.any(self._weights != self._weights[0]))

    def __repr__(self) -> str:
        weighted = ", weighted" if self.is_weighted else ""
        return f"MultivariateDesign(n={self._n}, p={self._p}{weighted})"
