"""
Multivariate solution types.

Contains the parameter payloads and user-facing solution wrappers for
wcov(), eigen() and mahalanobis().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats

from gravitree.core.result import Result


def _labels(columns: tuple[str, ...] | None, p: int) -> tuple[str, ...]:
    return columns or tuple(f"V{i+1}" for i in range(p))


def _format_matrix(matrix: NDArray, row_labels, col_labels) -> list[str]:
    """Right-aligned fixed-point rendering of a labelled matrix."""
    cells = [[f"{v:.6f}" for v in row] for row in matrix]
    widths = [
        max(len(col_labels[j]), max(len(r[j]) for r in cells))
        for j in range(len(col_labels))
    ]
    label_width = max(len(lbl) for lbl in row_labels)
    lines = [" " * (label_width + 2) + "  ".join(c.rjust(w) for c, w in zip(col_labels, widths))]
    for label, row in zip(row_labels, cells):
        lines.append(
            label.ljust(label_width) + "  " + "  ".join(v.rjust(w) for v, w in zip(row, widths))
        )
    return lines


# ═══════════════════════════════════════════════════════════════════════
# wcov()
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class MomentsParams:
    """
    Parameter payload for weighted moments.

    Maps to R's cov.wt(x, wt, method = "ML") result list.
    """
    center: NDArray[np.floating[Any]]
    cov: NDArray[np.floating[Any]]
    n_obs: int
    weights: NDArray[np.floating[Any]]
    weight_sum: float
    cor: NDArray[np.floating[Any]] | None = None


@dataclass
class MomentsSolution:
    """User-facing weighted center and covariance."""
    _result: Result[MomentsParams]
    _columns: tuple[str, ...] | None = None

    @property
    def center(self) -> NDArray[np.floating[Any]]:
        """Weighted mean of each column, shape (p,)."""
        return self._result.params.center

    @property
    def cov(self) -> NDArray[np.floating[Any]]:
        """Weighted covariance (denominator = weight sum), shape (p, p)."""
        return self._result.params.cov

    @property
    def cor(self) -> NDArray[np.floating[Any]] | None:
        """Weighted correlation, shape (p, p), or None if not requested."""
        return self._result.params.cor

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Normalized weights w / sum(w), shape (n,)."""
        return self._result.params.weights

    @property
    def weight_sum(self) -> float:
        return self._result.params.weight_sum

    @property
    def columns(self) -> tuple[str, ...] | None:
        return self._columns

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style printout of center and covariance."""
        p = len(self.center)
        cols = _labels(self._columns, p)
        lines = ["$center"]
        lines.extend(_format_matrix(self.center[None, :], ["[1,]"], cols))
        lines.append("")
        lines.append("$cov")
        lines.extend(_format_matrix(self.cov, cols, cols))
        if self.cor is not None:
            lines.append("")
            lines.append("$cor")
            lines.extend(_format_matrix(self.cor, cols, cols))
        lines.append("")
        lines.append(f"$n.obs\n[1] {self.n_obs}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MomentsSolution(n={self.n_obs}, p={len(self.center)}, "
            f"weight_sum={self.weight_sum:g})"
        )


# ═══════════════════════════════════════════════════════════════════════
# eigen()
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SpectrumParams:
    """
    Parameter payload for a symmetric eigendecomposition.

    values are sorted in decreasing order; column k of vectors is the
    unit eigenvector paired with values[k].
    """
    values: NDArray[np.floating[Any]]
    vectors: NDArray[np.floating[Any]]
    sign: str


@dataclass
class SpectrumSolution:
    """User-facing eigenvalues and eigenvectors."""
    _result: Result[SpectrumParams]

    @property
    def values(self) -> NDArray[np.floating[Any]]:
        """Eigenvalues, largest first, shape (p,)."""
        return self._result.params.values

    @property
    def vectors(self) -> NDArray[np.floating[Any]]:
        """Eigenvectors as columns, shape (p, p)."""
        return self._result.params.vectors

    @property
    def sign(self) -> str:
        """Sign convention applied to the eigenvectors."""
        return self._result.params.sign

    @property
    def proportion(self) -> NDArray[np.floating[Any]] | None:
        """
        Share of the total (trace) carried by each eigenvalue.

        None when the eigenvalues sum to zero or less, where the
        proportion is undefined.
        """
        total = float(np.sum(self.values))
        if not total > 0:
            return None
        return self.values / total

    @property
    def cumulative(self) -> NDArray[np.floating[Any]] | None:
        """Cumulative proportion, or None when proportion is undefined."""
        prop = self.proportion
        return None if prop is None else np.cumsum(prop)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Importance of components, in the layout of R's summary(prcomp())."""
        p = len(self.values)
        comps = tuple(f"PC{i+1}" for i in range(p))
        lines = ["Eigenvalues:"]
        lines.extend(_format_matrix(self.values[None, :], ["value"], comps))
        prop = self.proportion
        if prop is not None:
            lines.append("")
            lines.append("Importance of components:")
            lines.extend(_format_matrix(
                np.vstack([prop, np.cumsum(prop)]),
                ["Proportion of Variance", "Cumulative Proportion"],
                comps,
            ))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"SpectrumSolution(p={len(self.values)}, sign={self.sign!r})"


# ═══════════════════════════════════════════════════════════════════════
# mahalanobis()
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class MahalanobisParams:
    """
    Parameter payload for squared Mahalanobis distances.

    precision is the inverse covariance actually used (the input itself
    when it was supplied already inverted).
    """
    distances: NDArray[np.floating[Any]]
    precision: NDArray[np.floating[Any]]
    df: int


@dataclass
class MahalanobisSolution:
    """User-facing squared Mahalanobis distances."""
    _result: Result[MahalanobisParams]

    @property
    def distances(self) -> NDArray[np.floating[Any]]:
        """Squared distance of each observation, shape (n,)."""
        return self._result.params.distances

    @property
    def precision(self) -> NDArray[np.floating[Any]]:
        """Inverse covariance, shape (p, p)."""
        return self._result.params.precision

    @property
    def df(self) -> int:
        """Degrees of freedom of the reference chi-square (p)."""
        return self._result.params.df

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """
        Upper-tail chi-square probabilities of the squared distances.

        Under multivariate normality D^2 follows a chi-square with p
        degrees of freedom; small values flag outlying observations.
        """
        return stats.chi2.sf(self.distances, self.df)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        d = self.distances
        lines = [
            "Squared Mahalanobis distances",
            f"  observations: {len(d)}",
            f"  df:           {self.df}",
        ]
        if len(d):
            lines.extend([
                f"  min:          {d.min():.6f}",
                f"  median:       {np.median(d):.6f}",
                f"  max:          {d.max():.6f}",
            ])
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"MahalanobisSolution(n={len(self.distances)}, df={self.df})"
