"""
Shared helpers for the multivariate backends.

Input checks for covariance-like matrices and the post-processing steps
that must behave identically on every backend: exact symmetrization,
eigenvector sign conventions, the invertibility test for covariances
and numerical diagnostics.
"""

from __future__ import annotations

from typing import Any, Literal
import numpy as np
from numpy.typing import ArrayLike, NDArray

from gravitree.core.exceptions import ValidationError, SingularCovarianceError
from gravitree.core.validation import check_array, check_finite, check_square
from gravitree.core.compute.precision import reciprocal_condition
from gravitree.core.compute.tolerances import SINGULAR_RCOND, SYMMETRY_RTOL, PSD_RTOL


SignConvention = Literal['negate', 'solver', 'positive']
VALID_SIGNS = ('negate', 'solver', 'positive')


def as_square_matrix(matrix: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """Convert to a finite, non-empty, square float64 matrix."""
    arr = check_array(matrix, name)
    check_square(arr, name)
    if arr.shape[0] < 1:
        raise ValidationError(f"{name}: need at least a 1 x 1 matrix, got {arr.shape}")
    check_finite(arr, name)
    return arr


def mirror_lower(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Rebuild A from its lower triangle so that A[i, j] == A[j, i] exactly.

    Floating-point matrix products are not guaranteed to round both
    triangles identically.
    """
    return np.tril(A) + np.tril(A, -1).T


def weighted_correlation(
    cov: NDArray[np.floating[Any]],
) -> tuple[NDArray[np.floating[Any]], list[str]]:
    """
    Correlation matrix from a covariance matrix, as R's cov.wt(cor = TRUE).

    Returns the correlation and any warnings. Zero-variance variables get
    NaN rows and columns.
    """
    warnings_list: list[str] = []
    sd = np.sqrt(np.diag(cov))
    zero = np.flatnonzero(sd == 0)
    if zero.size > 0:
        warnings_list.append(
            f"zero weighted variance in columns {zero.tolist()}: correlation undefined (NaN)"
        )
    with np.errstate(divide='ignore', invalid='ignore'):
        inv_sd = np.where(sd > 0, 1.0 / sd, np.nan)
    cor = cov * inv_sd[:, None] * inv_sd[None, :]
    return mirror_lower(cor), warnings_list


def reorder_descending(
    values: NDArray[np.floating[Any]],
    vectors: NDArray[np.floating[Any]],
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """Reverse ascending solver output; eigenvectors stay paired by column."""
    return values[::-1].copy(), vectors[:, ::-1].copy()


def apply_sign_convention(
    vectors: NDArray[np.floating[Any]],
    sign: SignConvention,
) -> NDArray[np.floating[Any]]:
    """
    Fix eigenvector signs, which the decomposition leaves arbitrary.

    'negate' flips every coefficient relative to the solver, the convention
    existing consumers of this package were built against. 'solver' keeps
    LAPACK's signs. 'positive' makes the largest-magnitude coefficient of
    each vector positive, which does not depend on the solver.
    """
    if sign == 'negate':
        return -vectors
    if sign == 'solver':
        return vectors
    if sign == 'positive':
        idx = np.argmax(np.abs(vectors), axis=0)
        signs = np.sign(vectors[idx, np.arange(vectors.shape[1])])
        signs[signs == 0] = 1.0
        return vectors * signs[None, :]
    raise ValidationError(f"sign must be one of {VALID_SIGNS}, got {sign!r}")


def spectrum_diagnostics(
    matrix: NDArray[np.floating[Any]],
    values: NDArray[np.floating[Any]],
) -> list[str]:
    """Non-fatal findings about an eigendecomposition's input."""
    warnings_list: list[str] = []

    scale = float(np.max(np.abs(matrix)))
    asym = float(np.max(np.abs(matrix - matrix.T)))
    if scale > 0 and asym > SYMMETRY_RTOL * scale:
        warnings_list.append(
            f"input is not symmetric (max |A - A'| = {asym:.3g}); "
            f"only the lower triangle was used"
        )

    top = float(np.max(np.abs(values)))
    if top > 0 and values[-1] < -PSD_RTOL * top:
        warnings_list.append(
            f"smallest eigenvalue {values[-1]:.3g} is negative; "
            f"input is not positive semi-definite"
        )

    return warnings_list


def singular_covariance(
    reason: str,
    p: int,
    condition_number: float | None = None,
    rank: int | None = None,
) -> SingularCovarianceError:
    """Build the error raised when cov cannot be inverted."""
    return SingularCovarianceError(
        f"cov: {reason}",
        matrix_name='cov',
        condition_number=condition_number,
        rank=rank,
        expected_rank=p,
    )


def check_invertible(cov: NDArray[np.floating[Any]]) -> float:
    """
    Refuse a covariance whose inverse would be numerically meaningless.

    The test is R's solve(): the reciprocal 2-norm condition number must
    not fall below SINGULAR_RCOND. Runs on the host for every backend,
    since cov is only p x p.

    Returns:
        The condition number of cov

    Raises:
        SingularCovarianceError: If cov is singular or ill-conditioned
    """
    rcond = reciprocal_condition(cov)
    cond = np.inf if rcond == 0 else 1.0 / rcond
    if not rcond >= SINGULAR_RCOND:
        raise singular_covariance(
            f"matrix is singular or ill-conditioned "
            f"(condition number {cond:.3g}, reciprocal below {SINGULAR_RCOND:.3g})",
            cov.shape[0],
            condition_number=cond,
            rank=int(np.linalg.matrix_rank(cov)),
        )
    return cond
