"""
Solver dispatch for multivariate statistics.

Provides wcov(), eigen() and mahalanobis(): weighted moments, the ordered
symmetric spectrum, and squared Mahalanobis distances. Each call is pure;
inputs are never modified.
"""

from __future__ import annotations

from typing import Literal
import warnings

import numpy as np
from numpy.typing import ArrayLike

from gravitree.core.compute.device import select_device
from gravitree.core.exceptions import ValidationError, DimensionError
from gravitree.core.result import Result
from gravitree.core.validation import check_array, check_finite, check_1d
from gravitree.multivariate.design import MultivariateDesign
from gravitree.multivariate.solution import (
    MomentsSolution, SpectrumSolution, MahalanobisSolution,
)
from gravitree.multivariate.backends.cpu import CPUMultivariateBackend
from gravitree.multivariate._common import (
    SignConvention, VALID_SIGNS, as_square_matrix,
)


BackendChoice = Literal['auto', 'cpu', 'gpu']


def _get_backend(backend: BackendChoice):
    """Select backend based on preference."""
    if backend == 'cpu':
        return CPUMultivariateBackend()

    if backend == 'auto':
        device = select_device('auto')
        if device.is_gpu:
            try:
                from gravitree.multivariate.backends.gpu import GPUMultivariateBackend
                return GPUMultivariateBackend(device=device)
            except ImportError:
                return CPUMultivariateBackend()
        return CPUMultivariateBackend()

    if backend == 'gpu':
        device = select_device('gpu')
        from gravitree.multivariate.backends.gpu import GPUMultivariateBackend
        return GPUMultivariateBackend(device=device)

    raise ValidationError(f"Unknown backend: {backend!r}")


def _emit_warnings(result: Result) -> None:
    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=3)


def wcov(
    x: ArrayLike | MultivariateDesign,
    w: ArrayLike | None = None,
    *,
    cor: bool = False,
    backend: BackendChoice = 'auto',
) -> MomentsSolution:
    """
    Weighted center and covariance. Matches R cov.wt(x, w, method = "ML").

    center[k] = sum_i(w_i x_ik) / sum(w) and
    cov = sum_i (w_i / sum(w)) (x_i - center)(x_i - center)'.
    The denominator is the weight sum, not sum(w) - 1, and the returned
    covariance is exactly symmetric.

    Parameters
    ----------
    x : array-like or MultivariateDesign
        Observations (n x p). 1D input is one variable.
    w : array-like, optional
        Non-negative weights, length n, with a positive sum. Default:
        equal weights.
    cor : bool
        Also compute the weighted correlation matrix.
    backend : str
        'auto', 'cpu', 'gpu'.

    Returns
    -------
    MomentsSolution with center, cov (and cor) populated.

    Raises
    ------
    InvalidWeightsError
        A weight is negative or the weights do not sum to a positive value.
    DimensionError
        len(w) != n.
    """
    if isinstance(x, MultivariateDesign):
        if w is not None:
            raise ValidationError(
                "w: weights are already part of the MultivariateDesign; pass w=None"
            )
        design = x
    else:
        design = MultivariateDesign.from_array(x, w)

    be = _get_backend(backend)
    result = be.solve_moments(design, cor=cor)
    _emit_warnings(result)

    return MomentsSolution(_result=result, _columns=design.columns)


def eigen(
    cov: ArrayLike | MomentsSolution,
    *,
    sign: SignConvention = 'negate',
    backend: BackendChoice = 'auto',
) -> SpectrumSolution:
    """
    Eigenvalues and eigenvectors of a symmetric matrix, largest first.

    Only the lower triangle is read. Ties between equal eigenvalues keep
    the solver's order, which is implementation-defined.

    Parameters
    ----------
    cov : array-like or MomentsSolution
        Symmetric p x p matrix, typically a covariance from wcov(). A
        MomentsSolution is decomposed through its covariance.
    sign : str
        Eigenvector sign convention:
        'negate' (default) flips the solver's signs, matching existing
        consumers; 'solver' keeps them; 'positive' makes the
        largest-magnitude coefficient of each vector positive.
    backend : str
        'auto', 'cpu', 'gpu'.

    Returns
    -------
    SpectrumSolution with values (descending) and vectors (columns).
    """
    if sign not in VALID_SIGNS:
        raise ValidationError(f"sign must be one of {VALID_SIGNS}, got {sign!r}")

    if isinstance(cov, MomentsSolution):
        cov = cov.cov
    matrix = as_square_matrix(cov, "cov")

    be = _get_backend(backend)
    result = be.solve_spectrum(matrix, sign=sign)
    _emit_warnings(result)

    return SpectrumSolution(_result=result)


def mahalanobis(
    x: ArrayLike,
    center: ArrayLike,
    cov: ArrayLike,
    *,
    inverted: bool = False,
    backend: BackendChoice = 'auto',
) -> MahalanobisSolution:
    """
    Squared Mahalanobis distances. Matches R mahalanobis().

    D^2_i = (x_i - center)' cov^-1 (x_i - center) for every row of x.
    cov is inverted once for all rows.

    Parameters
    ----------
    x : array-like
        Observations (n x p). 1D input is a single observation.
    center : array-like
        Mean vector, length p.
    cov : array-like
        Covariance matrix (p x p), or its inverse if inverted=True.
    inverted : bool
        cov already holds the inverse covariance.
    backend : str
        'auto', 'cpu', 'gpu'.

    Returns
    -------
    MahalanobisSolution with one squared distance per observation.

    Raises
    ------
    SingularCovarianceError
        cov is singular or too ill-conditioned to invert reliably.
    DimensionError
        x columns, center length and cov dimensions disagree.
    """
    if hasattr(x, 'values') and not isinstance(x, np.ndarray):
        x = x.values
    x_arr = check_array(x, "x")
    if x_arr.ndim == 1:
        x_arr = x_arr.reshape(1, -1)
    if x_arr.ndim != 2:
        raise DimensionError(
            f"x: expected 1D or 2D array, got {x_arr.ndim}D with shape {x_arr.shape}"
        )
    check_finite(x_arr, "x")

    center_arr = check_array(center, "center")
    check_1d(center_arr, "center")
    check_finite(center_arr, "center")

    cov_arr = as_square_matrix(cov, "cov")

    p = x_arr.shape[1]
    if center_arr.shape[0] != p or cov_arr.shape[0] != p:
        raise DimensionError(
            f"Inconsistent dimensions: x has {p} columns, center has length "
            f"{center_arr.shape[0]}, cov is {cov_arr.shape[0]} x {cov_arr.shape[1]}"
        )

    be = _get_backend(backend)
    result = be.solve_mahalanobis(x_arr, center_arr, cov_arr, inverted=inverted)
    _emit_warnings(result)

    return MahalanobisSolution(_result=result)
