"""
Core infrastructure for gravitree.

This module provides shared abstractions and utilities used by the
domain-specific submodules (multivariate, dist).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Hardware detection, timing, precision and tolerances
"""

from gravitree.core.result import Result
from gravitree.core.exceptions import (
    GravitreeError,
    ValidationError,
    DimensionError,
    InvalidWeightsError,
    NumericalError,
    SingularMatrixError,
    SingularCovarianceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "GravitreeError",
    "ValidationError",
    "DimensionError",
    "InvalidWeightsError",
    "NumericalError",
    "SingularMatrixError",
    "SingularCovarianceError",
]
