"""
Exception hierarchy for gravitree.

All exceptions inherit from GravitreeError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class GravitreeError(Exception):
    """Base exception for all gravitree errors."""
    pass


class ValidationError(GravitreeError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class InvalidWeightsError(ValidationError):
    """
    Observation weights cannot define a weighted estimate.

    Raised when a weight is negative or when the weights sum to zero
    (or less), which would otherwise produce a divide-by-zero center.

    Attributes:
        weight_sum: Sum of the supplied weights
        n_negative: Number of strictly negative weights
    """

    def __init__(
        self,
        message: str,
        weight_sum: float | None = None,
        n_negative: int | None = None
    ):
        super().__init__(message)
        self.weight_sum = weight_sum
        self.n_negative = n_negative


class NumericalError(GravitreeError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically the matrix dimension)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class SingularCovarianceError(SingularMatrixError):
    """
    Covariance matrix cannot be inverted reliably.

    Raised by mahalanobis() when the covariance is singular, when its
    reciprocal condition number falls below machine precision, or when
    inversion produces non-finite entries.
    """
    pass
