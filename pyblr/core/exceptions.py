"""
Exception hierarchy for pyblr.

All exceptions inherit from PyBLRError so callers can catch any
library-specific error. Shape problems are ValidationErrors, raised before
any computation starts; factorization failures are NumericalErrors.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the matrix and the operation that failed
    - Never catch and re-raise with less information
"""


class PyBLRError(Exception):
    """Base exception for all pyblr errors."""
    pass


class ValidationError(PyBLRError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when the weight dimension D, the output dimension N and the
    shapes of X, Σy and y do not agree.
    """
    pass


class NumericalError(PyBLRError):
    """
    Numerical computation failed.

    Base class for errors arising from factorizations and solves.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        operation: The operation that needed the matrix (e.g. 'posterior')
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.operation = operation


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        operation: The operation that needed the matrix
        condition_number: Estimated condition number, if available
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        operation: str | None = None,
        condition_number: float | None = None,
    ):
        super().__init__(message, matrix_name=matrix_name, operation=operation)
        self.condition_number = condition_number


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised when a Cholesky factorization fails: for the weight precision,
    a noise covariance, a projection covariance or an updated precision.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        operation: The operation that needed the factorization
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        operation: str | None = None,
        min_eigenvalue: float | None = None,
    ):
        super().__init__(message, matrix_name=matrix_name, operation=operation)
        self.min_eigenvalue = min_eigenvalue
