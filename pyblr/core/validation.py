"""
Input validation utilities for pyblr.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyblr.core.exceptions import ValidationError, DimensionError
from pyblr.core.compute.tolerances import SYMMETRY, ToleranceTier


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.iscomplexobj(result):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    # Everything downstream is double precision LAPACK
    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If array is not 2D or rows != columns
    """
    check_2d(array, name)
    n_rows, n_cols = array.shape
    if n_rows != n_cols:
        raise DimensionError(
            f"{name}: expected square matrix, got shape {array.shape}"
        )


def check_dimension(actual: int, expected: int, name: str, what: str) -> None:
    """
    Verify a single dimension matches the size implied elsewhere.

    Args:
        actual: The dimension found on the input
        expected: The dimension required by context
        name: Parameter name for error messages
        what: Description of the dimension (e.g. 'rows (D)')

    Raises:
        DimensionError: If actual != expected
    """
    if actual != expected:
        raise DimensionError(
            f"{name}: {what} must be {expected}, got {actual}"
        )


def check_symmetric(
    array: NDArray[np.floating[Any]],
    name: str,
    tolerance: ToleranceTier = SYMMETRY,
) -> None:
    """
    Verify a square matrix equals its transpose up to rounding.

    The allowed deviation is atol + rtol * max|A|.

    Raises:
        ValidationError: If the matrix is visibly asymmetric
    """
    scale = float(np.max(np.abs(array))) if array.size else 0.0
    deviation = float(np.max(np.abs(array - array.T))) if array.size else 0.0
    if deviation > tolerance.atol + tolerance.rtol * scale:
        raise ValidationError(
            f"{name}: not symmetric (max |A - A'| = {deviation:.3e}, "
            f"max |A| = {scale:.3e})"
        )


def check_scalar_nonnegative(value: Any, name: str) -> float:
    """
    Validate a real, finite, non-negative scalar.

    Returns:
        The value as a Python float

    Raises:
        ValidationError: If value is not a real number, not finite, or negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real scalar, got {type(value).__name__}"
        )
    value = float(value)
    if not np.isfinite(value):
        raise ValidationError(f"{name}: must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")
    return value


def check_positive_int(value: Any, name: str) -> int:
    """
    Validate a positive integer (e.g. a number of samples).

    Raises:
        ValidationError: If value is not an integer >= 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")
    return int(value)


def check_rng(rng: Any, name: str) -> None:
    """
    Verify rng is a numpy random source.

    Sampling never falls back to global random state, so a missing or
    wrong-typed generator is an error.

    Raises:
        ValidationError: If rng is not a numpy Generator or RandomState
    """
    if not isinstance(rng, (np.random.Generator, np.random.RandomState)):
        raise ValidationError(
            f"{name}: expected numpy.random.Generator or numpy.random.RandomState, "
            f"got {type(rng).__name__}"
        )
