"""
Core infrastructure for pyblr.

Shared utilities used by the regression module:

    exceptions: Exception hierarchy
    validation: Input validators
    compute: Tolerance tiers and linear algebra kernels
"""

from pyblr.core.exceptions import (
    PyBLRError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
)

__all__ = [
    "PyBLRError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
]
