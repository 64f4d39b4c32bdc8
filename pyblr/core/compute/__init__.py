"""
Shared compute infrastructure for pyblr.

This module contains shared NUMERIC infrastructure, not regression logic.

Submodules:
    tolerances: Tolerance tiers for numerical comparison
    linalg: Linear algebra kernels (Cholesky, triangular solves)
"""

from pyblr.core.compute.tolerances import ToleranceTier, select_tolerance
from pyblr.core.compute.linalg import SymmetricPDMatrix

__all__ = [
    "ToleranceTier",
    "select_tolerance",
    "SymmetricPDMatrix",
]
