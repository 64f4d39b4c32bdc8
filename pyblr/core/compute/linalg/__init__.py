"""
Linear algebra kernels for pyblr.

All functions follow these conventions:
    - CPU functions use NumPy/SciPy (LAPACK under the hood)
    - Each factorization returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    cholesky: Cholesky factorization, triangular solves, SymmetricPDMatrix
    qr: QR decomposition, Cholesky factors of Gram matrices B'B
"""

from pyblr.core.compute.linalg.cholesky import (
    CholeskyResult,
    SymmetricPDMatrix,
    check_factorable,
    cholesky_cpu,
    cholesky_solve_cpu,
)
from pyblr.core.compute.linalg.qr import (
    QRResult,
    cholesky_from_root_cpu,
    qr_r_cpu,
)

__all__ = [
    "CholeskyResult",
    "SymmetricPDMatrix",
    "check_factorable",
    "cholesky_cpu",
    "cholesky_solve_cpu",
    "QRResult",
    "cholesky_from_root_cpu",
    "qr_r_cpu",
]
