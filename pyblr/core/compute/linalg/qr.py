"""
QR decomposition and Cholesky factors of Gram matrices.

A covariance assembled from stacked square roots, A = B'B, can be factored
without forming A. The R of a QR decomposition of B satisfies R'R = A, so
R' with its diagonal made positive is the lower Cholesky factor of A.

Forming A first loses everything below the rounding error of B'B. A rank-D
term plus noise at machine epsilon is positive definite, but its assembled
matrix usually is not; the QR route keeps the noise rows intact.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pyblr.core.exceptions import SingularMatrixError
from pyblr.core.compute.linalg.cholesky import CholeskyResult, check_factorable


@dataclass(frozen=True)
class QRResult:
    """
    Triangular part of a QR decomposition.

    Attributes:
        R: Upper triangular matrix (k x p), k = min(n, p)
        rank: Numerical rank determined from the R diagonal
    """
    R: NDArray[np.floating[Any]]
    rank: int


def qr_r_cpu(B: NDArray[np.floating[Any]]) -> QRResult:
    """
    R factor of B = QR using LAPACK (via NumPy); Q is never formed.

    Args:
        B: Matrix to decompose (n x p)

    Returns:
        QRResult with R and numerical rank
    """
    R = np.linalg.qr(B, mode='r')

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R.max() > 0:
        # Tolerance based on matrix size and machine epsilon
        tol = max(B.shape) * np.finfo(np.float64).eps * diag_R.max()
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(R=R, rank=rank)


def cholesky_from_root_cpu(
    B: NDArray[np.floating[Any]],
    name: str,
    operation: str,
) -> CholeskyResult:
    """
    Lower Cholesky factor of A = B'B computed from B.

    Args:
        B: Stacked square root (m x n), m >= n for A to be nonsingular
        name: Name of A for error messages
        operation: Operation requesting the factor, for error messages

    Returns:
        CholeskyResult with L (n x n, positive diagonal) and log|A|

    Raises:
        NumericalError: If B has non-finite entries
        SingularMatrixError: If A is numerically singular (rank of B < n)
    """
    check_factorable(B, name, operation)
    n = B.shape[1]
    qr = qr_r_cpu(B)

    if qr.rank < n:
        d = np.abs(np.diag(qr.R))
        if d.size < n or d.min() == 0:
            cond = np.inf
        else:
            cond = float((d.max() / d.min()) ** 2)
        raise SingularMatrixError(
            f"{operation}: {name} is numerically singular "
            f"(rank {qr.rank} of {n}); cannot factor",
            matrix_name=name,
            operation=operation,
            condition_number=cond,
        )

    R = qr.R[:n, :]
    signs = np.sign(np.diag(R))
    L = np.ascontiguousarray((signs[:, np.newaxis] * R).T)
    L.flags.writeable = False
    logdet = 2.0 * float(np.sum(np.log(np.diag(L))))
    return CholeskyResult(L=L, logdet=logdet)
