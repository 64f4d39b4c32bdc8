"""
Cholesky factorization and symmetric positive-definite matrices.

SymmetricPDMatrix is the value type used for the weight precision, noise
covariances and projection covariances. It computes its lower Cholesky
factor the first time any operation needs it and reuses that factor for
every later solve, whitening, log-determinant or sample.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
import scipy.linalg as sla
from numpy.typing import ArrayLike, NDArray

from pyblr.core._arrays import frozen_copy
from pyblr.core.exceptions import NotPositiveDefiniteError, NumericalError


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of a Cholesky factorization A = L L'.

    Attributes:
        L: Lower triangular factor (n x n)
        logdet: log|A| = 2 * sum(log(diag(L)))
    """
    L: NDArray[np.floating[Any]]
    logdet: float


def check_factorable(
    A: NDArray[np.floating[Any]],
    name: str,
    operation: str,
) -> None:
    """
    Verify a matrix about to be factored has only finite entries.

    Inputs are validated as finite, so a non-finite matrix here means an
    intermediate product overflowed.

    Raises:
        NumericalError: If A contains NaN or Inf
    """
    if not np.all(np.isfinite(A)):
        raise NumericalError(
            f"{operation}: {name} has non-finite entries (overflow); cannot factor",
            matrix_name=name,
            operation=operation,
        )


def cholesky_cpu(
    A: NDArray[np.floating[Any]],
    name: str,
    operation: str,
) -> CholeskyResult:
    """
    Lower Cholesky factorization using LAPACK (via NumPy).

    Args:
        A: Symmetric matrix to factor (n x n). Only the lower triangle is read.
        name: Matrix name for error messages
        operation: Operation requesting the factor, for error messages

    Returns:
        CholeskyResult with the read-only factor and log-determinant

    Raises:
        NumericalError: If A or its factor has non-finite entries
        NotPositiveDefiniteError: If A is not numerically positive definite
    """
    check_factorable(A, name, operation)
    try:
        L = np.linalg.cholesky(A)
    except np.linalg.LinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(A)[0])
        raise NotPositiveDefiniteError(
            f"{operation}: {name} is not positive definite "
            f"(min eigenvalue {min_eig:.3e}); Cholesky factorization failed",
            matrix_name=name,
            operation=operation,
            min_eigenvalue=min_eig,
        ) from e

    if not np.all(np.isfinite(L)):
        raise NumericalError(
            f"{operation}: Cholesky factor of {name} has non-finite entries",
            matrix_name=name,
            operation=operation,
        )

    L.flags.writeable = False
    logdet = 2.0 * float(np.sum(np.log(np.diag(L))))
    return CholeskyResult(L=L, logdet=logdet)


def cholesky_solve_cpu(
    L: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A X = B given the lower factor L of A.

    Two triangular solves: L Z = B, then L' X = Z.
    """
    Z = sla.solve_triangular(L, B, lower=True)
    return sla.solve_triangular(L.T, Z, lower=False)


class SymmetricPDMatrix:
    """
    Symmetric positive-definite matrix with a lazily computed, memoized factor.

    The wrapped matrix is copied and made read-only at construction. The
    factor is computed on first use and cached; a failed factorization is not
    cached, so the error is raised again on the next attempt.

    Construction does not factor. Callers that need an eager check (the
    weight precision of a regressor) call cholesky() immediately. Callers
    that computed the factor by another route wrap it with from_factor().

    Attributes:
        matrix: The wrapped (n x n) matrix, read-only
        name: Human-readable name used in error messages
    """

    def __init__(self, matrix: ArrayLike, name: str):
        self._matrix = frozen_copy(matrix)
        self._name = name
        self._cholesky: CholeskyResult | None = None

    @classmethod
    def from_factor(
        cls,
        matrix: ArrayLike,
        factor: CholeskyResult,
        name: str,
    ) -> 'SymmetricPDMatrix':
        """Wrap matrix together with an already computed factor of it."""
        obj = cls(matrix, name)
        obj._cholesky = factor
        return obj

    @property
    def matrix(self) -> NDArray[np.floating[Any]]:
        return self._matrix

    @property
    def name(self) -> str:
        return self._name

    @property
    def n(self) -> int:
        """Number of rows (= columns)."""
        return self._matrix.shape[0]

    def cholesky(self, operation: str = 'cholesky') -> CholeskyResult:
        """
        Cholesky factorization, computed once per value.

        Args:
            operation: Name of the calling operation, used only if factoring fails

        Raises:
            NotPositiveDefiniteError: If the matrix cannot be factored
        """
        if self._cholesky is None:
            self._cholesky = cholesky_cpu(self._matrix, self._name, operation)
        return self._cholesky

    def lower(self, operation: str = 'cholesky') -> NDArray[np.floating[Any]]:
        """Lower Cholesky factor L with L L' = A."""
        return self.cholesky(operation).L

    def solve(
        self,
        B: NDArray[np.floating[Any]],
        operation: str = 'solve',
    ) -> NDArray[np.floating[Any]]:
        """A⁻¹ B by two triangular solves against the cached factor."""
        return cholesky_solve_cpu(self.lower(operation), B)

    def whiten(
        self,
        B: NDArray[np.floating[Any]],
        operation: str = 'whiten',
    ) -> NDArray[np.floating[Any]]:
        """
        L⁻¹ B.

        For any B, whiten(B)' whiten(B) = B' A⁻¹ B, which is how quadratic
        forms are computed without an explicit inverse.
        """
        return sla.solve_triangular(self.lower(operation), B, lower=True)

    def whiten_transpose(
        self,
        B: NDArray[np.floating[Any]],
        operation: str = 'whiten',
    ) -> NDArray[np.floating[Any]]:
        """
        L⁻ᵀ B.

        If A is a precision matrix and z ~ N(0, I), L⁻ᵀ z ~ N(0, A⁻¹).
        """
        return sla.solve_triangular(self.lower(operation).T, B, lower=False)

    def logdet(self, operation: str = 'logdet') -> float:
        """log|A| from the diagonal of the cached factor."""
        return self.cholesky(operation).logdet

    def rcond_estimate(self, operation: str = 'rcond') -> float:
        """
        Cheap reciprocal condition estimate: (min diag L / max diag L)^2.

        A lower bound on cond(A) is 1 / rcond_estimate(); the estimate is only
        used to flag badly conditioned matrices.
        """
        d = np.diag(self.lower(operation))
        if d.size == 0:
            return 1.0
        return float((d.min() / d.max()) ** 2)

    def __repr__(self) -> str:
        factored = self._cholesky is not None
        return f"SymmetricPDMatrix(name={self._name!r}, n={self.n}, factored={factored})"
