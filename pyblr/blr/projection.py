"""
Finite-dimensional Gaussian projection of a Bayesian linear regressor.

Applying a regressor with weights w ~ N(mw, Λw⁻¹) to inputs X (D x N) and
noise Σy gives the Gaussian over outputs

    Y = X'w + ε,   ε ~ N(0, Σy)
    E[Y]   = X' mw
    Cov[Y] = X' Λw⁻¹ X + Σy

Λw is never inverted. Its cached Cholesky factor L whitens X, V = L⁻¹X, so
X' Λw⁻¹ X = V'V. The output covariance gets its own cached factor, shared by
sampling and the log-density.

That factor is computed from the stacked root B = [V; Ly'], Ly the factor
of Σy, by QR (B'B = Cov[Y]), not by factoring the assembled matrix. With
N > D and Σy at machine epsilon, V'V has rank D and its rounding error
exceeds Σy, so the assembled matrix is indefinite in floating point while
B still has full column rank.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyblr.core._arrays import frozen_copy
from pyblr.core.compute.linalg import (
    SymmetricPDMatrix,
    check_factorable,
    cholesky_from_root_cpu,
)
from pyblr.core.exceptions import DimensionError, NotPositiveDefiniteError
from pyblr.core.validation import (
    check_array,
    check_finite,
    check_dimension,
    check_positive_int,
    check_rng,
)
from pyblr.blr.design import ProjectionDesign
from pyblr.blr.normal import Normal

if TYPE_CHECKING:
    from pyblr.blr.regressor import BayesianLinearRegressor


_LOG_2PI = float(np.log(2.0 * np.pi))


class FiniteGaussianProjection:
    """
    Gaussian distribution over N outputs induced by a regressor and (X, Σy).

    Produced by BayesianLinearRegressor.project(); never mutated. Mean and
    covariance are computed on first use and memoized on this value.
    """

    def __init__(self, regressor: BayesianLinearRegressor, design: ProjectionDesign):
        self._regressor = regressor
        self._design = design

        # Cached computations
        self._mean: NDArray[np.floating[Any]] | None = None
        self._whitened_X: NDArray[np.floating[Any]] | None = None
        self._cov: NDArray[np.floating[Any]] | None = None
        self._covariance: SymmetricPDMatrix | None = None

    # === Properties ===

    @property
    def regressor(self) -> BayesianLinearRegressor:
        return self._regressor

    @property
    def design(self) -> ProjectionDesign:
        return self._design

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        return self._design.X

    @property
    def noise_cov(self) -> NDArray[np.floating[Any]]:
        return self._design.noise_cov

    @property
    def n_outputs(self) -> int:
        return self._design.n

    def __len__(self) -> int:
        return self._design.n

    # === Moments ===

    def mean(self) -> NDArray[np.floating[Any]]:
        """E[Y] = X' mw, shape (N,)."""
        if self._mean is None:
            self._mean = frozen_copy(self._design.X.T @ self._regressor.mw)
        return self._mean

    def _whitened(self) -> NDArray[np.floating[Any]]:
        """V = L⁻¹X, shape (D, N)."""
        if self._whitened_X is None:
            self._whitened_X = self._regressor.precision_operator.whiten(
                self._design.X, operation='cov'
            )
        return self._whitened_X

    def cov(self) -> NDArray[np.floating[Any]]:
        """Cov[Y] = X' Λw⁻¹ X + Σy, shape (N, N), exactly symmetric."""
        if self._cov is None:
            V = self._whitened()
            C = V.T @ V + self._design.noise_cov
            self._cov = frozen_copy(0.5 * (C + C.T))
        return self._cov

    def _noise_root(self, operation: str) -> NDArray[np.floating[Any]] | None:
        """Rows R with R'R = Σy, or None if Σy has no Cholesky factor."""
        design = self._design
        if design.isotropic:
            return np.diag(np.sqrt(np.diag(design.noise_cov)))
        try:
            return design.noise.lower(operation=operation).T
        except NotPositiveDefiniteError:
            # A singular or indefinite Σy can still give a positive definite
            # Cov[Y]; only the assembled matrix can tell.
            return None

    def covariance_operator(self, operation: str = 'covariance_operator') -> SymmetricPDMatrix:
        """
        cov() together with its lower Cholesky factor, computed once.

        Args:
            operation: Name of the calling operation, used only if factoring fails

        Raises:
            NumericalError: If cov() overflowed
            NotPositiveDefiniteError: If cov() is not positive definite
            SingularMatrixError: If cov() is numerically singular
        """
        if self._covariance is None:
            name = 'projection covariance'
            C = self.cov()
            check_factorable(C, name, operation)
            root = self._noise_root(operation)
            if root is None:
                covariance = SymmetricPDMatrix(C, name=name)
                covariance.cholesky(operation=operation)
            else:
                B = np.vstack([self._whitened(), root])
                factor = cholesky_from_root_cpu(B, name, operation)
                covariance = SymmetricPDMatrix.from_factor(C, factor, name=name)
            self._covariance = covariance
        return self._covariance

    def var(self) -> NDArray[np.floating[Any]]:
        """Diagonal of cov(), shape (N,)."""
        return np.diag(self.cov()).copy()

    def mean_and_cov(self) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        return self.mean(), self.cov()

    def mean_and_var(self) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        return self.mean(), self.var()

    def marginals(self) -> tuple[Normal, ...]:
        """
        Per-output univariate Gaussians.

        Means and standard deviations are read from mean() and the diagonal
        of cov(), so they agree with those views element for element.
        """
        m = self.mean()
        s = np.sqrt(np.diag(self.cov()))
        return tuple(Normal(mean=float(m_i), std=float(s_i)) for m_i, s_i in zip(m, s))

    # === Sampling ===

    def rand(
        self,
        rng: np.random.Generator,
        k: int | None = None,
    ) -> NDArray[np.floating[Any]]:
        """
        Draw samples mean + L z, with L the lower factor of cov().

        Args:
            rng: Caller-owned numpy random generator; the only source of randomness
            k: Number of independent draws. None draws a single sample.

        Returns:
            Array of shape (N,) if k is None, else (N, k)

        Raises:
            ValidationError: If rng is not a numpy generator or k < 1
            NumericalError: If cov() cannot be factored (see covariance_operator)
        """
        check_rng(rng, 'rng')
        L = self.covariance_operator(operation='rand').lower()
        m = self.mean()
        if k is None:
            z = rng.standard_normal(self.n_outputs)
            return m + L @ z
        k = check_positive_int(k, 'k')
        z = rng.standard_normal((self.n_outputs, k))
        return m[:, np.newaxis] + L @ z

    # === Density ===

    def logpdf(self, y: ArrayLike) -> float | NDArray[np.floating[Any]]:
        """
        Multivariate normal log-density of y.

            logpdf = -½ (N log 2π + log|C| + r' C⁻¹ r),   r = y - mean(),  C = cov()

        One Cholesky factor of C serves both the quadratic form (r' C⁻¹ r is
        the squared norm of L⁻¹ r) and the log-determinant.

        Args:
            y: Observation of shape (N,), or (N, k) for k observations at once

        Returns:
            float for 1D y, array of shape (k,) for 2D y

        Raises:
            DimensionError: If y does not have N rows
            NumericalError: If cov() cannot be factored (see covariance_operator)
        """
        y_arr = check_array(y, 'y')
        if y_arr.ndim not in (1, 2):
            raise DimensionError(
                f"y: expected 1D or 2D array, got {y_arr.ndim}D with shape {y_arr.shape}"
            )
        check_dimension(y_arr.shape[0], self.n_outputs, 'y', 'length (N)')
        check_finite(y_arr, 'y')

        C = self.covariance_operator(operation='logpdf')
        chol = C.cholesky()
        m = self.mean()
        r = y_arr - m if y_arr.ndim == 1 else y_arr - m[:, np.newaxis]
        w = C.whiten(r)
        quad = np.sum(w * w, axis=0)

        out = -0.5 * (self.n_outputs * _LOG_2PI + chol.logdet + quad)
        if y_arr.ndim == 1:
            return float(out)
        return out

    def __repr__(self) -> str:
        return (
            f"FiniteGaussianProjection(D={self._design.d}, N={self._design.n}, "
            f"isotropic_noise={self._design.isotropic})"
        )
