"""
BayesianLinearRegressor: Gaussian belief over a weight vector.

    w ~ N(mw, Λw⁻¹)

The belief is held in precision form. Λw is factored once, at
construction, and every projection, weight sample and posterior derived
from this regressor reuses that factor.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyblr.core._arrays import frozen_copy
from pyblr.core.compute.linalg import SymmetricPDMatrix
from pyblr.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_square,
    check_dimension,
    check_symmetric,
    check_positive_int,
    check_rng,
)
from pyblr.blr.design import ProjectionDesign
from pyblr.blr.projection import FiniteGaussianProjection


class BayesianLinearRegressor:
    """
    Bayesian linear regressor with weights w ~ N(mw, Λw⁻¹).

    Immutable: mw and Λw are copied and made read-only. posterior()
    returns a new regressor rather than updating this one.

    Args:
        mw: Weight mean, shape (D,)
        precision: Weight precision Λw, shape (D, D), symmetric positive definite

    Raises:
        ValidationError: Non-numeric, non-finite or asymmetric input
        DimensionError: mw is not 1D, Λw is not square, or sizes differ
        NotPositiveDefiniteError: Λw cannot be Cholesky-factored

    Example:
        >>> blr = BayesianLinearRegressor(np.zeros(3), np.eye(3))
        >>> f = blr.project(X, 0.1)          # or blr(X, 0.1)
        >>> f.mean(), f.cov()
        >>> blr_post = posterior(f, y)
    """

    def __init__(self, mw: ArrayLike, precision: ArrayLike):
        mw_arr = check_array(mw, 'mw')
        check_1d(mw_arr, 'mw')
        check_finite(mw_arr, 'mw')

        prec_arr = check_array(precision, 'precision')
        check_square(prec_arr, 'precision')
        check_dimension(prec_arr.shape[0], mw_arr.shape[0], 'precision', 'size (D, length of mw)')
        check_finite(prec_arr, 'precision')
        check_symmetric(prec_arr, 'precision')

        self._mw = frozen_copy(mw_arr)
        self._precision = SymmetricPDMatrix(
            0.5 * (prec_arr + prec_arr.T), name='weight precision Λw'
        )
        self._precision.cholesky(operation='BayesianLinearRegressor')

    @classmethod
    def _from_parts(
        cls,
        mw: NDArray[np.floating[Any]],
        precision: SymmetricPDMatrix,
    ) -> BayesianLinearRegressor:
        """Internal constructor for already validated, already factored parts."""
        obj = cls.__new__(cls)
        obj._mw = frozen_copy(mw)
        obj._precision = precision
        return obj

    # === Properties ===

    @property
    def mw(self) -> NDArray[np.floating[Any]]:
        """Weight mean (D,)."""
        return self._mw

    @property
    def precision(self) -> NDArray[np.floating[Any]]:
        """Weight precision Λw (D x D)."""
        return self._precision.matrix

    @property
    def precision_operator(self) -> SymmetricPDMatrix:
        """Λw together with its cached Cholesky factor."""
        return self._precision

    @property
    def n_features(self) -> int:
        """Weight dimension D."""
        return self._mw.shape[0]

    # === Projection ===

    def project(self, X: ArrayLike, noise: ArrayLike | float) -> FiniteGaussianProjection:
        """
        Distribution over outputs Y = X'w + ε, ε ~ N(0, Σy).

        Args:
            X: Input locations (D x N); column i is the features of output i
            noise: Σy as an (N x N) symmetric matrix, or a non-negative scalar
                variance meaning isotropic noise scalar * I(N)

        Raises:
            DimensionError: X does not have D rows, or Σy is not N x N
        """
        design = ProjectionDesign.build(X, noise, n_features=self.n_features)
        return FiniteGaussianProjection(self, design)

    def __call__(self, X: ArrayLike, noise: ArrayLike | float) -> FiniteGaussianProjection:
        return self.project(X, noise)

    # === Weight space ===

    def weight_cov(self) -> NDArray[np.floating[Any]]:
        """Weight covariance Λw⁻¹, by solves against the cached factor."""
        cov = self._precision.solve(np.eye(self.n_features), operation='weight_cov')
        return 0.5 * (cov + cov.T)

    def sample_weights(
        self,
        rng: np.random.Generator,
        k: int | None = None,
    ) -> NDArray[np.floating[Any]]:
        """
        Draw weight vectors mw + L⁻ᵀ z, with L the lower factor of Λw.

        Returns:
            Array of shape (D,) if k is None, else (D, k)
        """
        check_rng(rng, 'rng')
        if k is None:
            z = rng.standard_normal(self.n_features)
            return self._mw + self._precision.whiten_transpose(z, operation='sample_weights')
        k = check_positive_int(k, 'k')
        z = rng.standard_normal((self.n_features, k))
        return self._mw[:, np.newaxis] + self._precision.whiten_transpose(z, operation='sample_weights')

    def __repr__(self) -> str:
        return f"BayesianLinearRegressor(D={self.n_features})"
