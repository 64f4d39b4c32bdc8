"""
Projection Design.

ProjectionDesign holds the validated input locations X (D x N) and noise
covariance Σy (N x N) a regressor is evaluated at. It knows the shapes
must agree with the regressor's weight dimension; it does not know
anything about the weight distribution itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyblr.core._arrays import frozen_copy
from pyblr.core.compute.linalg import SymmetricPDMatrix
from pyblr.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_square,
    check_dimension,
    check_symmetric,
    check_scalar_nonnegative,
)


@dataclass(frozen=True)
class ProjectionDesign:
    """
    Validated (X, Σy) pair.

    Immutable after construction. X is stored read-only; Σy is stored as a
    SymmetricPDMatrix so its Cholesky factor is computed at most once, the
    first time logpdf() or posterior() needs it.

    Σy may be given as a full N x N symmetric matrix or as a non-negative
    scalar s, which means isotropic noise s * I(N) with N taken from X.

    Construction:
        ProjectionDesign.build(X, noise, n_features=D)
    """
    _X: NDArray[np.floating[Any]]
    _noise: SymmetricPDMatrix
    _d: int
    _n: int
    _isotropic: bool

    @classmethod
    def build(cls, X: ArrayLike, noise: ArrayLike | float, n_features: int) -> ProjectionDesign:
        """
        Validate X and Σy against the weight dimension.

        Args:
            X: Design matrix (D x N); column i is the feature vector of output i
            noise: Noise covariance (N x N) or non-negative scalar variance
            n_features: Weight dimension D of the regressor

        Raises:
            ValidationError: Non-numeric, non-finite, asymmetric or negative input
            DimensionError: X rows != D, or Σy is not N x N
        """
        X_arr = check_array(X, 'X')
        check_2d(X_arr, 'X')
        d, n = X_arr.shape
        check_dimension(d, n_features, 'X', 'number of rows (D)')
        check_finite(X_arr, 'X')

        if np.ndim(noise) == 0:
            variance = check_scalar_nonnegative(np.asarray(noise).item(), 'noise')
            noise_arr = variance * np.eye(n)
            isotropic = True
        else:
            noise_arr = check_array(noise, 'noise')
            check_square(noise_arr, 'noise')
            check_dimension(noise_arr.shape[0], n, 'noise', 'size (N, columns of X)')
            check_finite(noise_arr, 'noise')
            check_symmetric(noise_arr, 'noise')
            noise_arr = 0.5 * (noise_arr + noise_arr.T)
            isotropic = False

        return cls(
            _X=frozen_copy(X_arr),
            _noise=SymmetricPDMatrix(noise_arr, name='noise covariance Σy'),
            _d=d,
            _n=n,
            _isotropic=isotropic,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (D x N)."""
        return self._X

    @property
    def noise(self) -> SymmetricPDMatrix:
        """Noise covariance Σy with its memoized factor."""
        return self._noise

    @property
    def noise_cov(self) -> NDArray[np.floating[Any]]:
        """Noise covariance Σy as an (N x N) array."""
        return self._noise.matrix

    @property
    def d(self) -> int:
        """Weight dimension D."""
        return self._d

    @property
    def n(self) -> int:
        """Output dimension N."""
        return self._n

    @property
    def isotropic(self) -> bool:
        """True if Σy was given as a scalar variance."""
        return self._isotropic
