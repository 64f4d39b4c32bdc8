"""
Free-function API over projections.

    f = regressor.project(X, noise)
    mean(f), cov(f), var(f), marginals(f), logpdf(f, y)
    rand(rng, f), rand(rng, f, k)
    posterior(f, y)

Each function delegates to the corresponding FiniteGaussianProjection
method; they exist so statistics read the same way whichever object is at
hand.
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyblr.blr.normal import Normal
from pyblr.blr.projection import FiniteGaussianProjection
from pyblr.blr.posterior import posterior


def mean(f: FiniteGaussianProjection) -> NDArray[np.floating[Any]]:
    """Output mean X' mw, shape (N,)."""
    return f.mean()


def cov(f: FiniteGaussianProjection) -> NDArray[np.floating[Any]]:
    """Output covariance X' Λw⁻¹ X + Σy, shape (N, N)."""
    return f.cov()


def var(f: FiniteGaussianProjection) -> NDArray[np.floating[Any]]:
    """Output variances diag(cov(f)), shape (N,)."""
    return f.var()


def mean_and_cov(f: FiniteGaussianProjection) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    return f.mean_and_cov()


def mean_and_var(f: FiniteGaussianProjection) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    return f.mean_and_var()


def marginals(f: FiniteGaussianProjection) -> tuple[Normal, ...]:
    """One univariate Normal per output."""
    return f.marginals()


def logpdf(f: FiniteGaussianProjection, y: ArrayLike) -> float | NDArray[np.floating[Any]]:
    """Log-density of y (N,) or of each column of y (N, k)."""
    return f.logpdf(y)


def rand(
    rng: np.random.Generator,
    f: FiniteGaussianProjection,
    k: int | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Sample from f using the caller's generator.

    Returns shape (N,) for a single draw and (N, k) for k draws.
    """
    return f.rand(rng, k)


__all__ = [
    "mean",
    "cov",
    "var",
    "mean_and_cov",
    "mean_and_var",
    "marginals",
    "logpdf",
    "rand",
    "posterior",
]
