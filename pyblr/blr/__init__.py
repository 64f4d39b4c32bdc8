"""
Bayesian linear regression.

A BayesianLinearRegressor holds a Gaussian belief over weights,
w ~ N(mw, Λw⁻¹). Projecting it onto inputs X (D x N) with noise Σy gives
the Gaussian over outputs Y = X'w + ε, which supports moments, marginals,
log-density, sampling and exact conditioning.

Public API:
    BayesianLinearRegressor(mw, precision)
    regressor.project(X, noise) -> FiniteGaussianProjection
    mean, cov, var, mean_and_cov, mean_and_var, marginals, logpdf, rand
    posterior(f, y) -> BayesianLinearRegressor

Example:
    >>> import numpy as np
    >>> from pyblr.blr import BayesianLinearRegressor, posterior, mean, cov
    >>>
    >>> rng = np.random.default_rng(0)
    >>> X = rng.standard_normal((2, 20))
    >>> blr = BayesianLinearRegressor(np.zeros(2), np.eye(2))
    >>> y = blr(X, 0.1).rand(rng)
    >>> post = posterior(blr(X, 0.1), y)
    >>> mean(post(X, 0.1)), cov(post(X, 0.1))
"""

from pyblr.blr.design import ProjectionDesign
from pyblr.blr.normal import Normal
from pyblr.blr.projection import FiniteGaussianProjection
from pyblr.blr.regressor import BayesianLinearRegressor
from pyblr.blr.operations import (
    mean,
    cov,
    var,
    mean_and_cov,
    mean_and_var,
    marginals,
    logpdf,
    rand,
    posterior,
)

__all__ = [
    "BayesianLinearRegressor",
    "FiniteGaussianProjection",
    "ProjectionDesign",
    "Normal",
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
