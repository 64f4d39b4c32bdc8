"""
pyblr: Bayesian linear regression for Python.

Gaussian weight beliefs in precision form, projected onto arbitrary input
locations and noise, with exact Bayesian conditioning.

Submodules:
    blr: BayesianLinearRegressor, projections, posterior update
    core: Exceptions, validation, linear algebra kernels
"""

__version__ = "0.1.0"

from pyblr import blr
from pyblr.blr import BayesianLinearRegressor, posterior

__all__ = [
    "__version__",
    "blr",
    "BayesianLinearRegressor",
    "posterior",
]
