"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pyblr.blr import BayesianLinearRegressor


def generate_toy_problem(rng, N, D):
    """
    Toy problem without obvious structure in the mean, precision or noise.

    Avoids identity precisions and diagonal noise so tests cannot pass for
    a special case by accident. Everything is reasonably well conditioned.

    Returns:
        (X, regressor, noise) with X of shape (D, N) and noise of shape (N, N)
    """
    X = rng.standard_normal((D, N))
    B = rng.standard_normal((D, D))
    C = 0.1 * rng.standard_normal((N, N))
    mw = rng.standard_normal(D)
    precision = B @ B.T + np.eye(D)
    noise = C @ C.T + np.eye(N)
    return X, BayesianLinearRegressor(mw, precision), noise


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(123456)


@pytest.fixture
def toy_problem():
    """The toy-problem generator, called as toy_problem(rng, N, D)."""
    return generate_toy_problem


@pytest.fixture
def small_problem(rng):
    """D=3, N=11 toy problem."""
    return generate_toy_problem(rng, 11, 3)


@pytest.fixture
def medium_problem(rng):
    """D=7, N=13 toy problem."""
    return generate_toy_problem(rng, 13, 7)
