"""
Tests for the posterior update.

Validates:
    - Agreement with the textbook precision-form update
    - Low-noise limit: the posterior interpolates the observations
    - Sequential conditioning on independent blocks equals joint conditioning
    - The prior regressor is left untouched
    - Error paths: shapes, singular noise, badly conditioned noise
"""

import numpy as np
import pytest
from scipy.linalg import block_diag

from pyblr.blr import BayesianLinearRegressor, cov, mean, posterior, rand
from pyblr.core.exceptions import (
    DimensionError,
    NotPositiveDefiniteError,
    NumericalError,
    SingularMatrixError,
    ValidationError,
)


EPS = np.finfo(np.float64).eps


def naive_posterior(X, regressor, noise, y):
    """Reference update using explicit inverses."""
    noise_inv = np.linalg.inv(noise)
    precision = regressor.precision + X @ noise_inv @ X.T
    mw = np.linalg.solve(precision, regressor.precision @ regressor.mw + X @ noise_inv @ y)
    return mw, precision


# ═══════════════════════════════════════════════════════════════════════
# Update formula
# ═══════════════════════════════════════════════════════════════════════


class TestUpdate:
    """posterior() implements Λw' = Λw + XΣy⁻¹X', mw' = Λw'⁻¹(Λw mw + XΣy⁻¹y)."""

    def test_matches_naive_update(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        mw_ref, precision_ref = naive_posterior(X, f, noise, y)

        post = posterior(f(X, noise), y)
        np.testing.assert_allclose(post.precision, precision_ref, rtol=1e-10, atol=1e-10)
        np.testing.assert_allclose(post.mw, mw_ref, rtol=1e-9, atol=1e-10)

    def test_returns_new_regressor(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        post = posterior(f(X, noise), y)
        assert isinstance(post, BayesianLinearRegressor)
        assert post is not f
        assert post.n_features == 7

    def test_posterior_precision_symmetric(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        post = posterior(f(X, noise), y)
        np.testing.assert_array_equal(post.precision, post.precision.T)

    def test_posterior_owns_fresh_factor(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        post = posterior(f(X, noise), y)
        L = post.precision_operator.lower()
        np.testing.assert_allclose(L @ L.T, post.precision, rtol=1e-12, atol=1e-12)
        assert post.precision_operator is not f.precision_operator

    def test_prior_unchanged(self, rng, medium_problem):
        X, f, noise = medium_problem
        mw_before = f.mw.copy()
        precision_before = f.precision.copy()
        y = rand(rng, f(X, noise))
        posterior(f(X, noise), y)
        np.testing.assert_array_equal(f.mw, mw_before)
        np.testing.assert_array_equal(f.precision, precision_before)

    def test_observations_not_modified(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        y_before = y.copy()
        posterior(f(X, noise), y)
        np.testing.assert_array_equal(y, y_before)

    def test_posterior_variance_shrinks(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        post = posterior(f(X, noise), y)
        assert np.all(np.diag(cov(post(X, noise))) < np.diag(cov(f(X, noise))))

    def test_scalar_noise_matches_matrix_noise(self, rng, medium_problem):
        X, f, _ = medium_problem
        y = rng.standard_normal(13)
        a = posterior(f(X, 0.2), y)
        b = posterior(f(X, 0.2 * np.eye(13)), y)
        np.testing.assert_allclose(a.mw, b.mw, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(a.precision, b.precision, rtol=1e-12, atol=1e-12)

    def test_posterior_can_be_reprojected(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        post = posterior(f(X, noise), y)
        X_new = rng.standard_normal((7, 4))
        assert mean(post(X_new, 0.1)).shape == (4,)
        assert cov(post(X_new, 0.1)).shape == (4, 4)


# ═══════════════════════════════════════════════════════════════════════
# Low-noise limit (scenario: D=7, N=13, Σy = ε)
# ═══════════════════════════════════════════════════════════════════════


class TestLowNoise:
    """With noise at machine epsilon the posterior interpolates y."""

    @pytest.fixture
    def low_noise(self, rng, medium_problem):
        X, f, _ = medium_problem
        y = rand(rng, f(X, EPS))
        return X, f, y

    def test_mean_recovers_observations(self, low_noise):
        X, f, y = low_noise
        post = posterior(f(X, EPS), y)
        np.testing.assert_allclose(mean(post(X, EPS)), y, rtol=1e-6, atol=1e-6)

    def test_covariance_vanishes(self, low_noise):
        X, f, y = low_noise
        post = posterior(f(X, EPS), y)
        assert np.all(cov(post(X, EPS)) < 1_000 * EPS)

    def test_no_overflow(self, low_noise):
        X, f, y = low_noise
        post = posterior(f(X, EPS), y)
        assert np.all(np.isfinite(post.mw))
        assert np.all(np.isfinite(post.precision))


# ═══════════════════════════════════════════════════════════════════════
# Sequential vs joint conditioning (scenario: D=7, N=13, split N-3 / 3)
# ═══════════════════════════════════════════════════════════════════════


class TestRepeatedConditioning:
    """Conditioning on independent blocks in sequence equals joint conditioning."""

    @staticmethod
    def _split(X, noise, y, N1):
        # Noise correlated across the two blocks cannot be conditioned on
        # sequentially, so keep only the diagonal blocks.
        noise1, noise2 = noise[:N1, :N1], noise[N1:, N1:]
        noise_joint = block_diag(noise1, noise2)
        return (X[:, :N1], noise1, y[:N1]), (X[:, N1:], noise2, y[N1:]), noise_joint

    def test_sequential_equals_joint(self, rng, medium_problem):
        X, f, noise = medium_problem
        X_query = rng.standard_normal((7, 13))
        y = rand(rng, f(X, noise))

        (X1, noise1, y1), (X2, noise2, y2), noise_joint = self._split(X, noise, y, 13 - 3)

        post1 = posterior(f(X1, noise1), y1)
        post2 = posterior(post1(X2, noise2), y2)
        post = posterior(f(X, noise_joint), y)

        np.testing.assert_allclose(mean(post(X_query, noise)), mean(post2(X_query, noise)), rtol=1e-8, atol=1e-10)
        np.testing.assert_allclose(cov(post(X_query, noise)), cov(post2(X_query, noise)), rtol=1e-8, atol=1e-10)

    @pytest.mark.parametrize("N1", [1, 4, 7, 12])
    def test_any_split(self, rng, medium_problem, N1):
        X, f, noise = medium_problem
        X_query = rng.standard_normal((7, 5))
        y = rand(rng, f(X, noise))

        (X1, noise1, y1), (X2, noise2, y2), noise_joint = self._split(X, noise, y, N1)

        post2 = posterior(posterior(f(X1, noise1), y1)(X2, noise2), y2)
        post = posterior(f(X, noise_joint), y)

        np.testing.assert_allclose(post.mw, post2.mw, rtol=1e-8, atol=1e-10)
        np.testing.assert_allclose(post.precision, post2.precision, rtol=1e-10, atol=1e-10)
        np.testing.assert_allclose(cov(post(X_query, 0.5)), cov(post2(X_query, 0.5)), rtol=1e-8, atol=1e-10)

    def test_order_independent(self, rng, medium_problem):
        X, f, noise = medium_problem
        y = rand(rng, f(X, noise))
        (X1, noise1, y1), (X2, noise2, y2), _ = self._split(X, noise, y, 6)

        forward = posterior(posterior(f(X1, noise1), y1)(X2, noise2), y2)
        backward = posterior(posterior(f(X2, noise2), y2)(X1, noise1), y1)

        np.testing.assert_allclose(forward.mw, backward.mw, rtol=1e-8, atol=1e-10)
        np.testing.assert_allclose(forward.precision, backward.precision, rtol=1e-10, atol=1e-10)

    def test_one_observation_at_a_time(self, rng, small_problem):
        X, f, _ = small_problem
        y = rand(rng, f(X, 0.3))

        post = f
        for i in range(11):
            post = posterior(post(X[:, i:i + 1], 0.3), y[i:i + 1])
        joint = posterior(f(X, 0.3), y)

        np.testing.assert_allclose(post.mw, joint.mw, rtol=1e-8, atol=1e-10)
        np.testing.assert_allclose(post.precision, joint.precision, rtol=1e-10, atol=1e-10)


# ═══════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════


class TestPosteriorErrors:
    """Shape mismatches and numerically unusable noise fail loudly."""

    def test_wrong_length(self, medium_problem):
        X, f, noise = medium_problem
        with pytest.raises(DimensionError, match="length"):
            posterior(f(X, noise), np.zeros(12))

    def test_matrix_observations_rejected(self, medium_problem):
        X, f, noise = medium_problem
        with pytest.raises(DimensionError):
            posterior(f(X, noise), np.zeros((13, 2)))

    def test_non_finite_observations(self, medium_problem):
        X, f, noise = medium_problem
        y = np.zeros(13)
        y[0] = np.inf
        with pytest.raises(ValidationError, match="non-finite"):
            posterior(f(X, noise), y)

    def test_zero_noise_is_singular(self, medium_problem):
        X, f, _ = medium_problem
        with pytest.raises(NumericalError) as exc_info:
            posterior(f(X, 0.0), np.zeros(13))
        assert isinstance(exc_info.value, NotPositiveDefiniteError)
        assert exc_info.value.operation == 'posterior'
        assert exc_info.value.matrix_name == 'noise covariance Σy'

    def test_indefinite_noise(self, medium_problem):
        X, f, noise = medium_problem
        with pytest.raises(NotPositiveDefiniteError):
            posterior(f(X, -noise), np.zeros(13))

    def test_underflowing_noise_is_singular(self, medium_problem):
        X, f, _ = medium_problem
        with pytest.raises(SingularMatrixError) as exc_info:
            posterior(f(X, 1e-310), np.ones(13))
        assert exc_info.value.operation == 'posterior'

    def test_badly_conditioned_noise_warns(self, rng, medium_problem):
        X, f, _ = medium_problem
        noise = np.diag(np.r_[np.ones(12), 1e-20])
        y = rng.standard_normal(13)
        with pytest.warns(RuntimeWarning, match="badly conditioned"):
            post = posterior(f(X, noise), y)
        assert np.all(np.isfinite(post.mw))
