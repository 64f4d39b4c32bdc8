"""
Exact Bayesian conditioning in weight space.

Given f = regressor.project(X, Σy) and observed outputs y:

    Λw' = Λw + X Σy⁻¹ X'
    mw' = Λw'⁻¹ (Λw mw + X Σy⁻¹ y)

Σy⁻¹ is applied through its lower Cholesky factor Ly by whitening:

    A = Ly⁻¹ X'       (N x D)
    b = Ly⁻¹ y        (N,)
    X Σy⁻¹ X' = A'A,  X Σy⁻¹ y = A'b

so the update term is symmetric PSD by construction. Λw' is the sum of two
symmetric matrices and is factored once; the new regressor owns that factor.

Conditioning on two blocks of observations with independent noise, one after
the other, gives the same Λw' and mw' as conditioning on both at once with
block-diagonal Σy, since the update terms of the two blocks simply add.
"""

import warnings
import numpy as np
from numpy.typing import ArrayLike

from pyblr.core.compute.linalg import SymmetricPDMatrix
from pyblr.core.exceptions import SingularMatrixError
from pyblr.core.validation import check_array, check_1d, check_dimension, check_finite
from pyblr.blr.projection import FiniteGaussianProjection
from pyblr.blr.regressor import BayesianLinearRegressor


def posterior(f: FiniteGaussianProjection, y: ArrayLike) -> BayesianLinearRegressor:
    """
    Condition the regressor behind f on observations y.

    Args:
        f: Projection of a regressor at (X, Σy)
        y: Observed outputs, shape (N,)

    Returns:
        New BayesianLinearRegressor; the regressor behind f is unchanged.

    Raises:
        DimensionError: If y is not a vector of length N
        NotPositiveDefiniteError: If Σy or the updated precision cannot be factored
        SingularMatrixError: If Σy is so close to singular that the whitened
            design overflows

    Warns:
        RuntimeWarning: If Σy is badly conditioned but still factorable.
    """
    y_arr = check_array(y, 'y')
    check_1d(y_arr, 'y')
    check_dimension(y_arr.shape[0], f.n_outputs, 'y', 'length (N)')
    check_finite(y_arr, 'y')

    regressor = f.regressor
    design = f.design
    noise = design.noise

    # === Whiten against the noise factor ===
    noise.cholesky(operation='posterior')
    rcond = noise.rcond_estimate(operation='posterior')
    if rcond < np.finfo(np.float64).eps:
        warnings.warn(
            f"posterior: noise covariance Σy is badly conditioned "
            f"(reciprocal condition estimate {rcond:.2e}); the update may be inaccurate",
            RuntimeWarning,
            stacklevel=2,
        )

    A = noise.whiten(design.X.T, operation='posterior')
    b = noise.whiten(y_arr, operation='posterior')

    # === Updated precision and information vector ===
    prior_precision = regressor.precision
    new_precision = prior_precision + A.T @ A
    new_precision = 0.5 * (new_precision + new_precision.T)
    h = prior_precision @ regressor.mw + A.T @ b

    if not (np.all(np.isfinite(new_precision)) and np.all(np.isfinite(h))):
        raise SingularMatrixError(
            "posterior: noise covariance Σy is numerically singular; "
            "the whitened observations overflowed",
            matrix_name=noise.name,
            operation='posterior',
            condition_number=1.0 / rcond if rcond > 0 else np.inf,
        )

    new_precision_op = SymmetricPDMatrix(new_precision, name="posterior precision Λw'")
    new_precision_op.cholesky(operation='posterior')

    # === Updated mean ===
    new_mw = new_precision_op.solve(h, operation='posterior')

    return BayesianLinearRegressor._from_parts(new_mw, new_precision_op)
