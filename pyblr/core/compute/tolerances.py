"""
Tolerance tiers for numerical checks.

Defines precision expectations for the different comparisons the library
and its test suite make:
- CPU FP64: exact algebraic identities, up to rounding
- CPU FP64 ill-conditioned: identities through poorly conditioned solves
- SYMMETRY: how far a user-supplied matrix may be from its transpose
- STATISTICAL: Monte Carlo moments against analytic moments

Used by validation (symmetry check) and by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Algebraic identities computed in double precision
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned',
)

# Identities that pass through ill-conditioned solves (cond > 1e4)
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

# Accepted asymmetry of a precision or covariance matrix.
# Matrices built as B @ B.T + I are symmetric only up to rounding.
SYMMETRY = ToleranceTier(
    rtol=1e-8,
    atol=1e-12,
    name='symmetry',
    description='Maximum |A - A.T| relative to max |A|',
)

# Monte Carlo moment checks (10^7 draws).
# The standard error of a unit-scale covariance entry at 10^7 draws is about
# sqrt(2 / 10^7) = 4.5e-4, so the largest of ~100 entries routinely lands
# near 2e-3. 5e-3 is roughly ten standard errors at that scale.
STATISTICAL = ToleranceTier(
    rtol=5e-3,
    atol=5e-3,
    name='statistical',
    description='Empirical vs analytic moments of sampled draws',
)


def select_tolerance(is_ill_conditioned: bool = False) -> ToleranceTier:
    """Select appropriate tolerance tier for a deterministic comparison."""
    if is_ill_conditioned:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
