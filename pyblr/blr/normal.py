"""
Univariate Gaussian used for per-output marginals.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats


@dataclass(frozen=True)
class Normal:
    """
    Univariate Gaussian N(mean, std²).

    Marginals are built by reading entries straight out of a projection's
    mean vector and covariance diagonal, so mean and std are stored exactly
    as extracted and never recomputed.
    """
    mean: float
    std: float

    @property
    def var(self) -> float:
        return self.std ** 2

    def logpdf(self, x: ArrayLike) -> float | NDArray[np.floating[Any]]:
        return stats.norm.logpdf(x, loc=self.mean, scale=self.std)

    def cdf(self, x: ArrayLike) -> float | NDArray[np.floating[Any]]:
        return stats.norm.cdf(x, loc=self.mean, scale=self.std)

    def interval(self, confidence: float) -> tuple[float, float]:
        """Central interval containing `confidence` probability mass."""
        lo, hi = stats.norm.interval(confidence, loc=self.mean, scale=self.std)
        return float(lo), float(hi)
