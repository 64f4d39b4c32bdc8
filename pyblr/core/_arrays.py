"""
Array storage helpers shared by the value types.
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray


def frozen_copy(array: ArrayLike) -> NDArray[np.floating[Any]]:
    """Return a read-only float64 copy of array."""
    result = np.array(array, dtype=np.float64, copy=True)
    result.flags.writeable = False
    return result
