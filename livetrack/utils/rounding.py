"""
Rounding helpers used to quantize live track columns.

numpy's ``np.round`` rounds half to even; track encoding rounds half away
from zero so that 0.5 m always becomes 1 m and -0.5 m becomes -1 m.
"""

import math
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray


def round_half_away(values: ArrayLike, digits: int = 0) -> NDArray[np.float64]:
    """
    Round to ``digits`` decimals, halves away from zero.

    Args:
        values: Scalar or array of floats
        digits: Number of decimal digits to keep

    Returns:
        Float array with the same shape as the input
    """
    arr = np.asarray(values, dtype=np.float64)
    scale = 10.0 ** digits
    return np.sign(arr) * np.floor(np.abs(arr) * scale + 0.5) / scale


def round_to_int(value: float) -> int:
    """Round a single finite float to the nearest int, halves away from zero."""
    return int(round_half_away(value))


def is_finite_number(value: Optional[float]) -> bool:
    """True for ints/floats that are not None, NaN or infinite."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False
