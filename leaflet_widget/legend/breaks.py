"""
Break points for color scales and legends.
"""

import math
import sys
from typing import Iterable, Sequence

import numpy as np

EPS = sys.float_info.epsilon


def is_missing(value) -> bool:
    """True for None and float NaN (numpy or builtin)."""
    if value is None:
        return True
    try:
        return bool(np.isnan(value))
    except (TypeError, ValueError):
        return False


def as_float_array(values: Iterable) -> np.ndarray:
    """Convert values to a float array, mapping None to NaN."""
    if isinstance(values, np.ndarray) and values.dtype.kind == "f":
        return values.astype(float, copy=False).ravel()
    if np.isscalar(values) or values is None:
        values = [values]
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def value_range(values: Iterable) -> np.ndarray:
    """(min, max) ignoring missing values."""
    x = as_float_array(values)
    x = x[~np.isnan(x)]
    if x.size == 0:
        raise ValueError("Cannot compute a range: all values are missing")
    return np.array([x.min(), x.max()])


def pretty(values: Iterable, n: int = 5, min_n: int = None) -> np.ndarray:
    """
    Approximately n + 1 equally spaced round values covering the range of values.

    The step is 1, 2 or 5 times a power of ten. Candidates are tried in
    increasing order and a larger step only wins when it is strictly closer
    to the ideal cell width (with a bias towards larger steps), so ties keep
    the smaller step. The result always covers [min(values), max(values)].

    Args:
        values: Numeric values; missing values are ignored
        n: Desired number of intervals
        min_n: Minimal number of intervals (default n // 3)

    Returns:
        Sorted array of break points
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    lo, hi = value_range(values)
    if min_n is None:
        min_n = n // 3

    h = 1.5                  # high.u.bias
    h5 = 0.5 + 1.5 * h       # u5.bias
    shrink = 0.75            # shrink.sml
    ndiv = n

    dx = hi - lo
    if dx == 0 and hi == 0:
        cell = 1.0
        i_small = True
    else:
        cell = max(abs(lo), abs(hi))
        u = 1 + (1 / (1 + h) if h5 >= 1.5 * h + 0.5 else 1.5 / (1 + h5))
        u *= max(1, ndiv) * EPS
        i_small = dx < cell * u * 3

    if i_small:
        if cell > 10:
            cell = 9 + cell / 10
        cell *= shrink
        if min_n > 1:
            cell /= min_n
    else:
        cell = dx
        if ndiv > 1:
            cell /= ndiv

    if cell < 20 * sys.float_info.min:
        cell = 20 * sys.float_info.min
    elif cell * 10 > sys.float_info.max:
        cell = 0.1 * sys.float_info.max

    base = 10.0 ** math.floor(math.log10(cell))
    unit = base
    if 2 * base - cell < h * (cell - unit):
        unit = 2 * base
        if 5 * base - cell < h5 * (cell - unit):
            unit = 5 * base
            if 10 * base - cell < h * (cell - unit):
                unit = 10 * base

    rounding_eps = 1e-10
    ns = math.floor(lo / unit + rounding_eps)
    nu = math.ceil(hi / unit - rounding_eps)
    while ns * unit > lo + rounding_eps * unit:
        ns -= 1
    while nu * unit < hi - rounding_eps * unit:
        nu += 1

    k = int(0.5 + nu - ns)
    if k < min_n:
        k = min_n - k
        if ns >= 0:
            nu += k // 2
            ns -= k // 2 + k % 2
        else:
            ns -= k // 2
            nu += k // 2 + k % 2

    breaks = np.arange(ns, nu + 1) * unit
    # snap floating-point noise (e.g. 0.30000000000000004) onto the grid
    decimals = max(0, -int(math.floor(math.log10(unit))) + 1)
    return np.round(breaks, decimals) + 0.0


def quantile(values: Iterable, probs: Sequence[float]) -> np.ndarray:
    """Quantiles of values at probs, ignoring missing values (linear interpolation)."""
    x = as_float_array(values)
    x = x[~np.isnan(x)]
    if x.size == 0:
        raise ValueError("Cannot compute quantiles: all values are missing")
    probs = np.asarray(probs, dtype=float)
    if np.any((probs < 0) | (probs > 1)):
        raise ValueError(f"Probabilities must lie in [0, 1], got {probs.tolist()}")
    return np.quantile(x, probs)


def check_equally_spaced(breaks: Sequence[float]) -> np.ndarray:
    """
    Validate explicit legend breaks.

    Three or more breaks must be equally spaced: every second difference must
    be within sqrt(eps) scaled by the largest break magnitude.
    """
    b = as_float_array(breaks)
    if b.size > 2:
        tolerance = math.sqrt(EPS) * max(1.0, float(np.max(np.abs(b))))
        if not np.all(np.abs(np.diff(b, n=2)) <= tolerance):
            raise ValueError(f"The vector of breaks must be equally spaced, got {b.tolist()}")
    return b
