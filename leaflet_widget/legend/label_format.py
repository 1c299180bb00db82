"""
Legend label formatting.
"""

import math
from typing import Callable, List, Optional, Sequence

import numpy as np

from leaflet_widget.legend.breaks import as_float_array

# significant digits shown when formatting a vector of numbers
SIGNIFICANT_DIGITS = 7


def _decimals_needed(value: float, max_decimals: int) -> int:
    if value == 0 or not math.isfinite(value):
        return 0
    magnitude = math.floor(math.log10(abs(value))) + 1
    limit = max(0, min(max_decimals, SIGNIFICANT_DIGITS - magnitude))
    for d in range(limit + 1):
        if abs(round(value, d) - value) <= 1e-12 * max(1.0, abs(value)):
            return d
    return limit


def format_numbers(
    values: Sequence[float],
    digits: int = 3,
    big_mark: str = ",",
    transform: Optional[Callable] = None,
) -> List[str]:
    """
    Format numbers for display: round to `digits` decimal places, never use
    scientific notation, group thousands with `big_mark`, and show every
    number of the vector with the same number of decimals.
    """
    x = as_float_array(values)
    if transform is not None:
        x = as_float_array(transform(x))
    x = np.round(x, digits) + 0.0
    finite = [float(v) for v in x if math.isfinite(v)]
    decimals = max((_decimals_needed(v, digits) for v in finite), default=0)

    labels = []
    for v in x:
        if math.isnan(v):
            labels.append("NA")
        elif math.isinf(v):
            labels.append("Inf" if v > 0 else "-Inf")
        else:
            labels.append(f"{v:,.{decimals}f}".replace(",", big_mark))
    return labels


def _as_character(value) -> str:
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if value.is_integer():
            return str(int(value))
        return f"{value:.15g}"
    if isinstance(value, np.generic):
        return str(value.item())
    return str(value)


def label_format(
    prefix: str = "",
    suffix: str = "",
    between: str = " &ndash; ",
    digits: int = 3,
    big_mark: str = ",",
    transform: Optional[Callable] = None,
) -> Callable:
    """
    Build a legend label formatter.

    The returned function is called as fmt(kind, *args):
        fmt("numeric", cuts)          -> one label per cut
        fmt("bin", cuts)              -> len(cuts) - 1 interval labels
        fmt("quantile", cuts, probs)  -> len(cuts) - 1 percentage labels, with
                                         the value interval as hover text
        fmt("factor", levels)         -> one label per level

    Args:
        prefix: Text before each label
        suffix: Text after each label
        between: Separator between interval endpoints
        digits: Decimal places numbers are rounded to
        big_mark: Thousands separator
        transform: Applied to numeric breaks (as an array) or to each factor
            level before formatting
    """

    def fmt(values):
        return format_numbers(values, digits=digits, big_mark=big_mark, transform=transform)

    def numeric(cuts):
        return [f"{prefix}{c}{suffix}" for c in fmt(cuts)]

    def bin_(cuts):
        cuts = list(cuts)
        lower, upper = fmt(cuts[:-1]), fmt(cuts[1:])
        return [f"{prefix}{a}{between}{b}{suffix}" for a, b in zip(lower, upper)]

    def quantile(cuts, probs):
        cuts = list(cuts)
        percents = [f"{int(round(p * 100))}%" for p in probs]
        intervals = [f"{a}{between}{b}" for a, b in zip(fmt(cuts[:-1]), fmt(cuts[1:]))]
        # hovering a label shows the underlying value interval
        return [
            f'<span title="{interval}">{prefix}{p_lo}{between}{p_hi}{suffix}</span>'
            for interval, p_lo, p_hi in zip(intervals, percents[:-1], percents[1:])
        ]

    def factor(levels):
        if transform is not None:
            levels = [transform(v) for v in levels]
        return [f"{prefix}{_as_character(v)}{suffix}" for v in levels]

    formatters = {
        "numeric": numeric,
        "bin": bin_,
        "quantile": quantile,
        "factor": factor,
    }

    def label_formatter(kind, *args):
        kind = getattr(kind, "value", kind)
        if kind not in formatters:
            raise ValueError(f"Unknown label type '{kind}'")
        return formatters[kind](*args)

    return label_formatter
