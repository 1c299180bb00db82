"""
Color scale functions: map data values to hex colors.

Each scale is tagged with the kind of mapping it performs and the arguments
it was built with, so that a legend can be derived from it later.
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

import matplotlib
import numpy as np
import seaborn as sns
from matplotlib.colors import Colormap, LinearSegmentedColormap, to_hex, to_rgba

from leaflet_widget.exceptions import UnsupportedScaleError
from leaflet_widget.legend.breaks import as_float_array, is_missing, quantile, value_range
from leaflet_widget.legend.breaks import pretty as pretty_breaks

logger = logging.getLogger(__name__)

DEFAULT_NA_COLOR = "#808080"

# Palette names resolved as discrete color lists rather than gradients
QUALITATIVE_PALETTES = {
    "Accent", "Dark2", "Paired", "Pastel1", "Pastel2", "Set1", "Set2", "Set3",
    "tab10", "tab20", "tab20b", "tab20c",
    "deep", "muted", "bright", "pastel", "dark", "colorblind",
}

Palette = Union[str, Sequence[str], Colormap, Callable]


class ScaleKind(str, Enum):
    NUMERIC = "numeric"
    BIN = "bin"
    QUANTILE = "quantile"
    FACTOR = "factor"


class ColorScale:
    """
    A callable color mapping tagged with its kind and construction arguments.

    Calling the scale with one value or a sequence returns a list of colors.
    `args` always contains 'na_color'; bin scales add 'bins', quantile scales
    add 'probs' and 'bins', factor scales add 'levels'.
    """

    def __init__(self, kind: Union[str, ScaleKind], func: Callable, **args):
        try:
            self.kind = ScaleKind(kind)
        except ValueError:
            raise UnsupportedScaleError(f"Unsupported color scale kind '{kind}'") from None
        self.func = func
        self.args = args
        self.args.setdefault("na_color", DEFAULT_NA_COLOR)

    @property
    def na_color(self) -> Optional[str]:
        return self.args.get("na_color")

    def __call__(self, values: Any) -> List[str]:
        return self.func(values)

    def __repr__(self):
        return f"ColorScale({self.kind.value})"


def as_colormap(palette: Palette, reverse: bool = False) -> Callable:
    """Resolve a palette to a function of t in [0, 1] returning RGBA."""
    if isinstance(palette, Colormap):
        cmap = palette
    elif isinstance(palette, str):
        if palette in matplotlib.colormaps:
            cmap = matplotlib.colormaps[palette]
        else:
            try:
                cmap = sns.color_palette(palette, as_cmap=True)
            except ValueError:
                raise ValueError(f"Unknown palette '{palette}'") from None
            if not isinstance(cmap, Colormap):
                cmap = LinearSegmentedColormap.from_list(palette, list(cmap))
    elif isinstance(palette, (list, tuple, np.ndarray)):
        colors = [to_rgba(c) for c in palette]
        if not colors:
            raise ValueError("Palette must contain at least one color")
        if len(colors) == 1:
            colors = colors * 2
        cmap = LinearSegmentedColormap.from_list("custom", colors)
    elif callable(palette):
        cmap = palette
    else:
        raise ValueError(f"Unsupported palette type: {type(palette).__name__}")

    if reverse:
        if isinstance(cmap, Colormap):
            return cmap.reversed()
        return lambda t, _f=cmap: _f(1 - np.asarray(t))
    return cmap


def palette_colors(palette: Palette, n: int, reverse: bool = False) -> List[tuple]:
    """n RGBA colors drawn from a palette, in order."""
    if isinstance(palette, str) and palette in QUALITATIVE_PALETTES:
        colors = [tuple(c) + (1.0,) for c in sns.color_palette(palette, n_colors=n)]
        return colors[::-1] if reverse else colors
    cmap = as_colormap(palette, reverse)
    return [tuple(c) for c in np.atleast_2d(cmap(np.linspace(0, 1, n)))]


def _hex(rgba, alpha: bool) -> str:
    return to_hex(rgba, keep_alpha=alpha)


def _as_list(values: Any) -> list:
    if isinstance(values, (str, bytes)) or np.isscalar(values) or values is None:
        return [values]
    return list(values)


def color_numeric(
    palette: Palette,
    domain: Optional[Iterable],
    na_color: str = DEFAULT_NA_COLOR,
    alpha: bool = False,
    reverse: bool = False,
) -> ColorScale:
    """
    Continuous color scale: values are rescaled linearly from the domain's
    range onto the palette.

    Args:
        palette: Colormap name, list of colors, or Colormap
        domain: Values defining the range; None uses each call's values
        na_color: Color for missing and out-of-range values
        alpha: Keep the alpha channel in the hex output
        reverse: Reverse the palette
    """
    rng = value_range(domain) if domain is not None else None
    cmap = as_colormap(palette, reverse)

    def func(values):
        x = as_float_array(_as_list(values))
        lo, hi = rng if rng is not None else value_range(x)
        span = hi - lo
        with np.errstate(invalid="ignore"):
            scaled = (x - lo) / span if span > 0 else np.where(np.isnan(x), np.nan, 0.5)
            outside = (scaled < -1e-10) | (scaled > 1 + 1e-10)
        if np.any(outside):
            logger.warning("Some values were outside the color scale and will be treated as NA")
        colors = []
        for s, out in zip(scaled, outside):
            if np.isnan(s) or out:
                colors.append(na_color)
            else:
                colors.append(_hex(cmap(float(np.clip(s, 0, 1))), alpha))
        return colors

    return ColorScale(ScaleKind.NUMERIC, func, na_color=na_color)


def bin_index(values: Any, bins: np.ndarray, right: bool = False) -> np.ndarray:
    """
    Zero-based interval index of each value, -1 when missing or outside.

    Intervals are [a, b) (or (a, b] when right=True); the outermost edge is
    always included.
    """
    x = as_float_array(_as_list(values))
    n = len(bins) - 1
    if right:
        idx = np.searchsorted(bins, x, side="left") - 1
        idx[x == bins[0]] = 0
    else:
        idx = np.searchsorted(bins, x, side="right") - 1
        idx[x == bins[-1]] = n - 1
    idx[np.isnan(x) | (idx < 0) | (idx >= n)] = -1
    return idx


def color_bin(
    palette: Palette,
    domain: Optional[Iterable],
    bins: Union[int, Sequence[float]] = 7,
    pretty: bool = True,
    na_color: str = DEFAULT_NA_COLOR,
    alpha: bool = False,
    reverse: bool = False,
    right: bool = False,
) -> ColorScale:
    """
    Binned color scale: values are cut into intervals, each with one color.

    Args:
        palette: Palette to draw one color per interval from
        domain: Values used to compute breaks when bins is a count
        bins: Number of bins, or explicit break points
        pretty: Use round-number breaks (pretty) rather than equal-width
            breaks when bins is a count
        right: Intervals closed on the right
    """
    if np.isscalar(bins):
        if domain is None:
            raise ValueError("domain is required when bins is a number of bins")
        if pretty:
            breaks = pretty_breaks(domain, n=int(bins))
        else:
            lo, hi = value_range(domain)
            breaks = np.linspace(lo, hi, int(bins) + 1)
    else:
        breaks = np.sort(as_float_array(bins))
    if breaks.size < 2:
        raise ValueError("At least two break points are required")
    if np.any(np.diff(breaks) <= 0):
        raise ValueError(f"Break points must be unique, got {breaks.tolist()}")

    colors = [_hex(c, alpha) for c in palette_colors(palette, breaks.size - 1, reverse)]

    def func(values):
        idx = bin_index(values, breaks, right)
        x = as_float_array(_as_list(values))
        if np.any((idx < 0) & ~np.isnan(x)):
            logger.warning("Some values were outside the color scale and will be treated as NA")
        return [na_color if i < 0 else colors[i] for i in idx]

    return ColorScale(ScaleKind.BIN, func, na_color=na_color, bins=breaks)


def color_quantile(
    palette: Palette,
    domain: Iterable,
    n: int = 4,
    probs: Optional[Sequence[float]] = None,
    na_color: str = DEFAULT_NA_COLOR,
    alpha: bool = False,
    reverse: bool = False,
    right: bool = False,
) -> ColorScale:
    """
    Quantile color scale: bins hold (roughly) equal numbers of domain values.

    Args:
        n: Number of equal-probability bins (ignored when probs is given)
        probs: Explicit cumulative probabilities, starting at 0 and ending at 1
    """
    if domain is None:
        raise ValueError("domain is required for a quantile color scale")
    if probs is None:
        probs = np.linspace(0, 1, n + 1)
    probs = np.asarray(probs, dtype=float)
    breaks = quantile(domain, probs)
    if np.any(np.diff(breaks) <= 0):
        raise ValueError(
            f"Quantile breaks are not unique ({breaks.tolist()}); use fewer bins or color_bin()"
        )
    binned = color_bin(
        palette, None, bins=breaks, na_color=na_color, alpha=alpha,
        reverse=reverse, right=right
    )
    return ColorScale(ScaleKind.QUANTILE, binned.func, na_color=na_color, probs=probs, bins=breaks)


def _levels(domain, levels, ordered) -> list:
    if levels is not None:
        seen = []
        for level in levels:
            if level in seen:
                logger.warning(f"Duplicate level '{level}' ignored")
                continue
            seen.append(level)
        return seen
    if domain is None:
        raise ValueError("Either domain or levels must be provided")
    values = [v for v in _as_list(domain) if not is_missing(v)]
    unique = list(dict.fromkeys(values))
    return unique if ordered else sorted(unique)


def color_factor(
    palette: Palette,
    domain: Optional[Iterable],
    levels: Optional[Sequence] = None,
    ordered: bool = False,
    na_color: str = DEFAULT_NA_COLOR,
    alpha: bool = False,
    reverse: bool = False,
) -> ColorScale:
    """
    Categorical color scale: one color per distinct value.

    Levels are the sorted distinct non-missing domain values, the domain's
    values in order of appearance when ordered=True, or the explicit levels.
    """
    lvls = _levels(domain, levels, ordered)
    if not lvls:
        raise ValueError("A factor color scale needs at least one level")
    lookup = dict(zip(lvls, (_hex(c, alpha) for c in palette_colors(palette, len(lvls), reverse))))

    def func(values):
        colors = []
        unknown = False
        for v in _as_list(values):
            if is_missing(v):
                colors.append(na_color)
            elif v in lookup:
                colors.append(lookup[v])
            else:
                unknown = True
                colors.append(na_color)
        if unknown:
            logger.warning("Some values were outside the color scale and will be treated as NA")
        return colors

    return ColorScale(ScaleKind.FACTOR, func, na_color=na_color, levels=lvls)
