"""
Color legends derived from color scale functions.

A legend is computed from a ColorScale and the values it colors:

    numeric   gradient with tick marks at pretty (or explicit, equally spaced) breaks
    bin       one swatch per bin, colored at the bin midpoint
    quantile  one swatch per quantile bin, labelled with percentages
    factor    one swatch per distinct value

A gray "NA" swatch is added when the values contain missing entries and the
scale's missing-value color is not fully transparent.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from matplotlib.colors import to_rgba

from leaflet_widget.exceptions import ArgumentConflictError, UnsupportedScaleError
from leaflet_widget.legend.breaks import (
    check_equally_spaced,
    is_missing,
    pretty,
    quantile,
    value_range,
)
from leaflet_widget.legend.label_format import label_format
from leaflet_widget.legend.palettes import ScaleKind
from leaflet_widget.map.controls import check_position
from leaflet_widget.map.formula import Formula, resolve

logger = logging.getLogger(__name__)

DEFAULT_BINS = 7

LegendParts = Tuple[List[str], List[str], Optional[Dict[str, float]]]


def _percent(value: float) -> str:
    return f"{100 * value:.15g}%"


def _numeric_legend(pal, values, bins, lab_format) -> LegendParts:
    if np.isscalar(bins) or len(bins) == 1:
        # a single number is the approximate tick count
        cuts = pretty(values, n=int(np.ravel(bins)[0]))
    else:
        cuts = check_equally_spaced(bins)

    lo, hi = value_range(values)
    # pretty breaks may fall outside the range of the values
    cuts = cuts[(cuts >= lo) & (cuts <= hi)]
    if cuts.size == 0:
        raise ValueError(f"None of the breaks fall within the range of values [{lo}, {hi}]")

    span = hi - lo
    p = (cuts - lo) / span if span > 0 else np.zeros_like(cuts)

    # The gradient runs from min to max; the renderer needs the first and last
    # break positions to align tick marks with it.
    extra = {"p_1": float(p[0]), "p_n": float(p[-1])}

    # linear-gradient(start-color, color1 p1%, ..., colorn pn%, end-color)
    stops = [""] + [_percent(v) for v in p] + [""]
    colors = pal([lo] + cuts.tolist() + [hi])
    gradient = ", ".join(f"{color} {stop}" for color, stop in zip(colors, stops))
    return [gradient], list(lab_format("numeric", cuts)), extra


def _bin_legend(pal, values, bins, lab_format) -> LegendParts:
    cuts = np.asarray(pal.args["bins"], dtype=float)
    mids = (cuts[1:] + cuts[:-1]) / 2
    return list(pal(mids)), list(lab_format("bin", cuts)), None


def _quantile_legend(pal, values, bins, lab_format) -> LegendParts:
    probs = np.asarray(pal.args["probs"], dtype=float)
    cuts = quantile(values, probs)
    # the middle points here are the middle probabilities
    mids = quantile(values, (probs[1:] + probs[:-1]) / 2)
    return list(pal(mids)), list(lab_format("quantile", cuts, probs)), None


def _factor_legend(pal, values, bins, lab_format) -> LegendParts:
    present = list(dict.fromkeys(v for v in values if not is_missing(v)))
    scale_levels = (getattr(pal, "args", None) or {}).get("levels")
    if scale_levels is None:
        levels = sorted(present)
    else:
        # scale order first, values outside the levels last
        order = {level: i for i, level in enumerate(scale_levels)}
        known = sorted((v for v in present if v in order), key=order.get)
        levels = known + sorted(v for v in present if v not in order)
    return list(pal(levels)), list(lab_format("factor", levels)), None


LEGEND_BUILDERS = {
    ScaleKind.NUMERIC: _numeric_legend,
    ScaleKind.BIN: _bin_legend,
    ScaleKind.QUANTILE: _quantile_legend,
    ScaleKind.FACTOR: _factor_legend,
}


def _values_list(values: Any) -> list:
    if values is None:
        raise ValueError("'values' is required when 'pal' is given")
    if isinstance(values, (str, bytes)) or np.isscalar(values):
        return [values]
    return list(values)


def _visible(color: Optional[str]) -> Optional[str]:
    if color is None:
        return None
    return color if to_rgba(color)[3] > 0 else None


def build_legend(
    pal: Optional[Callable] = None,
    values: Any = None,
    position: str = "topright",
    na_label: str = "NA",
    bins: Union[int, Sequence[float], None] = None,
    colors: Optional[Sequence[str]] = None,
    opacity: float = 0.5,
    labels: Optional[Sequence[str]] = None,
    lab_format: Optional[Callable] = None,
    title: Optional[str] = None,
    class_name: str = "info legend",
    layer_id: Optional[str] = None,
    group: Optional[str] = None,
    data: Any = None,
) -> Dict[str, Any]:
    """
    Compute the legend payload consumed by the renderer's addLegend.

    Either `pal` (a ColorScale) with `values`, or explicit `colors` with
    matching `labels` must be given.

    Args:
        pal: Color scale from color_numeric/color_bin/color_quantile/color_factor
        values: Values (or a Formula over `data`) the scale was applied to
        position: topright, bottomright, bottomleft or topleft
        na_label: Label of the missing-value swatch
        bins: Numeric scales only: approximate number of ticks, or explicit
            equally spaced breaks
        colors: Swatch colors when no palette is given
        opacity: Swatch opacity
        labels: Swatch labels matching `colors`
        lab_format: Formatter built by label_format()
        title: Legend title; defaults to the label of a Formula `values`
        class_name: CSS classes of the control
        layer_id: Control id; a later legend with the same id replaces this one
        group: Layer group the legend is shown and hidden with
        data: Dataset `values` formulas are resolved against

    Returns:
        Legend payload dict
    """
    check_position(position)
    lab_format = lab_format or label_format()
    kind = "unknown"
    na_color = None
    extra = None

    if pal is not None:
        if colors is not None:
            raise ArgumentConflictError("You must provide either 'pal' or 'colors' (not both)")

        if title is None and isinstance(values, Formula):
            title = values.label
        values = _values_list(resolve(values, data))

        scale_kind = getattr(pal, "kind", None)
        try:
            scale_kind = ScaleKind(scale_kind)
        except ValueError:
            raise UnsupportedScaleError(f"Palette function not supported (kind={scale_kind!r})") from None

        args = getattr(pal, "args", {}) or {}
        # a transparent NA color is not shown
        na_color = _visible(args.get("na_color"))

        if scale_kind is not ScaleKind.NUMERIC and bins is not None:
            logger.warning("'bins' is ignored because the palette type is not numeric")

        colors, labels, extra = LEGEND_BUILDERS[scale_kind](
            pal, values, DEFAULT_BINS if bins is None else bins, lab_format
        )
        kind = scale_kind.value

        if not any(is_missing(v) for v in values):
            na_color = None
    else:
        if colors is None or labels is None:
            raise ValueError("Provide either 'pal' and 'values', or 'colors' and 'labels'")
        colors, labels = list(colors), list(labels)
        if len(colors) != len(labels):
            raise ValueError(
                f"'colors' and 'labels' must be of the same length ({len(colors)} != {len(labels)})"
            )

    return {
        "colors": colors,
        "labels": labels,
        "na_color": na_color,
        "na_label": na_label,
        "opacity": opacity,
        "position": position,
        "type": kind,
        "title": title,
        "extra": extra,
        "layerId": layer_id,
        "className": class_name,
        "group": group,
    }


def legend_entries(legend: Dict[str, Any]) -> List[Tuple[str, str]]:
    """(color, label) pairs of a legend payload, including the NA swatch."""
    entries = list(zip(legend["colors"], legend["labels"]))
    if legend.get("na_color"):
        entries.append((legend["na_color"], legend["na_label"]))
    return entries


class LegendMethods:
    """add_legend builder shared by Map and MapProxy."""

    def add_legend(
        self,
        pal: Optional[Callable] = None,
        values: Any = None,
        position: str = "topright",
        na_label: str = "NA",
        bins: Union[int, Sequence[float], None] = None,
        colors: Optional[Sequence[str]] = None,
        opacity: float = 0.5,
        labels: Optional[Sequence[str]] = None,
        lab_format: Optional[Callable] = None,
        title: Optional[str] = None,
        class_name: str = "info legend",
        layer_id: Optional[str] = None,
        group: Optional[str] = None,
        data: Any = None,
    ):
        """Add a color legend; see build_legend() for the arguments."""
        data = self.data if data is None else data
        legend = build_legend(
            pal=pal, values=values, position=position, na_label=na_label,
            bins=bins, colors=colors, opacity=opacity, labels=labels,
            lab_format=lab_format, title=title, class_name=class_name,
            layer_id=layer_id, group=group, data=data,
        )
        return self.invoke_method(data, "addLegend", legend)
