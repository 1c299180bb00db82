"""
leaflet-widget: build Leaflet map widgets from Python
"""

__version__ = "0.1.0"

from leaflet_widget.map.formula import Formula, resolve
from leaflet_widget.map.widget import Map
from leaflet_widget.map.proxy import MapProxy, MessageChannel
from leaflet_widget.legend.palettes import (
    color_bin,
    color_factor,
    color_numeric,
    color_quantile,
)
from leaflet_widget.legend.label_format import label_format
from leaflet_widget.providers.registry import ProviderRegistry
from leaflet_widget.providers.tiles import provider_tile_options

__all__ = [
    "__version__",
    "Formula",
    "resolve",
    "Map",
    "MapProxy",
    "MessageChannel",
    "ProviderRegistry",
    "color_bin",
    "color_factor",
    "color_numeric",
    "color_quantile",
    "label_format",
    "provider_tile_options",
]
