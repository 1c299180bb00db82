"""
Operation descriptors and the wire contract between builders and the renderer.

Every builder call becomes one Operation: the name of a method the
JavaScript renderer knows plus its positional arguments. Renaming or
reordering arguments breaks the renderer; new optional trailing arguments
are safe.
"""

import logging
from collections import namedtuple
from typing import Any, Dict

from leaflet_widget.map.formula import resolve

logger = logging.getLogger(__name__)


Operation = namedtuple("Operation", ["method", "args"])
Operation.__doc__ = "One renderer call; args is a tuple of evaluated values."

HtmlDependency = namedtuple("HtmlDependency", ["name", "version", "src", "script"])
HtmlDependency.__doc__ = "An external script bundle the renderer must load."


# category -> (add methods, remove method, clear method)
CATEGORY_METHODS = {
    "tile": (("addTiles", "addWMSTiles", "addProviderTiles"), "removeTiles", "clearTiles"),
    "marker": (("addMarkers", "addCircleMarkers"), "removeMarker", "clearMarkers"),
    "shape": (("addCircles", "addRectangles", "addPolylines", "addPolygons"), "removeShape", "clearShapes"),
    "geojson": (("addGeoJSON",), "removeGeoJSON", "clearGeoJSON"),
    "topojson": (("addTopoJSON",), "removeTopoJSON", "clearTopoJSON"),
    "control": (("addControl", "addLegend"), "removeControl", "clearControls"),
}

CATEGORIES = tuple(CATEGORY_METHODS)


def make_operation(method: str, args: tuple, data: Any) -> Operation:
    """Resolve formulas in args against data and freeze the result."""
    resolved = tuple(resolve(arg, data) for arg in args)
    logger.debug(f"Operation {method} with {len(resolved)} args")
    return Operation(method, resolved)


def operation_to_dict(operation: Operation) -> Dict[str, Any]:
    return {"method": operation.method, "args": list(operation.args)}


def filter_none(**options) -> Dict[str, Any]:
    """Drop options whose value is None."""
    return {k: v for k, v in options.items() if v is not None}
