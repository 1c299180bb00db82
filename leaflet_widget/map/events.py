"""
Events reported by a rendered map back to the host application.

The renderer publishes each event as a named input:

    {map_id}_{category}_{event}   object events, payload {lat, lng, id}
                                  (+ featureId, properties for geojson)
    {map_id}_click                {lat, lng}
    {map_id}_bounds               {north, east, south, west}
    {map_id}_zoom                 int
    {map_id}_center               {lat, lng}

An event that has not happened yet reads as None.
"""

from typing import Any, Dict, Mapping, Optional

OBJECT_CATEGORIES = ("marker", "shape", "geojson", "topojson")
OBJECT_EVENTS = ("click", "mouseover", "mouseout")
MAP_EVENTS = ("click", "bounds", "zoom", "center")


def event_name(map_id: str, category: str, event: str) -> str:
    """Input name of an object event, e.g. event_name("map", "marker", "click")."""
    if category not in OBJECT_CATEGORIES:
        raise ValueError(
            f"Unknown event category '{category}'. Use one of: {', '.join(OBJECT_CATEGORIES)}"
        )
    if event not in OBJECT_EVENTS:
        raise ValueError(f"Unknown object event '{event}'. Use one of: {', '.join(OBJECT_EVENTS)}")
    return f"{map_id}_{category}_{event}"


def map_event_name(map_id: str, event: str) -> str:
    if event not in MAP_EVENTS:
        raise ValueError(f"Unknown map event '{event}'. Use one of: {', '.join(MAP_EVENTS)}")
    return f"{map_id}_{event}"


class MapEvents:
    """Read the latest events of one map from the host's input values."""

    def __init__(self, inputs: Mapping[str, Any], map_id: str):
        self.inputs = inputs
        self.map_id = map_id

    def _read(self, name: str) -> Optional[Any]:
        value = self.inputs.get(name)
        if value in ({}, [], ""):
            return None
        return value

    def object_event(self, category: str, event: str) -> Optional[Dict[str, Any]]:
        return self._read(event_name(self.map_id, category, event))

    def click(self) -> Optional[Dict[str, float]]:
        return self._read(map_event_name(self.map_id, "click"))

    def bounds(self) -> Optional[Dict[str, float]]:
        return self._read(map_event_name(self.map_id, "bounds"))

    def zoom(self) -> Optional[int]:
        value = self._read(map_event_name(self.map_id, "zoom"))
        return int(value) if value is not None else None

    def center(self) -> Optional[Dict[str, float]]:
        return self._read(map_event_name(self.map_id, "center"))
