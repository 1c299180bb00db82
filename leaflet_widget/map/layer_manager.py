"""
Model of the renderer's layer store.

The renderer keeps one id -> layer mapping per category, so ids never collide
across categories. Adding a layer whose (category, id) is already live
replaces the old layer in a single step. Groups are labels shared across
categories; clearing a group removes its layers from the map but the group
stays usable.

Replaying a map's operations through a LayerManager shows what the rendered
map will contain.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Set

from leaflet_widget.map.operations import CATEGORIES, CATEGORY_METHODS, Operation

logger = logging.getLogger(__name__)

# positions of (layerId, group) in the args of each add method
ADD_SIGNATURES = {
    "addTiles": (1, 2),
    "addWMSTiles": (1, 2),
    "addProviderTiles": (1, 2),
    "addMarkers": (3, 4),
    "addCircleMarkers": (3, 4),
    "addCircles": (3, 4),
    "addRectangles": (4, 5),
    "addPolylines": (1, 2),
    "addPolygons": (1, 2),
    "addGeoJSON": (1, 2),
    "addTopoJSON": (1, 2),
    "addControl": (2, None),
}

MULTI_LAYER_METHODS = {
    "addMarkers", "addCircleMarkers", "addCircles",
    "addRectangles", "addPolylines", "addPolygons",
}


class Layer:
    """A live object on the rendered map."""

    def __init__(self, category: str, layer_id: Optional[str], group: Optional[str], method: str):
        self.category = category
        self.layer_id = layer_id
        self.group = group
        self.method = method

    def __repr__(self):
        return f"Layer({self.category}, id={self.layer_id!r}, group={self.group!r})"


class LayerManager:
    """
    Per-category layer store with group bookkeeping.

    Usage:
        manager = LayerManager.replay(m.calls)
        manager.count("marker")
        manager.get_layer("marker", "X")
    """

    def __init__(self):
        self._by_id: Dict[str, Dict[Any, Layer]] = {c: OrderedDict() for c in CATEGORIES}
        self._anonymous: Dict[str, List[Layer]] = {c: [] for c in CATEGORIES}
        self._groups: Dict[str, List[Layer]] = {}
        self.hidden_groups: Set[str] = set()

    @staticmethod
    def _check_category(category: str):
        if category not in CATEGORIES:
            raise ValueError(f"Unknown layer category '{category}'. Use one of: {', '.join(CATEGORIES)}")

    def add_layer(self, layer: Layer) -> Layer:
        self._check_category(layer.category)
        if layer.layer_id is not None:
            previous = self._by_id[layer.category].get(layer.layer_id)
            if previous is not None:
                self._detach(previous)
            self._by_id[layer.category][layer.layer_id] = layer
        else:
            self._anonymous[layer.category].append(layer)
        if layer.group is not None:
            self._groups.setdefault(layer.group, []).append(layer)
        return layer

    def _detach(self, layer: Layer):
        if layer.group is not None and layer.group in self._groups:
            self._groups[layer.group] = [l for l in self._groups[layer.group] if l is not layer]

    def remove_layer(self, category: str, layer_ids: Iterable):
        self._check_category(category)
        if isinstance(layer_ids, (str, int)):
            layer_ids = [layer_ids]
        for layer_id in layer_ids:
            layer = self._by_id[category].pop(layer_id, None)
            if layer is not None:
                self._detach(layer)

    def clear_layers(self, category: str):
        self._check_category(category)
        for layer in list(self._by_id[category].values()) + self._anonymous[category]:
            self._detach(layer)
        self._by_id[category].clear()
        self._anonymous[category].clear()

    def clear_group(self, group: str):
        """Remove every layer of the group, whatever its category."""
        for layer in self._groups.get(group, []):
            if layer.layer_id is not None:
                self._by_id[layer.category].pop(layer.layer_id, None)
            else:
                self._anonymous[layer.category] = [
                    l for l in self._anonymous[layer.category] if l is not layer
                ]
        self._groups[group] = []

    def hide_group(self, group: str):
        self.hidden_groups.add(group)

    def show_group(self, group: str):
        self.hidden_groups.discard(group)

    def get_layer(self, category: str, layer_id) -> Optional[Layer]:
        self._check_category(category)
        return self._by_id[category].get(layer_id)

    def layers(self, category: Optional[str] = None) -> List[Layer]:
        categories = [category] if category is not None else list(CATEGORIES)
        result = []
        for c in categories:
            self._check_category(c)
            result.extend(self._by_id[c].values())
            result.extend(self._anonymous[c])
        return result

    def count(self, category: Optional[str] = None) -> int:
        return len(self.layers(category))

    def group_layers(self, group: str) -> List[Layer]:
        return list(self._groups.get(group, []))

    def groups(self) -> List[str]:
        return list(self._groups)

    def is_visible(self, layer: Layer) -> bool:
        return layer.group is None or layer.group not in self.hidden_groups

    def apply(self, operation: Operation):
        """Apply one renderer operation; operations outside the layer store are ignored."""
        method, args = operation.method, operation.args

        for category, (add_methods, remove_method, clear_method) in CATEGORY_METHODS.items():
            if method in add_methods:
                for layer in self._layers_from(category, method, args):
                    self.add_layer(layer)
                return
            if method == remove_method:
                self.remove_layer(category, _as_ids(args[0]))
                return
            if method == clear_method:
                self.clear_layers(category)
                return

        if method == "clearGroup":
            for group in _as_ids(args[0]):
                self.clear_group(group)
        elif method == "hideGroup":
            for group in _as_ids(args[0]):
                self.hide_group(group)
        elif method == "showGroup":
            for group in _as_ids(args[0]):
                self.show_group(group)
        else:
            logger.debug(f"Operation {method} does not change the layer store")

    def _layers_from(self, category: str, method: str, args: tuple) -> List[Layer]:
        if method == "addLegend":
            legend = args[0]
            return [Layer(category, legend.get("layerId"), legend.get("group"), method)]

        id_pos, group_pos = ADD_SIGNATURES[method]
        layer_ids = args[id_pos] if id_pos < len(args) else None
        group = args[group_pos] if group_pos is not None and group_pos < len(args) else None

        # point and shape builders create one layer per element
        n = 1
        if method in MULTI_LAYER_METHODS and _is_sequence(args[0]):
            n = len(args[0])
        ids = list(layer_ids) if _is_sequence(layer_ids) else [layer_ids] * n
        groups = list(group) if _is_sequence(group) else [group] * n
        return [Layer(category, i, g, method) for i, g in zip(ids, groups)]

    @classmethod
    def replay(cls, operations: Iterable[Operation]) -> "LayerManager":
        manager = cls()
        for operation in operations:
            manager.apply(operation)
        return manager

    def summary(self) -> Dict[str, int]:
        return {c: self.count(c) for c in CATEGORIES}


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple)) or (
        hasattr(value, "tolist") and not isinstance(value, (str, bytes)) and getattr(value, "ndim", 1) > 0
    )


def _as_ids(value) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if _is_sequence(value):
        return list(value.tolist())
    return [value]
