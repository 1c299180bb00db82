"""
The map widget: an append-only log of renderer operations plus the script
dependencies the renderer must load.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from leaflet_widget.legend.legend import LegendMethods
from leaflet_widget.map.controls import ControlMethods
from leaflet_widget.map.layers import LayerMethods
from leaflet_widget.map.operations import (
    HtmlDependency,
    Operation,
    make_operation,
    operation_to_dict,
)
from leaflet_widget.providers.registry import ProviderRegistry
from leaflet_widget.providers.tiles import ProviderMethods
from leaflet_widget.utils.serialization import dumps, to_jsonable

logger = logging.getLogger(__name__)


class Map(LayerMethods, ControlMethods, LegendMethods, ProviderMethods):
    """
    A Leaflet map under construction.

    Every builder appends one Operation to `calls` and returns the map, so
    calls chain:

        m = (Map(data=df)
             .add_provider_tiles("CartoDB.Positron")
             .add_circle_markers(radius=4, color=Formula(lambda d: pal(d["pop"])))
             .add_legend(pal=pal, values=Formula("pop")))
        m.save("map.json")
    """

    def __init__(
        self,
        data: Any = None,
        options: Optional[Dict[str, Any]] = None,
        width: Optional[str] = None,
        height: Optional[str] = None,
        providers: Optional[ProviderRegistry] = None,
    ):
        """
        Args:
            data: Dataset formulas are resolved against (dict of columns or DataFrame)
            options: Leaflet map options (e.g. {"minZoom": 2})
            width: CSS width of the widget
            height: CSS height of the widget
            providers: Provider registry; the packaged catalog is loaded on
                first use when omitted
        """
        self.data = data
        self.options = dict(options or {})
        self.width = width
        self.height = height
        self.providers = providers
        self.calls: List[Operation] = []
        self.dependencies: List[HtmlDependency] = []

    def invoke_method(self, data: Any, method: str, *args):
        """Append one renderer call; formulas in args are resolved against data."""
        self.calls.append(make_operation(method, args, data))
        return self

    def add_dependencies(self, *dependencies: HtmlDependency):
        """Register script dependencies; already registered ones are skipped."""
        known = {(d.name, d.version) for d in self.dependencies}
        for dependency in dependencies:
            key = (dependency.name, dependency.version)
            if key in known:
                continue
            known.add(key)
            self.dependencies.append(dependency)
            logger.debug(f"Registered dependency {dependency.name} {dependency.version}")
        return self

    def pipe(self, func: Callable, *args, **kwargs):
        """Call func(map, *args, **kwargs) and return its result, for chaining."""
        return func(self, *args, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """The widget payload handed to the rendering host."""
        return to_jsonable({
            "x": {
                "options": self.options,
                "calls": [operation_to_dict(op) for op in self.calls],
            },
            "dependencies": [d._asdict() for d in self.dependencies],
            "width": self.width,
            "height": self.height,
        })

    def to_json(self, **kwargs) -> str:
        return dumps(self.to_dict(), **kwargs)

    def save(self, path: str) -> Path:
        """Write the widget payload as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Saved map with {len(self.calls)} calls to {path}")
        return path

    def __len__(self):
        return len(self.calls)

    def __repr__(self):
        return f"Map({len(self.calls)} calls, {len(self.dependencies)} dependencies)"
