"""
Builders for map view, tiles, markers, shapes, GeoJSON/TopoJSON and groups.

LayerMethods is mixed into both Map (static widget) and MapProxy (live map);
the host class supplies `data` and `invoke_method(data, method, *args)`.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from leaflet_widget.map.formula import Formula
from leaflet_widget.map.operations import filter_none

DEFAULT_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_TILE_ATTRIBUTION = (
    '&copy; <a href="https://openstreetmap.org/copyright/">OpenStreetMap</a>,  '
    '<a href="https://opendatacommons.org/licenses/odbl/">ODbL</a>'
)

LNG_NAMES = ("lng", "long", "longitude", "lon")
LAT_NAMES = ("lat", "latitude")


def tile_options(
    min_zoom: int = 0,
    max_zoom: int = 18,
    max_native_zoom: Optional[int] = None,
    tile_size: int = 256,
    subdomains: str = "abc",
    error_tile_url: str = "",
    tms: bool = False,
    no_wrap: bool = False,
    zoom_offset: int = 0,
    zoom_reverse: bool = False,
    opacity: float = 1.0,
    z_index: int = 1,
    update_when_idle: Optional[bool] = None,
    detect_retina: bool = False,
    **extra
) -> Dict[str, Any]:
    """Options for add_tiles(); None entries are dropped."""
    return filter_none(
        minZoom=min_zoom, maxZoom=max_zoom, maxNativeZoom=max_native_zoom,
        tileSize=tile_size, subdomains=subdomains, errorTileUrl=error_tile_url,
        tms=tms, noWrap=no_wrap, zoomOffset=zoom_offset, zoomReverse=zoom_reverse,
        opacity=opacity, zIndex=z_index, updateWhenIdle=update_when_idle,
        detectRetina=detect_retina, **extra
    )


def wms_tile_options(
    styles: str = "",
    format: str = "image/jpeg",
    transparent: bool = False,
    version: str = "1.1.1",
    crs: Optional[str] = None,
    **extra
) -> Dict[str, Any]:
    return filter_none(
        styles=styles, format=format, transparent=transparent,
        version=version, crs=crs, **extra
    )


def marker_options(
    interactive: bool = True,
    draggable: bool = False,
    keyboard: bool = True,
    title: str = "",
    alt: str = "",
    z_index_offset: int = 0,
    opacity: float = 1.0,
    rise_on_hover: bool = False,
    rise_offset: int = 250,
    **extra
) -> Dict[str, Any]:
    return filter_none(
        interactive=interactive, draggable=draggable, keyboard=keyboard,
        title=title, alt=alt, zIndexOffset=z_index_offset, opacity=opacity,
        riseOnHover=rise_on_hover, riseOffset=rise_offset, **extra
    )


def path_options(
    line_cap: Optional[str] = None,
    line_join: Optional[str] = None,
    clickable: bool = True,
    pointer_events: Optional[str] = None,
    class_name: str = "",
    **extra
) -> Dict[str, Any]:
    return filter_none(
        lineCap=line_cap, lineJoin=line_join, clickable=clickable,
        pointerEvents=pointer_events, className=class_name, **extra
    )


def popup_options(
    max_width: int = 300,
    min_width: int = 50,
    max_height: Optional[int] = None,
    auto_pan: bool = True,
    keep_in_view: bool = False,
    close_button: bool = True,
    class_name: str = "",
    **extra
) -> Dict[str, Any]:
    return filter_none(
        maxWidth=max_width, minWidth=min_width, maxHeight=max_height,
        autoPan=auto_pan, keepInView=keep_in_view, closeButton=close_button,
        className=class_name, **extra
    )


def label_options(
    interactive: bool = False,
    permanent: bool = False,
    direction: str = "auto",
    opacity: float = 1.0,
    text_size: str = "10px",
    class_name: str = "",
    **extra
) -> Dict[str, Any]:
    return filter_none(
        interactive=interactive, permanent=permanent, direction=direction,
        opacity=opacity, textsize=text_size, className=class_name, **extra
    )


def _style_options(
    stroke=True, color="#03F", weight=5, opacity=0.5, fill=True,
    fill_color=None, fill_opacity=0.2, dash_array=None, smooth_factor=1.0,
    no_clip=False, options=None
) -> Dict[str, Any]:
    style = filter_none(
        stroke=stroke, color=color, weight=weight, opacity=opacity, fill=fill,
        fillColor=fill_color, fillOpacity=fill_opacity, dashArray=dash_array,
        smoothFactor=smooth_factor, noClip=no_clip
    )
    style.update(options or {})
    return style


def _guess_column(data: Any, names: Sequence[str]) -> Optional[str]:
    if data is None:
        return None
    for name in names:
        try:
            if name in data:
                return name
        except TypeError:
            return None
    return None


def derive_points(data: Any, lng: Any = None, lat: Any = None) -> Tuple[Any, Any]:
    """
    Return (lng, lat), guessing formulas from well-known column names when
    either coordinate is not given explicitly.
    """
    if lng is None:
        column = _guess_column(data, LNG_NAMES)
        if column is None:
            raise ValueError("Point data not found; please provide lng/lat")
        lng = Formula(column)
    if lat is None:
        column = _guess_column(data, LAT_NAMES)
        if column is None:
            raise ValueError("Point data not found; please provide lng/lat")
        lat = Formula(column)
    return lng, lat


def _is_coordinate(value) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(v, (int, float)) for v in value)
    )


def _ring(coords: Sequence[Sequence[float]]) -> Dict[str, List[float]]:
    return {
        "lng": [float(c[0]) for c in coords],
        "lat": [float(c[1]) for c in coords],
    }


def derive_shapes(shapes: Sequence) -> List:
    """
    Convert [lng, lat] coordinate sequences into the renderer's nested
    shape structure: shapes -> parts -> rings -> {lng: [...], lat: [...]}.

    Each shape may be a single ring (list of coordinates) or a list of rings.
    """
    result = []
    for shape in shapes:
        if not shape:
            raise ValueError("Empty shape")
        if _is_coordinate(shape[0]):
            rings = [shape]
        else:
            rings = shape
        result.append([[_ring(ring) for ring in rings]])
    return result


class LayerMethods:
    """Builders shared by Map and MapProxy."""

    # -- view ---------------------------------------------------------------

    def set_view(self, lng: float, lat: float, zoom: int, options: Optional[dict] = None):
        return self.invoke_method(self.data, "setView", [lat, lng], zoom, options or {})

    def fly_to(self, lng: float, lat: float, zoom: int, options: Optional[dict] = None):
        return self.invoke_method(self.data, "flyTo", [lat, lng], zoom, options or {})

    def fit_bounds(self, lng1: float, lat1: float, lng2: float, lat2: float, options: Optional[dict] = None):
        return self.invoke_method(self.data, "fitBounds", lat1, lng1, lat2, lng2, options or {})

    def fly_to_bounds(self, lng1: float, lat1: float, lng2: float, lat2: float, options: Optional[dict] = None):
        return self.invoke_method(self.data, "flyToBounds", lat1, lng1, lat2, lng2, options or {})

    def set_max_bounds(self, lng1: float, lat1: float, lng2: float, lat2: float):
        return self.invoke_method(self.data, "setMaxBounds", lat1, lng1, lat2, lng2)

    def clear_bounds(self):
        return self.invoke_method(self.data, "clearBounds")

    # -- tile ---------------------------------------------------------------

    def add_tiles(
        self,
        url_template: str = DEFAULT_TILE_URL,
        attribution: Optional[str] = None,
        layer_id: Optional[str] = None,
        group: Optional[str] = None,
        options: Optional[dict] = None,
        data: Any = None,
    ):
        options = dict(options if options is not None else tile_options())
        if attribution is None and url_template == DEFAULT_TILE_URL:
            attribution = DEFAULT_TILE_ATTRIBUTION
        if attribution is not None:
            options["attribution"] = attribution
        return self.invoke_method(
            self._data_for(data), "addTiles", url_template, layer_id, group, options
        )

    def add_wms_tiles(
        self,
        base_url: str,
        layers: str = "",
        group: Optional[str] = None,
        options: Optional[dict] = None,
        attribution: Optional[str] = None,
        layer_id: Optional[str] = None,
        data: Any = None,
    ):
        if not layers:
            raise ValueError("layers is a required argument with comma-separated list of WMS layers to show")
        options = dict(options if options is not None else wms_tile_options())
        options["attribution"] = attribution
        options["layers"] = layers
        return self.invoke_method(
            self._data_for(data), "addWMSTiles", base_url, layer_id, group, options
        )

    def remove_tiles(self, layer_id):
        return self.invoke_method(self.data, "removeTiles", layer_id)

    def clear_tiles(self):
        return self.invoke_method(self.data, "clearTiles")

    # -- marker -------------------------------------------------------------

    def add_markers(
        self,
        lng: Any = None,
        lat: Any = None,
        layer_id: Any = None,
        group: Optional[str] = None,
        icon: Optional[dict] = None,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        data: Any = None,
    ):
        data = self._data_for(data)
        lng, lat = derive_points(data, lng, lat)
        return self.invoke_method(
            data, "addMarkers", lat, lng, icon, layer_id, group,
            options if options is not None else marker_options(),
            popup, popup_opts, None, None, label, label_opts
        )

    def add_circle_markers(
        self,
        lng: Any = None,
        lat: Any = None,
        radius: Any = 10,
        layer_id: Any = None,
        group: Optional[str] = None,
        stroke: bool = True,
        color: Any = "#03F",
        weight: float = 5,
        opacity: float = 0.5,
        fill: bool = True,
        fill_color: Any = None,
        fill_opacity: float = 0.2,
        dash_array: Optional[str] = None,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        data: Any = None,
    ):
        data = self._data_for(data)
        lng, lat = derive_points(data, lng, lat)
        style = _style_options(
            stroke=stroke, color=color, weight=weight, opacity=opacity, fill=fill,
            fill_color=fill_color if fill_color is not None else color,
            fill_opacity=fill_opacity, dash_array=dash_array,
            options=options if options is not None else path_options(),
        )
        return self.invoke_method(
            data, "addCircleMarkers", lat, lng, radius, layer_id, group, style,
            None, None, popup, popup_opts, label, label_opts
        )

    def remove_marker(self, layer_id):
        return self.invoke_method(self.data, "removeMarker", layer_id)

    def clear_markers(self):
        return self.invoke_method(self.data, "clearMarkers")

    # -- shape --------------------------------------------------------------

    def add_circles(
        self,
        lng: Any = None,
        lat: Any = None,
        radius: Any = 10,
        layer_id: Any = None,
        group: Optional[str] = None,
        color: Any = "#03F",
        weight: float = 5,
        fill_color: Any = None,
        fill_opacity: float = 0.2,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        highlight_options: Optional[dict] = None,
        data: Any = None,
    ):
        data = self._data_for(data)
        lng, lat = derive_points(data, lng, lat)
        style = _style_options(
            color=color, weight=weight,
            fill_color=fill_color if fill_color is not None else color,
            fill_opacity=fill_opacity,
            options=options if options is not None else path_options(),
        )
        return self.invoke_method(
            data, "addCircles", lat, lng, radius, layer_id, group, style,
            popup, popup_opts, label, label_opts, highlight_options
        )

    def add_rectangles(
        self,
        lng1: Any,
        lat1: Any,
        lng2: Any,
        lat2: Any,
        layer_id: Any = None,
        group: Optional[str] = None,
        color: Any = "#03F",
        weight: float = 5,
        fill_color: Any = None,
        fill_opacity: float = 0.2,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        highlight_options: Optional[dict] = None,
        data: Any = None,
    ):
        style = _style_options(
            color=color, weight=weight,
            fill_color=fill_color if fill_color is not None else color,
            fill_opacity=fill_opacity,
            options=options if options is not None else path_options(),
        )
        return self.invoke_method(
            self._data_for(data), "addRectangles", lat1, lng1, lat2, lng2,
            layer_id, group, style, popup, popup_opts, label, label_opts,
            highlight_options
        )

    def add_polylines(
        self,
        shapes: Sequence,
        layer_id: Any = None,
        group: Optional[str] = None,
        color: Any = "#03F",
        weight: float = 5,
        opacity: float = 0.5,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        highlight_options: Optional[dict] = None,
        data: Any = None,
    ):
        style = _style_options(
            color=color, weight=weight, opacity=opacity, fill=False,
            options=options if options is not None else path_options(),
        )
        return self.invoke_method(
            self._data_for(data), "addPolylines", derive_shapes(shapes),
            layer_id, group, style, popup, popup_opts, label, label_opts,
            highlight_options
        )

    def add_polygons(
        self,
        shapes: Sequence,
        layer_id: Any = None,
        group: Optional[str] = None,
        color: Any = "#03F",
        weight: float = 5,
        opacity: float = 0.5,
        fill_color: Any = None,
        fill_opacity: float = 0.2,
        popup: Any = None,
        popup_opts: Optional[dict] = None,
        label: Any = None,
        label_opts: Optional[dict] = None,
        options: Optional[dict] = None,
        highlight_options: Optional[dict] = None,
        data: Any = None,
    ):
        style = _style_options(
            color=color, weight=weight, opacity=opacity,
            fill_color=fill_color if fill_color is not None else color,
            fill_opacity=fill_opacity,
            options=options if options is not None else path_options(),
        )
        return self.invoke_method(
            self._data_for(data), "addPolygons", derive_shapes(shapes),
            layer_id, group, style, popup, popup_opts, label, label_opts,
            highlight_options
        )

    def remove_shape(self, layer_id):
        return self.invoke_method(self.data, "removeShape", layer_id)

    def clear_shapes(self):
        return self.invoke_method(self.data, "clearShapes")

    # -- geojson / topojson -------------------------------------------------

    def add_geojson(
        self,
        geojson: Any,
        layer_id: Optional[str] = None,
        group: Optional[str] = None,
        options: Optional[dict] = None,
    ):
        return self.invoke_method(
            self.data, "addGeoJSON", geojson, layer_id, group, options or {}
        )

    def remove_geojson(self, layer_id):
        return self.invoke_method(self.data, "removeGeoJSON", layer_id)

    def clear_geojson(self):
        return self.invoke_method(self.data, "clearGeoJSON")

    def add_topojson(
        self,
        topojson: Any,
        layer_id: Optional[str] = None,
        group: Optional[str] = None,
        options: Optional[dict] = None,
    ):
        return self.invoke_method(
            self.data, "addTopoJSON", topojson, layer_id, group, options or {}
        )

    def remove_topojson(self, layer_id):
        return self.invoke_method(self.data, "removeTopoJSON", layer_id)

    def clear_topojson(self):
        return self.invoke_method(self.data, "clearTopoJSON")

    # -- groups -------------------------------------------------------------

    def show_group(self, group):
        return self.invoke_method(self.data, "showGroup", group)

    def hide_group(self, group):
        return self.invoke_method(self.data, "hideGroup", group)

    def clear_group(self, group):
        return self.invoke_method(self.data, "clearGroup", group)

    def _data_for(self, data: Any) -> Any:
        return self.data if data is None else data
