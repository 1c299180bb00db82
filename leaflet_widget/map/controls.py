"""
Builders for the control category (custom HTML controls and the layers control).
"""

from typing import Any, Dict, Optional, Sequence, Union

from leaflet_widget.map.operations import filter_none

POSITIONS = ("topright", "bottomright", "bottomleft", "topleft")


def check_position(position: str) -> str:
    if position not in POSITIONS:
        raise ValueError(
            f"Invalid control position '{position}'. Use one of: {', '.join(POSITIONS)}"
        )
    return position


def layers_control_options(collapsed: bool = True, auto_z_index: bool = True, **extra) -> Dict[str, Any]:
    return filter_none(collapsed=collapsed, autoZIndex=auto_z_index, **extra)


def _groups(groups):
    # {label: group} mappings pass through, sequences become lists
    return dict(groups) if isinstance(groups, dict) else list(groups)


class ControlMethods:
    """Control builders shared by Map and MapProxy."""

    def add_control(
        self,
        html: str,
        position: str = "topleft",
        layer_id: Optional[str] = None,
        class_name: str = "info legend",
    ):
        check_position(position)
        return self.invoke_method(self.data, "addControl", html, position, layer_id, class_name)

    def add_layers_control(
        self,
        base_groups: Union[Sequence[str], Dict[str, str]] = (),
        overlay_groups: Union[Sequence[str], Dict[str, str]] = (),
        position: str = "topright",
        options: Optional[dict] = None,
    ):
        check_position(position)
        options = dict(options if options is not None else layers_control_options())
        options["position"] = position
        return self.invoke_method(
            self.data, "addLayersControl", _groups(base_groups), _groups(overlay_groups), options
        )

    def remove_layers_control(self):
        return self.invoke_method(self.data, "removeLayersControl")

    def remove_control(self, layer_id):
        return self.invoke_method(self.data, "removeControl", layer_id)

    def clear_controls(self):
        return self.invoke_method(self.data, "clearControls")
