"""
Lightweight validation of map descriptions to catch mistakes before building.
"""

from typing import Any, Optional

from leaflet_widget.legend.palettes import ScaleKind
from leaflet_widget.map.controls import POSITIONS


def validate_config(config: Any, registry: Optional[Any] = None) -> None:
    """
    Validate a map description.
    Raises ValueError on invalid combinations.

    Args:
        config: Config (or anything with a dot-notation get())
        registry: ProviderRegistry used to check provider names
    """
    tiles = config.get("tiles", [])
    if not isinstance(tiles, list):
        raise ValueError("'tiles' must be a list of tile layer descriptions")

    check = config.get("providers.check", True)
    for i, tile in enumerate(tiles):
        if not isinstance(tile, dict) or not (tile.get("provider") or tile.get("url")):
            raise ValueError(f"tiles[{i}] must set either 'provider' or 'url'")
        provider = tile.get("provider")
        if provider and check and registry is not None and provider not in registry:
            raise ValueError(
                f"tiles[{i}]: unknown provider '{provider}'. "
                "Fix the name or set providers.check to false."
            )

    markers = config.get("markers", [])
    if not isinstance(markers, list):
        raise ValueError("'markers' must be a list of marker layer descriptions")

    legend = config.get("legend")
    if legend is None:
        return
    if not isinstance(legend, dict):
        raise ValueError("'legend' must be a mapping")

    position = legend.get("position", "topright")
    if position not in POSITIONS:
        raise ValueError(f"Unsupported legend.position '{position}'. Use one of: {', '.join(POSITIONS)}")

    scale = legend.get("scale", "numeric")
    if scale not in [kind.value for kind in ScaleKind]:
        raise ValueError(
            f"Unsupported legend.scale '{scale}'. Use one of: {', '.join(k.value for k in ScaleKind)}"
        )

    if not legend.get("column"):
        raise ValueError("legend.column must name the data column the legend describes")

    bins = legend.get("bins")
    if bins is not None and scale != "numeric" and scale != "bin":
        raise ValueError(f"legend.bins only applies to numeric and bin scales, not '{scale}'")
