"""
Tile layers from named providers.
"""

import logging
from typing import Any, Dict, Optional

from leaflet_widget.exceptions import UnknownProviderError
from leaflet_widget.map.formula import resolve
from leaflet_widget.map.operations import filter_none
from leaflet_widget.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def provider_tile_options(
    error_tile_url: str = "",
    no_wrap: bool = False,
    opacity: Optional[float] = None,
    z_index: Optional[int] = None,
    update_when_idle: Optional[bool] = None,
    detect_retina: bool = False,
    **extra
) -> Dict[str, Any]:
    """
    Tile layer options for add_provider_tiles().

    Extra keyword arguments are passed through as additional options.
    None values are dropped.
    """
    return filter_none(
        errorTileUrl=error_tile_url,
        noWrap=no_wrap,
        opacity=opacity,
        zIndex=z_index,
        updateWhenIdle=update_when_idle,
        detectRetina=detect_retina,
        **extra
    )


class ProviderMethods:
    """Provider tile builder shared by Map and MapProxy."""

    def provider_registry(self) -> ProviderRegistry:
        if self.providers is None:
            self.providers = ProviderRegistry.load_default()
        return self.providers

    def add_provider_tiles(
        self,
        provider: str,
        layer_id: Optional[str] = None,
        group: Optional[str] = None,
        options: Optional[dict] = None,
        check: bool = True,
    ):
        """
        Add a tile layer from a known map provider.

        Args:
            provider: Provider name, e.g. "Esri.WorldTopoMap"
            layer_id: Layer id in the tile category
            group: Group the layer belongs to
            options: Tile options (see provider_tile_options)
            check: Validate provider against the registry; disable when the
                catalog is older than the renderer's plugin
        """
        registry = self.provider_registry()
        if check and provider not in registry:
            raise UnknownProviderError(provider)
        if not check:
            logger.debug(f"Adding provider '{provider}' without registry check")

        # resolve before registering dependencies
        args = resolve(
            [provider, layer_id, group, options if options is not None else provider_tile_options()],
            self.data,
        )
        self.add_dependencies(*registry.dependencies())
        return self.invoke_method(self.data, "addProviderTiles", *args)
