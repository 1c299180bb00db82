"""
Catalog of tile providers understood by the leaflet-providers plugin.

The registry is an explicit object: build it from a catalog file (or the
packaged default) and hand it to the maps that need it. Refreshing the
catalog never touches the builders.
"""

import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import yaml

from leaflet_widget import __version__
from leaflet_widget.map.operations import HtmlDependency

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).parent / "catalog.yml"

PLUGIN_DEPENDENCY = HtmlDependency(
    name="leaflet-providers-plugin",
    version=__version__,
    src="htmlwidgets/plugins/leaflet-providers-plugin",
    script="leaflet-providers-plugin.js",
)


class ProviderRegistry:
    """
    Known tile-provider identifiers and their details.

    Usage:
        registry = ProviderRegistry.load_default()
        "CartoDB.Positron" in registry          # True
        registry.providers.CartoDB_Positron      # "CartoDB.Positron"
        registry.get("CartoDB.Positron")["url"]
    """

    def __init__(self, catalog: Dict[str, Any]):
        """
        Args:
            catalog: Mapping with 'version', 'src', 'script' and a 'providers'
                mapping of provider name -> details
        """
        if not isinstance(catalog, dict) or not isinstance(catalog.get("providers"), dict):
            raise ValueError("Provider catalog must be a mapping with a 'providers' mapping")

        self.version = str(catalog.get("version", "0"))
        self.src = catalog.get("src", "")
        self.script = catalog.get("script", "leaflet-providers.js")
        self._providers = {
            str(name): dict(details or {}) for name, details in catalog["providers"].items()
        }
        self.providers = SimpleNamespace(
            **{name.replace(".", "_"): name for name in self._providers}
        )
        logger.debug(f"Loaded {len(self._providers)} tile providers (leaflet-providers {self.version})")

    @classmethod
    def from_file(cls, path: str) -> "ProviderRegistry":
        """Load a registry from a YAML (or JSON) catalog file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Provider catalog not found: {path}")

        with open(path, 'r') as f:
            catalog = yaml.safe_load(f)

        return cls(catalog)

    @classmethod
    def load_default(cls) -> "ProviderRegistry":
        return cls.from_file(DEFAULT_CATALOG)

    def names(self) -> List[str]:
        return sorted(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Details for a provider, inherited from its base provider.

        For "CartoDB.Positron" the base "CartoDB" entry supplies url and
        attribution; the variant name fills the url's {variant} slot.
        Returns None for unknown providers.
        """
        if name not in self._providers:
            return None

        base_name, _, variant = name.partition(".")
        details: Dict[str, Any] = {}
        if variant and base_name in self._providers:
            base = self._providers[base_name]
            details.update(base)
            details["options"] = dict(base.get("options", {}))

        own = self._providers[name]
        for key, value in own.items():
            if key == "options":
                details.setdefault("options", {}).update(value)
            else:
                details[key] = value

        if variant:
            details.setdefault("options", {}).setdefault("variant", variant)
        return details

    def dependencies(self) -> List[HtmlDependency]:
        """Script bundles the renderer needs for addProviderTiles."""
        return [
            HtmlDependency(
                name="leaflet-providers",
                version=self.version,
                src=self.src,
                script=self.script,
            ),
            PLUGIN_DEPENDENCY,
        ]

    def __repr__(self):
        return f"ProviderRegistry({len(self)} providers, version={self.version})"
