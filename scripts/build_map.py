#!/usr/bin/env python3
"""
Build a Leaflet widget payload from a YAML map description.
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from leaflet_widget.legend.palettes import color_bin, color_factor, color_numeric, color_quantile
from leaflet_widget.map.formula import Formula
from leaflet_widget.map.layer_manager import LayerManager
from leaflet_widget.map.widget import Map
from leaflet_widget.providers.registry import ProviderRegistry
from leaflet_widget.utils.config import Config
from leaflet_widget.utils.config_validation import validate_config
from leaflet_widget.utils.logging import setup_logging

logger = logging.getLogger("leaflet_widget.build_map")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build a Leaflet map widget payload")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/example_map.yml",
        help="Path to map description"
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Override output path"
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="Override provider catalog file"
    )
    parser.add_argument(
        "--no_check",
        action="store_true",
        help="Do not validate provider names against the catalog"
    )
    return parser.parse_args(argv)


def load_data(config: Config):
    """Columns from data.path (YAML or JSON) merged with inline data.columns."""
    columns = {}
    path = config.get("data.path")
    if path:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")
        with open(path, 'r') as f:
            columns.update(yaml.safe_load(f) or {})
    columns.update(config.get("data.columns", {}))
    return columns or None


def make_scale(legend: dict, values):
    scale = legend.get("scale", "numeric")
    palette = legend.get("palette", "viridis")
    na_color = legend.get("na_color", "#808080")
    if scale == "numeric":
        return color_numeric(palette, values, na_color=na_color)
    if scale == "bin":
        return color_bin(palette, values, bins=legend.get("bins", 7), na_color=na_color)
    if scale == "quantile":
        return color_quantile(palette, values, n=legend.get("n", 4), na_color=na_color)
    return color_factor(palette, values, na_color=na_color)


def build_map(config: Config, registry: ProviderRegistry) -> Map:
    data = load_data(config)
    m = Map(
        data=data,
        options=config.get("map.options", {}),
        width=config.get("map.width"),
        height=config.get("map.height"),
        providers=registry,
    )

    view = config.get("map.view")
    if view:
        m.set_view(view["lng"], view["lat"], view["zoom"])

    check = config.get("providers.check", True)
    for tile in config.get("tiles", []):
        if tile.get("provider"):
            m.add_provider_tiles(
                tile["provider"], layer_id=tile.get("layer_id"),
                group=tile.get("group"), check=check
            )
        else:
            m.add_tiles(tile["url"], attribution=tile.get("attribution"),
                        layer_id=tile.get("layer_id"), group=tile.get("group"))

    legend = config.get("legend")
    pal = None
    if legend:
        pal = make_scale(legend, Formula(legend["column"]).evaluate(data))

    for layer in config.get("markers", []):
        color = layer.get("color", "#03F")
        if pal is not None and layer.get("color_by") == legend["column"]:
            color = Formula(lambda d, column=legend["column"]: pal(d[column]))
        m.add_circle_markers(
            lng=Formula(layer.get("lng", "lng")),
            lat=Formula(layer.get("lat", "lat")),
            radius=layer.get("radius", 10),
            layer_id=Formula(layer["id"]) if layer.get("id") else None,
            group=layer.get("group"),
            color=color,
            popup=Formula(layer["popup"]) if layer.get("popup") else None,
        )

    if legend:
        m.add_legend(
            pal=pal,
            values=Formula(legend["column"]),
            position=legend.get("position", "topright"),
            bins=legend.get("bins") if legend.get("scale", "numeric") == "numeric" else None,
            title=legend.get("title"),
            opacity=legend.get("opacity", 0.5),
            layer_id=legend.get("layer_id"),
            group=legend.get("group"),
        )

    control = config.get("layers_control")
    if control:
        m.add_layers_control(
            base_groups=control.get("base_groups", []),
            overlay_groups=control.get("overlay_groups", []),
            position=control.get("position", "topright"),
        )
    return m


def main(argv=None):
    args = parse_args(argv)

    config = Config(args.config)
    if args.output:
        config.set('output.path', args.output)
    if args.catalog:
        config.set('providers.catalog', args.catalog)
    if args.no_check:
        config.set('providers.check', False)

    setup_logging(
        log_dir=config.get('logging.dir', 'logs'),
        log_level=config.get('logging.level', 'INFO'),
        log_to_file=config.get('logging.to_file', False),
        run_name=Path(args.config).stem,
    )
    logger.info(f"Building map from config: {args.config}")

    catalog = config.get('providers.catalog')
    registry = ProviderRegistry.from_file(catalog) if catalog else ProviderRegistry.load_default()
    logger.info(f"Provider catalog: {registry}")

    validate_config(config, registry)

    try:
        m = build_map(config, registry)
    except Exception as e:
        logger.error(f"Building map failed with error: {e}", exc_info=True)
        raise

    summary = LayerManager.replay(m.calls).summary()
    logger.info("Layers: " + ", ".join(f"{k}={v}" for k, v in summary.items()))

    output = m.save(config.get('output.path', 'build/map.json'))
    logger.info(f"Wrote {output}")
    return output


if __name__ == "__main__":
    main()
