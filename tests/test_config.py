"""
Tests for map descriptions: loading, validation and the build script.
"""

import json
import logging
from pathlib import Path

import pytest

from leaflet_widget.utils.config import Config
from leaflet_widget.utils.config_validation import validate_config
from leaflet_widget.utils.logging import setup_logging
from scripts.build_map import main

EXAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "example_map.yml"


def _valid():
    return {
        "tiles": [{"provider": "CartoDB.Positron"}, {"url": "https://tiles.example.com/{z}/{x}/{y}.png"}],
        "markers": [{"group": "Cities"}],
        "legend": {"column": "pop", "scale": "numeric", "bins": 5, "position": "bottomright"},
    }


class TestConfig:
    """Tests for Config loading and access."""

    def test_load_example(self):
        config = Config(EXAMPLE_CONFIG)
        assert config.get("map.view.zoom") == 4
        assert config["legend"]["column"] == "pop"
        assert "layers_control" in config

    def test_output_reference_resolved(self):
        config = Config(EXAMPLE_CONFIG)
        assert config.get("output.path") == "build/map.json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(tmp_path / "missing.yml")

    def test_defaults_and_set(self):
        config = Config.from_dict({"map": {"width": "100%"}})
        assert config.get("map.height", "400px") == "400px"
        assert config.get("map.width.px", "none") == "none"
        config.set("providers.check", False)
        assert config.get("providers.check") is False

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("MAP_DATA_DIR", "/srv/maps")
        config = Config.from_dict({"data": {"path": "$MAP_DATA_DIR/cities.yml"}})
        assert config.get("data.path") == "/srv/maps/cities.yml"


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_valid(self, registry):
        validate_config(Config.from_dict(_valid()), registry)

    def test_example_is_valid(self, registry):
        validate_config(Config(EXAMPLE_CONFIG), registry)

    def test_tiles_must_be_list(self):
        with pytest.raises(ValueError, match="tiles"):
            validate_config(Config.from_dict({"tiles": {"provider": "OpenStreetMap"}}))

    def test_tile_needs_provider_or_url(self):
        with pytest.raises(ValueError, match="tiles\\[0\\]"):
            validate_config(Config.from_dict({"tiles": [{"group": "base"}]}))

    def test_unknown_provider(self, registry):
        config = Config.from_dict({"tiles": [{"provider": "Not.AProvider"}]})
        with pytest.raises(ValueError, match="unknown provider"):
            validate_config(config, registry)

    def test_unknown_provider_unchecked(self, registry):
        config = Config.from_dict({"tiles": [{"provider": "Not.AProvider"}], "providers": {"check": False}})
        validate_config(config, registry)

    def test_markers_must_be_list(self):
        with pytest.raises(ValueError, match="markers"):
            validate_config(Config.from_dict({"markers": "Cities"}))

    def test_legend_position(self):
        config = _valid()
        config["legend"]["position"] = "middle"
        with pytest.raises(ValueError, match="position"):
            validate_config(Config.from_dict(config))

    def test_legend_scale(self):
        config = _valid()
        config["legend"]["scale"] = "gradient"
        with pytest.raises(ValueError, match="scale"):
            validate_config(Config.from_dict(config))

    def test_legend_column_required(self):
        config = _valid()
        del config["legend"]["column"]
        with pytest.raises(ValueError, match="column"):
            validate_config(Config.from_dict(config))

    def test_bins_with_factor_scale(self):
        config = _valid()
        config["legend"]["scale"] = "factor"
        with pytest.raises(ValueError, match="bins"):
            validate_config(Config.from_dict(config))


@pytest.fixture
def restore_logging():
    # setup_logging() reconfigures the package logger
    package = logging.getLogger("leaflet_widget")
    handlers, level, propagate = list(package.handlers), package.level, package.propagate
    yield package
    for handler in package.handlers:
        if handler not in handlers:
            handler.close()
    package.handlers[:] = handlers
    package.setLevel(level)
    package.propagate = propagate


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:

    def test_package_logger(self):
        logger = setup_logging(log_level="DEBUG", log_to_file=False)
        assert logger.name == "leaflet_widget"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file_named_after_run(self, tmp_path):
        logger = setup_logging(log_dir=tmp_path / "logs", run_name="example_map")
        logger.info("hello")
        files = list((tmp_path / "logs").glob("build_example_map_*.log"))
        assert len(files) == 1

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging(log_to_file=False)
        logger = setup_logging(log_to_file=False)
        assert len(logger.handlers) == 1

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging(log_level="LOUD", log_to_file=False)


@pytest.mark.usefixtures("restore_logging")
class TestBuildMapScript:

    def test_builds_example(self, tmp_path):
        output = main(["--config", str(EXAMPLE_CONFIG), "--output", str(tmp_path / "map.json")])
        payload = json.loads(output.read_text(encoding="utf-8"))
        methods = [call["method"] for call in payload["x"]["calls"]]
        assert methods == [
            "setView", "addProviderTiles", "addProviderTiles",
            "addCircleMarkers", "addLegend", "addLayersControl",
        ]
        assert payload["height"] == "480px"
        assert [d["name"] for d in payload["dependencies"]] == [
            "leaflet-providers", "leaflet-providers-plugin",
        ]

    def test_legend_payload(self, tmp_path):
        output = main(["--config", str(EXAMPLE_CONFIG), "--output", str(tmp_path / "map.json")])
        payload = json.loads(output.read_text(encoding="utf-8"))
        legend = payload["x"]["calls"][4]["args"][0]
        assert legend["type"] == "numeric"
        assert legend["title"] == "Population"
        assert legend["position"] == "bottomright"
        # the example data has one city without a population
        assert legend["na_color"] == "#808080"

    def test_unknown_provider_fails(self, tmp_path):
        config = tmp_path / "bad.yml"
        config.write_text("tiles:\n  - provider: Not.AProvider\n")
        with pytest.raises(ValueError):
            main(["--config", str(config), "--output", str(tmp_path / "map.json")])

    def test_unknown_provider_unchecked(self, tmp_path):
        config = tmp_path / "new.yml"
        config.write_text("tiles:\n  - provider: Brand.NewProvider\n")
        output = main(["--config", str(config), "--output", str(tmp_path / "map.json"), "--no_check"])
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["x"]["calls"][0]["args"][0] == "Brand.NewProvider"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
