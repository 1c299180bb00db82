"""
Tests for color scale functions.
"""

import matplotlib
import numpy as np
import pytest
import seaborn as sns
from matplotlib.colors import to_hex

from leaflet_widget.exceptions import UnsupportedScaleError
from leaflet_widget.legend.palettes import (
    ColorScale,
    ScaleKind,
    bin_index,
    color_bin,
    color_factor,
    color_numeric,
    color_quantile,
)


class TestColorNumeric:
    """Tests for color_numeric()."""

    def test_endpoints_match_colormap(self):
        pal = color_numeric("viridis", [0, 10])
        cmap = matplotlib.colormaps["viridis"]
        assert pal([0, 10]) == [to_hex(cmap(0.0)), to_hex(cmap(1.0))]

    def test_color_list_palette(self):
        pal = color_numeric(["#000000", "#ffffff"], [0, 1])
        assert pal([0, 1]) == ["#000000", "#ffffff"]

    def test_reverse(self):
        pal = color_numeric(["#000000", "#ffffff"], [0, 1], reverse=True)
        assert pal(0) == ["#ffffff"]

    def test_missing_and_out_of_range_use_na_color(self):
        pal = color_numeric("viridis", [0, 10], na_color="#123456")
        assert pal([None, -5, 20]) == ["#123456", "#123456", "#123456"]

    def test_kind_and_args(self):
        pal = color_numeric("Blues", [0, 1])
        assert pal.kind is ScaleKind.NUMERIC
        assert pal.args["na_color"] == "#808080"

    def test_alpha_keeps_channel(self):
        pal = color_numeric(["#00000080", "#ffffff80"], [0, 1], alpha=True)
        assert pal(0) == ["#00000080"]

    def test_unknown_palette(self):
        with pytest.raises(ValueError):
            color_numeric("definitely-not-a-palette", [0, 1])


class TestColorBin:
    """Tests for color_bin()."""

    def test_pretty_bins(self):
        pal = color_bin("Blues", [0, 100], bins=5)
        assert pal.kind is ScaleKind.BIN
        assert pal.args["bins"].tolist() == [0, 20, 40, 60, 80, 100]

    def test_equal_width_bins(self):
        pal = color_bin("Blues", [0, 90], bins=3, pretty=False)
        assert pal.args["bins"].tolist() == [0, 30, 60, 90]

    def test_one_color_per_bin(self):
        pal = color_bin("Blues", [0, 100], bins=5)
        colors = pal([10, 30, 50, 70, 90])
        assert len(set(colors)) == 5

    def test_upper_edge_included(self):
        pal = color_bin("Blues", [0, 100], bins=5)
        assert pal(100) == pal(90)

    def test_left_closed_intervals(self):
        pal = color_bin(["#000000", "#ffffff"], None, bins=[0, 10, 20])
        assert pal(10) == pal(15) == ["#ffffff"]
        assert pal(0) == ["#000000"]

    def test_right_closed_intervals(self):
        pal = color_bin(["#000000", "#ffffff"], None, bins=[0, 10, 20], right=True)
        assert pal(10) == pal(5) == ["#000000"]

    def test_outside_bins_is_na(self):
        pal = color_bin("Blues", None, bins=[0, 10, 20], na_color="#abcdef")
        assert pal([-1, 21, None]) == ["#abcdef"] * 3

    def test_count_without_domain_raises(self):
        with pytest.raises(ValueError):
            color_bin("Blues", None, bins=5)

    def test_bin_index(self):
        idx = bin_index([0, 5, 10, 20, 25, None], np.array([0.0, 10.0, 20.0]))
        assert idx.tolist() == [0, 0, 1, 1, -1, -1]


class TestColorQuantile:
    """Tests for color_quantile()."""

    def test_probs_and_breaks(self):
        pal = color_quantile("Reds", list(range(1, 11)), n=4)
        assert pal.kind is ScaleKind.QUANTILE
        np.testing.assert_allclose(pal.args["probs"], [0, 0.25, 0.5, 0.75, 1])
        np.testing.assert_allclose(pal.args["bins"], [1, 3.25, 5.5, 7.75, 10])

    def test_explicit_probs(self):
        pal = color_quantile("Reds", list(range(1, 11)), probs=[0, 0.5, 1])
        assert len(set(pal([1, 10]))) == 2

    def test_non_unique_breaks_raise(self):
        with pytest.raises(ValueError, match="not unique"):
            color_quantile("Reds", [1, 1, 1, 1, 2], n=4)


class TestColorFactor:
    """Tests for color_factor()."""

    def test_sorted_levels(self):
        pal = color_factor("Set2", ["b", "a", "c", "a", None])
        assert pal.kind is ScaleKind.FACTOR
        assert pal.args["levels"] == ["a", "b", "c"]

    def test_qualitative_palette_colors(self):
        pal = color_factor("Set2", ["b", "a", "c"])
        expected = [to_hex(c) for c in sns.color_palette("Set2", n_colors=3)]
        assert pal(["a", "b", "c"]) == expected

    def test_deterministic(self):
        first = color_factor("viridis", ["x", "y", "z"])(["z", "x"])
        second = color_factor("viridis", ["z", "y", "x"])(["z", "x"])
        assert first == second

    def test_ordered_keeps_appearance_order(self):
        pal = color_factor("Set1", ["b", "a", "b"], ordered=True)
        assert pal.args["levels"] == ["b", "a"]

    def test_explicit_levels(self):
        pal = color_factor("Set1", None, levels=["low", "high"])
        assert pal.args["levels"] == ["low", "high"]

    def test_unknown_value_is_na(self):
        pal = color_factor("Set1", ["a", "b"], na_color="#000000")
        assert pal(["zzz", None]) == ["#000000", "#000000"]


class TestColorScale:

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedScaleError):
            ColorScale("gradient", lambda v: v)

    def test_callable(self):
        scale = ColorScale("factor", lambda v: ["#ffffff"] * len(v))
        assert scale(["a", "b"]) == ["#ffffff", "#ffffff"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
