"""
Tests for legend label formatting.
"""

import pytest

from leaflet_widget.legend.label_format import format_numbers, label_format


class TestFormatNumbers:

    def test_thousands_separator(self):
        assert format_numbers([0, 1000, 2500000]) == ["0", "1,000", "2,500,000"]

    def test_common_decimals(self):
        assert format_numbers([3.25, 5.5]) == ["3.25", "5.50"]

    def test_rounding_digits(self):
        assert format_numbers([1.23456], digits=2) == ["1.23"]

    def test_no_scientific_notation(self):
        assert format_numbers([1e8]) == ["100,000,000"]

    def test_custom_big_mark(self):
        assert format_numbers([1234567], big_mark=" ") == ["1 234 567"]

    def test_negative_zero(self):
        assert format_numbers([-0.0001]) == ["0"]


class TestLabelFormat:
    """Tests for label_format()."""

    def test_numeric(self):
        fmt = label_format()
        assert fmt("numeric", [0, 1000, 2000]) == ["0", "1,000", "2,000"]

    def test_numeric_prefix_suffix(self):
        fmt = label_format(prefix="$", suffix="k")
        assert fmt("numeric", [5, 10]) == ["$5k", "$10k"]

    def test_bin_intervals(self):
        fmt = label_format()
        assert fmt("bin", [0, 10, 20]) == ["0 &ndash; 10", "10 &ndash; 20"]

    def test_bin_custom_between(self):
        fmt = label_format(between=" to ")
        assert fmt("bin", [0, 10, 20]) == ["0 to 10", "10 to 20"]

    def test_quantile_percentages_with_hover_values(self):
        fmt = label_format()
        labels = fmt("quantile", [1, 3.25, 5.5, 7.75, 10], [0, 0.25, 0.5, 0.75, 1])
        assert len(labels) == 4
        assert labels[0] == '<span title="1.00 &ndash; 3.25">0% &ndash; 25%</span>'
        assert labels[3] == '<span title="7.75 &ndash; 10.00">75% &ndash; 100%</span>'

    def test_factor(self):
        fmt = label_format(prefix="<", suffix=">")
        assert fmt("factor", ["a", "b"]) == ["<a>", "<b>"]

    def test_factor_numbers(self):
        fmt = label_format()
        assert fmt("factor", [1.0, 2.5, 3]) == ["1", "2.5", "3"]

    def test_factor_transform(self):
        fmt = label_format(transform=str.upper)
        assert fmt("factor", ["a", "b"]) == ["A", "B"]

    def test_numeric_transform(self):
        fmt = label_format(transform=lambda x: x * 100, suffix="%")
        assert fmt("numeric", [0.1, 0.25]) == ["10%", "25%"]

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            label_format()("gradient", [1, 2])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
