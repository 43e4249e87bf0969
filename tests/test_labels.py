"""Tests for center label layout and arc text truncation."""

import math

import pytest

from pysunburst.compute.colors import ColorPalette
from pysunburst.compute.convert import convert
from pysunburst.compute.core.types import Slice, SunburstData
from pysunburst.compute.partition import partition
from pysunburst.io.base import data_view_from_mapping
from pysunburst.render.labels import (
    ELLIPSIS,
    ApproximateTextMeasurer,
    TextMeasurer,
    arc_label_width,
    category_label,
    center_label_width,
    percentage_label,
    wrap_text,
)


class CharMeasurer:
    """One unit per character, independent of font size."""

    def measure_text(self, text, font_size):
        return float(len(text))


class TestWrapText:
    """Greedy end truncation with a trailing ellipsis."""

    def test_fitting_text_is_unchanged(self):
        assert wrap_text("Hello", CharMeasurer(), 12, 10) == "Hello"

    def test_truncates_until_it_fits(self):
        assert wrap_text("Hello world", CharMeasurer(), 12, 10) == "Hello wor" + ELLIPSIS

    def test_padding_reduces_room_on_both_sides(self):
        assert wrap_text("Hello world", CharMeasurer(), 12, 10, padding=2) == "Hello" + ELLIPSIS

    def test_nothing_fits(self):
        """When not even the ellipsis fits the result is empty."""
        assert wrap_text("Hello", CharMeasurer(), 12, 0) == ""
        assert wrap_text("Hello", CharMeasurer(), 12, 4, padding=2) == ""

    def test_only_ellipsis_fits(self):
        assert wrap_text("Hello", CharMeasurer(), 12, 1) == ELLIPSIS

    def test_result_never_exceeds_width(self):
        measurer = ApproximateTextMeasurer()
        for width in (5, 20, 40, 80):
            text = wrap_text("Quarterly revenue by region", measurer, 12, width, 5)
            assert measurer.measure_text(text, 12) <= width - 10 or text == ""


class TestApproximateTextMeasurer:
    def test_protocol(self):
        assert isinstance(ApproximateTextMeasurer(), TextMeasurer)

    def test_scales_with_font_size(self):
        m = ApproximateTextMeasurer()
        assert m.measure_text("abc", 24) == pytest.approx(2 * m.measure_text("abc", 12))

    def test_wide_characters_measure_wider(self):
        m = ApproximateTextMeasurer()
        assert m.measure_text("WWW", 10) > m.measure_text("iii", 10)


class TestCenterLabels:
    """Vertical stacking of the category and percentage labels."""

    def test_category_sits_above_center(self):
        label = category_label("Books", 10, 200, CharMeasurer())
        assert label.offset == pytest.approx(-6.0)
        assert label.font_size == 10
        assert label.text == "Books"

    def test_percentage_below_category_when_shown(self):
        label = percentage_label("25.00%", 10, True, 200, CharMeasurer())
        assert label.font_size == 20
        assert label.offset == pytest.approx(12.0)

    def test_percentage_closer_to_center_alone(self):
        label = percentage_label("25.00%", 10, False, 200, CharMeasurer())
        assert label.offset == pytest.approx(5.0)

    def test_percentage_truncated_to_center_width(self):
        label = percentage_label("25.00%", 10, True, 13, CharMeasurer())
        assert label.text == "25" + ELLIPSIS


class TestWidths:
    def test_center_width_is_first_ring_inner_radius(self):
        data = convert(
            data_view_from_mapping(
                {"children": [{"name": "A", "value": 1}, {"name": "B", "children": [{"name": "B1", "value": 1}]}]}
            ),
            ColorPalette(),
        )
        partition(data.root, 250.0)
        assert center_label_width(data) == pytest.approx(math.sqrt(250.0**2 / 3))

    def test_center_width_without_data(self):
        assert center_label_width(None) == 0.0
        assert center_label_width(SunburstData(total=0.0, root=Slice())) == 0.0

    def test_arc_label_width(self):
        node = Slice(dx=math.pi / 2, y=0.0, dy=100.0**2)
        assert arc_label_width(node) == pytest.approx(100.0 * math.pi / 2)
