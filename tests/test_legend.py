"""Tests for the legend adapter."""

import pytest

from pysunburst.compute.colors import ColorPalette
from pysunburst.compute.convert import convert
from pysunburst.compute.core.types import Viewport
from pysunburst.config import LegendSettings, SunburstSettings
from pysunburst.io.base import data_view_from_mapping
from pysunburst.render.legend import (
    HtmlLegend,
    LegendData,
    LegendDataPoint,
    LegendIcon,
    LegendLike,
    LegendPosition,
    create_legend_data,
    reduce_viewport,
)


@pytest.fixture
def data():
    return convert(
        data_view_from_mapping(
            {
                "children": [
                    {"name": "A", "value": 10},
                    {"name": "B", "children": [{"name": "B1", "value": 5}]},
                ]
            }
        ),
        ColorPalette(["#111111", "#222222"]),
    )


class TestCreateLegendData:
    def test_one_point_per_top_level_slice(self, data):
        legend = create_legend_data(data, SunburstSettings())
        assert [(p.label, p.color) for p in legend.data_points] == [
            ("A", "#111111"),
            ("B", "#222222"),
        ]
        assert all(p.icon == LegendIcon.CIRCLE for p in legend.data_points)
        assert all(not p.selected for p in legend.data_points)
        assert legend.data_points[0].identity == data.root.children[0].selector

    def test_title_and_font(self, data):
        settings = SunburstSettings(legend=LegendSettings(font_size=10, title_text="Region"))
        legend = create_legend_data(data, settings)
        assert legend.font_size == 10
        assert legend.title == "Region"
        settings.legend.show_title = False
        assert create_legend_data(data, settings).title is None


class TestLegendPosition:
    @pytest.mark.parametrize("position", ["Top", "TopCenter", "Bottom", "BottomCenter"])
    def test_horizontal(self, position):
        assert LegendPosition(position).is_horizontal
        assert not LegendPosition(position).is_vertical

    @pytest.mark.parametrize("position", ["Left", "LeftCenter", "Right", "RightCenter"])
    def test_vertical(self, position):
        assert LegendPosition(position).is_vertical

    def test_none(self):
        assert not LegendPosition.NONE.is_horizontal
        assert not LegendPosition.NONE.is_vertical


class TestHtmlLegend:
    def legend_data(self):
        return LegendData(
            font_size=8,
            data_points=[LegendDataPoint("Alpha", "#111111"), LegendDataPoint("Beta", "#222222")],
        )

    def test_protocol(self):
        assert isinstance(HtmlLegend(), LegendLike)

    def test_top_takes_height(self):
        legend = HtmlLegend(LegendPosition.TOP)
        legend.draw_legend(self.legend_data(), Viewport(400, 300))
        margins = legend.get_margins()
        assert margins.height == 27
        assert reduce_viewport(Viewport(400, 300), legend) == Viewport(400, 273)

    def test_right_takes_width(self):
        legend = HtmlLegend(LegendPosition.RIGHT)
        legend.draw_legend(self.legend_data(), Viewport(400, 300))
        margins = legend.get_margins()
        assert 0 < margins.width <= 400 / 3 + 1
        assert reduce_viewport(Viewport(400, 300), legend) == Viewport(400 - margins.width, 300)

    def test_hidden_legend_takes_nothing(self):
        legend = HtmlLegend(LegendPosition.NONE)
        legend.draw_legend(self.legend_data(), Viewport(400, 300))
        assert legend.get_margins() == Viewport(0.0, 0.0)
        assert reduce_viewport(Viewport(400, 300), legend) == Viewport(400, 300)
        assert legend.to_html() == ""

    def test_change_orientation_accepts_strings(self):
        legend = HtmlLegend()
        legend.change_orientation("LeftCenter")
        assert legend.get_orientation() is LegendPosition.LEFT_CENTER

    def test_to_html_lists_entries(self):
        legend = HtmlLegend(LegendPosition.BOTTOM)
        data = self.legend_data()
        data.title = "Kinds <all>"
        legend.draw_legend(data, Viewport(400, 300))
        out = legend.to_html()
        assert "legend--bottom" in out
        assert out.count('class="legend__item"') == 2
        assert 'fill="#111111"' in out
        assert "Kinds &lt;all&gt;" in out
