"""Legend adapter and default legend collaborator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Protocol, runtime_checkable

from ..compute.core.types import SunburstData, Viewport
from .labels import ApproximateTextMeasurer, TextMeasurer
from .svg_utils import escape, px

if TYPE_CHECKING:  # pragma: no cover
    from ..config import SunburstSettings


class LegendPosition(str, Enum):
    TOP = "Top"
    TOP_CENTER = "TopCenter"
    BOTTOM = "Bottom"
    BOTTOM_CENTER = "BottomCenter"
    LEFT = "Left"
    LEFT_CENTER = "LeftCenter"
    RIGHT = "Right"
    RIGHT_CENTER = "RightCenter"
    NONE = "None"

    @property
    def is_horizontal(self) -> bool:
        """Top/bottom placements take height; left/right take width."""
        return self in (
            LegendPosition.TOP,
            LegendPosition.TOP_CENTER,
            LegendPosition.BOTTOM,
            LegendPosition.BOTTOM_CENTER,
        )

    @property
    def is_vertical(self) -> bool:
        return self in (
            LegendPosition.LEFT,
            LegendPosition.LEFT_CENTER,
            LegendPosition.RIGHT,
            LegendPosition.RIGHT_CENTER,
        )


class LegendIcon(str, Enum):
    CIRCLE = "circle"


@dataclass
class LegendDataPoint:
    label: str
    color: Optional[str]
    icon: LegendIcon = LegendIcon.CIRCLE
    selected: bool = False
    identity: Any = None


@dataclass
class LegendData:
    font_size: float
    data_points: List[LegendDataPoint] = field(default_factory=list)
    title: Optional[str] = None
    label_color: Optional[str] = None


def create_legend_data(data: SunburstData, settings: SunburstSettings) -> LegendData:
    """One legend entry per top-level slice, in tree order."""
    legend = settings.legend
    return LegendData(
        font_size=legend.font_size,
        data_points=[
            LegendDataPoint(
                label="" if node.name is None else str(node.name),
                color=node.color,
                icon=LegendIcon.CIRCLE,
                selected=False,
                identity=node.selector,
            )
            for node in data.root.children
        ],
        title=legend.title_text if legend.show_title else None,
        label_color=legend.label_color,
    )


@runtime_checkable
class LegendLike(Protocol):
    def change_orientation(self, orientation: LegendPosition) -> None: ...

    def get_orientation(self) -> LegendPosition: ...

    def draw_legend(self, data: LegendData, viewport: Viewport) -> None: ...

    def get_margins(self) -> Viewport: ...


def point_to_px(points: float) -> float:
    return points * 4.0 / 3.0


class HtmlLegend:
    """Minimal legend drawn as an HTML strip next to the chart.

    Margins are estimated with a :class:`TextMeasurer`: a single row for
    top/bottom placements, a column as wide as the longest entry (capped at a
    third of the viewport) for left/right placements.
    """

    PADDING = 5

    def __init__(
        self,
        orientation: LegendPosition = LegendPosition.TOP,
        measurer: Optional[TextMeasurer] = None,
    ) -> None:
        self.orientation = orientation
        self.measurer = measurer or ApproximateTextMeasurer()
        self.data: Optional[LegendData] = None
        self._margins = Viewport(0.0, 0.0)

    def change_orientation(self, orientation: LegendPosition) -> None:
        self.orientation = LegendPosition(orientation)

    def get_orientation(self) -> LegendPosition:
        return self.orientation

    def draw_legend(self, data: LegendData, viewport: Viewport) -> None:
        self.data = data
        if self.orientation == LegendPosition.NONE or not data.data_points:
            self._margins = Viewport(0.0, 0.0)
            return
        font = point_to_px(data.font_size)
        if self.orientation.is_horizontal:
            self._margins = Viewport(viewport.width, math.ceil(font * 2 + self.PADDING))
        else:
            labels = [p.label for p in data.data_points]
            if data.title:
                labels.append(data.title)
            longest = max(self.measurer.measure_text(text, font) for text in labels)
            width = longest + font + 3 * self.PADDING
            self._margins = Viewport(math.ceil(min(width, viewport.width / 3)), viewport.height)

    def get_margins(self) -> Viewport:
        return Viewport(self._margins.width, self._margins.height)

    def to_html(self) -> str:
        if self.data is None or self.orientation == LegendPosition.NONE:
            return ""
        data = self.data
        font = px(point_to_px(data.font_size))
        color = escape(data.label_color or "currentColor")
        items = []
        for point in data.data_points:
            items.append(
                f'<span class="legend__item" title="{escape(point.label)}">'
                f'<svg width="10" height="10"><circle cx="5" cy="5" r="5" fill="{escape(point.color or "#ccc")}"/></svg>'
                f" {escape(point.label)}</span>"
            )
        title = f'<span class="legend__title">{escape(data.title)}</span>' if data.title else ""
        m = self._margins
        size = f"height:{px(m.height)}" if self.orientation.is_horizontal else f"width:{px(m.width)}"
        return (
            f'<div class="legend legend--{self.orientation.value.lower()}" '
            f'style="font-size:{font};color:{color};{size}">{title}{"".join(items)}</div>'
        )


def reduce_viewport(viewport: Viewport, legend: LegendLike) -> Viewport:
    """Viewport left for the chart once the legend took its margins."""
    margins = legend.get_margins()
    orientation = legend.get_orientation()
    if orientation.is_vertical:
        return Viewport(viewport.width - margins.width, viewport.height)
    if orientation.is_horizontal:
        return Viewport(viewport.width, viewport.height - margins.height)
    return Viewport(viewport.width, viewport.height)
