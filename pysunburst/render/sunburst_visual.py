"""Sunburst visual.

The :class:`Sunburst` owns the current slice tree, the settings and the
rendered element list. Host events drive it:

- :meth:`Sunburst.update` rebuilds tree, layout, labels and legend from a
  data view, or clears everything when the data view has no usable matrix.
- :meth:`Sunburst.set_settings` applies a settings change to the current chart
  without dropping the selection.
- :meth:`Sunburst.dispatch_click` routes a click either to a slice (select
  and highlight its path) or to the background (back to idle).

Elements are plain dataclasses standing in for DOM nodes; :meth:`to_svg` and
:meth:`to_html` serialize them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Set, runtime_checkable

from ..compute.colors import ColorPalette, ColorPaletteLike
from ..compute.convert import TreeConverter, is_valid_update
from ..compute.core.types import Slice, SunburstData, TooltipItem, UpdateOptions, Viewport
from ..compute.partition import partition
from ..compute.selection import SelectionManager, SelectionManagerLike, SelectionState
from ..config import RenderDelta, SunburstSettings, apply_settings
from .labels import (
    DEFAULT_DATA_LABEL_PADDING,
    ApproximateTextMeasurer,
    TextMeasurer,
    arc_label_width,
    category_label,
    center_label_width,
    percentage_label,
    wrap_text,
)
from .legend import (
    HtmlLegend,
    LegendData,
    LegendLike,
    LegendPosition,
    create_legend_data,
    reduce_viewport,
)
from .svg_utils import arc_path, escape, fmt_coord, outer_arc_path, px, translate

VIEW_BOX_SIZE = 500
CENTRAL_POINT = VIEW_BOX_SIZE / 2
OUTER_RADIUS = VIEW_BOX_SIZE / 2
SLICE_LABEL_DY = 18  # font size + slice padding


class CssConstants:
    MAIN = "sunburst"
    MAIN_INTERACTIVE = "sunburst--interactive"
    SLICE = "sunburst__slice"
    SLICE_SELECTED = "sunburst__slice--selected"
    SLICE_HIDDEN = "sunburst__slice--hidden"
    LABEL = "sunburst__label"
    LABEL_VISIBLE = "sunburst__label--visible"
    CATEGORY_LABEL = "sunburst__category-label"
    PERCENTAGE_LABEL = "sunburst__percentage-label"
    SLICE_LABEL = "sunburst__slice-label"


@dataclass
class SliceElement:
    index: int
    slice: Slice
    d: str
    fill: Optional[str]
    display: Optional[str] = None
    classes: Set[str] = field(default_factory=lambda: {CssConstants.SLICE})
    title: Optional[str] = None


@dataclass
class SliceLabelElement:
    index: int
    slice: Slice
    path_id: str
    path_d: str
    text: str
    font_size: float


@dataclass
class TextElement:
    classes: Set[str]
    x: float = CENTRAL_POINT
    y: float = CENTRAL_POINT
    text: str = ""
    transform: Optional[str] = None
    font_size: Optional[float] = None
    fill: Optional[str] = None

    def classed(self, name: str, on: bool) -> None:
        if on:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    @property
    def visible(self) -> bool:
        return CssConstants.LABEL_VISIBLE in self.classes


@dataclass
class ClickEvent:
    target: Optional[Slice] = None
    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@runtime_checkable
class TooltipServiceLike(Protocol):
    def add_tooltip(
        self,
        elements: Sequence[SliceElement],
        get_tooltip_info: Callable[[SliceElement], List[TooltipItem]],
    ) -> None: ...


class TitleTooltipService:
    """Attaches tooltip items to slice paths as SVG ``<title>`` text."""

    def add_tooltip(
        self,
        elements: Sequence[SliceElement],
        get_tooltip_info: Callable[[SliceElement], List[TooltipItem]],
    ) -> None:
        for element in elements:
            items = get_tooltip_info(element) or []
            element.title = "\n".join(f"{i.display_name}: {i.value}" for i in items) or None


class Sunburst:
    """Interactive sunburst chart.

    Args:
        palette: Color collaborator, one color per top-level category.
        selection_manager: Receives selection ids on clicks.
        tooltip_service: Receives per-slice tooltip items.
        legend: Legend collaborator; reports the margins it occupies.
        text_measurer: Measures label text for truncation.
        logger: Optional logger, defaults to the module logger.
    """

    def __init__(
        self,
        palette: Optional[ColorPaletteLike] = None,
        selection_manager: Optional[SelectionManagerLike] = None,
        tooltip_service: Optional[TooltipServiceLike] = None,
        legend: Optional[LegendLike] = None,
        text_measurer: Optional[TextMeasurer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.palette = palette or ColorPalette()
        self.selection_manager = selection_manager or SelectionManager()
        self.tooltip_service = tooltip_service or TitleTooltipService()
        self.text_measurer = text_measurer or ApproximateTextMeasurer()
        self.legend = legend or HtmlLegend(LegendPosition.TOP, self.text_measurer)
        self.converter = TreeConverter(self.palette, logger=self.logger)
        self.selection = SelectionState(self.selection_manager, logger=self.logger)

        self.settings: Optional[SunburstSettings] = None
        self.data: Optional[SunburstData] = None
        self.nodes: List[Slice] = []
        self.slice_elements: List[SliceElement] = []
        self.slice_label_elements: List[SliceLabelElement] = []
        self.legend_data: Optional[LegendData] = None
        self.host_viewport: Optional[Viewport] = None
        self.viewport: Optional[Viewport] = None
        self.wrapper_style: Optional[Dict[str, str]] = None
        self.svg_font_size: Optional[float] = None

        self.category_label = TextElement(
            classes={CssConstants.LABEL, CssConstants.CATEGORY_LABEL}
        )
        self.percentage_label = TextElement(
            classes={CssConstants.LABEL, CssConstants.PERCENTAGE_LABEL}
        )

    # ------------------------------------------------------------------ state
    @property
    def labels_hidden(self) -> bool:
        return self.selection.labels_hidden

    def _sync_label_visibility(self) -> None:
        hidden = self.selection.labels_hidden
        show_selected = self.settings.group.show_selected if self.settings else False
        self.percentage_label.classed(CssConstants.LABEL_VISIBLE, not hidden)
        self.category_label.classed(CssConstants.LABEL_VISIBLE, not hidden and show_selected)

    def _sync_slice_classes(self) -> None:
        for element in self.slice_elements:
            if element.slice.selected:
                element.classes.add(CssConstants.SLICE_SELECTED)
            else:
                element.classes.discard(CssConstants.SLICE_SELECTED)

    # ----------------------------------------------------------------- update
    def update(self, options: Optional[UpdateOptions]) -> None:
        """Rebuild the chart from a host update; clears it on unusable data.

        A rebuild starts from the idle state, so the root font size is the only
        settings-derived state carried into the new render.
        """
        if not is_valid_update(options):
            self.logger.info("update without matrix rows/columns; clearing sunburst")
            self.clear()
            return
        data_view = options.data_views[0]
        self.host_viewport = Viewport(options.viewport.width, options.viewport.height)
        self.settings = SunburstSettings.parse(data_view.objects, logger=self.logger)
        self.svg_font_size = self.settings.group.font_size
        self.data = self.converter.convert(data_view)
        self.selection.reset()
        self._update_internal()
        self._update_legend()

    def set_settings(self, settings: SunburstSettings) -> None:
        """Apply new settings to the current chart, keeping the selection.

        Arc labels are rebuilt when a label setting changed; the center labels
        follow the :class:`RenderDelta` computed by :func:`apply_settings`.
        """
        old = self.settings
        delta = apply_settings(old, settings, self.labels_hidden)
        self.settings = settings
        self.svg_font_size = settings.group.font_size
        if self.data is None:
            return
        if old is None or old.group != settings.group:
            self._update_internal()
        self._apply_render_delta(delta)
        self._update_legend()

    def _apply_render_delta(self, delta: RenderDelta) -> None:
        if delta.is_empty:
            return
        if delta.font_size is not None:
            self.svg_font_size = delta.font_size
        if delta.show_category_label is not None:
            self.category_label.classed(
                CssConstants.LABEL_VISIBLE, delta.show_category_label and not self.labels_hidden
            )
        if delta.relayout_labels:
            self.calculate_label_position()

    def _update_internal(self) -> None:
        self.nodes = partition(self.data.root, OUTER_RADIUS)
        self.slice_elements = [
            SliceElement(
                index=i,
                slice=node,
                d=arc_path(node.x, node.x + node.dx, node.inner_radius, node.outer_radius),
                fill=node.color,
                display=None if node.depth else "none",
            )
            for i, node in enumerate(self.nodes)
        ]
        self.slice_label_elements = []
        if self.settings.group.show_data_labels:
            font_size = self.settings.group.font_size
            for i, node in enumerate(self.nodes):
                if not node.depth:
                    continue
                text = "" if node.name is None else str(node.name)
                self.slice_label_elements.append(
                    SliceLabelElement(
                        index=i,
                        slice=node,
                        path_id=f"sliceLabel_{i}",
                        path_d=outer_arc_path(node.x, node.x + node.dx, node.outer_radius),
                        text=wrap_text(
                            text,
                            self.text_measurer,
                            font_size,
                            arc_label_width(node),
                            DEFAULT_DATA_LABEL_PADDING,
                        ),
                        font_size=font_size,
                    )
                )
        self.tooltip_service.add_tooltip(self.slice_elements, lambda el: el.slice.tooltip_info)
        self._sync_slice_classes()
        self._sync_label_visibility()
        self.logger.debug(
            "laid out %d slices, ring unit %.1f (%d arc labels)",
            len(self.nodes),
            max(node.dy for node in self.nodes),
            len(self.slice_label_elements),
        )

    def _update_legend(self) -> None:
        self.legend_data = create_legend_data(self.data, self.settings)
        self._render_legend()
        if self.settings.legend.show:
            self.wrapper_style = {
                "width": px(self.viewport.width),
                "height": px(self.viewport.height),
            }
        else:
            self.wrapper_style = None

    def _render_legend(self) -> None:
        if self.data is None:
            return
        position = (
            LegendPosition(self.settings.legend.position)
            if self.settings.legend.show
            else LegendPosition.NONE
        )
        host = self.host_viewport
        self.legend.change_orientation(position)
        self.legend.draw_legend(self.legend_data, Viewport(host.width, host.height))
        self.viewport = reduce_viewport(host, self.legend)

    def clear(self) -> None:
        """Drop all rendered geometry; the legend is left untouched."""
        self.data = None
        self.nodes = []
        self.slice_elements = []
        self.slice_label_elements = []
        self.selection.reset()
        self._sync_label_visibility()

    # ----------------------------------------------------------------- clicks
    def dispatch_click(self, target: Optional[Slice] = None) -> ClickEvent:
        """Deliver one click gesture.

        A click on a slice is handled by the slice and stops propagation; only
        an unhandled click reaches the background handler.
        """
        event = ClickEvent(target=target)
        if target is not None:
            self.on_slice_click(target, event)
        if not event.propagation_stopped:
            self.on_background_click()
        return event

    def on_slice_click(self, node: Slice, event: Optional[ClickEvent] = None) -> None:
        if self.data is None:
            return
        self.selection.click_slice(node, self.data, self.nodes)
        self._sync_slice_classes()
        self.percentage_label.text = self.selection.percentage_text
        self.percentage_label.fill = node.color
        self.category_label.text = self.selection.category_text
        self.category_label.fill = node.color
        self.calculate_label_position()
        self._sync_label_visibility()
        if event is not None:
            event.stop_propagation()

    def on_background_click(self) -> None:
        self.selection.click_background(self.nodes)
        self._sync_slice_classes()
        self._sync_label_visibility()

    def calculate_label_position(self) -> None:
        width = center_label_width(self.data)
        group = self.settings.group
        percentage = percentage_label(
            self.selection.percentage_text,
            group.font_size,
            group.show_selected,
            width,
            self.text_measurer,
        )
        category = category_label(
            self.selection.category_text, group.font_size, width, self.text_measurer
        )
        for element, layout in ((self.percentage_label, percentage), (self.category_label, category)):
            element.text = layout.text
            element.font_size = layout.font_size
            element.transform = translate(0, layout.offset)

    # ---------------------------------------------------------------- queries
    @property
    def interactive(self) -> bool:
        return self.selection.interactive

    def find_slice(self, path: Sequence[Any]) -> Optional[Slice]:
        """Slice reached by following display names from the root."""
        if self.data is None:
            return None
        node = self.data.root
        for name in path:
            node = next((c for c in node.children if str(c.name) == str(name)), None)
            if node is None:
                return None
        return node

    def enumerate_colors(self) -> List[Dict[str, Any]]:
        """Fill instances of the top-level categories for a formatting pane."""
        if self.data is None:
            return []
        return [
            {
                "display_name": "" if node.name is None else str(node.name),
                "object_name": "group",
                "selector": node.selector.get_selector() if node.selector else None,
                "properties": {"fill": {"solid": {"color": node.color}}},
            }
            for node in self.data.root.children
        ]

    # ---------------------------------------------------------------- output
    def _text_svg(self, element: TextElement) -> str:
        attrs = [
            f'class="{" ".join(sorted(element.classes))}"',
            f'x="{fmt_coord(element.x)}"',
            f'y="{fmt_coord(element.y)}"',
            'text-anchor="middle"',
        ]
        if element.transform:
            attrs.append(f'transform="{element.transform}"')
        style = []
        if element.font_size is not None:
            style.append(f"font-size:{px(element.font_size)}")
        if element.fill:
            style.append(f"fill:{escape(element.fill)}")
        if not element.visible:
            style.append("display:none")
        if style:
            attrs.append(f'style="{";".join(style)}"')
        return f"<text {' '.join(attrs)}>{escape(element.text)}</text>"

    def to_svg(self) -> str:
        classes = [CssConstants.MAIN]
        if self.interactive:
            classes.append(CssConstants.MAIN_INTERACTIVE)
        style = f' style="font-size:{px(self.svg_font_size)}"' if self.svg_font_size else ""
        paths = []
        for el in self.slice_elements:
            css = " ".join(sorted(el.classes))
            display = "display:none;" if el.display == "none" else ""
            fill = f"fill:{escape(el.fill)}" if el.fill else ""
            title = f"<title>{escape(el.title)}</title>" if el.title else ""
            paths.append(
                f'<path class="{css}" d="{el.d}" data-key="{escape(el.slice.key)}" '
                f'style="{display}{fill}">{title}</path>'
            )
        labels = []
        for el in self.slice_label_elements:
            labels.append(
                f'<path class="{CssConstants.SLICE_HIDDEN}" id="{el.path_id}" d="{el.path_d}" '
                f'style="fill:none;stroke:none"/>'
                f'<text class="{CssConstants.SLICE_LABEL}" dy="{SLICE_LABEL_DY}" '
                f'style="font-size:{px(el.font_size)}">'
                f'<textPath startOffset="50%" text-anchor="middle" href="#{el.path_id}" '
                f'xlink:href="#{el.path_id}">{escape(el.text)}</textPath></text>'
            )
        center = translate(CENTRAL_POINT, CENTRAL_POINT)
        return (
            f'<svg class="{" ".join(classes)}" viewBox="0 0 {VIEW_BOX_SIZE} {VIEW_BOX_SIZE}" '
            f'width="100%" height="100%" preserveAspectRatio="xMidYMid meet" '
            f'xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"{style}>'
            f'<g transform="{center}">{"".join(paths)}{"".join(labels)}</g>'
            f"{self._text_svg(self.category_label)}{self._text_svg(self.percentage_label)}"
            f"</svg>"
        )

    def to_html(self) -> str:
        style = ""
        if self.wrapper_style:
            style = ' style="' + ";".join(f"{k}:{v}" for k, v in self.wrapper_style.items()) + '"'
        to_html = getattr(self.legend, "to_html", None)
        legend_html = to_html() if callable(to_html) else ""
        orientation = self.legend.get_orientation()
        svg = self.to_svg()
        body = svg + legend_html if orientation in (
            LegendPosition.BOTTOM,
            LegendPosition.BOTTOM_CENTER,
            LegendPosition.RIGHT,
            LegendPosition.RIGHT_CENTER,
        ) else legend_html + svg
        return f'<div class="{CssConstants.MAIN}-wrapper"{style}>{body}</div>'
