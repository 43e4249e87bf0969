"""High-level public API for pysunburst.

`render_sunburst` takes hierarchical data (a pandas DataFrame with one
column per ring, a nested mapping, or a ready-made data view), runs it
through the :class:`~pysunburst.render.sunburst_visual.Sunburst` visual and
returns a :class:`Chart` holding a self-contained HTML fragment and a
JSON-friendly description of the laid-out slices.
"""

from __future__ import annotations

import collections.abc as cabc
import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union

from .compute.colors import ColorPalette
from .compute.core.types import DataView, UpdateOptions, Viewport
from .config import SunburstSettings, settings_fields
from .io.base import data_view_from_frame, data_view_from_mapping
from .render.sunburst_visual import Sunburst

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd  # type: ignore

DataLike = Union["pd.DataFrame", Mapping[str, Any], DataView]


_XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


@dataclass
class Chart:
    """A rendered sunburst.

    Attributes:
        html: Wrapper ``<div>`` with the legend and the inline SVG.
        svg: The chart alone as an SVG element.
        stats: JSON-serializable layout description: grand total, slices with
            their geometry, legend entries, selection and effective settings.
    """

    html: str
    svg: str
    stats: Mapping[str, Any]

    @staticmethod
    def _write(path: str, text: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def save_html(self, path: str) -> None:
        self._write(path, self.html)

    def save_svg(self, path: str) -> None:
        """Write a standalone SVG document (no legend)."""
        self._write(path, _XML_HEADER + self.svg)

    def save_json(self, path: str) -> None:
        self._write(path, json.dumps(self.stats, ensure_ascii=False, indent=2))

    def save(self, path: str) -> None:
        """Save by file extension: ``.html``/``.htm``, ``.svg`` or ``.json``.

        Raises:
            ValueError: If the extension is not supported.
        """
        writers = {
            ".html": self.save_html,
            ".htm": self.save_html,
            ".svg": self.save_svg,
            ".json": self.save_json,
        }
        ext = os.path.splitext(path)[1].lower()
        if ext not in writers:
            raise ValueError(f"Cannot save a chart as {ext!r}; use one of {sorted(writers)}")
        writers[ext](path)

    def _repr_html_(self) -> str:  # pragma: no cover - notebook display
        return self.html

    def _repr_svg_(self) -> str:  # pragma: no cover - notebook display
        return self.svg


@dataclass
class ChartConfig:
    """Configuration passed to :func:`render_sunburst`.

    Attributes:
        settings: Visual settings (labels and legend).
        width: Viewport width in px.
        height: Viewport height in px.
        measure_format: Format string for tooltip values (e.g. ``"#,0.00"``).
        colors: Optional palette overriding the default theme colors.
        logger: Optional logger; defaults to the ``pysunburst`` logger.
        log_level: Level applied to that logger.
    """

    settings: SunburstSettings = field(default_factory=SunburstSettings)
    width: int = 600
    height: int = 600
    measure_format: Optional[str] = None
    colors: Optional[Sequence[str]] = None
    logger: Optional[logging.Logger] = None
    log_level: int = logging.WARNING


def _coerce_input(
    data: DataLike,
    levels: Optional[Sequence[str]],
    measure: Optional[str],
    cfg: ChartConfig,
) -> DataView:
    """Normalize supported inputs into a :class:`DataView`.

    Raises:
        TypeError: If the object is not one of the supported forms, or a
            DataFrame is given without ``levels`` and ``measure``.
    """
    objects = cfg.settings.to_objects()
    if isinstance(data, DataView):
        return data if data.objects else replace(data, objects=objects)
    if isinstance(data, cabc.Mapping):
        return data_view_from_mapping(data, measure_format=cfg.measure_format, objects=objects)
    try:
        import pandas as pd  # type: ignore

        if isinstance(data, pd.DataFrame):
            if not levels or not measure:
                raise TypeError("DataFrame input needs `levels` and `measure`")
            return data_view_from_frame(
                data, levels, measure, measure_format=cfg.measure_format, objects=objects
            )
    except ImportError:
        pass
    raise TypeError(
        "Unsupported data type for this API. Provide a pandas DataFrame, a nested mapping, or a DataView."
    )


def _build_stats(visual: Sunburst) -> dict:
    data = visual.data
    if data is None:
        return {"total": 0.0, "slices": [], "legend": [], "settings": {}}
    slices = []
    for node in visual.nodes:
        slices.append(
            {
                "key": node.key,
                "name": None if node.name is None else str(node.name),
                "depth": node.depth,
                "value": node.value,
                "total": node.total,
                "color": node.color,
                "x": node.x,
                "dx": node.dx,
                "y": node.y,
                "dy": node.dy,
                "selected": node.selected,
            }
        )
    legend = []
    if visual.legend_data is not None:
        legend = [
            {"label": p.label, "color": p.color, "icon": p.icon.value}
            for p in visual.legend_data.data_points
        ]
    settings = visual.settings
    return {
        "total": data.total,
        "slices": slices,
        "legend": legend,
        "selection": {
            "category": visual.category_label.text,
            "percentage": visual.percentage_label.text,
        }
        if not visual.labels_hidden
        else None,
        "settings": {
            "group": settings_fields(settings.group),
            "legend": settings_fields(settings.legend),
        },
    }


def render_sunburst(
    data: DataLike,
    levels: Optional[Sequence[str]] = None,
    measure: Optional[str] = None,
    config: Optional[ChartConfig] = None,
    select: Optional[Sequence[Any]] = None,
) -> Chart:
    """Lay out and render a sunburst chart.

    Args:
        data: A pandas DataFrame (with ``levels`` and ``measure``), a nested
            ``{"name", "value", "children"}`` mapping, or a :class:`DataView`.
        levels: DataFrame columns, innermost ring first.
        measure: DataFrame column holding the numeric measure.
        config: Optional :class:`ChartConfig`.
        select: Optional path of category names to pre-select, as if the
            slice had been clicked.

    Returns:
        A :class:`Chart` with the HTML fragment and the layout stats.

    Raises:
        TypeError: If ``data`` is not of a supported type.
        ValueError: If the settings are invalid or ``select`` names no slice.
    """
    cfg = config or ChartConfig()
    cfg.settings.validate()
    logger = cfg.logger or logging.getLogger("pysunburst")
    logger.setLevel(cfg.log_level)

    data_view = _coerce_input(data, levels, measure, cfg)
    visual = Sunburst(palette=ColorPalette(cfg.colors), logger=logger)
    visual.update(UpdateOptions(data_views=[data_view], viewport=Viewport(cfg.width, cfg.height)))

    if select:
        target = visual.find_slice(select)
        if target is None:
            raise ValueError(f"No slice found for path {list(select)!r}")
        visual.dispatch_click(target)

    return Chart(html=visual.to_html(), svg=visual.to_svg(), stats=_build_stats(visual))
