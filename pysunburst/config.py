from __future__ import annotations

"""Visual settings for the sunburst.

Settings arrive from the host as nested ``objects`` mappings with camelCase
property names (``{"group": {"fontSize": 12}}``). They are parsed into plain
dataclasses here. Changing settings never re-renders as a side effect:
:func:`apply_settings` computes a :class:`RenderDelta` and the visual applies
it explicitly.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

_log = logging.getLogger(__name__)


@dataclass
class GroupSettings:
    """Label settings.

    Attributes:
        font_size: Category label font size in px; the percentage label is
            drawn at twice this size.
        show_selected: Show the selected category's name above the percentage.
        show_data_labels: Draw a truncated label along every arc.
    """

    font_size: float = 12
    show_selected: bool = True
    show_data_labels: bool = False


@dataclass
class LegendSettings:
    show: bool = False
    position: str = "Top"
    font_size: float = 8  # pt
    show_title: bool = True
    title_text: str = ""
    label_color: str = "#666666"


# host property name -> dataclass field name
_GROUP_PROPERTIES = {
    "fontSize": "font_size",
    "showSelected": "show_selected",
    "showDataLabels": "show_data_labels",
}
_LEGEND_PROPERTIES = {
    "show": "show",
    "position": "position",
    "fontSize": "font_size",
    "showTitle": "show_title",
    "titleText": "title_text",
    "labelColor": "label_color",
}


def _coerce(raw: Any, default: Any) -> Any:
    if isinstance(raw, Mapping) and "solid" in raw:
        raw = (raw.get("solid") or {}).get("color")
    if isinstance(default, bool):
        if isinstance(raw, str):
            if raw.lower() in ("true", "1", "yes", "on"):
                return True
            if raw.lower() in ("false", "0", "no", "off"):
                return False
            raise ValueError(f"not a boolean: {raw!r}")
        return bool(raw)
    if isinstance(default, (int, float)):
        return float(raw)
    if raw is None:
        raise ValueError("missing value")
    return str(raw)


def _parse_object(target: Any, values: Optional[Mapping[str, Any]], names: Dict[str, str], object_name: str, logger: logging.Logger) -> None:
    for prop, attr in names.items():
        if not values or prop not in values:
            continue
        default = getattr(target, attr)
        try:
            setattr(target, attr, _coerce(values[prop], default))
        except (TypeError, ValueError) as e:
            logger.warning(
                "ignoring %s.%s=%r (%s); keeping %r", object_name, prop, values[prop], e, default
            )


@dataclass
class SunburstSettings:
    group: GroupSettings = field(default_factory=GroupSettings)
    legend: LegendSettings = field(default_factory=LegendSettings)

    @classmethod
    def parse(
        cls, objects: Optional[Mapping[str, Any]], logger: Optional[logging.Logger] = None
    ) -> "SunburstSettings":
        """Build settings from host ``objects``; unknown or bad values keep defaults."""
        from .render.legend import LegendPosition

        logger = logger or _log
        settings = cls()
        objects = objects or {}
        _parse_object(settings.group, objects.get("group"), _GROUP_PROPERTIES, "group", logger)
        _parse_object(settings.legend, objects.get("legend"), _LEGEND_PROPERTIES, "legend", logger)
        try:
            LegendPosition(settings.legend.position)
        except ValueError:
            logger.warning("unknown legend position %r; using Top", settings.legend.position)
            settings.legend.position = LegendPosition.TOP.value
        if settings.group.font_size <= 0:
            logger.warning("group.fontSize must be positive; using default")
            settings.group.font_size = GroupSettings.font_size
        return settings

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a font size is not positive or the legend position
                is unknown.
        """
        from .render.legend import LegendPosition

        if self.group.font_size <= 0:
            raise ValueError("group.font_size must be positive")
        if self.legend.font_size <= 0:
            raise ValueError("legend.font_size must be positive")
        try:
            LegendPosition(self.legend.position)
        except ValueError:
            raise ValueError(f"Unknown legend position: {self.legend.position}") from None

    def to_objects(self) -> Dict[str, Dict[str, Any]]:
        """Inverse of :meth:`parse`: host-style ``objects`` mapping."""
        return {
            "group": {prop: getattr(self.group, attr) for prop, attr in _GROUP_PROPERTIES.items()},
            "legend": {prop: getattr(self.legend, attr) for prop, attr in _LEGEND_PROPERTIES.items()},
        }


@dataclass(frozen=True)
class RenderDelta:
    """What the visual has to redo after a settings change.

    Attributes:
        font_size: New root font size to apply, or ``None`` to leave it.
        show_category_label: New visibility of the category label, or ``None``.
        relayout_labels: Whether center labels must be re-positioned.
    """

    font_size: Optional[float] = None
    show_category_label: Optional[bool] = None
    relayout_labels: bool = False

    @property
    def is_empty(self) -> bool:
        return self.font_size is None and self.show_category_label is None and not self.relayout_labels


def apply_settings(
    old: Optional[SunburstSettings], new: SunburstSettings, labels_hidden: bool
) -> RenderDelta:
    """Compute the render work caused by replacing ``old`` with ``new``.

    Only label-related settings matter, and only while the center labels are
    visible; hidden labels are laid out on the next click anyway.
    """
    if labels_hidden:
        return RenderDelta()
    if (
        old is None
        or old.group.font_size != new.group.font_size
        or old.group.show_selected != new.group.show_selected
    ):
        return RenderDelta(
            font_size=new.group.font_size,
            show_category_label=new.group.show_selected,
            relayout_labels=True,
        )
    return RenderDelta()


def settings_fields(section: Any) -> Dict[str, Any]:
    return {f.name: getattr(section, f.name) for f in fields(section)}
