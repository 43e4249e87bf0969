"""Color assignment for top-level sunburst branches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

# Default theme colors, handed out in order of first request.
DEFAULT_COLORS: Tuple[str, ...] = (
    "#01B8AA",
    "#374649",
    "#FD625E",
    "#F2C80F",
    "#5F6B6D",
    "#8AD4EB",
    "#FE9666",
    "#A66999",
    "#3599B8",
    "#DFBFBF",
    "#4AC5BB",
    "#FB8281",
)

# (objectName, propertyName) of the per-category fill override.
FILL_PROPERTY: Tuple[str, str] = ("group", "fill")


@dataclass(frozen=True)
class Color:
    value: str


@runtime_checkable
class ColorPaletteLike(Protocol):
    """Anything that hands out a color per key, deterministically per session."""

    def get_color(self, key: str) -> Color: ...


class ColorPalette:
    """Deterministic palette: the n-th distinct key gets the n-th color."""

    def __init__(self, colors: Optional[Sequence[str]] = None) -> None:
        self.colors = list(DEFAULT_COLORS if colors is None else colors)
        if not self.colors:
            raise ValueError("ColorPalette needs at least one color")
        self._assigned: Dict[str, str] = {}

    def get_color(self, key: str) -> Color:
        key = str(key)
        if key not in self._assigned:
            self._assigned[key] = self.colors[len(self._assigned) % len(self.colors)]
        return Color(self._assigned[key])

    def reset(self) -> None:
        self._assigned.clear()


class ColorHelper:
    """Resolves a node color: explicit fill override first, palette second."""

    def __init__(
        self,
        palette: ColorPaletteLike,
        property_identifier: Tuple[str, str] = FILL_PROPERTY,
    ) -> None:
        self.palette = palette
        self.object_name, self.property_name = property_identifier

    def get_color_for_measure(
        self, objects: Optional[Mapping[str, Any]], key: str
    ) -> str:
        override = self._fill_override(objects)
        if override:
            return override
        return self.palette.get_color(key).value

    def _fill_override(self, objects: Optional[Mapping[str, Any]]) -> Optional[str]:
        if not objects:
            return None
        obj = objects.get(self.object_name) or {}
        fill = obj.get(self.property_name)
        if isinstance(fill, str):
            return fill
        if isinstance(fill, Mapping):
            solid = fill.get("solid") or {}
            color = solid.get("color")
            if isinstance(color, str) and color:
                return color
        return None
