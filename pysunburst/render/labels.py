"""Center label layout and text truncation for arc-shaped containers.

Text measurement is a capability (:class:`TextMeasurer`) so truncation can be
exercised without a live drawing surface. :class:`ApproximateTextMeasurer`
is the default and estimates widths from per-character advance factors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from ..compute.core.types import Slice, SunburstData

PERCENTAGE_FONT_SIZE_MULTIPLIER = 2
CATEGORY_LINE_INTERVAL = 0.6
DEFAULT_PERCENTAGE_LINE_INTERVAL = 0.25
MULTILINE_PERCENTAGE_LINE_INTERVAL = 0.6
DEFAULT_DATA_LABEL_PADDING = 5
ELLIPSIS = "…"


@runtime_checkable
class TextMeasurer(Protocol):
    def measure_text(self, text: str, font_size: float) -> float: ...


class ApproximateTextMeasurer:
    """Width estimate for a proportional sans-serif font."""

    NARROW = set("il.,:;|!'`ijtfI ")
    WIDE = set("mwMW@%")

    def __init__(self, font_family: str = "Segoe UI, sans-serif") -> None:
        self.font_family = font_family

    def _advance(self, ch: str) -> float:
        if ch in self.NARROW:
            return 0.3
        if ch in self.WIDE:
            return 0.85
        if ch.isupper():
            return 0.65
        if ch.isdigit():
            return 0.55
        return 0.52

    def measure_text(self, text: str, font_size: float) -> float:
        return sum(self._advance(ch) for ch in text) * font_size


def wrap_text(
    text: str,
    measurer: TextMeasurer,
    font_size: float,
    width: float,
    padding: float = 0,
) -> str:
    """Truncate ``text`` from the end until it fits ``width - 2 * padding``.

    Each removed character is replaced by a trailing ellipsis and the result
    re-measured. If nothing fits, not even the ellipsis, returns ``""``.
    """
    available = width - 2 * (padding or 0)
    shown = text
    kept = text
    length = measurer.measure_text(shown, font_size)
    while length > available and len(kept) > 0:
        kept = kept[:-1]
        shown = kept + ELLIPSIS
        length = measurer.measure_text(shown, font_size)
    if length > available:
        return ""
    return shown


@dataclass
class CenterLabel:
    """Position and content of one center label.

    ``offset`` is the vertical translation from the view box center.
    """

    text: str
    font_size: float
    offset: float


def center_label_width(data: Optional[SunburstData]) -> float:
    """Room for center labels: the smallest inner radius of the first ring."""
    if data is None or data.root is None or not data.root.children:
        return 0.0
    return min(child.inner_radius for child in data.root.children)


def arc_label_width(node: Slice) -> float:
    """Length of the outer edge of ``node``'s arc."""
    return node.outer_radius * node.dx


def category_label(
    text: str,
    font_size: float,
    width: float,
    measurer: TextMeasurer,
    padding: float = DEFAULT_DATA_LABEL_PADDING,
) -> CenterLabel:
    return CenterLabel(
        text=wrap_text(text, measurer, font_size, width, padding),
        font_size=font_size,
        offset=font_size * -CATEGORY_LINE_INTERVAL,
    )


def percentage_label(
    text: str,
    font_size: float,
    show_selected: bool,
    width: float,
    measurer: TextMeasurer,
    padding: float = DEFAULT_DATA_LABEL_PADDING,
) -> CenterLabel:
    """Percentage label, pushed further down when the category label shows."""
    size = font_size * PERCENTAGE_FONT_SIZE_MULTIPLIER
    interval = (
        MULTILINE_PERCENTAGE_LINE_INTERVAL
        if show_selected
        else DEFAULT_PERCENTAGE_LINE_INTERVAL
    )
    return CenterLabel(
        text=wrap_text(text, measurer, size, width, padding),
        font_size=size,
        offset=size * interval,
    )

