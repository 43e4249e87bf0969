"""Selection and highlight state machine.

Two states: idle (nothing selected, center labels hidden, no highlighted
slice) and selected (one active slice; it and its ancestors below the root
are highlighted; center labels show its name and share of the grand total).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..render.format_utils import ValueFormatter, get_formatted_value
from .core.types import SelectionId, Slice, SunburstData

PERCENTAGE_FORMAT = "0.00%;-0.00%;0.00%"


@runtime_checkable
class SelectionManagerLike(Protocol):
    def select(self, selection_id: SelectionId, multi_select: bool = False) -> List[SelectionId]: ...

    def clear(self) -> None: ...

    def get_selection_ids(self) -> List[SelectionId]: ...


class SelectionManager:
    """In-memory selection manager keyed by :class:`SelectionId`.

    Selections survive tree rebuilds because ids are built from identity
    paths, not from slice objects.
    """

    def __init__(self) -> None:
        self._ids: List[SelectionId] = []

    def select(self, selection_id: SelectionId, multi_select: bool = False) -> List[SelectionId]:
        if multi_select:
            if selection_id in self._ids:
                self._ids.remove(selection_id)
            else:
                self._ids.append(selection_id)
        else:
            self._ids = [selection_id]
        return list(self._ids)

    def clear(self) -> None:
        self._ids = []

    def get_selection_ids(self) -> List[SelectionId]:
        return list(self._ids)

    def has_selection(self) -> bool:
        return bool(self._ids)


def get_tree_path(node: Slice) -> List[Slice]:
    """Slices from just below the root down to ``node`` (inclusive)."""
    path: List[Slice] = []
    current = node
    while current.parent is not None:
        path.insert(0, current)
        current = current.parent
    return path


class SelectionState:
    """Tracks the active slice and derives highlight flags and label text.

    Attributes:
        selected: The active slice, or ``None`` when idle.
        labels_hidden: Whether the center labels are hidden.
        interactive: Whether the chart is in highlight mode.
        percentage_text: Formatted share of the grand total of ``selected``.
        category_text: Display name of ``selected``.
        label_color: Fill of the center labels (the slice's color).
    """

    def __init__(
        self,
        selection_manager: SelectionManagerLike,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.selection_manager = selection_manager
        self.percentage_formatter = ValueFormatter(PERCENTAGE_FORMAT)
        self.logger = logger or logging.getLogger(__name__)
        self.reset()

    def reset(self) -> None:
        """Forget slice-level state; the selection manager is left alone."""
        self.selected: Optional[Slice] = None
        self.labels_hidden = True
        self.interactive = False
        self.percentage_text = ""
        self.category_text = ""
        self.label_color: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.selected is None

    def click_slice(self, node: Slice, data: SunburstData, nodes: Sequence[Slice]) -> List[Slice]:
        """Make ``node`` the active selection; returns the highlighted path."""
        if node.selector is not None:
            self.selection_manager.select(node.selector)
        path = self.highlight_path(node, nodes)
        share = node.total / data.total if data.total else 0.0
        self.selected = node
        self.percentage_text = get_formatted_value(share, self.percentage_formatter)
        self.category_text = node.tooltip_info[0].display_name if node.tooltip_info else ""
        self.label_color = node.color
        self.labels_hidden = False
        self.logger.debug(
            "selected slice %r (%s), %d highlighted", node.name, self.percentage_text, len(path)
        )
        return path

    def click_background(self, nodes: Sequence[Slice] = ()) -> None:
        self.selection_manager.clear()
        for node in nodes:
            node.selected = False
        self.selected = None
        self.labels_hidden = True
        self.interactive = False

    def highlight_path(self, node: Slice, nodes: Sequence[Slice]) -> List[Slice]:
        """Clear every highlight flag, then flag the path to ``node``."""
        path = get_tree_path(node)
        on_path = {id(p) for p in path}
        for candidate in nodes:
            candidate.selected = id(candidate) in on_path
        self.interactive = True
        return path
