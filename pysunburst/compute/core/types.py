"""Type definitions for the compute module.

This module defines the raw input structures handed over by the host's data
layer (a matrix data view whose row hierarchy is the category tree) and the
converted slice tree consumed by the layout, the selection state machine and
the renderer.
"""

from __future__ import annotations

import json
import math
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ScopeIdentity:
    """Opaque identity of one category value, stable per logical path."""

    key: str


@dataclass
class RawNode:
    """One node of the host's row (or column) hierarchy.

    Attributes:
        value: Display value of the category (any stringifiable object).
        measure: The node's single numeric measure, if any.
        children: Ordered child nodes.
        identity: Identity of the category value, if the host supplies one.
        objects: Per-node style properties (e.g. a ``group.fill`` override).
        name: Name of the hierarchy level the node belongs to.
    """

    value: Any = None
    measure: Optional[float] = None
    children: List[RawNode] = field(default_factory=list)
    identity: Optional[ScopeIdentity] = None
    objects: Optional[Dict[str, Any]] = None
    name: Optional[str] = None


@dataclass
class ColumnSource:
    """Metadata of a measure column."""

    display_name: str
    query_name: Optional[str] = None
    format: Optional[str] = None


@dataclass
class Level:
    sources: List[ColumnSource] = field(default_factory=list)


@dataclass
class Hierarchy:
    root: Optional[RawNode] = None
    levels: List[Level] = field(default_factory=list)


@dataclass
class Matrix:
    """Matrix data view: category tree in ``rows``, measures in ``columns``."""

    rows: Optional[Hierarchy] = None
    columns: Optional[Hierarchy] = None

    def measure_format(self) -> Optional[str]:
        """Format string of the first measure column, if the host set one."""
        if not self.columns or not self.columns.levels:
            return None
        sources = self.columns.levels[0].sources
        return sources[0].format if sources else None


@dataclass
class DataView:
    matrix: Optional[Matrix] = None
    objects: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Viewport:
    width: float = 0.0
    height: float = 0.0


@dataclass
class UpdateOptions:
    """Payload of a host "data updated" event."""

    data_views: List[DataView] = field(default_factory=list)
    viewport: Viewport = field(default_factory=Viewport)


@dataclass(frozen=True)
class SelectionId:
    """Selection identity built from the identity path of a slice.

    Two slices built from the same logical category path get equal ids across
    rebuilds, which is what lets a selection manager remember a selection
    while the slice objects themselves are thrown away.
    """

    path: Tuple[ScopeIdentity, ...] = ()

    def get_key(self) -> str:
        return json.dumps([identity.key for identity in self.path])

    def get_selector(self) -> Dict[str, Any]:
        return {"data": [identity.key for identity in self.path]}


@dataclass
class TooltipItem:
    display_name: str
    value: str


@dataclass(eq=False)
class Slice:
    """One node of the converted sunburst tree.

    ``x``/``dx`` are the angular start and width in radians. ``y``/``dy`` are
    the radial start and width stored as squared radii; use
    :attr:`inner_radius` and :attr:`outer_radius` for linear values.

    Slices compare by identity. ``parent`` is a weak reference: the tree is
    owned top-down through ``children`` and the back-reference is only used
    for walking up to the root.
    """

    name: Any = None
    value: float = 0.0
    raw_value: float = 0.0
    total: float = 0.0
    color: Optional[str] = None
    children: List[Slice] = field(default_factory=list)
    selector: Optional[SelectionId] = None
    key: Optional[str] = None
    tooltip_info: List[TooltipItem] = field(default_factory=list)
    x: float = 0.0
    dx: float = 0.0
    y: float = 0.0
    dy: float = 0.0
    depth: int = 0
    selected: bool = False
    _parent: Optional[weakref.ReferenceType] = field(
        default=None, repr=False, compare=False
    )

    @property
    def parent(self) -> Optional[Slice]:
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional[Slice]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    @property
    def inner_radius(self) -> float:
        return math.sqrt(max(self.y, 0.0))

    @property
    def outer_radius(self) -> float:
        return math.sqrt(max(self.y + self.dy, 0.0))

    def iter_nodes(self) -> Iterator[Slice]:
        """Yield this slice and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class SunburstData:
    """The whole converted tree and the grand total of all slice values."""

    total: float = 0.0
    root: Optional[Slice] = None
