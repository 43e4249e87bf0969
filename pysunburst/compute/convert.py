"""Tree conversion: host matrix rows into the sunburst slice tree.

The converter walks the row hierarchy depth-first. Identities and branch
colors flow down (pre-order), totals flow up (post-order). Every update
builds a brand new tree; nothing is patched in place.
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

from ..render.format_utils import ValueFormatter, get_formatted_value
from .colors import ColorHelper, ColorPaletteLike
from .core.types import (
    DataView,
    RawNode,
    ScopeIdentity,
    SelectionId,
    Slice,
    SunburstData,
    TooltipItem,
    UpdateOptions,
)


def _as_number(measure: Any) -> float:
    if measure is None:
        return 0.0
    try:
        x = float(measure)
    except (TypeError, ValueError):
        return 0.0
    return x if math.isfinite(x) else 0.0


def is_valid_update(options: Optional[UpdateOptions]) -> bool:
    """Whether an update carries the matrix structure the converter needs.

    Both the row and the column hierarchy must be present with at least one
    top-level child each; anything else is treated as "no data".
    """
    if not options or not options.data_views or not options.data_views[0]:
        return False
    matrix = options.data_views[0].matrix
    if not matrix:
        return False
    rows, columns = matrix.rows, matrix.columns
    if not rows or not rows.root or not rows.root.children:
        return False
    if not columns or not columns.root or not columns.root.children:
        return False
    return True


class TreeConverter:
    """Converts a data view into :class:`SunburstData`.

    Args:
        palette: Color collaborator; asked once per top-level branch.
        logger: Optional logger, defaults to the module logger.
    """

    def __init__(
        self,
        palette: ColorPaletteLike,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.color_helper = ColorHelper(palette)
        self.logger = logger or logging.getLogger(__name__)

    def convert(self, data_view: DataView) -> SunburstData:
        matrix = data_view.matrix
        formatter = ValueFormatter(matrix.measure_format())
        data = SunburstData(total=0.0, root=None)
        data.root = self.convert_node(matrix.rows.root, None, [], data, None, formatter)
        self.logger.debug(
            "converted sunburst tree: %d top-level categories, total=%s",
            len(data.root.children),
            data.total,
        )
        return data

    def convert_node(
        self,
        node: RawNode,
        parent: Optional[Slice],
        path_identity: List[ScopeIdentity],
        data: SunburstData,
        color: Optional[str],
        formatter: ValueFormatter,
    ) -> Slice:
        if node.identity is not None:
            path_identity = path_identity + [node.identity]

        selector = SelectionId(tuple(path_identity))
        raw_value = _as_number(node.measure)
        value = max(raw_value, 0.0)
        new_slice = Slice(
            name=node.value,
            value=value,
            raw_value=raw_value,
            selector=selector,
            key=selector.get_key(),
            total=value,
        )
        # Only categories with a display value get a color of their own.
        if node.value:
            if not color:
                color = self.color_helper.get_color_for_measure(
                    node.objects, self._category_key(node)
                )
            new_slice.color = color

        data.total += new_slice.value

        for child in node.children or []:
            new_child = self.convert_node(
                child, new_slice, path_identity, data, new_slice.color, formatter
            )
            new_slice.children.append(new_child)
            new_slice.total += new_child.total

        new_slice.tooltip_info = self.get_tooltip_data(
            node.value, new_slice.total, formatter
        )
        if parent is not None:
            new_slice.parent = parent
        return new_slice

    @staticmethod
    def _category_key(node: RawNode) -> str:
        if node.identity is not None:
            return node.identity.key
        return str(node.value)

    @staticmethod
    def get_tooltip_data(
        display_name: Any, value: float, formatter: ValueFormatter
    ) -> List[TooltipItem]:
        name = "" if display_name is None else str(display_name)
        return [TooltipItem(display_name=name, value=get_formatted_value(value, formatter))]


def convert(
    data_view: DataView,
    palette: ColorPaletteLike,
    logger: Optional[logging.Logger] = None,
) -> SunburstData:
    """Convert ``data_view`` with a one-off :class:`TreeConverter`."""
    return TreeConverter(palette, logger=logger).convert(data_view)
