"""Host data layer: build matrix data views from in-memory data.

The sunburst core never aggregates raw rows. These helpers play the host's
part: they group a pandas DataFrame (or read a nested mapping) into the row
hierarchy the converter consumes, with one identity per category value.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..compute.core.types import (
    ColumnSource,
    DataView,
    Hierarchy,
    Level,
    Matrix,
    RawNode,
    ScopeIdentity,
)


def _scalar(value: Any) -> Any:
    # numpy scalars -> python scalars
    return value.item() if hasattr(value, "item") else value


def _measure_columns(measure: str, measure_format: Optional[str]) -> Hierarchy:
    return Hierarchy(
        root=RawNode(children=[RawNode(value=measure)]),
        levels=[
            Level(
                sources=[
                    ColumnSource(display_name=measure, query_name=measure, format=measure_format)
                ]
            )
        ],
    )


def data_view_from_frame(
    df: Any,
    levels: Sequence[str],
    measure: str,
    *,
    measure_format: Optional[str] = None,
    objects: Optional[Mapping[str, Any]] = None,
) -> DataView:
    """Group ``df`` by ``levels`` into a matrix data view.

    Categories keep their order of first appearance. Leaves carry the sum of
    ``measure``; inner nodes carry no measure of their own.

    Args:
        df: pandas DataFrame with one column per level and a measure column.
        levels: Category columns, outermost ring first.
        measure: Numeric column summed per leaf.
        measure_format: Optional format string for tooltip values.
        objects: Optional settings objects attached to the data view.

    Returns:
        A :class:`DataView` ready for :meth:`Sunburst.update`.

    Raises:
        TypeError: If ``df`` is not a pandas DataFrame.
        KeyError: If a level or the measure column is missing.
        ValueError: If ``levels`` is empty.
    """
    import pandas as pd  # type: ignore

    if not isinstance(df, pd.DataFrame):
        raise TypeError("data_view_from_frame expects a pandas DataFrame")
    levels = list(levels)
    if not levels:
        raise ValueError("at least one level column is required")
    missing = [c for c in [*levels, measure] if c not in df.columns]
    if missing:
        raise KeyError(f"Columns not found: {missing}")

    values = pd.to_numeric(df[measure], errors="coerce")
    frame = df[levels].assign(__measure__=values)

    def build(parent: RawNode, part: "pd.DataFrame", depth: int) -> None:
        level = levels[depth]
        for value, group in part.groupby(level, sort=False, dropna=False):
            if isinstance(value, tuple) and len(value) == 1:
                value = value[0]
            value = _scalar(value)
            node = RawNode(value=value, identity=ScopeIdentity(f"{level}={value}"), name=level)
            if depth + 1 < len(levels):
                build(node, group, depth + 1)
            else:
                node.measure = float(group["__measure__"].sum())
            parent.children.append(node)

    root = RawNode()
    if len(frame):
        build(root, frame, 0)
    return DataView(
        matrix=Matrix(rows=Hierarchy(root=root), columns=_measure_columns(measure, measure_format)),
        objects=dict(objects or {}),
    )


def _path_segment(key: Any) -> str:
    # "/" joins path segments, so it is escaped inside a segment
    return str(key).replace("\\", "\\\\").replace("/", "\\/")


def _node_from_mapping(item: Mapping[str, Any], parent_key: Optional[str]) -> RawNode:
    name = item.get("name")
    segment = _path_segment(item.get("id", name))
    path_key = segment if parent_key is None else f"{parent_key}/{segment}"
    return RawNode(
        value=name,
        measure=item.get("value"),
        identity=ScopeIdentity(path_key),
        objects=item.get("objects"),
        children=[_node_from_mapping(child, path_key) for child in item.get("children") or []],
    )


def data_view_from_mapping(
    tree: Mapping[str, Any],
    *,
    measure: str = "Value",
    measure_format: Optional[str] = None,
    objects: Optional[Mapping[str, Any]] = None,
) -> DataView:
    """Build a data view from a nested ``{"name", "value", "children"}`` mapping.

    The top-level mapping is the (undrawn) root; only its ``children`` are
    categories. An item may carry ``id`` (identity, defaults to its name) and
    ``objects`` (e.g. a ``group.fill`` override).
    """
    if not isinstance(tree, Mapping):
        raise TypeError("data_view_from_mapping expects a mapping")
    root = RawNode(
        children=[_node_from_mapping(child, None) for child in tree.get("children") or []]
    )
    return DataView(
        matrix=Matrix(rows=Hierarchy(root=root), columns=_measure_columns(measure, measure_format)),
        objects=dict(objects or {}),
    )
