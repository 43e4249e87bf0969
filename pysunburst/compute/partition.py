"""Radial partition layout.

Assigns every slice an angular span ``[x, x + dx)`` and a radial span
``[y, y + dy)``. Radii are stored squared so that ring areas, not ring
widths, grow linearly with depth; the arc generator takes the square root at
draw time.
"""

from __future__ import annotations

import math
from typing import List

import numpy as np

from .core.types import Slice

DEFAULT_OUTER_RADIUS = 250.0
FULL_CIRCLE = 2 * math.pi


def _flatten(root: Slice) -> List[Slice]:
    """Pre-order list of all slices, with ``depth`` assigned on the way."""
    nodes: List[Slice] = []
    root.depth = 0
    stack = [root]
    while stack:
        node = stack.pop()
        nodes.append(node)
        for child in node.children:
            child.depth = node.depth + 1
        stack.extend(reversed(node.children))
    return nodes


def ring_unit(max_depth: int, max_outer_radius: float = DEFAULT_OUTER_RADIUS) -> float:
    """Squared-radius thickness of one ring for a tree ``max_depth`` deep."""
    return max_outer_radius * max_outer_radius / (max_depth + 1)


def partition(root: Slice, max_outer_radius: float = DEFAULT_OUTER_RADIUS) -> List[Slice]:
    """Lay out the tree under ``root`` and return its slices in pre-order.

    Children split their parent's angle in input order, proportionally to
    their ``total``; no sorting happens, so identical input gives identical
    geometry. Zero-total children get zero width but stay in the list.
    """
    nodes = _flatten(root)
    max_depth = max(node.depth for node in nodes)
    unit = ring_unit(max_depth, max_outer_radius)

    root.x, root.dx, root.y, root.dy = 0.0, FULL_CIRCLE, 0.0, 0.0
    # Pre-order guarantees a parent is positioned before its children.
    for node in nodes:
        children = node.children
        if not children:
            continue
        totals = np.fromiter((c.total for c in children), dtype=float, count=len(children))
        siblings_total = totals.sum()
        if siblings_total > 0:
            widths = totals * (node.dx / siblings_total)
        else:
            widths = np.zeros(len(children))
        starts = node.x + np.concatenate(([0.0], np.cumsum(widths)[:-1]))
        for child, start, width in zip(children, starts, widths):
            child.x = float(start)
            child.dx = float(width)
            child.y = child.depth * unit
            child.dy = unit
    return nodes
