from __future__ import annotations

import html as _html
import math

# Spans this close to a full turn are drawn as two half circles.
_FULL_TURN = 2 * math.pi - 1e-6


def fmt_coord(v: float) -> str:
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def translate(x: float, y: float) -> str:
    return f"translate({fmt_coord(x)},{fmt_coord(y)})"


def px(value: float) -> str:
    return f"{fmt_coord(value)}px"


def escape(text: object) -> str:
    return _html.escape("" if text is None else str(text))


def _polar(radius: float, angle: float) -> str:
    # Angles run clockwise from 12 o'clock.
    a = angle - math.pi / 2
    return f"{fmt_coord(radius * math.cos(a))},{fmt_coord(radius * math.sin(a))}"


def arc_path(start_angle: float, end_angle: float, inner_radius: float, outer_radius: float) -> str:
    """SVG path of an annular sector centered on the origin.

    Args:
        start_angle: Start angle in radians, clockwise from 12 o'clock.
        end_angle: End angle in radians.
        inner_radius: Linear inner radius (0 draws a pie slice).
        outer_radius: Linear outer radius.

    Returns:
        Path data string.
    """
    r0, r1 = inner_radius, outer_radius
    da = abs(end_angle - start_angle)
    if da >= _FULL_TURN:
        r1s = fmt_coord(r1)
        outer = (
            f"M0,{r1s}A{r1s},{r1s} 0 1,1 0,{fmt_coord(-r1)}"
            f"A{r1s},{r1s} 0 1,1 0,{r1s}"
        )
        if r0:
            r0s = fmt_coord(r0)
            return (
                f"{outer}M0,{r0s}A{r0s},{r0s} 0 1,0 0,{fmt_coord(-r0)}"
                f"A{r0s},{r0s} 0 1,0 0,{r0s}Z"
            )
        return outer + "Z"
    large_arc = 0 if da < math.pi else 1
    r1s = fmt_coord(r1)
    path = (
        f"M{_polar(r1, start_angle)}"
        f"A{r1s},{r1s} 0 {large_arc},1 {_polar(r1, end_angle)}"
    )
    if r0:
        r0s = fmt_coord(r0)
        return (
            f"{path}L{_polar(r0, end_angle)}"
            f"A{r0s},{r0s} 0 {large_arc},0 {_polar(r0, start_angle)}Z"
        )
    return path + "L0,0Z"


def outer_arc_path(start_angle: float, end_angle: float, outer_radius: float) -> str:
    """Open path along the outer edge of a sector, used as a text path."""
    path = arc_path(start_angle, end_angle, 0.0, outer_radius)
    # The outer edge is everything before the first line segment (or close).
    for stop in ("L", "Z"):
        idx = path.find(stop)
        if idx != -1:
            path = path[:idx]
            break
    return path.replace(",", " ")

