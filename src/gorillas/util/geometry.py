"""Geometry utilities — analytic hit testing in world units.

All functions operate on plain ``(x, y)`` tuples.  Used for the gorilla
hit area, which is a filled polygon plus thick quadratic strokes.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

Point = Tuple[float, float]


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Even-odd ray casting test.

    Points exactly on an edge may fall either way.
    """
    px, py = point
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > py) != (yj > py):
            x_cross = xi + (py - yi) * (xj - xi) / (yj - yi)
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def point_segment_distance(point: Point, a: Point, b: Point) -> float:
    """Shortest distance from a point to the segment a–b."""
    px, py = point
    ax, ay = a
    bx, by = b
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def quadratic_curve(start: Point, control: Point, end: Point, segments: int = 16) -> list[Point]:
    """Sample a quadratic Bézier curve into a polyline of ``segments + 1`` points."""
    points: list[Point] = []
    for i in range(segments + 1):
        t = i / segments
        u = 1.0 - t
        x = u * u * start[0] + 2 * u * t * control[0] + t * t * end[0]
        y = u * u * start[1] + 2 * u * t * control[1] + t * t * end[1]
        points.append((x, y))
    return points


def point_near_polyline(point: Point, polyline: Sequence[Point], max_distance: float) -> bool:
    """True if the point lies within ``max_distance`` of any polyline segment."""
    for a, b in zip(polyline, polyline[1:]):
        if point_segment_distance(point, a, b) <= max_distance:
            return True
    return False


def translate(points: Sequence[Point], dx: float, dy: float) -> list[Point]:
    """Shift every point by ``(dx, dy)``."""
    return [(x + dx, y + dy) for x, y in points]
