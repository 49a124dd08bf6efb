"""Planar helpers shared by hull construction and hit testing."""

import math
from collections.abc import Sequence

from openingscope.models.transform import Bounds, Point


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def centroid(points: Sequence[Point]) -> Point:
    """Arithmetic mean of the points. Raises ValueError for an empty sequence."""
    if not points:
        raise ValueError("centroid of an empty point set is undefined")
    n = len(points)
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)


def path_bounds(points: Sequence[Point]) -> Bounds | None:
    """Bounding box of a polygon, or None when it has no vertices."""
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def cross(o: Point, a: Point, b: Point) -> float:
    """Z component of (a - o) x (b - o). Positive for a counter-clockwise turn."""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def point_in_polygon(x: float, y: float, path: Sequence[Point]) -> bool:
    """Ray-casting parity test.

    Polygons with fewer than three vertices never contain anything.
    """
    if not path or len(path) < 3:
        return False

    inside = False
    j = len(path) - 1
    for i in range(len(path)):
        xi, yi = path[i]
        xj, yj = path[j]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def expand_from_centroid(points: Sequence[Point], padding: float) -> list[Point]:
    """Push every vertex ``padding`` units further away from the centroid.

    A vertex that coincides with the centroid is shifted by (+padding, +padding).
    """
    if not points:
        return []
    cx, cy = centroid(points)
    expanded: list[Point] = []
    for px, py in points:
        dx = px - cx
        dy = py - cy
        dist = math.hypot(dx, dy)
        if dist == 0:
            expanded.append((px + padding, py + padding))
            continue
        factor = (dist + padding) / dist
        expanded.append((cx + dx * factor, cy + dy * factor))
    return expanded
