"""Convex hulls and the smooth outlines drawn around clusters.

Outlines are returned as data (path segments or a rounded rectangle) so
the renderer can replay them on any drawing surface and tests can
inspect them without one.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from openingscope.geometry.polygon import cross, expand_from_centroid
from openingscope.models.transform import Point

# Fraction of the requested padding applied to hull vertices
CONSERVATIVE_PADDING_FACTOR = 0.3
# How far a Bézier control point is pulled back toward the previous vertex
CURVE_CONTROL_FACTOR = 0.2
# Corner radius of the fallback rectangle for one- and two-node clusters
CLUSTER_CORNER_RADIUS = 20.0
SINGLE_NODE_PADDING_MULTIPLIER = 1.5
# Hit-test padding for clusters of three or more nodes
HULL_HIT_PADDING = 60.0


class SegmentKind(str, Enum):
    MOVE = "move"
    QUAD = "quad"
    CLOSE = "close"


@dataclass(frozen=True)
class PathSegment:
    """One drawing instruction of a closed outline.

    MOVE carries the target point, QUAD carries (control, end), CLOSE
    carries nothing.
    """

    kind: SegmentKind
    points: tuple[Point, ...] = ()


@dataclass(frozen=True)
class RoundedRect:
    """Rounded rectangle used in place of a hull for tiny clusters."""

    x: float
    y: float
    width: float
    height: float
    radius: float = CLUSTER_CORNER_RADIUS

    def corners(self) -> list[Point]:
        return [
            (self.x, self.y),
            (self.x + self.width, self.y),
            (self.x + self.width, self.y + self.height),
            (self.x, self.y + self.height),
        ]


ClusterOutline = list[PathSegment] | RoundedRect


def convex_hull(points: Sequence[Point]) -> list[Point]:
    """
    Graham scan convex hull.

    Inputs with fewer than three points are returned unchanged. Collinear
    boundary points are dropped, so every input lies inside or on the
    returned polygon. Vertices come out counter-clockwise in a y-up frame
    (clockwise on screen).

    Args:
        points: Input points, duplicates allowed.

    Returns:
        Hull vertices starting at the lowest point.
    """
    if len(points) < 3:
        return list(points)

    start = points[0]
    for p in points[1:]:
        if p[1] < start[1] or (p[1] == start[1] and p[0] < start[0]):
            start = p

    rest = [p for p in points if p != start]
    rest.sort(
        key=lambda p: (
            math.atan2(p[1] - start[1], p[0] - start[0]),
            (p[0] - start[0]) ** 2 + (p[1] - start[1]) ** 2,
        )
    )
    # Points on the final ray are visited farthest first so the closing edge stays straight
    if rest:
        tail = len(rest) - 1
        while tail > 0 and cross(start, rest[tail - 1], rest[-1]) == 0:
            tail -= 1
        if tail > 0:
            rest[tail:] = reversed(rest[tail:])

    hull: list[Point] = [start]
    for p in rest:
        while len(hull) > 1 and cross(hull[-2], hull[-1], p) <= 0:
            hull.pop()
        hull.append(p)
    return hull


def rounded_rect_fallback(points: Sequence[Point], padding: float) -> RoundedRect:
    """Padded bounding rectangle for a cluster with one or two members."""
    if not points:
        raise ValueError("cannot outline an empty cluster")
    pad = padding * SINGLE_NODE_PADDING_MULTIPLIER if len(points) == 1 else padding
    min_x = min(p[0] for p in points) - pad
    max_x = max(p[0] for p in points) + pad
    min_y = min(p[1] for p in points) - pad
    max_y = max(p[1] for p in points) + pad
    return RoundedRect(min_x, min_y, max_x - min_x, max_y - min_y)


def _pulled_back(curr: Point, prev: Point) -> Point:
    return (
        curr[0] - (curr[0] - prev[0]) * CURVE_CONTROL_FACTOR,
        curr[1] - (curr[1] - prev[1]) * CURVE_CONTROL_FACTOR,
    )


def smooth_closed_path(hull: Sequence[Point], padding: float = 50.0) -> ClusterOutline:
    """
    Build the rounded outline drawn around a cluster.

    Hull vertices are pushed away from their centroid by 30% of
    ``padding`` and joined with quadratic curves whose control point sits
    20% of the way back toward the previous vertex. Hulls with fewer than
    three vertices get a rounded rectangle instead.

    Args:
        hull: Convex hull vertices (see ``convex_hull``).
        padding: Nominal padding in world units.

    Returns:
        Path segments for three or more vertices, otherwise a RoundedRect.
    """
    if len(hull) < 3:
        return rounded_rect_fallback(hull, padding)

    padded = expand_from_centroid(hull, padding * CONSERVATIVE_PADDING_FACTOR)

    segments = [PathSegment(SegmentKind.MOVE, (padded[0],))]
    for i in range(1, len(padded)):
        curr = padded[i]
        segments.append(
            PathSegment(SegmentKind.QUAD, (_pulled_back(curr, padded[i - 1]), curr))
        )
    first = padded[0]
    segments.append(PathSegment(SegmentKind.QUAD, (_pulled_back(first, padded[-1]), first)))
    segments.append(PathSegment(SegmentKind.CLOSE))
    return segments


def cluster_hit_path(
    points: Sequence[Point],
    cluster_padding: float = 100.0,
    pair_padding: float = 80.0,
) -> list[Point]:
    """
    Polygon used to hit-test a cluster.

    One member: a square of half-size ``cluster_padding * 1.5``. Two
    members: their bounding box grown by ``pair_padding``. Three or more:
    the convex hull grown by 60 units away from its centroid.
    """
    if not points:
        return []

    if len(points) == 1:
        x, y = points[0]
        extra = cluster_padding * SINGLE_NODE_PADDING_MULTIPLIER
        return [(x - extra, y - extra), (x + extra, y - extra), (x + extra, y + extra), (x - extra, y + extra)]

    if len(points) == 2:
        (x1, y1), (x2, y2) = points
        min_x, max_x = min(x1, x2) - pair_padding, max(x1, x2) + pair_padding
        min_y, max_y = min(y1, y2) - pair_padding, max(y1, y2) + pair_padding
        return [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)]

    hull = convex_hull(points)
    if len(hull) < 3:
        # Collinear members collapse to a segment; outline the segment instead
        return cluster_hit_path([hull[0], hull[-1]], cluster_padding, pair_padding)
    return expand_from_centroid(hull, HULL_HIT_PADDING)
