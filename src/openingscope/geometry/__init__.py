"""Geometry helpers: hulls, outlines and point-in-polygon tests."""

from openingscope.geometry.hull import (
    ClusterOutline,
    PathSegment,
    RoundedRect,
    SegmentKind,
    cluster_hit_path,
    convex_hull,
    rounded_rect_fallback,
    smooth_closed_path,
)
from openingscope.geometry.polygon import (
    centroid,
    distance,
    expand_from_centroid,
    path_bounds,
    point_in_polygon,
)

__all__ = [
    "convex_hull",
    "smooth_closed_path",
    "rounded_rect_fallback",
    "cluster_hit_path",
    "PathSegment",
    "SegmentKind",
    "RoundedRect",
    "ClusterOutline",
    "point_in_polygon",
    "distance",
    "centroid",
    "path_bounds",
    "expand_from_centroid",
]
