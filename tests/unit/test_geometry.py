"""Unit tests for hulls, outlines and polygon helpers."""

import numpy as np
import pytest

from openingscope.geometry import (
    RoundedRect,
    SegmentKind,
    centroid,
    cluster_hit_path,
    convex_hull,
    distance,
    expand_from_centroid,
    path_bounds,
    point_in_polygon,
    rounded_rect_fallback,
    smooth_closed_path,
)
from openingscope.geometry.polygon import cross

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


class TestPolygonHelpers:
    """Tests for planar helper functions."""

    def test_distance_and_centroid(self) -> None:
        assert distance((0, 0), (3, 4)) == 5
        assert centroid(SQUARE) == (5.0, 5.0)

    def test_centroid_of_nothing_raises(self) -> None:
        with pytest.raises(ValueError):
            centroid([])

    def test_path_bounds(self) -> None:
        bounds = path_bounds([(1, 5), (-2, 3), (4, -1)])

        assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (-2, -1, 4, 5)
        assert path_bounds([]) is None

    def test_point_in_polygon(self) -> None:
        assert point_in_polygon(5, 5, SQUARE)
        assert not point_in_polygon(15, 5, SQUARE)
        assert not point_in_polygon(5, -1, SQUARE)

    def test_point_in_degenerate_polygon(self) -> None:
        """Test that fewer than three vertices contain nothing."""
        assert not point_in_polygon(0, 0, [])
        assert not point_in_polygon(0, 0, [(0, 0), (1, 1)])

    def test_expand_from_centroid(self) -> None:
        expanded = expand_from_centroid([(0.0, 0.0), (10.0, 0.0)], 5.0)

        assert expanded[0] == pytest.approx((-5.0, 0.0))
        assert expanded[1] == pytest.approx((15.0, 0.0))

    def test_expand_point_at_centroid(self) -> None:
        """Test a vertex on the centroid is nudged diagonally."""
        assert expand_from_centroid([(2.0, 3.0)], 4.0) == [(6.0, 7.0)]


class TestConvexHull:
    """Tests for the Graham scan hull."""

    def test_fewer_than_three_points_unchanged(self) -> None:
        assert convex_hull([]) == []
        assert convex_hull([(1.0, 2.0)]) == [(1.0, 2.0)]
        assert convex_hull([(1.0, 2.0), (3.0, 4.0)]) == [(1.0, 2.0), (3.0, 4.0)]

    def test_square_with_interior_and_edge_points(self) -> None:
        """Test interior and collinear edge points are dropped."""
        points = [*SQUARE, (5.0, 5.0), (5.0, 0.0), (0.0, 5.0)]
        hull = convex_hull(points)

        assert sorted(hull) == sorted(SQUARE)
        assert hull[0] == (0.0, 0.0)

    def test_collinear_points_collapse_to_segment(self) -> None:
        hull = convex_hull([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)])

        assert hull == [(0.0, 0.0), (20.0, 0.0)]

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_hull_is_convex_and_contains_inputs(self, seed: int) -> None:
        """Test every turn is counter-clockwise and no input lies outside."""
        rng = np.random.default_rng(seed)
        points = [tuple(p) for p in rng.uniform(-500, 500, size=(40, 2)).tolist()]
        hull = convex_hull(points)
        n = len(hull)

        assert n >= 3
        for i in range(n):
            assert cross(hull[i], hull[(i + 1) % n], hull[(i + 2) % n]) > 0
        for p in points:
            for i in range(n):
                assert cross(hull[i], hull[(i + 1) % n], p) >= -1e-9


class TestOutlines:
    """Tests for smooth cluster outlines and hit paths."""

    def test_smooth_path_for_triangle(self) -> None:
        hull = [(0.0, 0.0), (100.0, 0.0), (50.0, 100.0)]
        segments = smooth_closed_path(hull, padding=50.0)

        kinds = [s.kind for s in segments]
        assert kinds == [SegmentKind.MOVE, SegmentKind.QUAD, SegmentKind.QUAD, SegmentKind.QUAD, SegmentKind.CLOSE]
        # Closing curve ends where the path started
        assert segments[-2].points[1] == segments[0].points[0]

    def test_smooth_path_pads_outward(self) -> None:
        """Test outline vertices sit 30% of the padding outside the hull."""
        hull = [(0.0, 0.0), (100.0, 0.0), (50.0, 100.0)]
        segments = smooth_closed_path(hull, padding=50.0)
        c = centroid(hull)

        start = segments[0].points[0]
        assert distance(start, c) == pytest.approx(distance(hull[0], c) + 15.0)

    def test_small_hulls_use_rounded_rect(self) -> None:
        single = smooth_closed_path([(0.0, 0.0)], padding=50.0)
        pair = smooth_closed_path([(0.0, 0.0), (100.0, 0.0)], padding=50.0)

        assert isinstance(single, RoundedRect)
        assert (single.x, single.y, single.width, single.height) == (-75.0, -75.0, 150.0, 150.0)
        assert isinstance(pair, RoundedRect)
        assert (pair.x, pair.width) == (-50.0, 200.0)

    def test_rounded_rect_needs_points(self) -> None:
        with pytest.raises(ValueError):
            rounded_rect_fallback([], 10.0)

    def test_hit_path_single_node(self) -> None:
        path = cluster_hit_path([(0.0, 0.0)], cluster_padding=100.0)

        assert path_bounds(path).width == 300.0
        assert point_in_polygon(140, -140, path)
        assert not point_in_polygon(160, 0, path)

    def test_hit_path_two_nodes(self) -> None:
        path = cluster_hit_path([(0.0, 0.0), (100.0, 50.0)], pair_padding=80.0)
        bounds = path_bounds(path)

        assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (-80.0, -80.0, 180.0, 130.0)

    def test_hit_path_contains_members(self) -> None:
        points = [(0.0, 0.0), (200.0, 0.0), (100.0, 150.0), (100.0, 50.0)]
        path = cluster_hit_path(points)

        for x, y in points:
            assert point_in_polygon(x, y, path)
        # Grown 60 units past the hull
        assert point_in_polygon(100, -20, path)

    def test_hit_path_collinear_members(self) -> None:
        """Test collinear members fall back to a padded box."""
        path = cluster_hit_path([(0.0, 0.0), (100.0, 0.0), (200.0, 0.0)], pair_padding=80.0)

        assert len(path) == 4
        assert point_in_polygon(100, 50, path)
