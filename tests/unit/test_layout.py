"""Unit tests for transform math, tree layout and graph filtering."""

import numpy as np
import pytest

from openingscope.layout import (
    GraphFilter,
    assign_positions,
    build_move_graph,
    clamp_scale,
    compute_bounds,
    compute_optimal_transform,
    filter_graph,
    graph_signature,
    interpolate,
    pan,
    screen_to_world,
    world_to_screen,
    zoom_at_point,
)
from openingscope.models import Edge, GraphData, PositionNode, Transform, ViewportSize

VIEWPORT = ViewportSize(800, 600)


class TestOptimalTransform:
    """Tests for fitting content into the viewport."""

    def test_single_node(self, make_node) -> None:
        """Test one default-size node is scaled to the padded viewport and centred."""
        transform = compute_optimal_transform([make_node("a")], VIEWPORT, padding=50)

        assert transform.scale == pytest.approx(500 / 180)
        assert transform.x == pytest.approx(400.0)
        assert transform.y == pytest.approx(300.0)

    def test_zero_extent_is_identity(self) -> None:
        node = PositionNode(id="a", fen="f", x=10.0, y=10.0, width=0, height=0)

        assert compute_optimal_transform([node], VIEWPORT) == Transform.identity()

    def test_nothing_to_fit(self, make_node) -> None:
        assert compute_optimal_transform([], VIEWPORT) == Transform.identity()
        assert compute_optimal_transform([make_node("a")], ViewportSize(0, 600)) == Transform.identity()
        assert compute_optimal_transform([PositionNode(id="a", fen="f")], VIEWPORT) == Transform.identity()

    def test_laid_out_tree(self, sample_graph: GraphData) -> None:
        graph = assign_positions(sample_graph)
        transform = compute_optimal_transform(graph.nodes, VIEWPORT, padding=50)

        assert transform.scale == pytest.approx(500 / 700)
        assert transform.x == pytest.approx(242.857, abs=1e-3)
        assert transform.y == pytest.approx(114.286, abs=1e-3)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_content_stays_inside_padding(self, make_node, seed: int) -> None:
        rng = np.random.default_rng(seed)
        coords = rng.uniform(-3000, 3000, size=(25, 2))
        nodes = [make_node(f"n{i}", x=float(x), y=float(y)) for i, (x, y) in enumerate(coords)]
        transform = compute_optimal_transform(nodes, VIEWPORT, padding=50)

        bounds = compute_bounds(nodes)
        left, top = world_to_screen((bounds.min_x, bounds.min_y), transform)
        right, bottom = world_to_screen((bounds.max_x, bounds.max_y), transform)
        assert left >= 50 - 1e-6
        assert top >= 50 - 1e-6
        assert right <= 750 + 1e-6
        assert bottom <= 550 + 1e-6

    def test_bounds_use_node_boxes(self, make_node) -> None:
        bounds = compute_bounds([make_node("a"), make_node("b", x=100.0, y=50.0)])

        assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (-90, -90, 190, 140)


class TestCoordinateMapping:
    """Tests for screen/world conversion, zooming and panning."""

    def test_round_trip(self) -> None:
        transform = Transform(120.0, -40.0, 0.75)
        point = (333.0, 77.0)

        assert world_to_screen(screen_to_world(point, transform), transform) == pytest.approx(point)

    def test_clamp_scale(self) -> None:
        assert clamp_scale(0.001) == 0.01
        assert clamp_scale(9.0) == 5.0
        assert clamp_scale(1.2) == 1.2

    def test_zoom_keeps_cursor_point(self) -> None:
        """Test the world point under the cursor does not move."""
        start = Transform(30.0, 60.0, 0.5)
        cursor = (200.0, 150.0)
        before = screen_to_world(cursor, start)

        zoomed = zoom_at_point(start, 1.1, cursor)

        assert zoomed.scale == pytest.approx(0.55)
        assert screen_to_world(cursor, zoomed) == pytest.approx(before)

    def test_zoom_is_clamped(self) -> None:
        zoomed = zoom_at_point(Transform(0.0, 0.0, 4.0), 10.0, (100.0, 100.0))

        assert zoomed.scale == 5.0
        assert zoomed.x == pytest.approx(-25.0)

    def test_pan(self) -> None:
        assert pan(Transform(1.0, 2.0, 3.0), 10.0, -5.0) == Transform(11.0, -3.0, 3.0)

    def test_interpolate(self) -> None:
        start = Transform(0.0, 0.0, 1.0)
        end = Transform(100.0, -50.0, 2.0)

        assert interpolate(start, end, 0.0) == start
        assert interpolate(start, end, 1.0) == end
        assert interpolate(start, end, 0.5) == Transform(50.0, -25.0, 1.5)


class TestPositioning:
    """Tests for the hierarchical tree layout."""

    def test_assign_positions(self, sample_graph: GraphData) -> None:
        graph = assign_positions(sample_graph)
        placed = {n.id: (n.x, n.y) for n in graph.nodes}

        assert placed == {
            "root": (275.0, 0.0),
            "e4": (110.0, 260.0),
            "d4": (440.0, 260.0),
            "e4e5": (0.0, 520.0),
            "e4c5": (220.0, 520.0),
        }
        assert [e.game_count for e in graph.edges] == [25, 15, 12, 13]

    def test_input_not_modified(self, sample_graph: GraphData) -> None:
        assign_positions(sample_graph)

        assert all(n.x is None for n in sample_graph.nodes)

    def test_positioned_nodes_kept(self, sample_graph: GraphData) -> None:
        anchored = sample_graph.nodes[0].positioned_at(-500.0, -500.0)
        graph = GraphData(nodes=[anchored, *sample_graph.nodes[1:]], edges=sample_graph.edges)

        result = assign_positions(graph)

        assert result.nodes[0] is anchored
        assert all(n.is_positioned for n in result.nodes)

    def test_transposition_placed_once(self) -> None:
        """Test a node with two parents sits under the first one."""
        nodes = [
            PositionNode(id="r", fen="r", is_root=True),
            PositionNode(id="a", fen="a"),
            PositionNode(id="b", fen="b"),
            PositionNode(id="t", fen="t"),
        ]
        edges = [Edge("r", "a"), Edge("r", "b"), Edge("a", "t"), Edge("b", "t")]
        graph = assign_positions(GraphData(nodes=nodes, edges=edges))
        placed = {n.id: (n.x, n.y) for n in graph.nodes}

        assert placed["t"] == (0.0, 520.0)
        assert placed["a"] == (0.0, 260.0)
        assert placed["b"] == (220.0, 260.0)

    def test_build_move_graph_skips_dangling(self, sample_graph: GraphData) -> None:
        graph = GraphData(nodes=sample_graph.nodes, edges=[*sample_graph.edges, Edge("e4", "nowhere")])
        g = build_move_graph(graph)

        assert g.number_of_nodes() == 5
        assert g.number_of_edges() == 4


class TestFiltering:
    """Tests for graph filters and change detection."""

    def test_depth_filter(self, sample_graph: GraphData) -> None:
        result = filter_graph(sample_graph, GraphFilter(max_depth=1))

        assert [n.id for n in result.nodes] == ["root", "e4", "d4"]
        assert [e.id for e in result.edges] == ["root->e4", "root->d4"]

    def test_children_of_dropped_nodes_removed(self, sample_graph: GraphData) -> None:
        """Test a passing position under a rejected parent is dropped too."""
        result = filter_graph(sample_graph, GraphFilter(win_rate_max=58.0))

        assert [n.id for n in result.nodes] == ["root", "d4"]

    def test_min_game_count(self, sample_graph: GraphData) -> None:
        result = filter_graph(sample_graph, GraphFilter(min_game_count=14))

        assert {n.id for n in result.nodes} == {"root", "e4", "d4"}

    def test_missing_moves_skip_statistics(self) -> None:
        node = PositionNode(id="m", fen="m", depth=2, is_missing=True)

        assert GraphFilter(min_game_count=5).accepts(node)
        assert not GraphFilter(max_depth=1).accepts(node)

    def test_empty_win_rate_range_raises(self) -> None:
        with pytest.raises(ValueError):
            GraphFilter(win_rate_min=70.0, win_rate_max=30.0)

    def test_signature_ignores_display_data(self, sample_graph: GraphData) -> None:
        moved = assign_positions(sample_graph)

        assert graph_signature(moved) == graph_signature(sample_graph)

    def test_signature_detects_structure(self, sample_graph: GraphData) -> None:
        smaller = filter_graph(sample_graph, GraphFilter(max_depth=1))

        assert graph_signature(smaller) != graph_signature(sample_graph)
