"""Unit tests for data models and settings."""

import math

import pytest

from openingscope.config import Settings
from openingscope.models import (
    Bounds,
    Cluster,
    ClusterAnalysis,
    ClusterStats,
    ClusterType,
    Edge,
    GraphData,
    PositionNode,
    Transform,
    ViewportSize,
)


class TestPositionNode:
    """Tests for PositionNode model."""

    def test_create_node(self) -> None:
        """Test node creation with defaults."""
        node = PositionNode(id="n1", fen="start")

        assert node.x is None
        assert node.y is None
        assert node.width == 180
        assert node.height == 180
        assert node.game_count == 0
        assert node.arrows == []
        assert not node.is_positioned

    def test_is_positioned_requires_finite_coordinates(self) -> None:
        """Test that NaN or infinite coordinates do not count as placed."""
        assert PositionNode(id="a", fen="f", x=0.0, y=0.0).is_positioned
        assert not PositionNode(id="b", fen="f", x=math.nan, y=0.0).is_positioned
        assert not PositionNode(id="c", fen="f", x=0.0, y=math.inf).is_positioned

    def test_positioned_at_returns_copy(self) -> None:
        """Test that placing a node leaves the source node untouched."""
        node = PositionNode(id="n1", fen="start", win_rate=60.0)
        placed = node.positioned_at(10.0, 20.0)

        assert placed is not node
        assert (placed.x, placed.y) == (10.0, 20.0)
        assert placed.win_rate == 60.0
        assert node.x is None

    def test_to_dict_from_dict(self) -> None:
        """Test dictionary conversion keeps display fields."""
        node = PositionNode(
            id="n1",
            fen="fen",
            move_sequence=["e4", "e5"],
            x=1.0,
            y=2.0,
            win_rate=55.0,
            game_count=7,
            depth=2,
            san="e5",
            arrows=["#ff0000"],
            has_comment=True,
        )
        restored = PositionNode.from_dict(node.to_dict())

        assert restored == node

    def test_from_dict_defaults_depth_to_sequence_length(self) -> None:
        """Test missing depth falls back to the number of moves."""
        node = PositionNode.from_dict({"id": 5, "move_sequence": ["d4", "d5", "c4"]})

        assert node.id == "5"
        assert node.depth == 3
        assert node.game_count == 0


class TestGraphData:
    """Tests for GraphData and Edge models."""

    def test_edge_copies_target_statistics(self) -> None:
        """Test that edges carry the statistics of the move they lead to."""
        target = PositionNode(id="t", fen="f", win_rate=70.0, game_count=12, is_main_line=True)
        edge = Edge.to_node("s", target)

        assert edge.id == "s->t"
        assert edge.win_rate == 70.0
        assert edge.game_count == 12
        assert edge.is_main_line

    def test_rebuild_edges_drops_dangling(self) -> None:
        """Test that edges to removed nodes disappear."""
        graph = GraphData(
            nodes=[PositionNode(id="a", fen="a"), PositionNode(id="b", fen="b", game_count=3)],
            edges=[Edge("a", "b"), Edge("a", "gone")],
        )
        rebuilt = graph.rebuild_edges()

        assert [e.id for e in rebuilt.edges] == ["a->b"]
        assert rebuilt.edges[0].game_count == 3

    def test_from_dict(self) -> None:
        """Test loading a graph from plain data."""
        graph = GraphData.from_dict({
            "nodes": [{"id": "a", "fen": "x", "is_root": True}, {"id": "b", "fen": "y"}],
            "edges": [{"source": "a", "target": "b", "game_count": "4"}],
        })

        assert not graph.is_empty
        assert graph.node_by_id()["a"].is_root
        assert graph.edges[0].game_count == 4
        assert GraphData.from_dict(graph.to_dict()) == graph


class TestClusterModels:
    """Tests for Cluster and ClusterAnalysis models."""

    def test_cluster_to_dict_references_ids(self) -> None:
        """Test that serialised clusters refer to nodes by id."""
        nodes = [PositionNode(id="a", fen="a"), PositionNode(id="b", fen="b")]
        cluster = Cluster(
            id="dbscan-0",
            type=ClusterType.DBSCAN,
            name="Cluster 1",
            nodes=nodes,
            stats=ClusterStats(count=2, avg_win_rate=55.0),
        )
        data = cluster.to_dict()

        assert cluster.size == 2
        assert data["type"] == "dbscan"
        assert data["node_ids"] == ["a", "b"]
        assert data["stats"]["avg_win_rate"] == 55.0
        assert data["parent_node_id"] is None

    def test_empty_analysis(self) -> None:
        """Test the default analysis is empty."""
        analysis = ClusterAnalysis()

        assert analysis.is_empty
        assert analysis.to_dict()["metadata"]["method"] == "none"


class TestTransformModels:
    """Tests for viewport geometry models."""

    def test_identity(self) -> None:
        assert Transform.identity() == Transform(0.0, 0.0, 1.0)

    def test_viewport_size_validity(self) -> None:
        assert ViewportSize(800, 600).is_valid
        assert not ViewportSize(0, 600).is_valid
        assert not ViewportSize().is_valid

    def test_bounds(self) -> None:
        bounds = Bounds(-10, -20, 30, 40)

        assert bounds.width == 40
        assert bounds.height == 60
        assert bounds.center == (10, 10)
        assert bounds.contains(0, 0)
        assert not bounds.contains(31, 0)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, test_settings: Settings) -> None:
        """Test default values used by the engine."""
        assert test_settings.zoom_min == 0.01
        assert test_settings.zoom_max == 5.0
        assert test_settings.clustering_method == "dbscan"
        assert test_settings.filter_min_game_count == 0

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that OPENINGSCOPE_ variables override defaults."""
        monkeypatch.setenv("OPENINGSCOPE_CLUSTERING_EPS", "0.5")
        monkeypatch.setenv("OPENINGSCOPE_ENABLE_AUTO_FIT", "false")

        s = Settings(_env_file=None)

        assert s.clustering_eps == 0.5
        assert s.enable_auto_fit is False
