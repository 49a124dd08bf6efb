"""Unit tests for cluster analysis, summaries and structural grouping."""

import numpy as np
import pytest

from openingscope.clustering import (
    ClusteringConfig,
    analyze_clusters,
    cluster_stats,
    create_opening_clusters,
    create_position_clusters,
    kmeans_labels,
    opening_family,
    required_nodes,
)
from openingscope.clustering.grouping import is_descendant
from openingscope.clustering.summary import build_insights
from openingscope.models import Cluster, ClusterType, PositionNode

SCENARIO_C_WIN_RATES = [90, 88, 92, 10, 8, 12, 50, 52, 48]


@pytest.fixture
def win_rate_groups(make_node) -> list[PositionNode]:
    """Nine positions in three clear win-rate groups."""
    return [
        make_node(f"n{i}", x=i * 200.0, win_rate=float(w), game_count=20, depth=4)
        for i, w in enumerate(SCENARIO_C_WIN_RATES)
    ]


@pytest.fixture
def dense_with_outliers(make_node) -> list[PositionNode]:
    """Eight similar Sicilian positions and two outliers."""
    nodes = [
        make_node(f"n{i}", x=i * 10.0, win_rate=60.0, game_count=10, depth=3,
                  opening_name="Sicilian Defense: Najdorf Variation")
        for i in range(8)
    ]
    nodes.append(make_node("low", x=30.0, win_rate=5.0, game_count=10, depth=3))
    nodes.append(make_node("high", x=50.0, win_rate=95.0, game_count=10, depth=3))
    return nodes


class TestAnalyzeClusters:
    """Tests for the clustering entry point."""

    def test_required_nodes(self) -> None:
        assert required_nodes(ClusteringConfig(min_pts=2)) == 3
        assert required_nodes(ClusteringConfig(min_pts=5)) == 5
        assert required_nodes(ClusteringConfig(method="kmeans", k=6)) == 6
        assert required_nodes(ClusteringConfig(method="kmeans", k=2)) == 3
        assert required_nodes(ClusteringConfig(method="kmeans")) == 4

    def test_too_few_nodes_explains(self, make_node) -> None:
        """Test insufficient data yields an empty analysis, not an error."""
        nodes = [make_node("a"), make_node("b"), make_node("c", game_count=0)]
        analysis = analyze_clusters(nodes, ClusteringConfig())

        assert analysis.is_empty
        assert analysis.insights == ["Need at least 3 played positions for dbscan clustering (found 2)"]
        assert analysis.metadata.total_nodes == 3
        assert analysis.metadata.valid_nodes == 2

    def test_dbscan_scenario(self, dense_with_outliers: list[PositionNode]) -> None:
        analysis = analyze_clusters(dense_with_outliers, ClusteringConfig(eps=0.35, min_pts=2))

        assert len(analysis.clusters) == 1
        cluster = analysis.clusters[0]
        assert cluster.id == "dbscan-0"
        assert cluster.type == ClusterType.DBSCAN
        assert cluster.size == 8
        assert cluster.name == "Sicilian Defense Cluster 1"
        assert cluster.stats.avg_win_rate == pytest.approx(60.0)
        assert cluster.stats.density > 0
        assert {n.id for n in analysis.noise} == {"low", "high"}
        assert analysis.metadata.noise_count == 2
        assert "2 positions did not fit any pattern" in analysis.insights

    def test_kmeans_fixed_k(self, win_rate_groups: list[PositionNode]) -> None:
        analysis = analyze_clusters(win_rate_groups, ClusteringConfig(method="kmeans", k=3))

        by_label = {c.label: c for c in analysis.clusters}
        assert set(by_label) == {"Win-Focused", "Draw-Heavy", "Loss-Prone"}
        assert by_label["Win-Focused"].stats.avg_win_rate == pytest.approx(90.0)
        assert by_label["Draw-Heavy"].stats.avg_win_rate == pytest.approx(50.0)
        assert by_label["Loss-Prone"].stats.avg_win_rate == pytest.approx(10.0)
        assert all(c.type == ClusterType.KMEANS for c in analysis.clusters)
        assert analysis.metadata.k == 3
        assert analysis.insights[0] == "Found 3 performance patterns across 9 positions"

    def test_kmeans_deterministic(self, win_rate_groups: list[PositionNode]) -> None:
        config = ClusteringConfig(method="kmeans", k=3)
        first = analyze_clusters(win_rate_groups, config)
        second = analyze_clusters(win_rate_groups, config)

        assert [c.node_ids for c in first.clusters] == [c.node_ids for c in second.clusters]

    def test_kmeans_auto_k(self, win_rate_groups: list[PositionNode]) -> None:
        analysis = analyze_clusters(win_rate_groups, ClusteringConfig(method="kmeans"))

        assert 2 <= analysis.metadata.k <= 4
        assert analysis.metadata.score is not None
        assert sum(c.size for c in analysis.clusters) == 9

    def test_unplayed_positions_ignored(self, win_rate_groups: list[PositionNode], make_node) -> None:
        nodes = [*win_rate_groups, make_node("never", game_count=0), PositionNode(id="loose", fen="x", game_count=3)]
        analysis = analyze_clusters(nodes, ClusteringConfig(method="kmeans", k=3))

        clustered = {i for c in analysis.clusters for i in c.node_ids}
        assert "never" not in clustered
        assert "loose" not in clustered
        assert analysis.metadata.total_nodes == 11
        assert analysis.metadata.valid_nodes == 9


class TestSummary:
    """Tests for statistics, labels and insights."""

    def test_opening_family(self) -> None:
        assert opening_family("Sicilian Defense: Najdorf Variation") == "Sicilian Defense"
        assert opening_family("Ruy Lopez: Berlin Defense") == "Ruy Lopez"
        assert opening_family("Bongcloud Attack") == "Unknown"
        assert opening_family(None) == "Unknown"

    def test_cluster_stats(self, make_node) -> None:
        nodes = [make_node("a", win_rate=40.0, game_count=5, depth=2), make_node("b", win_rate=60.0, game_count=7, depth=4)]
        stats = cluster_stats(nodes, np.array([[0.0, 0.0], [0.0, 0.5]]))

        assert stats.count == 2
        assert stats.avg_win_rate == pytest.approx(50.0)
        assert stats.win_rate_std == pytest.approx(10.0)
        assert stats.total_games == 12
        assert stats.avg_depth == 3.0
        assert stats.density == pytest.approx(2000.0)

    def test_cluster_stats_empty(self) -> None:
        assert cluster_stats([]).count == 0

    def test_labels_for_three(self) -> None:
        assert kmeans_labels([10.0, 90.0, 50.0]) == ["Loss-Prone", "Win-Focused", "Draw-Heavy"]

    def test_labels_for_two(self) -> None:
        assert kmeans_labels([40.0, 60.0]) == ["Weak", "Strong"]

    def test_labels_for_many_use_buckets(self) -> None:
        labels = kmeans_labels([75.0, 72.0, 65.0, 50.0, 20.0])

        assert labels == ["Excellence", "Excellence 2", "Strong", "Average", "Weak"]

    def test_insights_without_clusters(self) -> None:
        assert build_insights([], 0, 5) == ["No performance patterns found among 5 positions"]


class TestOpeningClusters:
    """Tests for grouping by opening name."""

    def test_groups_by_name(self, make_node) -> None:
        nodes = [
            make_node("root", is_root=True, opening_name="Italian Game"),
            make_node("a", opening_name="Italian Game"),
            make_node("b", x=200.0, opening_name="Sicilian Defense"),
            make_node("c", x=100.0, opening_name="Italian Game"),
            make_node("d"),
            make_node("e", opening_name="Unknown Opening"),
        ]
        clusters = create_opening_clusters(nodes)

        assert [c.id for c in clusters] == ["opening-cluster-0", "opening-cluster-1"]
        assert clusters[0].name == "Italian Game (2 positions)"
        assert clusters[0].node_ids == ["a", "c"]
        assert clusters[0].centroid == (50.0, 0.0)
        assert clusters[1].name == "Sicilian Defense (1 positions)"
        assert clusters[1].color_index == 1

    def test_palette_cycles(self, make_node) -> None:
        nodes = [make_node(f"n{i}", opening_name=f"Opening {i}") for i in range(8)]
        clusters = create_opening_clusters(nodes)

        assert [c.color_index for c in clusters] == [0, 1, 2, 3, 4, 5, 0, 1]


class TestPositionClusters:
    """Tests for clusters around the current position."""

    @pytest.fixture
    def transposition_nodes(self, make_node) -> list[PositionNode]:
        return [
            make_node("root", fen="start", is_root=True),
            make_node("p1", fen="X", move_sequence=["e4", "e5", "Nf3", "Nc6"], depth=4),
            make_node("p2", fen="X", move_sequence=["Nf3", "Nc6", "e4", "e5"], depth=4),
            make_node("c1", move_sequence=["e4", "e5", "Nf3", "Nc6", "Bb5"], depth=5),
            make_node("g1", move_sequence=["e4", "e5", "Nf3", "Nc6", "Bb5", "a6"], depth=6),
            make_node("other", move_sequence=["d4"], depth=1),
        ]

    def test_is_descendant(self, transposition_nodes: list[PositionNode]) -> None:
        by_id = {n.id: n for n in transposition_nodes}

        assert is_descendant(by_id["g1"], by_id["p1"])
        assert not is_descendant(by_id["p1"], by_id["p1"])
        assert not is_descendant(by_id["c1"], by_id["p2"])

    def test_one_cluster_per_occurrence(self, transposition_nodes: list[PositionNode]) -> None:
        clusters = create_position_clusters(transposition_nodes, "X")

        assert len(clusters) == 2
        first, second = clusters
        assert first.name == "Position 1 (1 moves, 2 total nodes)"
        assert first.node_ids == ["p1", "c1", "g1"]
        assert first.parent_node.id == "p1"
        assert [n.id for n in first.child_nodes] == ["c1"]
        assert not first.is_leaf
        assert second.name == "Leaf Position 2 (single position)"
        assert second.is_leaf
        assert second.color_index == 1

    def test_no_current_position(self, transposition_nodes: list[PositionNode]) -> None:
        assert create_position_clusters(transposition_nodes, None) == []
        assert create_position_clusters([], "X") == []

    def test_root_position_excluded(self, transposition_nodes: list[PositionNode]) -> None:
        assert create_position_clusters(transposition_nodes, "start") == []

    def test_clusters_reference_input_nodes(self, transposition_nodes: list[PositionNode]) -> None:
        clusters = create_position_clusters(transposition_nodes, "X")

        assert isinstance(clusters[0], Cluster)
        assert clusters[0].nodes[0] is transposition_nodes[1]
