"""Cluster models - groups of positions shown as hulls on the canvas."""

from dataclasses import dataclass, field
from enum import Enum

from openingscope.models.position import PositionNode


class ClusterType(str, Enum):
    """How a cluster was formed."""

    OPENING = "opening"  # Same opening name
    POSITION = "position"  # A position and its descendants
    DBSCAN = "dbscan"  # Density grouping in feature space
    KMEANS = "kmeans"  # Performance grouping in feature space


@dataclass
class ClusterStats:
    """Aggregate performance of a cluster's members."""

    count: int = 0
    avg_win_rate: float = 0.0
    total_games: int = 0
    avg_depth: float = 0.0
    win_rate_std: float = 0.0
    density: float = 0.0  # DBSCAN only
    top_opening_family: str = "Unknown"

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "avg_win_rate": self.avg_win_rate,
            "total_games": self.total_games,
            "avg_depth": self.avg_depth,
            "win_rate_std": self.win_rate_std,
            "density": self.density,
            "top_opening_family": self.top_opening_family,
        }


@dataclass
class Cluster:
    """
    A group of positions.

    ``nodes`` holds references to the caller's node objects. ``centroid``
    is a world point for opening/position clusters and a feature-space
    vector for DBSCAN/K-means clusters.
    """

    id: str
    type: ClusterType
    name: str
    nodes: list[PositionNode] = field(default_factory=list)
    centroid: tuple[float, ...] = ()
    stats: ClusterStats = field(default_factory=ClusterStats)
    color_index: int = 0
    label: str | None = None  # Interpretable K-means label

    # Position clusters only
    parent_node: PositionNode | None = None
    child_nodes: list[PositionNode] = field(default_factory=list)
    descendant_nodes: list[PositionNode] = field(default_factory=list)
    is_leaf: bool = False

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def to_dict(self) -> dict:
        """Convert to dictionary (nodes referenced by id)."""
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "node_ids": self.node_ids,
            "centroid": list(self.centroid),
            "stats": self.stats.to_dict(),
            "color_index": self.color_index,
            "label": self.label,
            "parent_node_id": self.parent_node.id if self.parent_node else None,
            "child_node_ids": [n.id for n in self.child_nodes],
            "is_leaf": self.is_leaf,
        }


@dataclass
class AnalysisMetadata:
    """Bookkeeping for a clustering run."""

    method: str
    total_nodes: int = 0
    valid_nodes: int = 0
    noise_count: int = 0
    k: int | None = None  # Chosen or requested K (K-means only)
    score: float | None = None  # Combined optimizer score when K was selected automatically


@dataclass
class ClusterAnalysis:
    """Result of a clustering run."""

    clusters: list[Cluster] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    noise: list[PositionNode] = field(default_factory=list)
    metadata: AnalysisMetadata = field(default_factory=lambda: AnalysisMetadata(method="none"))

    @property
    def is_empty(self) -> bool:
        return not self.clusters

    def to_dict(self) -> dict:
        return {
            "clusters": [c.to_dict() for c in self.clusters],
            "insights": list(self.insights),
            "noise_node_ids": [n.id for n in self.noise],
            "metadata": {
                "method": self.metadata.method,
                "total_nodes": self.metadata.total_nodes,
                "valid_nodes": self.metadata.valid_nodes,
                "noise_count": self.metadata.noise_count,
                "k": self.metadata.k,
                "score": self.metadata.score,
            },
        }
