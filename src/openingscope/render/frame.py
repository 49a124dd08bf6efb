"""Immutable snapshot handed from the viewport controller to the renderer."""

from dataclasses import dataclass

from openingscope.models import Cluster, Edge, GraphMode, PositionNode, Transform, ViewportSize


@dataclass(frozen=True)
class RenderFrame:
    """Everything one frame draws; read once per frame."""

    size: ViewportSize
    transform: Transform | None
    nodes: tuple[PositionNode, ...] = ()
    edges: tuple[Edge, ...] = ()
    mode: GraphMode = GraphMode.PERFORMANCE
    device_pixel_ratio: float = 1.0

    position_clusters: tuple[Cluster, ...] = ()
    opening_clusters: tuple[Cluster, ...] = ()
    performance_clusters: tuple[Cluster, ...] = ()

    current_node_id: str | None = None
    hovered_node_id: str | None = None
    hovered_cluster_id: str | None = None
    hovered_next_move_node_id: str | None = None

    @property
    def is_drawable(self) -> bool:
        return self.size.is_valid and self.transform is not None
