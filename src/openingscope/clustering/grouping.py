"""Structural clusters: positions grouped by opening name or by subtree."""

import logging
from collections.abc import Sequence

from openingscope.clustering.summary import cluster_stats
from openingscope.models import Cluster, ClusterType, PositionNode

logger = logging.getLogger(__name__)

UNKNOWN_OPENING = "Unknown Opening"
OPENING_COLOR_COUNT = 6
POSITION_COLOR_COUNT = 3


def _world_centroid(nodes: Sequence[PositionNode]) -> tuple[float, ...]:
    placed = [n for n in nodes if n.is_positioned]
    if not placed:
        return ()
    return (
        sum(n.x for n in placed) / len(placed),
        sum(n.y for n in placed) / len(placed),
    )


def create_opening_clusters(
    nodes: Sequence[PositionNode],
    color_count: int = OPENING_COLOR_COUNT,
) -> list[Cluster]:
    """One cluster per named opening, in order of first appearance.

    Root nodes and positions without a known opening are left out.
    """
    groups: dict[str, list[PositionNode]] = {}
    for node in nodes:
        if node.is_root or not node.opening_name or node.opening_name == UNKNOWN_OPENING:
            continue
        groups.setdefault(node.opening_name, []).append(node)

    clusters = []
    for i, (name, members) in enumerate(groups.items()):
        clusters.append(Cluster(
            id=f"opening-cluster-{i}",
            type=ClusterType.OPENING,
            name=f"{name} ({len(members)} positions)",
            nodes=members,
            centroid=_world_centroid(members),
            stats=cluster_stats(members),
            color_index=i % color_count,
        ))
    return clusters


def is_descendant(candidate: PositionNode, ancestor: PositionNode) -> bool:
    """True when the candidate's move sequence strictly extends the ancestor's."""
    prefix = ancestor.move_sequence
    moves = candidate.move_sequence
    return len(moves) > len(prefix) and moves[: len(prefix)] == prefix


def create_position_clusters(
    nodes: Sequence[PositionNode],
    current_fen: str | None,
) -> list[Cluster]:
    """
    Clusters around every occurrence of the current position.

    A position reached through different move orders (a transposition)
    appears several times in the tree; each occurrence gets its own
    cluster with all of its descendants.

    Args:
        nodes: All positions in the graph.
        current_fen: FEN of the active position.

    Returns:
        Position clusters, possibly empty.
    """
    if not nodes or not current_fen:
        return []

    occurrences = [n for n in nodes if n.fen == current_fen and not n.is_root]
    clusters = []
    for i, parent in enumerate(occurrences):
        descendants = [n for n in nodes if is_descendant(n, parent)]
        children = [n for n in descendants if len(n.move_sequence) == len(parent.move_sequence) + 1]
        members = [parent, *descendants]

        if descendants:
            name = f"Position {i + 1} ({len(children)} moves, {len(descendants)} total nodes)"
        else:
            name = f"Leaf Position {i + 1} (single position)"

        clusters.append(Cluster(
            id=f"position-cluster-{i}",
            type=ClusterType.POSITION,
            name=name,
            nodes=members,
            centroid=_world_centroid(members),
            stats=cluster_stats(members),
            color_index=i % POSITION_COLOR_COUNT,
            parent_node=parent,
            child_nodes=children,
            descendant_nodes=descendants,
            is_leaf=not descendants,
        ))

    logger.debug(f"{len(clusters)} position clusters for current position")
    return clusters
