"""Graph filtering and change detection."""

import hashlib
import logging
from dataclasses import dataclass

from openingscope.config import Settings, settings
from openingscope.models import GraphData, PositionNode

logger = logging.getLogger(__name__)


@dataclass
class GraphFilter:
    """Which positions are shown."""

    max_depth: int = 20
    min_game_count: int = 1
    win_rate_min: float = 0.0
    win_rate_max: float = 100.0

    def __post_init__(self) -> None:
        if self.win_rate_min > self.win_rate_max:
            raise ValueError(
                f"win rate range is empty: [{self.win_rate_min}, {self.win_rate_max}]"
            )

    def accepts(self, node: PositionNode) -> bool:
        """Per-node test. Roots always pass; missing moves skip the statistical checks."""
        if node.is_root:
            return True
        if node.depth > self.max_depth:
            return False
        if node.is_missing:
            return True
        if node.game_count < self.min_game_count:
            return False
        if node.win_rate is None:
            return True
        return self.win_rate_min <= node.win_rate <= self.win_rate_max

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "GraphFilter":
        s = s or settings
        return cls(
            max_depth=s.filter_max_depth,
            min_game_count=s.filter_min_game_count,
            win_rate_min=s.filter_win_rate_min,
            win_rate_max=s.filter_win_rate_max,
        )


def filter_graph(graph: GraphData, graph_filter: GraphFilter | None = None) -> GraphData:
    """
    Drop positions the filter rejects, plus everything below them.

    A node whose parent was dropped is dropped too, so the result is
    still connected from the root. Edges are rebuilt from the survivors.
    """
    graph_filter = graph_filter or GraphFilter.from_settings()
    parents: dict[str, list[str]] = {}
    for edge in graph.edges:
        parents.setdefault(edge.target, []).append(edge.source)

    by_id = graph.node_by_id()
    verdict: dict[str, bool] = {}

    def keep(node_id: str, visiting: frozenset[str] = frozenset()) -> bool:
        if node_id in verdict:
            return verdict[node_id]
        node = by_id[node_id]
        result = graph_filter.accepts(node)
        sources = [p for p in parents.get(node_id, []) if p in by_id and p not in visiting]
        if result and sources and not node.is_root:
            result = any(keep(p, visiting | {node_id}) for p in sources)
        verdict[node_id] = result
        return result

    nodes = [n for n in graph.nodes if keep(n.id)]
    logger.debug(f"Filter kept {len(nodes)}/{len(graph.nodes)} nodes")
    return GraphData(nodes=nodes, edges=graph.edges).rebuild_edges()


def graph_signature(graph: GraphData) -> str:
    """Digest of node/edge counts and stable-sorted ids.

    Equal signatures mean the graph structure did not change, only its
    display data.
    """
    node_ids = sorted(n.id for n in graph.nodes)
    edge_ids = sorted(e.id for e in graph.edges)
    payload = "|".join([
        str(len(node_ids)),
        str(len(edge_ids)),
        ",".join(node_ids),
        ",".join(edge_ids),
    ])
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
