"""Hierarchical placement of positions that have no coordinates yet."""

import logging

import networkx as nx

from openingscope.models import GraphData, PositionNode

logger = logging.getLogger(__name__)

DEFAULT_LEVEL_HEIGHT = 260.0
DEFAULT_NODE_SPACING = 220.0


def build_move_graph(graph: GraphData) -> nx.DiGraph:
    """Directed graph of move edges, keyed by node id, in input order."""
    g = nx.DiGraph()
    g.add_nodes_from(node.id for node in graph.nodes)
    for edge in graph.edges:
        if edge.source in g and edge.target in g:
            g.add_edge(edge.source, edge.target)
    return g


def hierarchical_positions(
    graph: GraphData,
    level_height: float = DEFAULT_LEVEL_HEIGHT,
    node_spacing: float = DEFAULT_NODE_SPACING,
) -> dict[str, tuple[float, float]]:
    """
    Tidy tree layout: one row per BFS level, leaves spaced left to right,
    every parent centred over its first and last child.

    Transpositions reachable from several parents are placed under the
    first parent visited. Nodes unreachable from a root start trees of
    their own.

    Returns:
        node id -> (x, y) centre coordinates.
    """
    g = build_move_graph(graph)
    by_id = graph.node_by_id()

    roots = [n.id for n in graph.nodes if n.is_root]
    roots += [n.id for n in graph.nodes if g.in_degree(n.id) == 0 and n.id not in roots]

    positions: dict[str, tuple[float, float]] = {}
    next_slot = 0

    def place_tree(root: str) -> None:
        nonlocal next_slot
        reachable = nx.bfs_tree(g, root)
        tree = nx.DiGraph()
        tree.add_node(root)
        tree.add_edges_from((u, v) for u, v in reachable.edges() if v not in positions)
        levels = nx.single_source_shortest_path_length(tree, root)
        for node_id in nx.dfs_postorder_nodes(tree, root):
            children = list(tree.successors(node_id))
            if children:
                x = (positions[children[0]][0] + positions[children[-1]][0]) / 2
            else:
                x = next_slot * node_spacing
                next_slot += 1
            positions[node_id] = (x, levels[node_id] * level_height)

    for root in roots:
        if root not in positions:
            place_tree(root)
    # Cycles without an entry point
    for node in graph.nodes:
        if node.id not in positions:
            place_tree(node.id)

    logger.debug(f"Laid out {len(positions)} nodes over {next_slot} columns")
    return {node_id: positions[node_id] for node_id in by_id}


def assign_positions(
    graph: GraphData,
    level_height: float = DEFAULT_LEVEL_HEIGHT,
    node_spacing: float = DEFAULT_NODE_SPACING,
) -> GraphData:
    """
    Give coordinates to nodes that lack them.

    Nodes that are already positioned are passed through untouched; the
    others are replaced by placed copies. Edge statistics are refreshed.
    """
    if all(n.is_positioned for n in graph.nodes):
        return graph.rebuild_edges()

    positions = hierarchical_positions(graph, level_height, node_spacing)
    nodes: list[PositionNode] = []
    placed = 0
    for node in graph.nodes:
        if node.is_positioned:
            nodes.append(node)
        else:
            nodes.append(node.positioned_at(*positions[node.id]))
            placed += 1
    logger.debug(f"Assigned positions to {placed}/{len(nodes)} nodes")
    return GraphData(nodes=nodes, edges=graph.edges).rebuild_edges()
