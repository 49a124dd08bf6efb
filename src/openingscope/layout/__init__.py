"""Layout and transform math."""

from openingscope.layout.filters import GraphFilter, filter_graph, graph_signature
from openingscope.layout.positioning import assign_positions, build_move_graph, hierarchical_positions
from openingscope.layout.transform import (
    clamp_scale,
    compute_bounds,
    compute_optimal_transform,
    interpolate,
    pan,
    screen_to_world,
    world_to_screen,
    zoom_at_point,
)

__all__ = [
    "compute_bounds",
    "compute_optimal_transform",
    "screen_to_world",
    "world_to_screen",
    "zoom_at_point",
    "clamp_scale",
    "pan",
    "interpolate",
    "assign_positions",
    "hierarchical_positions",
    "build_move_graph",
    "GraphFilter",
    "filter_graph",
    "graph_signature",
]
