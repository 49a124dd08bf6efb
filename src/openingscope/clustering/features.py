"""Feature extraction for performance clustering.

Each position becomes a 7-dimensional vector:

    [win, loss, draw, reliability, depth, x, y]

Probabilities come from the win rate, reliability is the log-scaled game
count, depth and layout coordinates are min-max scaled over the node set.
Feature groups are multiplied by their FeatureWeights before distances
are taken.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from openingscope.clustering.config import FeatureWeights
from openingscope.models import PositionNode

# Statistics carry no draw split, so draws get a fixed share
DRAW_PROBABILITY = 0.1
# Layout coordinates only nudge grouping
POSITION_WEIGHT = 0.2

WIN, LOSS, DRAW, RELIABILITY, DEPTH, X, Y = range(7)
FEATURE_NAMES = ("win", "loss", "draw", "reliability", "depth", "x", "y")


@dataclass
class FeatureMatrix:
    """Raw and weighted feature vectors for a list of nodes (row i is nodes[i])."""

    nodes: list[PositionNode]
    raw: np.ndarray
    weighted: np.ndarray

    def __len__(self) -> int:
        return len(self.nodes)


def is_valid_node(node: PositionNode) -> bool:
    """A node can be clustered once it is laid out and has been played."""
    return node.is_positioned and node.game_count > 0


def filter_valid_nodes(nodes: Sequence[PositionNode]) -> list[PositionNode]:
    return [n for n in nodes if is_valid_node(n)]


def win_probability(node: PositionNode) -> float:
    if node.win_rate is None or not math.isfinite(node.win_rate):
        return 0.5
    return min(max(node.win_rate / 100.0, 0.0), 1.0)


def _min_max(values: np.ndarray) -> np.ndarray:
    lo = values.min()
    span = values.max() - lo
    if span <= 0:
        return np.zeros_like(values)
    return (values - lo) / span


def extract_features(
    nodes: Sequence[PositionNode],
    weights: FeatureWeights | None = None,
) -> FeatureMatrix:
    """
    Build feature vectors for the given nodes.

    Pure function; nodes are not modified. Nodes without coordinates are
    treated as sitting at the origin, callers normally pass the output of
    ``filter_valid_nodes``.

    Args:
        nodes: Positions to describe.
        weights: Feature weights (defaults to FeatureWeights()).

    Returns:
        FeatureMatrix with one row per node.
    """
    weights = weights or FeatureWeights()
    node_list = list(nodes)
    n = len(node_list)
    raw = np.zeros((n, 7), dtype=float)
    if n == 0:
        return FeatureMatrix(nodes=node_list, raw=raw, weighted=raw.copy())

    win = np.array([win_probability(node) for node in node_list])
    games = np.array([max(node.game_count, 0) for node in node_list], dtype=float)
    depth = np.array([max(node.depth, 0) for node in node_list], dtype=float)
    xs = np.array([node.x if node.is_positioned else 0.0 for node in node_list], dtype=float)
    ys = np.array([node.y if node.is_positioned else 0.0 for node in node_list], dtype=float)

    max_games = games.max()
    max_depth = depth.max()

    raw[:, WIN] = win
    raw[:, LOSS] = np.clip(1.0 - win - DRAW_PROBABILITY, 0.0, None)
    raw[:, DRAW] = DRAW_PROBABILITY
    raw[:, RELIABILITY] = np.log1p(games) / math.log1p(max_games) if max_games > 0 else 0.0
    raw[:, DEPTH] = depth / max_depth if max_depth > 0 else 0.0
    raw[:, X] = _min_max(xs)
    raw[:, Y] = _min_max(ys)

    column_weights = np.array([
        weights.win_rate,
        weights.win_rate,
        weights.win_rate,
        weights.game_count,
        weights.depth,
        POSITION_WEIGHT,
        POSITION_WEIGHT,
    ])
    return FeatureMatrix(nodes=node_list, raw=raw, weighted=raw * column_weights)


def pairwise_distances(vectors: np.ndarray) -> np.ndarray:
    """Dense Euclidean distance matrix."""
    if len(vectors) == 0:
        return np.zeros((0, 0))
    diff = vectors[:, None, :] - vectors[None, :, :]
    return np.sqrt((diff ** 2).sum(axis=-1))
