"""Cluster statistics, labels and human-readable insights."""

import math
from collections import Counter
from collections.abc import Sequence

import numpy as np

from openingscope.clustering.features import pairwise_distances, win_probability
from openingscope.models import Cluster, ClusterStats, PositionNode

# Checked in order; the first keyword found in the opening name wins
OPENING_FAMILIES: tuple[tuple[str, str], ...] = (
    ("sicilian", "Sicilian Defense"),
    ("french", "French Defense"),
    ("caro-kann", "Caro-Kann Defense"),
    ("scandinavian", "Scandinavian Defense"),
    ("pirc", "Pirc Defense"),
    ("alekhine", "Alekhine Defense"),
    ("ruy lopez", "Ruy Lopez"),
    ("spanish", "Ruy Lopez"),
    ("italian", "Italian Game"),
    ("giuoco", "Italian Game"),
    ("two knights", "Italian Game"),
    ("scotch", "Scotch Game"),
    ("vienna", "Vienna Game"),
    ("king's gambit", "King's Gambit"),
    ("petrov", "Petrov Defense"),
    ("russian", "Petrov Defense"),
    ("queen's gambit", "Queen's Gambit"),
    ("slav", "Slav Defense"),
    ("nimzo", "Nimzo-Indian Defense"),
    ("king's indian", "King's Indian Defense"),
    ("grunfeld", "Grünfeld Defense"),
    ("grünfeld", "Grünfeld Defense"),
    ("queen's indian", "Queen's Indian Defense"),
    ("dutch", "Dutch Defense"),
    ("benoni", "Benoni Defense"),
    ("london", "London System"),
    ("english", "English Opening"),
    ("reti", "Réti Opening"),
    ("réti", "Réti Opening"),
    ("catalan", "Catalan Opening"),
)
UNKNOWN_FAMILY = "Unknown"

# Minimum mean pairwise distance used for density (identical members)
MIN_MEAN_DISTANCE = 1e-3

KMEANS_THREE_LABELS = ("Win-Focused", "Draw-Heavy", "Loss-Prone")  # By descending win rate
KMEANS_TWO_LABELS = ("Strong", "Weak")
KMEANS_BUCKET_LABELS = (
    (70.0, "Excellence"),
    (60.0, "Strong"),
    (45.0, "Average"),
    (-math.inf, "Weak"),
)


def opening_family(name: str | None) -> str:
    """Map an opening name to its family by keyword."""
    if not name:
        return UNKNOWN_FAMILY
    lowered = name.lower()
    for keyword, family in OPENING_FAMILIES:
        if keyword in lowered:
            return family
    return UNKNOWN_FAMILY


def dominant_family(nodes: Sequence[PositionNode]) -> str:
    """Most common known family among the nodes (first seen wins ties)."""
    counts = Counter(
        family for family in (opening_family(n.opening_name) for n in nodes) if family != UNKNOWN_FAMILY
    )
    if not counts:
        return UNKNOWN_FAMILY
    return counts.most_common(1)[0][0]


def cluster_stats(
    nodes: Sequence[PositionNode],
    vectors: np.ndarray | None = None,
) -> ClusterStats:
    """
    Summarise a cluster.

    Args:
        nodes: Members.
        vectors: Their weighted feature rows; when given, density is
            1000 / mean pairwise distance.
    """
    if not nodes:
        return ClusterStats()
    win_rates = np.array([win_probability(n) * 100.0 for n in nodes])
    density = 0.0
    if vectors is not None and len(vectors) > 1:
        distances = pairwise_distances(vectors)
        n = len(vectors)
        mean_distance = distances.sum() / (n * (n - 1))
        density = 1000.0 / max(mean_distance, MIN_MEAN_DISTANCE)
    return ClusterStats(
        count=len(nodes),
        avg_win_rate=float(win_rates.mean()),
        total_games=sum(n.game_count for n in nodes),
        avg_depth=float(np.mean([n.depth for n in nodes])),
        win_rate_std=float(win_rates.std()),
        density=density,
        top_opening_family=dominant_family(nodes),
    )


def kmeans_labels(avg_win_rates: Sequence[float]) -> list[str]:
    """
    Interpretable names for K-means clusters, in input order.

    k == 3 and k == 2 use fixed names by win-rate rank; larger k uses
    win-rate buckets with an ordinal suffix for repeats.
    """
    k = len(avg_win_rates)
    order = sorted(range(k), key=lambda i: -avg_win_rates[i])
    labels = [""] * k

    if k == 3:
        for rank, i in enumerate(order):
            labels[i] = KMEANS_THREE_LABELS[rank]
        return labels
    if k == 2:
        for rank, i in enumerate(order):
            labels[i] = KMEANS_TWO_LABELS[rank]
        return labels

    seen: Counter[str] = Counter()
    for i in order:
        base = next(name for threshold, name in KMEANS_BUCKET_LABELS if avg_win_rates[i] >= threshold)
        seen[base] += 1
        labels[i] = base if seen[base] == 1 else f"{base} {seen[base]}"
    return labels


def describe(cluster: Cluster) -> str:
    s = cluster.stats
    return f"{cluster.name}: {s.count} positions, {s.avg_win_rate:.0f}% win rate over {s.total_games} games"


def build_insights(
    clusters: Sequence[Cluster],
    noise_count: int,
    valid_count: int,
) -> list[str]:
    """Short findings shown next to the cluster overlay."""
    if not clusters:
        return [f"No performance patterns found among {valid_count} positions"]

    insights = [f"Found {len(clusters)} performance patterns across {valid_count} positions"]
    strongest = max(clusters, key=lambda c: c.stats.avg_win_rate)
    weakest = min(clusters, key=lambda c: c.stats.avg_win_rate)
    insights.append(
        f"Strongest pattern: {strongest.name} "
        f"({strongest.stats.avg_win_rate:.0f}% over {strongest.stats.total_games} games)"
    )
    if weakest is not strongest:
        insights.append(
            f"Weakest pattern: {weakest.name} "
            f"({weakest.stats.avg_win_rate:.0f}% over {weakest.stats.total_games} games)"
        )
    busiest = max(clusters, key=lambda c: c.stats.total_games)
    if busiest.stats.top_opening_family != UNKNOWN_FAMILY:
        insights.append(f"Most played pattern is dominated by the {busiest.stats.top_opening_family}")
    if noise_count:
        insights.append(f"{noise_count} positions did not fit any pattern")
    return insights
