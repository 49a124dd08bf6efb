"""Automatic selection of K for performance clustering.

Every candidate K is run with three initialisation seeds and scored:

    score = 0.4 * silhouette + 0.4 * feature_importance - 0.2 * weighted_entropy

The entropy term penalises splits whose members scatter across the
win-rate, game-count and depth buckets.
"""

import bisect
import logging
import math
from dataclasses import dataclass, field

import numpy as np

from openingscope.clustering.config import FeatureWeights
from openingscope.clustering.features import DEPTH, RELIABILITY, WIN, FeatureMatrix, pairwise_distances
from openingscope.clustering.kmeans import KMeansResult, kmeans

logger = logging.getLogger(__name__)

SEEDS = (0, 1, 2)
SILHOUETTE_WEIGHT = 0.4
FEATURE_IMPORTANCE_WEIGHT = 0.4
ENTROPY_WEIGHT = 0.2

# Variance of a uniform distribution on [0, 1]
REFERENCE_VARIANCE = 1.0 / 12.0

WIN_RATE_BUCKETS = 5
GAME_COUNT_EDGES = (5, 10, 50, 100)  # Buckets: <5, 5-9, 10-49, 50-99, 100+
DEPTH_BUCKET_PLIES = 2
DEPTH_BUCKETS = 6


@dataclass
class KAttempt:
    """Score breakdown of one (k, seed) run."""

    k: int
    seed: int
    silhouette: float
    feature_importance: float
    weighted_entropy: float
    score: float


@dataclass
class KOptimizationResult:
    """Best K found and the run that produced it."""

    best_k: int
    best_score: float
    result: KMeansResult
    scores: dict[int, float] = field(default_factory=dict)  # Best score per k
    attempts: list[KAttempt] = field(default_factory=list)


def _entropy(counts: np.ndarray, n_buckets: int) -> float:
    """Shannon entropy of a histogram, normalised to [0, 1]."""
    total = counts.sum()
    if total <= 0 or n_buckets <= 1:
        return 0.0
    p = counts[counts > 0] / total
    return float(-(p * np.log(p)).sum() / math.log(n_buckets))


def _buckets(features: FeatureMatrix) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    win = np.minimum((features.raw[:, WIN] * WIN_RATE_BUCKETS).astype(int), WIN_RATE_BUCKETS - 1)
    games = np.array([bisect.bisect_right(GAME_COUNT_EDGES, n.game_count) for n in features.nodes])
    depth = np.array([min(max(n.depth, 0) // DEPTH_BUCKET_PLIES, DEPTH_BUCKETS - 1) for n in features.nodes])
    return win, games, depth


def weighted_entropy(features: FeatureMatrix, labels: np.ndarray, weights: FeatureWeights) -> float:
    """
    Blend of cluster-size entropy and per-feature bucket entropy.

    Returns a value in [0, 1]: half from the size distribution, half from
    the size-weighted entropy of win rate, game count and depth buckets
    inside each cluster, each scaled by its normalised feature weight.
    """
    n = len(labels)
    if n == 0:
        return 0.0
    cluster_ids = np.unique(labels)
    sizes = np.array([(labels == c).sum() for c in cluster_ids])
    size_entropy = _entropy(sizes, len(cluster_ids))

    bucketed = _buckets(features)
    bucket_counts = (WIN_RATE_BUCKETS, len(GAME_COUNT_EDGES) + 1, DEPTH_BUCKETS)
    feature_entropy = 0.0
    for weight, values, n_buckets in zip(weights.normalized(), bucketed, bucket_counts):
        per_cluster = 0.0
        for c, size in zip(cluster_ids, sizes):
            histogram = np.bincount(values[labels == c], minlength=n_buckets)
            per_cluster += size / n * _entropy(histogram, n_buckets)
        feature_entropy += weight * per_cluster

    return 0.5 * size_entropy + 0.5 * feature_entropy


def importance_weights(features: FeatureMatrix) -> np.ndarray:
    """Per-node weight: decisive win rates, many games and depth count more."""
    raw = features.raw
    return 1.0 + 2.0 * np.abs(raw[:, WIN] - 0.5) + raw[:, RELIABILITY] + 0.5 * raw[:, DEPTH]


def weighted_silhouette(features: FeatureMatrix, labels: np.ndarray) -> float:
    """Importance-weighted mean silhouette over the weighted feature distances.

    Returns 0 when there are fewer than two clusters.
    """
    cluster_ids = np.unique(labels)
    if len(cluster_ids) < 2:
        return 0.0

    distances = pairwise_distances(features.weighted)
    silhouettes = np.zeros(len(labels))
    for i in range(len(labels)):
        own = labels == labels[i]
        own_count = own.sum() - 1
        if own_count == 0:
            continue  # Singleton cluster scores 0
        a = distances[i, own].sum() / own_count
        b = min(distances[i, labels == c].mean() for c in cluster_ids if c != labels[i])
        denominator = max(a, b)
        silhouettes[i] = (b - a) / denominator if denominator > 0 else 0.0

    weights = importance_weights(features)
    return float((silhouettes * weights).sum() / weights.sum())


def feature_importance_score(
    features: FeatureMatrix,
    labels: np.ndarray,
    weights: FeatureWeights,
) -> float:
    """How tight clusters are in win rate, reliability and depth (0 to 1)."""
    n = len(labels)
    if n == 0:
        return 0.0
    score = 0.0
    for weight, column in zip(weights.normalized(), (WIN, RELIABILITY, DEPTH)):
        within = 0.0
        for c in np.unique(labels):
            values = features.raw[labels == c, column]
            within += len(values) / n * float(values.var())
        score += weight * max(0.0, 1.0 - within / REFERENCE_VARIANCE)
    return score


def score_clustering(
    features: FeatureMatrix,
    labels: np.ndarray,
    weights: FeatureWeights,
) -> tuple[float, float, float, float]:
    """Return (score, silhouette, feature_importance, weighted_entropy)."""
    silhouette = weighted_silhouette(features, labels)
    importance = feature_importance_score(features, labels, weights)
    entropy = weighted_entropy(features, labels, weights)
    score = (
        SILHOUETTE_WEIGHT * silhouette
        + FEATURE_IMPORTANCE_WEIGHT * importance
        - ENTROPY_WEIGHT * entropy
    )
    return score, silhouette, importance, entropy


def optimize_k(
    features: FeatureMatrix,
    weights: FeatureWeights | None = None,
    max_k: int = 8,
    max_iterations: int = 100,
    tolerance: float = 0.001,
) -> KOptimizationResult | None:
    """
    Pick K in [2, min(max_k, n // 2)] by the combined score.

    Ties keep the first attempt seen (lower seed, then lower K).

    Returns:
        KOptimizationResult, or None when fewer than four nodes leave no
        candidate K.
    """
    weights = weights or FeatureWeights()
    upper = min(max_k, len(features) // 2)
    if upper < 2:
        return None

    best: KOptimizationResult | None = None
    scores: dict[int, float] = {}
    attempts: list[KAttempt] = []

    for k in range(2, upper + 1):
        for seed in SEEDS:
            run = kmeans(features.weighted, k, max_iterations=max_iterations, tolerance=tolerance, seed=seed)
            score, silhouette, importance, entropy = score_clustering(features, run.labels, weights)
            attempts.append(KAttempt(k, seed, silhouette, importance, entropy, score))
            if k not in scores or score > scores[k]:
                scores[k] = score
            if best is None or score > best.best_score:
                best = KOptimizationResult(best_k=k, best_score=score, result=run)

    best.scores = scores
    best.attempts = attempts
    logger.info(f"Selected k={best.best_k} (score {best.best_score:.3f}) from {len(attempts)} runs")
    return best
