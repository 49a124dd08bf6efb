"""Performance clustering entry point."""

import logging
from collections.abc import Sequence

from openingscope.clustering.config import ClusteringConfig, ClusteringMethod
from openingscope.clustering.dbscan import dbscan
from openingscope.clustering.features import FeatureMatrix, extract_features, filter_valid_nodes
from openingscope.clustering.kmeans import KMeansResult, kmeans
from openingscope.clustering.optimizer import optimize_k
from openingscope.clustering.summary import (
    UNKNOWN_FAMILY,
    build_insights,
    cluster_stats,
    kmeans_labels,
)
from openingscope.models import (
    AnalysisMetadata,
    Cluster,
    ClusterAnalysis,
    ClusterType,
    PositionNode,
)

logger = logging.getLogger(__name__)

MIN_NODES = 3
MIN_NODES_AUTO_K = 4


def required_nodes(config: ClusteringConfig) -> int:
    """Smallest number of valid nodes the configured method can work with."""
    if config.method == ClusteringMethod.DBSCAN:
        return max(config.min_pts, MIN_NODES)
    if config.k is None:
        return MIN_NODES_AUTO_K
    return max(config.k, MIN_NODES)


def _dbscan_clusters(features: FeatureMatrix, config: ClusteringConfig) -> tuple[list[Cluster], list[PositionNode]]:
    result = dbscan(features.weighted, config.eps, config.min_pts)
    clusters = []
    for i, rows in enumerate(result.clusters):
        members = [features.nodes[r] for r in rows]
        stats = cluster_stats(members, features.weighted[rows])
        name = f"Cluster {i + 1}"
        if stats.top_opening_family != UNKNOWN_FAMILY:
            name = f"{stats.top_opening_family} Cluster {i + 1}"
        clusters.append(Cluster(
            id=f"dbscan-{i}",
            type=ClusterType.DBSCAN,
            name=name,
            nodes=members,
            centroid=tuple(float(v) for v in features.weighted[rows].mean(axis=0)),
            stats=stats,
            color_index=i,
        ))
    noise = [features.nodes[r] for r in result.noise]
    return clusters, noise


def _kmeans_clusters(features: FeatureMatrix, run: KMeansResult) -> list[Cluster]:
    groups = [rows for rows in run.members() if rows]
    stats = [cluster_stats([features.nodes[r] for r in rows]) for rows in groups]
    labels = kmeans_labels([s.avg_win_rate for s in stats])

    clusters = []
    for i, (rows, s, label) in enumerate(zip(groups, stats, labels)):
        clusters.append(Cluster(
            id=f"kmeans-{i}",
            type=ClusterType.KMEANS,
            name=label,
            nodes=[features.nodes[r] for r in rows],
            centroid=tuple(float(v) for v in features.weighted[rows].mean(axis=0)),
            stats=s,
            color_index=i,
            label=label,
        ))
    return clusters


def analyze_clusters(
    nodes: Sequence[PositionNode],
    config: ClusteringConfig | None = None,
) -> ClusterAnalysis:
    """
    Group positions by performance.

    Only positioned nodes with at least one game take part. Too few of
    them yields an empty analysis with an explanation instead of an error.

    Args:
        nodes: Candidate positions (not modified).
        config: Method and parameters; defaults come from settings.

    Returns:
        ClusterAnalysis with clusters, insights and noise.
    """
    config = config or ClusteringConfig.from_settings()
    valid = filter_valid_nodes(nodes)
    metadata = AnalysisMetadata(
        method=config.method.value,
        total_nodes=len(nodes),
        valid_nodes=len(valid),
        k=config.k,
    )

    needed = required_nodes(config)
    if len(valid) < needed:
        logger.info(f"Skipping {config.method.value} clustering: {len(valid)} valid nodes, need {needed}")
        return ClusterAnalysis(
            insights=[
                f"Need at least {needed} played positions for {config.method.value} clustering "
                f"(found {len(valid)})"
            ],
            metadata=metadata,
        )

    features = extract_features(valid, config.weights)
    noise: list[PositionNode] = []

    if config.method == ClusteringMethod.DBSCAN:
        clusters, noise = _dbscan_clusters(features, config)
    elif config.k is not None:
        run = kmeans(features.weighted, config.k, config.max_iterations, config.tolerance)
        clusters = _kmeans_clusters(features, run)
    else:
        optimized = optimize_k(
            features,
            config.weights,
            max_k=config.max_k,
            max_iterations=config.max_iterations,
            tolerance=config.tolerance,
        )
        # required_nodes guarantees a candidate K exists
        metadata.k = optimized.best_k
        metadata.score = optimized.best_score
        clusters = _kmeans_clusters(features, optimized.result)

    metadata.noise_count = len(noise)
    insights = build_insights(clusters, len(noise), len(valid))
    logger.info(
        f"{config.method.value} clustering: {len(clusters)} clusters, "
        f"{len(noise)} noise from {len(valid)}/{len(nodes)} nodes"
    )
    return ClusterAnalysis(clusters=clusters, insights=insights, noise=noise, metadata=metadata)

