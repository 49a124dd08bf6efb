"""DBSCAN density clustering over feature vectors."""

import logging
from collections import deque
from dataclasses import dataclass, field

import numpy as np

from openingscope.clustering.features import pairwise_distances

logger = logging.getLogger(__name__)

NOISE = -1
UNVISITED = -2


@dataclass
class DBSCANResult:
    """Cluster assignment for each input row."""

    labels: np.ndarray  # Cluster index per row, NOISE for noise
    clusters: list[list[int]] = field(default_factory=list)  # Row indices per cluster
    noise: list[int] = field(default_factory=list)

    @property
    def n_clusters(self) -> int:
        return len(self.clusters)


def dbscan(vectors: np.ndarray, eps: float, min_pts: int) -> DBSCANResult:
    """
    Group rows that are density-reachable from each other.

    The eps-neighbourhood of a point includes the point itself. A point
    with fewer than ``min_pts`` neighbours is noise and never joins a
    cluster, even when it lies inside a core point's neighbourhood.

    Args:
        vectors: (n, d) weighted feature matrix.
        eps: Neighbourhood radius (inclusive).
        min_pts: Minimum neighbourhood size of a core point.

    Returns:
        DBSCANResult with clusters in discovery order.
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")
    if min_pts < 1:
        raise ValueError(f"min_pts must be at least 1, got {min_pts}")

    n = len(vectors)
    labels = np.full(n, UNVISITED, dtype=int)
    if n == 0:
        return DBSCANResult(labels=labels)

    distances = pairwise_distances(vectors)
    neighbourhoods = [np.flatnonzero(distances[i] <= eps) for i in range(n)]

    cluster_id = 0
    for i in range(n):
        if labels[i] != UNVISITED:
            continue
        if len(neighbourhoods[i]) < min_pts:
            labels[i] = NOISE
            continue

        labels[i] = cluster_id
        queue = deque(j for j in neighbourhoods[i] if j != i)
        while queue:
            j = queue.popleft()
            if labels[j] != UNVISITED:
                continue
            if len(neighbourhoods[j]) < min_pts:
                labels[j] = NOISE
                continue
            labels[j] = cluster_id
            queue.extend(neighbourhoods[j])
        cluster_id += 1

    clusters = [np.flatnonzero(labels == c).tolist() for c in range(cluster_id)]
    noise = np.flatnonzero(labels == NOISE).tolist()
    logger.debug(f"DBSCAN eps={eps} min_pts={min_pts}: {cluster_id} clusters, {len(noise)} noise")
    return DBSCANResult(labels=labels, clusters=clusters, noise=noise)
