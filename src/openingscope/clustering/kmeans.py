"""Deterministic K-means over feature vectors."""

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class KMeansResult:
    """Outcome of one K-means run."""

    labels: np.ndarray  # Cluster index per row
    centroids: np.ndarray  # (k, d)
    iterations: int
    converged: bool
    seed: int = 0

    @property
    def k(self) -> int:
        return len(self.centroids)

    def members(self) -> list[list[int]]:
        """Row indices per cluster, empty clusters included."""
        return [np.flatnonzero(self.labels == c).tolist() for c in range(self.k)]


def initial_centroids(vectors: np.ndarray, k: int, seed: int = 0) -> np.ndarray:
    """
    Spread k centroids evenly between the per-dimension min and max.

    Centroid i takes, in dimension d, the fraction ((i + seed * d) mod k) / (k - 1)
    of the range. Dimensions that fall while the highest-variance dimension
    rises are walked from max to min, so seed 0 places the centroids along
    the main trend of the data (win and loss probability move in opposite
    directions). Other seeds rotate the order per dimension.
    """
    lo = vectors.min(axis=0)
    hi = vectors.max(axis=0)
    dims = vectors.shape[1]
    if k == 1:
        return ((lo + hi) / 2)[None, :]

    centered = vectors - vectors.mean(axis=0)
    dominant = int(np.argmax(centered.var(axis=0)))
    descending = (centered * centered[:, [dominant]]).sum(axis=0) < 0

    centroids = np.empty((k, dims))
    for i in range(k):
        for d in range(dims):
            fraction = ((i + seed * d) % k) / (k - 1)
            if descending[d]:
                fraction = 1.0 - fraction
            centroids[i, d] = lo[d] + (hi[d] - lo[d]) * fraction
    return centroids


def assign(vectors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid per row (ties go to the lowest index)."""
    diff = vectors[:, None, :] - centroids[None, :, :]
    return np.argmin((diff ** 2).sum(axis=-1), axis=1)


def kmeans(
    vectors: np.ndarray,
    k: int,
    max_iterations: int = 100,
    tolerance: float = 0.001,
    seed: int = 0,
) -> KMeansResult:
    """
    Lloyd's algorithm with deterministic initialisation.

    Identical input, k and seed always produce identical labels. An
    emptied cluster keeps its previous centroid.

    Args:
        vectors: (n, d) weighted feature matrix.
        k: Number of clusters.
        max_iterations: Iteration cap.
        tolerance: Stop once no centroid moves further than this.
        seed: Initialisation variant.

    Returns:
        KMeansResult.
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    n = len(vectors)
    if n == 0:
        return KMeansResult(
            labels=np.zeros(0, dtype=int),
            centroids=np.zeros((0, vectors.shape[1] if vectors.ndim == 2 else 0)),
            iterations=0,
            converged=True,
            seed=seed,
        )

    centroids = initial_centroids(vectors, k, seed)
    labels = assign(vectors, centroids)
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        updated = centroids.copy()
        for c in range(k):
            mask = labels == c
            if mask.any():
                updated[c] = vectors[mask].mean(axis=0)

        shift = np.sqrt(((updated - centroids) ** 2).sum(axis=1)).max()
        centroids = updated
        labels = assign(vectors, centroids)
        if shift < tolerance:
            converged = True
            break

    logger.debug(f"K-means k={k} seed={seed}: {iterations} iterations, converged={converged}")
    return KMeansResult(
        labels=labels,
        centroids=centroids,
        iterations=iterations,
        converged=converged,
        seed=seed,
    )
