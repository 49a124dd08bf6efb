"""Configuration for performance clustering."""

from dataclasses import dataclass, field
from enum import Enum

from openingscope.config import Settings, settings


class ClusteringMethod(str, Enum):
    DBSCAN = "dbscan"
    KMEANS = "kmeans"


@dataclass
class FeatureWeights:
    """Relative weight of each feature group in the distance metric."""

    win_rate: float = 1.0  # Applied to win/loss/draw probabilities
    game_count: float = 0.5  # Applied to the log-scaled reliability
    depth: float = 0.5

    def __post_init__(self) -> None:
        for name in ("win_rate", "game_count", "depth"):
            if getattr(self, name) < 0:
                raise ValueError(f"feature weight {name} must be non-negative")

    def normalized(self) -> tuple[float, float, float]:
        """Weights scaled to sum to one (equal thirds when all are zero)."""
        total = self.win_rate + self.game_count + self.depth
        if total <= 0:
            return (1 / 3, 1 / 3, 1 / 3)
        return (self.win_rate / total, self.game_count / total, self.depth / total)

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "FeatureWeights":
        s = s or settings
        return cls(
            win_rate=s.weight_win_rate,
            game_count=s.weight_game_count,
            depth=s.weight_depth,
        )


@dataclass
class ClusteringConfig:
    """Parameters of a clustering run."""

    method: ClusteringMethod = ClusteringMethod.DBSCAN

    # DBSCAN
    eps: float = 0.35
    min_pts: int = 3

    # K-means; k=None picks K automatically
    k: int | None = None
    max_k: int = 8
    max_iterations: int = 100
    tolerance: float = 0.001

    weights: FeatureWeights = field(default_factory=FeatureWeights)

    def __post_init__(self) -> None:
        self.method = ClusteringMethod(self.method)
        if self.eps <= 0:
            raise ValueError(f"eps must be positive, got {self.eps}")
        if self.min_pts < 1:
            raise ValueError(f"min_pts must be at least 1, got {self.min_pts}")
        if self.k is not None and self.k < 1:
            raise ValueError(f"k must be at least 1, got {self.k}")
        if self.max_k < 2:
            raise ValueError(f"max_k must be at least 2, got {self.max_k}")

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "ClusteringConfig":
        s = s or settings
        return cls(
            method=ClusteringMethod(s.clustering_method),
            eps=s.clustering_eps,
            min_pts=s.clustering_min_pts,
            k=s.clustering_k,
            max_k=s.clustering_max_k,
            max_iterations=s.kmeans_max_iterations,
            tolerance=s.kmeans_tolerance,
            weights=FeatureWeights.from_settings(s),
        )
