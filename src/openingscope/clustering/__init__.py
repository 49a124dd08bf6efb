"""Clustering engine: DBSCAN, K-means and structural grouping of positions."""

from openingscope.clustering.analysis import analyze_clusters, required_nodes
from openingscope.clustering.config import ClusteringConfig, ClusteringMethod, FeatureWeights
from openingscope.clustering.dbscan import DBSCANResult, dbscan
from openingscope.clustering.features import (
    FeatureMatrix,
    extract_features,
    filter_valid_nodes,
    is_valid_node,
)
from openingscope.clustering.grouping import create_opening_clusters, create_position_clusters
from openingscope.clustering.kmeans import KMeansResult, kmeans
from openingscope.clustering.optimizer import (
    KOptimizationResult,
    feature_importance_score,
    optimize_k,
    weighted_entropy,
    weighted_silhouette,
)
from openingscope.clustering.summary import cluster_stats, kmeans_labels, opening_family

__all__ = [
    "analyze_clusters",
    "required_nodes",
    "ClusteringConfig",
    "ClusteringMethod",
    "FeatureWeights",
    "dbscan",
    "DBSCANResult",
    "kmeans",
    "KMeansResult",
    "optimize_k",
    "KOptimizationResult",
    "weighted_entropy",
    "weighted_silhouette",
    "feature_importance_score",
    "extract_features",
    "FeatureMatrix",
    "filter_valid_nodes",
    "is_valid_node",
    "create_opening_clusters",
    "create_position_clusters",
    "cluster_stats",
    "kmeans_labels",
    "opening_family",
]
