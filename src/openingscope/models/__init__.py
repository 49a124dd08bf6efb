"""openingscope data models."""

from openingscope.models.cluster import (
    AnalysisMetadata,
    Cluster,
    ClusterAnalysis,
    ClusterStats,
    ClusterType,
)
from openingscope.models.position import Edge, GraphData, GraphMode, PositionNode
from openingscope.models.transform import Bounds, Point, Transform, ViewportSize

__all__ = [
    "PositionNode",
    "Edge",
    "GraphData",
    "GraphMode",
    "Cluster",
    "ClusterType",
    "ClusterStats",
    "ClusterAnalysis",
    "AnalysisMetadata",
    "Transform",
    "ViewportSize",
    "Bounds",
    "Point",
]
