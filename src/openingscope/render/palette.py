"""Colours used by the canvas."""

from dataclasses import dataclass

from openingscope.models import Cluster, ClusterType, PositionNode

BACKGROUND_COLOR = "#0f172a"


@dataclass(frozen=True)
class ColorScheme:
    bg: str
    border: str
    text: str


PERFORMANCE_COLORS = {
    "excellent": ColorScheme("#10b981", "#059669", "#ffffff"),
    "good": ColorScheme("#06b6d4", "#0891b2", "#ffffff"),
    "solid": ColorScheme("#f59e0b", "#d97706", "#000000"),
    "challenging": ColorScheme("#f97316", "#ea580c", "#ffffff"),
    "difficult": ColorScheme("#dc2626", "#b91c1c", "#ffffff"),
    "missing": ColorScheme("#6b7280", "#4b5563", "#ffffff"),  # Never played
}

OPENING_NODE_COLORS = {
    "white_move": ColorScheme("#ffffff", "#d1d5db", "#000000"),
    "black_move": ColorScheme("#1f2937", "#374151", "#ffffff"),
    "selected": ColorScheme("#3b82f6", "#2563eb", "#ffffff"),
    "with_comment": ColorScheme("#06b6d4", "#0891b2", "#ffffff"),
    "with_links": ColorScheme("#10b981", "#059669", "#ffffff"),
    "missing": ColorScheme("#6b7280", "#4b5563", "#ffffff"),
    "start_node": ColorScheme("#6b7280", "#4b5563", "#ffffff"),
}

OPENING_CLUSTER_COLORS = (
    ColorScheme("#8b5cf6", "#7c3aed", "#ffffff"),  # Violet
    ColorScheme("#6366f1", "#4f46e5", "#ffffff"),  # Indigo
    ColorScheme("#ec4899", "#db2777", "#ffffff"),  # Pink
    ColorScheme("#14b8a6", "#0d9488", "#ffffff"),  # Teal
    ColorScheme("#0ea5e9", "#0284c7", "#ffffff"),  # Sky
    ColorScheme("#84cc16", "#65a30d", "#000000"),  # Lime
)

POSITION_CLUSTER_COLORS = (
    ColorScheme("#f97316", "#ea580c", "#ffffff"),  # Orange
    ColorScheme("#f59e0b", "#d97706", "#000000"),  # Amber
    ColorScheme("#eab308", "#ca8a04", "#000000"),  # Yellow
)

KMEANS_LABEL_COLORS = {
    "Win-Focused": "#10b981",
    "Strong": "#10b981",
    "Excellence": "#10b981",
    "Draw-Heavy": "#8b5cf6",
    "Average": "#f59e0b",
    "Loss-Prone": "#dc2626",
    "Weak": "#dc2626",
}

SELECTED_GLOW = "rgba(236, 72, 153, 1.0)"  # Pink
INITIAL_MOVE_GLOW = "rgba(249, 115, 22, 1.0)"  # Orange
HOVERED_NEXT_MOVE_GLOW = "rgba(59, 130, 246, 1.0)"  # Blue

MAIN_LINE_EDGE_COLOR = "#8b5cf6"
SIDE_LINE_EDGE_COLOR = "#64748b"


def performance_bucket(win_rate: float | None, game_count: int) -> str:
    """Name of the performance colour for a win rate."""
    if win_rate is None:
        return "missing"
    if game_count == 0:
        return "solid"
    if win_rate >= 70:
        return "excellent"
    if win_rate >= 60:
        return "good"
    if win_rate >= 50:
        return "solid"
    if win_rate >= 40:
        return "challenging"
    return "difficult"


def performance_colors(node: PositionNode) -> ColorScheme:
    if node.is_missing:
        return PERFORMANCE_COLORS["missing"]
    return PERFORMANCE_COLORS[performance_bucket(node.win_rate, node.game_count)]


def opening_node_colors(node: PositionNode) -> ColorScheme:
    """Opening-tree colours: the side that just moved decides the fill."""
    if node.is_missing:
        return OPENING_NODE_COLORS["missing"]
    if node.is_root:
        return OPENING_NODE_COLORS["start_node"]
    if len(node.move_sequence) % 2 == 1:
        return OPENING_NODE_COLORS["white_move"]
    return OPENING_NODE_COLORS["black_move"]


def win_rate_color(avg_win_rate: float) -> str:
    """Overlay colour for a density cluster."""
    if avg_win_rate >= 70:
        return "#10b981"
    if avg_win_rate >= 60:
        return "#06b6d4"
    if avg_win_rate >= 50:
        return "#f59e0b"
    if avg_win_rate >= 40:
        return "#f97316"
    return "#dc2626"


def kmeans_label_color(label: str | None, avg_win_rate: float) -> str:
    """Overlay colour for a K-means cluster; numbered labels share their base colour."""
    if label:
        base = label.rsplit(" ", 1)[0] if label.rsplit(" ", 1)[-1].isdigit() else label
        if base in KMEANS_LABEL_COLORS:
            return KMEANS_LABEL_COLORS[base]
    return win_rate_color(avg_win_rate)


def cluster_colors(cluster: Cluster) -> ColorScheme:
    """Fill/border colours of any cluster."""
    if cluster.type == ClusterType.OPENING:
        return OPENING_CLUSTER_COLORS[cluster.color_index % len(OPENING_CLUSTER_COLORS)]
    if cluster.type == ClusterType.POSITION:
        return POSITION_CLUSTER_COLORS[cluster.color_index % len(POSITION_CLUSTER_COLORS)]
    if cluster.type == ClusterType.KMEANS:
        color = kmeans_label_color(cluster.label, cluster.stats.avg_win_rate)
    else:
        color = win_rate_color(cluster.stats.avg_win_rate)
    return ColorScheme(color, color, "#ffffff")


def hex_to_rgba(color: str, alpha: float) -> str:
    """'#rrggbb' -> 'rgba(r, g, b, alpha)'."""
    value = color.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"
