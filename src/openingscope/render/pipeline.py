"""Frame renderer: clusters, edges, nodes and their labels."""

import logging
import math
from dataclasses import dataclass

from openingscope.geometry import (
    ClusterOutline,
    RoundedRect,
    SegmentKind,
    convex_hull,
    smooth_closed_path,
)
from openingscope.models import Cluster, Edge, GraphMode, PositionNode
from openingscope.render.frame import RenderFrame
from openingscope.render.palette import (
    BACKGROUND_COLOR,
    HOVERED_NEXT_MOVE_GLOW,
    INITIAL_MOVE_GLOW,
    MAIN_LINE_EDGE_COLOR,
    PERFORMANCE_COLORS,
    SELECTED_GLOW,
    SIDE_LINE_EDGE_COLOR,
    ColorScheme,
    cluster_colors,
    hex_to_rgba,
    opening_node_colors,
    performance_bucket,
    performance_colors,
)
from openingscope.render.surface import Surface

logger = logging.getLogger(__name__)

FONT_FAMILY = '-apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif'
NODE_CORNER_RADIUS = 12.0
GLOW_LAYERS = 8
GLOW_BLUR = 20.0
INTENSE_GLOW_BLUR = 25.0
# Nodes further than twice this (scaled) outside the viewport are skipped
CULL_NODE_SIZE = 140.0

POSITION_HULL_PADDING = 80.0
OPENING_HULL_PADDING = 100.0
PERFORMANCE_HULL_PADDING = 50.0

POSITION_FILL_OPACITY = 0.4
OPENING_FILL_OPACITY = 0.45
OPENING_HOVER_FILL_OPACITY = 0.7
PERFORMANCE_FILL_OPACITY = 0.2
CLUSTER_STROKE_WIDTH = 3.0
CLUSTER_HOVER_STROKE_WIDTH = 4.0

EDGE_MIN_WIDTH = 4.0
EDGE_MAX_WIDTH = 12.0
EDGE_GAMES_DIVISOR = 25.0

ARROW_OFFSET_Y = -65.0
ARROW_SPACING = 22.0
ARROW_RADIUS = 8.0
ANNOTATION_OFFSET_Y = 65.0
ANNOTATION_SPACING = 32.0
ANNOTATION_ICON_SIZE = 20.0


@dataclass
class RenderStats:
    """What the last draw call actually painted."""

    drawn: bool = False
    clusters: int = 0
    edges: int = 0
    nodes: int = 0
    culled: int = 0


def edge_width(game_count: int) -> float:
    return max(EDGE_MIN_WIDTH, min(EDGE_MAX_WIDTH, EDGE_MIN_WIDTH + game_count / EDGE_GAMES_DIVISOR))


def is_visible(node: PositionNode, frame: RenderFrame) -> bool:
    """Whether the node centre is close enough to the viewport to draw."""
    t = frame.transform
    sx = node.x * t.scale + t.x
    sy = node.y * t.scale + t.y
    margin = CULL_NODE_SIZE * t.scale * 2
    return (
        -margin <= sx <= frame.size.width + margin
        and -margin <= sy <= frame.size.height + margin
    )


def _text_stroke(surface: Surface, text_color: str) -> None:
    dark_text = text_color in ("#000000", "#000")
    surface.stroke_style = "rgba(255, 255, 255, 0.8)" if dark_text else "rgba(0, 0, 0, 0.8)"
    surface.line_width = 2 if dark_text else 3


def _label(surface: Surface, text: str, x: float, y: float) -> None:
    surface.stroke_text(text, x, y)
    surface.fill_text(text, x, y)


class Renderer:
    """Paints a RenderFrame onto a Surface in a fixed back-to-front order."""

    def __init__(self, show_position_clusters: bool = True, show_opening_clusters: bool = True):
        self.show_position_clusters = show_position_clusters
        self.show_opening_clusters = show_opening_clusters
        self._backing_size: tuple[int, int] | None = None

    def draw(self, surface: Surface, frame: RenderFrame) -> RenderStats:
        """
        Draw one frame.

        Nothing is painted until the frame has a measured size and a
        transform, so the first visible frame is already fitted.

        Args:
            surface: Target surface.
            frame: Snapshot from ``ViewportController.frame()``.

        Returns:
            Counts of what was painted.
        """
        stats = RenderStats()
        if not frame.is_drawable:
            return stats

        width, height = frame.size.width, frame.size.height
        dpr = frame.device_pixel_ratio or 1.0
        backing = (round(width * dpr), round(height * dpr))
        if backing != self._backing_size or (surface.width, surface.height) != backing:
            surface.resize(*backing)
            surface.reset_transform()
            surface.scale(dpr, dpr)
            self._backing_size = backing

        surface.fill_style = BACKGROUND_COLOR
        surface.fill_rect(0, 0, width, height)

        t = frame.transform
        surface.save()
        surface.translate(t.x, t.y)
        surface.scale(t.scale, t.scale)

        positions = {n.id: n for n in frame.nodes}
        if self.show_position_clusters:
            for cluster in frame.position_clusters:
                if self._draw_hull(surface, cluster, positions, POSITION_HULL_PADDING,
                                   POSITION_FILL_OPACITY, CLUSTER_STROKE_WIDTH):
                    stats.clusters += 1
        if self.show_opening_clusters:
            for cluster in frame.opening_clusters:
                hovered = cluster.id == frame.hovered_cluster_id
                if self._draw_hull(
                    surface, cluster, positions, OPENING_HULL_PADDING,
                    OPENING_HOVER_FILL_OPACITY if hovered else OPENING_FILL_OPACITY,
                    CLUSTER_HOVER_STROKE_WIDTH if hovered else CLUSTER_STROKE_WIDTH,
                ):
                    stats.clusters += 1
        for cluster in frame.performance_clusters:
            hovered = cluster.id == frame.hovered_cluster_id
            if self._draw_hull(
                surface, cluster, positions, PERFORMANCE_HULL_PADDING,
                PERFORMANCE_FILL_OPACITY * 2 if hovered else PERFORMANCE_FILL_OPACITY,
                CLUSTER_HOVER_STROKE_WIDTH if hovered else CLUSTER_STROKE_WIDTH,
            ):
                stats.clusters += 1

        for edge in frame.edges:
            source, target = positions.get(edge.source), positions.get(edge.target)
            if source is None or target is None or not (source.is_positioned and target.is_positioned):
                continue
            self._draw_edge(surface, edge, source, target, frame.mode)
            stats.edges += 1

        for node in frame.nodes:
            if not node.is_positioned:
                continue
            if not is_visible(node, frame):
                stats.culled += 1
                continue
            self._draw_node(surface, node, frame)
            stats.nodes += 1

        surface.restore()
        stats.drawn = True
        logger.debug(
            f"Rendered {stats.nodes} nodes ({stats.culled} culled), "
            f"{stats.edges} edges, {stats.clusters} clusters"
        )
        return stats

    # Clusters

    def _draw_hull(
        self,
        surface: Surface,
        cluster: Cluster,
        positions: dict[str, PositionNode],
        padding: float,
        fill_opacity: float,
        line_width: float,
    ) -> bool:
        points = [
            (positions[n.id].x, positions[n.id].y)
            for n in cluster.nodes
            if n.id in positions and positions[n.id].is_positioned
        ]
        if not points:
            return False

        colors = cluster_colors(cluster)
        surface.fill_style = hex_to_rgba(colors.bg, fill_opacity)
        surface.stroke_style = colors.border
        surface.line_width = line_width
        surface.set_line_dash([])
        trace_outline(surface, smooth_closed_path(convex_hull(points), padding))
        surface.fill()
        surface.stroke()
        return True

    # Edges

    def _draw_edge(
        self,
        surface: Surface,
        edge: Edge,
        source: PositionNode,
        target: PositionNode,
        mode: GraphMode,
    ) -> None:
        if mode == GraphMode.OPENING:
            main_line = source.is_main_line and target.is_main_line
            surface.stroke_style = MAIN_LINE_EDGE_COLOR if main_line else SIDE_LINE_EDGE_COLOR
            surface.line_width = 3 if main_line else 2
            surface.global_alpha = 1.0 if main_line else 0.7
            surface.set_line_dash([] if main_line else [5, 5])
        else:
            if edge.is_missing:
                colors = PERFORMANCE_COLORS["missing"]
            else:
                colors = PERFORMANCE_COLORS[performance_bucket(edge.win_rate or 0, edge.game_count)]
            surface.stroke_style = colors.border
            surface.line_width = edge_width(edge.game_count)
            surface.global_alpha = 0.8

        surface.begin_path()
        surface.move_to(source.x, source.y + source.height / 2)
        surface.line_to(target.x, target.y - target.height / 2)
        surface.stroke()

        surface.set_line_dash([])
        surface.global_alpha = 1.0

    # Nodes

    def _draw_node(self, surface: Surface, node: PositionNode, frame: RenderFrame) -> None:
        opening = frame.mode == GraphMode.OPENING
        colors = opening_node_colors(node) if opening else performance_colors(node)
        is_current = node.id == frame.current_node_id
        is_next_move = node.id == frame.hovered_next_move_node_id
        is_hovered = node.id == frame.hovered_node_id

        x = node.x - node.width / 2
        y = node.y - node.height / 2

        surface.fill_style = colors.bg
        surface.stroke_style = colors.border
        surface.line_width = 8 if is_current or is_next_move else (6 if is_hovered else 4)

        if is_current:
            if opening:
                glow = INITIAL_MOVE_GLOW if node.is_initial_move else SELECTED_GLOW
                self._glow(surface, node, x, y, glow, GLOW_BLUR)
            else:
                self._glow(surface, node, x, y, SELECTED_GLOW, INTENSE_GLOW_BLUR)
        elif is_next_move:
            self._glow(surface, node, x, y, HOVERED_NEXT_MOVE_GLOW, GLOW_BLUR)
        else:
            surface.begin_path()
            surface.round_rect(x, y, node.width, node.height, NODE_CORNER_RADIUS)
            surface.fill()
            if opening and node.is_initial_move:
                surface.stroke_style = "#f97316"
                surface.line_width = 6
                surface.stroke()
                surface.stroke_style = colors.border
                surface.line_width = 4
            else:
                surface.stroke()

        if opening:
            self._opening_text(surface, node, colors)
        else:
            self._performance_text(surface, node, colors)

    def _glow(self, surface: Surface, node: PositionNode, x: float, y: float, color: str, blur: float) -> None:
        surface.shadow_color = color
        surface.shadow_blur = blur
        for _ in range(GLOW_LAYERS):
            surface.begin_path()
            surface.round_rect(x, y, node.width, node.height, NODE_CORNER_RADIUS)
            surface.fill()
        surface.stroke()
        surface.shadow_blur = 0

    def _opening_text(self, surface: Surface, node: PositionNode, colors: ColorScheme) -> None:
        surface.text_align = "center"
        surface.text_baseline = "middle"
        _text_stroke(surface, colors.text)
        surface.fill_style = colors.text

        if node.is_root:
            surface.font = f"bold 36px {FONT_FAMILY}"
            _label(surface, "START", node.x, node.y)
            return

        surface.font = f"bold 40px {FONT_FAMILY}"
        _label(surface, node.label or node.san or "?", node.x, node.y)
        self._arrow_dots(surface, node)
        self._annotation_glyphs(surface, node, colors)

    def _performance_text(self, surface: Surface, node: PositionNode, colors: ColorScheme) -> None:
        surface.text_align = "center"
        surface.text_baseline = "middle"
        surface.shadow_blur = 0
        _text_stroke(surface, colors.text)
        surface.fill_style = colors.text

        cx, cy = node.x, node.y
        if node.is_root:
            surface.font = f"bold 40px {FONT_FAMILY}"
            _label(surface, "START", cx, cy - 30)
            surface.font = f"600 28px {FONT_FAMILY}"
            _label(surface, f"{node.game_count or 0} games", cx, cy + 25)
            return

        surface.font = f"bold 36px {FONT_FAMILY}"
        _label(surface, node.san or "?", cx, cy - 35)
        if node.is_missing:
            surface.font = f"600 20px {FONT_FAMILY}"
            _label(surface, "No Data", cx, cy + 10)
            return

        surface.font = f"600 26px {FONT_FAMILY}"
        _label(surface, f"{round(node.win_rate or 0)}%", cx, cy)
        surface.font = f"500 22px {FONT_FAMILY}"
        _label(surface, f"{node.game_count or 0}g", cx, cy + 35)

    def _arrow_dots(self, surface: Surface, node: PositionNode) -> None:
        colors = list(dict.fromkeys(node.arrows))
        if not colors:
            return
        cx = node.x - (len(colors) - 1) * ARROW_SPACING / 2
        cy = node.y + ARROW_OFFSET_Y
        for color in colors:
            surface.save()
            surface.fill_style = color
            surface.stroke_style = "#ffffff"
            surface.line_width = 2
            surface.begin_path()
            surface.arc(cx, cy, ARROW_RADIUS, 0, 2 * math.pi)
            surface.fill()
            surface.stroke()
            surface.restore()
            cx += ARROW_SPACING

    def _annotation_glyphs(self, surface: Surface, node: PositionNode, colors: ColorScheme) -> None:
        has_links = node.has_links and node.link_count > 0
        if not node.has_comment and not has_links:
            return

        surface.save()
        icon_color = "#000000" if colors.bg == "#ffffff" else "#ffffff"
        surface.shadow_blur = 0
        surface.global_alpha = 1.0
        surface.stroke_style = icon_color
        surface.line_width = 2

        ix = node.x - (ANNOTATION_SPACING / 2 if node.has_comment and has_links else 0)
        iy = node.y + ANNOTATION_OFFSET_Y
        half = ANNOTATION_ICON_SIZE / 2
        if node.has_comment:
            # Speech bubble
            surface.begin_path()
            surface.round_rect(ix - half, iy - half, ANNOTATION_ICON_SIZE, ANNOTATION_ICON_SIZE * 0.75, 3)
            surface.move_to(ix - half + 3, iy + half * 0.5)
            surface.line_to(ix - half + 3, iy + half)
            surface.line_to(ix - half + 8, iy + half * 0.5)
            surface.stroke()
            ix += ANNOTATION_SPACING
        if has_links:
            # Two interlocking rings
            surface.begin_path()
            surface.arc(ix - half * 0.35, iy, half * 0.55, 0, 2 * math.pi)
            surface.stroke()
            surface.begin_path()
            surface.arc(ix + half * 0.35, iy, half * 0.55, 0, 2 * math.pi)
            surface.stroke()
        surface.restore()


def trace_outline(surface: Surface, outline: ClusterOutline) -> None:
    """Replay a cluster outline as path calls on the surface."""
    surface.begin_path()
    if isinstance(outline, RoundedRect):
        surface.round_rect(outline.x, outline.y, outline.width, outline.height, outline.radius)
        return
    for segment in outline:
        if segment.kind == SegmentKind.MOVE:
            surface.move_to(*segment.points[0])
        elif segment.kind == SegmentKind.QUAD:
            (cx, cy), (x, y) = segment.points
            surface.quadratic_curve_to(cx, cy, x, y)
        else:
            surface.close_path()
