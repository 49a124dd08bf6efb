"""Viewport controller: transform ownership, auto-fit scheduling and input handling.

Lifecycle:
    uninitialized --(valid size + data)--> positioning --(fit)--> ready

Once ready, resizes, graph changes and position changes schedule
automatic fits. Pan, wheel, click and keyboard input are ignored while
the controller is initialising, has no transform, or an automatic fit
holds the interaction lock; hover is always processed.
"""

import logging
import math
from collections.abc import Sequence
from enum import Enum

from openingscope.clustering.grouping import create_opening_clusters, create_position_clusters
from openingscope.geometry import cluster_hit_path, point_in_polygon
from openingscope.layout import (
    assign_positions,
    compute_optimal_transform,
    graph_signature,
    pan,
    screen_to_world,
    zoom_at_point,
)
from openingscope.models import Cluster, GraphData, GraphMode, PositionNode, Transform, ViewportSize
from openingscope.render.frame import RenderFrame
from openingscope.render.palette import cluster_colors
from openingscope.viewport.animation import TransformAnimation
from openingscope.viewport.config import ViewportConfig
from openingscope.viewport.priority import (
    AUTO_FIT_LOCK_SUPPRESSION,
    DIRECT_ZOOM_SOURCES,
    RESIZE_SUPPRESSION,
    ActionSource,
    is_suppressed,
    record_change,
)
from openingscope.viewport.state import (
    ClusterHitPath,
    ContextMenu,
    ContextMenuAction,
    InteractionContext,
    KeyEvent,
    MouseButton,
    Phase,
    PointerEvent,
    ViewportCallbacks,
    ViewportState,
    WheelEvent,
)
from openingscope.viewport.timers import Scheduler, TimerKind, TimerSlots

logger = logging.getLogger(__name__)

CONTEXT_MENU_OFFSET = 200
CONTEXT_MENU_ITEM_HEIGHT = 40
CONTEXT_MENU_PADDING = 20

FIT_VIEW_KEYS = frozenset({"r", "R"})


class ZoomTarget(str, Enum):
    ALL = "all"
    CLUSTERS = "clusters"
    RESET = "reset"


class Cursor(str, Enum):
    GRAB = "grab"
    GRABBING = "grabbing"
    POINTER = "pointer"
    NOT_ALLOWED = "not-allowed"


class ViewportController:
    """
    Owns the viewport state of one canvas.

    All timers go through ``scheduler``; nothing here blocks or starts
    threads. The host forwards size measurements and input events, and
    reads ``frame()`` once per animation frame to draw.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: ViewportConfig | None = None,
        callbacks: ViewportCallbacks | None = None,
        context_menu_actions: Sequence[ContextMenuAction] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.config = config or ViewportConfig.from_settings()
        self.callbacks = callbacks or ViewportCallbacks()
        self.state = ViewportState(context_menu_actions=list(context_menu_actions or []))
        self.interaction: InteractionContext | None = InteractionContext()
        self._timers = TimerSlots(scheduler)
        self._animation: TransformAnimation | None = None
        self._derive_position_clusters = True
        self._derive_opening_clusters = True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Arm the fallback used when the host never reports a size."""
        self._timers.replace(
            TimerKind.DIMENSION_FALLBACK,
            self.config.dimension_fallback_timeout,
            self._on_dimension_fallback,
        )

    def teardown(self) -> None:
        """Cancel every timer and animation frame and drop interaction state."""
        self._timers.cancel_all()
        self._animation = None
        self.interaction = None
        logger.debug("Viewport controller torn down")

    @property
    def is_active(self) -> bool:
        return self.interaction is not None

    def _on_dimension_fallback(self) -> None:
        if self.state.size.is_valid:
            return
        logger.warning(
            f"No valid canvas size after {self.config.dimension_fallback_timeout}s, "
            f"using {self.config.fallback_width}x{self.config.fallback_height}"
        )
        self.measure(self.config.fallback_width, self.config.fallback_height)

    # ------------------------------------------------------------------
    # Size and graph data
    # ------------------------------------------------------------------

    def measure(self, width: float, height: float, device_pixel_ratio: float = 1.0) -> None:
        """
        Report the canvas size in CSS pixels.

        Non-positive sizes are ignored. Changes smaller than the resize
        threshold (with an unchanged pixel ratio) are ignored once a
        valid size is known.
        """
        if not self.is_active:
            return
        width, height = math.floor(width), math.floor(height)
        if width <= 0 or height <= 0:
            logger.debug(f"Ignoring invalid canvas size {width}x{height}")
            return

        s = self.state
        previous = s.size
        if not previous.is_valid:
            s.size = ViewportSize(width, height)
            s.device_pixel_ratio = device_pixel_ratio
            self._timers.cancel(TimerKind.DIMENSION_FALLBACK)
            logger.debug(f"Canvas measured at {width}x{height} (dpr {device_pixel_ratio})")
            self._process_graph(real_change=True)
            return

        threshold = self.config.resize_change_threshold
        changed = (
            abs(width - previous.width) > threshold
            or abs(height - previous.height) > threshold
            or device_pixel_ratio != s.device_pixel_ratio
        )
        if not changed:
            return

        s.size = ViewportSize(width, height)
        s.device_pixel_ratio = device_pixel_ratio
        if s.phase != Phase.READY:
            self._process_graph(real_change=True)
            return
        self._begin_resize()

    def _begin_resize(self) -> None:
        s = self.state
        if not s.is_resizing:
            s.is_resizing = True
            self._notify(self.callbacks.on_resize_state_change, True)
        # Lock interaction until the post-resize fit completes
        if self.config.enable_auto_fit:
            s.is_auto_fit_pending = True
        self._timers.replace(TimerKind.RESIZE_SETTLE, self.config.resize_debounce, self._on_resize_settled)

    def _on_resize_settled(self) -> None:
        s = self.state
        s.is_resizing = False
        self._notify(self.callbacks.on_resize_state_change, False)

        if is_suppressed(RESIZE_SUPPRESSION, self.interaction.last_change, self.scheduler.time()):
            logger.debug(f"Skipping resize auto-fit after recent {self.interaction.last_change.source.value}")
            s.is_auto_fit_pending = False
            return
        self.schedule_auto_fit("resize", self.config.resize_auto_fit_delay)

    def set_graph_data(self, graph: GraphData) -> None:
        """
        Replace the graph.

        Unpositioned nodes are laid out. A structural change (different
        node or edge ids) refits the view; a display-only change keeps it.
        """
        if not self.is_active:
            return
        s = self.state
        positioned = assign_positions(graph)
        signature = graph_signature(positioned)
        real_change = signature != s.graph_signature

        s.graph = graph
        s.nodes = positioned.nodes
        s.edges = positioned.edges
        s.graph_signature = signature
        self._mark_selected()
        if self._derive_position_clusters:
            self._recompute_position_clusters()
        if self._derive_opening_clusters:
            self._recompute_opening_clusters()
        self._refresh_cluster_paths()

        if not s.size.is_valid:
            return
        was_ready = s.phase == Phase.READY
        self._process_graph(real_change)
        if was_ready and real_change and s.nodes:
            self.schedule_auto_fit("graph-change")

    def _process_graph(self, real_change: bool) -> None:
        s = self.state
        if not s.size.is_valid:
            return

        if not s.nodes:
            if s.phase != Phase.READY or real_change:
                self._set_transform(Transform.identity())
            self._complete_initialization()
            return

        if s.phase == Phase.READY:
            if real_change and not s.is_resizing:
                self._set_transform(self._fit(s.nodes, self.config.default_padding))
            return

        self._enter_positioning()
        if self.config.mode == GraphMode.PERFORMANCE and len(s.nodes) <= 1:
            # The tree is still loading; wait for more data or the fallback
            logger.debug("Waiting for more than one positioned node")
            return
        self._set_transform(self._fit(s.nodes, self.config.default_padding))
        self._complete_initialization()

    def _enter_positioning(self) -> None:
        s = self.state
        if s.phase != Phase.UNINITIALIZED:
            return
        s.phase = Phase.POSITIONING
        self._notify(self.callbacks.on_initializing_state_change, True)
        self._timers.replace(
            TimerKind.INIT_FALLBACK,
            self.config.initialization_timeout,
            self._on_initialization_timeout,
        )

    def _on_initialization_timeout(self) -> None:
        s = self.state
        if s.phase == Phase.READY:
            return
        logger.warning(
            f"Initial positioning incomplete after {self.config.initialization_timeout}s, forcing completion"
        )
        if s.transform is None:
            self._set_transform(self._fit(s.nodes, self.config.default_padding))
        self._complete_initialization()

    def _complete_initialization(self) -> None:
        s = self.state
        self._timers.cancel(TimerKind.INIT_FALLBACK)
        if s.phase == Phase.READY:
            return
        s.phase = Phase.READY
        logger.info(f"Viewport ready with {len(s.nodes)} nodes at {s.size.width}x{s.size.height}")
        self._notify(self.callbacks.on_initializing_state_change, False)

    # ------------------------------------------------------------------
    # Clusters and current position
    # ------------------------------------------------------------------

    def set_opening_clusters(self, clusters: Sequence[Cluster] | None) -> None:
        """Use the given opening clusters; None derives them from the nodes again."""
        self._derive_opening_clusters = clusters is None
        if clusters is None:
            self._recompute_opening_clusters()
        else:
            self.state.opening_clusters = list(clusters)
        self._refresh_cluster_paths()

    def set_performance_clusters(self, clusters: Sequence[Cluster]) -> None:
        """Show DBSCAN/K-means clusters from a ClusterAnalysis."""
        self.state.performance_clusters = list(clusters)
        self._refresh_cluster_paths()

    def set_context_menu_actions(self, actions: Sequence[ContextMenuAction]) -> None:
        self.state.context_menu_actions = list(actions)

    def set_hovered_next_move(self, node_id: str | None) -> None:
        """Highlight a move hovered outside the canvas (e.g. in a move list)."""
        self.state.hovered_next_move_node_id = node_id

    def update_current_position(
        self,
        node_id: str | None,
        fen: str | None,
        source: ActionSource | str = ActionSource.UNKNOWN,
        zoom_target_node_ids: Sequence[str] | None = None,
        position_clusters: Sequence[Cluster] | None = None,
    ) -> None:
        """
        Record a new current position and zoom to it.

        Clicks (when click auto-zoom is on) and resets zoom directly
        after a short delay. Other sources zoom only when the position
        actually changed, never for the first position, and not within
        a second of a click or reset that already zoomed.

        Args:
            node_id: Selected node.
            fen: Position FEN.
            source: Where the change came from.
            zoom_target_node_ids: Explicit nodes to frame on a direct zoom.
            position_clusters: Clusters to use instead of deriving them.
        """
        ctx = self.interaction
        if ctx is None:
            return
        s = self.state
        source = ActionSource(source)
        now = self.scheduler.time()

        ctx.last_change = record_change(ctx.last_change, source, now)
        position_changed = fen != s.current_position_fen
        s.current_node_id = node_id
        s.current_position_fen = fen
        self._mark_selected()

        self._derive_position_clusters = position_clusters is None
        if position_clusters is None:
            self._recompute_position_clusters()
        else:
            s.position_clusters = list(position_clusters)

        first_position = not ctx.has_initial_position and fen is not None
        if fen is not None:
            ctx.has_initial_position = True

        if not self.config.enable_auto_fit or not fen:
            return

        targets = list(zoom_target_node_ids) if zoom_target_node_ids else None
        if (source == ActionSource.CLICK and self.config.enable_click_auto_zoom) or source == ActionSource.RESET:
            logger.debug(f"Direct auto-zoom on {source.value}")
            self._timers.replace(
                TimerKind.AUTO_ZOOM,
                self.config.auto_zoom_delay,
                lambda: self._auto_zoom(targets),
            )
            return

        if first_position or not position_changed:
            return
        if not self.config.enable_click_auto_zoom:
            self._timers.cancel(TimerKind.AUTO_ZOOM)
            return
        if s.is_resizing or s.is_initializing:
            return
        if is_suppressed(DIRECT_ZOOM_SOURCES, ctx.last_change, now):
            return
        self._timers.replace(TimerKind.AUTO_ZOOM, self.config.auto_zoom_delay, lambda: self._auto_zoom(None))

    def _auto_zoom(self, targets: list[str] | None) -> None:
        if self.state.phase != Phase.READY:
            return
        if targets:
            self.zoom_to(targets, bypass_interaction_blocking=True)
        elif self._should_zoom_to_position_clusters():
            self.zoom_to(ZoomTarget.CLUSTERS, bypass_interaction_blocking=True)
        else:
            self.zoom_to(ZoomTarget.ALL, bypass_interaction_blocking=True)
        self._timers.replace(TimerKind.AUTO_FIT_SETTLE, self.config.auto_fit_settle_delay, self._finish_auto_fit)

    def _recompute_position_clusters(self) -> None:
        s = self.state
        if self.config.enable_position_clusters and s.current_position_fen:
            s.position_clusters = create_position_clusters(s.nodes, s.current_position_fen)
        else:
            s.position_clusters = []

    def _recompute_opening_clusters(self) -> None:
        s = self.state
        if self.config.enable_opening_clusters and self.config.mode == GraphMode.OPENING:
            s.opening_clusters = create_opening_clusters(s.nodes)
        else:
            s.opening_clusters = []

    def _refresh_cluster_paths(self) -> None:
        s = self.state
        by_id = {n.id: n for n in s.nodes if n.is_positioned}
        paths = []
        for cluster in [*s.opening_clusters, *s.performance_clusters]:
            points = [(by_id[n.id].x, by_id[n.id].y) for n in cluster.nodes if n.id in by_id]
            if not points:
                continue
            path = cluster_hit_path(points, self.config.cluster_padding, self.config.position_cluster_padding)
            paths.append(ClusterHitPath(cluster=cluster, path=path, color=cluster_colors(cluster).bg))
        s.cluster_hit_paths = paths

    def _mark_selected(self) -> None:
        current = self.state.current_node_id
        for node in self.state.nodes:
            node.is_selected = node.id == current

    # ------------------------------------------------------------------
    # Auto-fit and zoom
    # ------------------------------------------------------------------

    def schedule_auto_fit(self, reason: str = "auto", delay: float | None = None) -> None:
        """
        Debounced fit to the active position's clusters, or to everything.

        Raises the interaction lock right away unless the controller is
        initialising or a recent navigation made the fit redundant. The
        lock is released once the fit has settled.
        """
        if not self.config.enable_auto_fit or not self.is_active:
            return
        delay = self.config.auto_fit_delay if delay is None else delay
        s = self.state
        self._timers.cancel(TimerKind.AUTO_FIT)

        if not s.is_initializing and not is_suppressed(
            AUTO_FIT_LOCK_SUPPRESSION, self.interaction.last_change, self.scheduler.time()
        ):
            s.is_auto_fit_pending = True

        logger.debug(f"Auto-fit scheduled ({reason}) in {delay:.3f}s")
        self._timers.replace(TimerKind.AUTO_FIT, delay, lambda: self._run_auto_fit(reason))

    def _run_auto_fit(self, reason: str) -> None:
        s = self.state
        if s.phase != Phase.READY or not s.size.is_valid:
            logger.debug(f"Auto-fit ({reason}) skipped, viewport not ready")
            self._finish_auto_fit()
            return
        if self._should_zoom_to_position_clusters():
            self.zoom_to(ZoomTarget.CLUSTERS, bypass_interaction_blocking=True)
        else:
            self.zoom_to(ZoomTarget.ALL, bypass_interaction_blocking=True)
        self._timers.replace(TimerKind.AUTO_FIT_SETTLE, self.config.auto_fit_settle_delay, self._finish_auto_fit)

    def _finish_auto_fit(self) -> None:
        self.state.is_auto_fit_pending = False
        self._notify(self.callbacks.on_auto_fit_complete)

    def _should_zoom_to_position_clusters(self) -> bool:
        s = self.state
        return bool(
            self.config.enable_position_clusters
            and s.position_clusters
            and s.current_position_fen
        )

    def zoom_to(
        self,
        target: ZoomTarget | str | Sequence[str] | Sequence[PositionNode] = ZoomTarget.ALL,
        bypass_interaction_blocking: bool = False,
    ) -> bool:
        """
        Animate to frame a target.

        Args:
            target: "all", "clusters" (the active position's clusters,
                falling back to all), "reset" (identity transform), a
                list of node ids or a list of nodes.
            bypass_interaction_blocking: Ignore the interaction lock and
                the resizing/initialising checks (automatic fits).

        Returns:
            False when the request was rejected.
        """
        if not self.is_active:
            return False
        s = self.state
        if not bypass_interaction_blocking and (s.is_interaction_blocked() or s.is_resizing):
            logger.debug(f"zoom_to({target!r}) rejected while viewport is busy")
            return False
        if not s.size.is_valid:
            return False

        self._cancel_animation()
        if isinstance(target, str) and ZoomTarget(target) == ZoomTarget.RESET:
            self._animate_to(Transform.identity())
            return True

        nodes, padding = self._resolve_zoom_target(target)
        if not nodes:
            self._timers.frame(TimerKind.ANIMATION, lambda _: self._set_transform(Transform.identity()))
            return True
        self._animate_to(self._fit(nodes, padding))
        return True

    def fit_view(self, bypass_interaction_blocking: bool = False) -> bool:
        return self.zoom_to(ZoomTarget.ALL, bypass_interaction_blocking)

    def zoom_to_clusters(self, bypass_interaction_blocking: bool = False) -> bool:
        return self.zoom_to(ZoomTarget.CLUSTERS, bypass_interaction_blocking)

    def _resolve_zoom_target(self, target) -> tuple[list[PositionNode], float]:
        s = self.state
        by_id = {n.id: n for n in s.nodes if n.is_positioned}

        if isinstance(target, str):
            kind = ZoomTarget(target)
            if kind == ZoomTarget.CLUSTERS and s.position_clusters:
                ids = {n.id for cluster in s.position_clusters for n in cluster.nodes}
                nodes = [by_id[i] for i in ids if i in by_id]
                if nodes:
                    return nodes, self.config.cluster_zoom_padding
            return list(by_id.values()), self.config.default_padding

        nodes = []
        for item in target:
            if isinstance(item, PositionNode):
                node = by_id.get(item.id, item)
                if node.is_positioned:
                    nodes.append(node)
            elif isinstance(item, str):
                if item in by_id:
                    nodes.append(by_id[item])
            else:
                raise ValueError(f"Unsupported zoom target element: {item!r}")
        return nodes, self.config.default_padding

    def _fit(self, nodes: Sequence[PositionNode], padding: float) -> Transform:
        return compute_optimal_transform(nodes, self.state.size, padding)

    def _animate_to(self, end: Transform) -> None:
        start = self.state.transform
        if start is None or self.config.animation_duration <= 0:
            self._set_transform(end)
            return
        self._animation = TransformAnimation(
            start=start,
            end=end,
            started_at=self.scheduler.time(),
            duration=self.config.animation_duration,
        )
        self._timers.frame(TimerKind.ANIMATION, self._on_animation_frame)

    def _on_animation_frame(self, timestamp: float) -> None:
        animation = self._animation
        if animation is None:
            return
        transform, done = animation.frame(timestamp)
        self._set_transform(transform)
        if done:
            self._animation = None
        else:
            self._timers.frame(TimerKind.ANIMATION, self._on_animation_frame)

    def _cancel_animation(self) -> None:
        self._timers.cancel(TimerKind.ANIMATION)
        self._animation = None

    @property
    def is_animating(self) -> bool:
        return self._animation is not None

    def _set_transform(self, transform: Transform) -> None:
        self.state.transform = transform
        self._notify(self.callbacks.on_transform_change, transform)

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------

    def node_at(self, x: float, y: float) -> PositionNode | None:
        """Topmost node whose box contains the canvas point (first in list wins)."""
        transform = self.state.transform
        if transform is None:
            return None
        wx, wy = screen_to_world((x, y), transform)
        for node in self.state.nodes:
            if not node.is_positioned:
                continue
            if abs(wx - node.x) <= node.width / 2 and abs(wy - node.y) <= node.height / 2:
                return node
        return None

    def _cluster_hit_at(self, x: float, y: float) -> ClusterHitPath | None:
        transform = self.state.transform
        if transform is None or self.node_at(x, y) is not None:
            return None
        wx, wy = screen_to_world((x, y), transform)
        for hit in reversed(self.state.cluster_hit_paths):
            if point_in_polygon(wx, wy, hit.path):
                return hit
        return None

    def cluster_at(self, x: float, y: float) -> Cluster | None:
        """Cluster under the canvas point, only when no node is hit."""
        hit = self._cluster_hit_at(x, y)
        return hit.cluster if hit else None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _interaction_allowed(self, action: str) -> bool:
        ctx = self.interaction
        if ctx is None:
            return False
        if self.state.is_interaction_blocked():
            if not ctx.logged_blocked:
                logger.debug(f"Ignoring {action}: viewport is busy")
                ctx.logged_blocked = True
            return False
        ctx.logged_blocked = False
        return True

    def pointer_down(self, event: PointerEvent) -> None:
        ctx = self.interaction
        if ctx is None:
            return
        if event.button == MouseButton.MIDDLE:
            self.fit_view()
            return
        if event.button == MouseButton.LEFT:
            ctx.pointer.press(event.x, event.y)

    def pointer_move(self, event: PointerEvent) -> None:
        """Pan while the left button is held, otherwise update hover."""
        ctx = self.interaction
        if ctx is None:
            return
        pointer = ctx.pointer
        if pointer.is_pressed and event.buttons & 1:
            if not self._interaction_allowed("pan") or pointer.last_position is None:
                return
            last_x, last_y = pointer.last_position
            dx, dy = event.x - last_x, event.y - last_y
            pointer.drag_distance += abs(dx) + abs(dy)
            if pointer.drag_distance > self.config.drag_threshold:
                pointer.is_dragging = True
            pointer.last_position = (event.x, event.y)
            self._cancel_animation()
            self._set_transform(pan(self.state.transform, dx, dy))
            return
        self._update_hover(event)

    def pointer_up(self, event: PointerEvent) -> None:
        if self.interaction is not None:
            self.interaction.pointer.release()

    def pointer_leave(self, event: PointerEvent) -> None:
        ctx = self.interaction
        if ctx is None:
            return
        ctx.pointer.release()
        if ctx.hovered_node is not None:
            ctx.hovered_node = None
            self._notify(self.callbacks.on_node_hover_end, event)
        if ctx.hovered_cluster is not None:
            ctx.hovered_cluster = None
            self._notify(self.callbacks.on_cluster_hover_end)

    def click(self, event: PointerEvent) -> None:
        """Left click: select a node unless the press turned into a drag."""
        ctx = self.interaction
        if ctx is None or not self._interaction_allowed("click"):
            return
        if ctx.pointer.is_dragging:
            ctx.pointer.is_dragging = False
            return
        node = self.node_at(event.x, event.y)
        if ctx.context_menu is not None:
            self.close_context_menu()
        if node is not None:
            self._notify(self.callbacks.on_node_click, event, node)

    def wheel(self, event: WheelEvent) -> None:
        if not self._interaction_allowed("wheel"):
            return
        factor = self.config.zoom_out_factor if event.delta_y > 0 else self.config.zoom_in_factor
        self._cancel_animation()
        self._set_transform(zoom_at_point(
            self.state.transform,
            factor,
            (event.x, event.y),
            self.config.zoom_min,
            self.config.zoom_max,
        ))

    def key_down(self, event: KeyEvent) -> bool:
        """Keyboard shortcuts. Returns True when the key was handled."""
        ctx = self.interaction
        if ctx is None or event.from_text_input:
            return False

        if ctx.context_menu is not None:
            if event.key == "Escape":
                self.close_context_menu()
                return True
            if event.key == "Enter":
                node = ctx.context_menu.node
                action = next((a for a in self.state.context_menu_actions if a.enabled_for(node)), None)
                if action is not None:
                    self.activate_context_action(action)
                return True

        if not self._interaction_allowed(f"key {event.key}"):
            return False
        if event.key in FIT_VIEW_KEYS:
            self.fit_view()
            return True
        if event.key == "Escape":
            self._cancel_animation()
            self._set_transform(Transform(0.0, 0.0, self.config.emergency_reset_scale))
            return True
        return False

    def _update_hover(self, event: PointerEvent) -> None:
        ctx = self.interaction
        node = self.node_at(event.x, event.y)
        if node is not ctx.hovered_node:
            ctx.hovered_node = node
            if node is not None:
                self._notify(self.callbacks.on_node_hover, event, node)
            else:
                self._notify(self.callbacks.on_node_hover_end, event)

        hit = self._cluster_hit_at(event.x, event.y) if node is None else None
        cluster = hit.cluster if hit else None
        if cluster is not ctx.hovered_cluster:
            ctx.hovered_cluster = cluster
            if hit is not None:
                self._notify(self.callbacks.on_cluster_hover, cluster.name, hit.color)
            else:
                self._notify(self.callbacks.on_cluster_hover_end)

    # ------------------------------------------------------------------
    # Context menu
    # ------------------------------------------------------------------

    def context_menu(self, event: PointerEvent) -> None:
        """Right click: open the node menu, or close it on empty space."""
        ctx = self.interaction
        if ctx is None or not self._interaction_allowed("context menu"):
            return
        actions = self.state.context_menu_actions
        if not actions:
            return
        node = self.node_at(event.x, event.y)
        if node is None:
            self.close_context_menu()
            return

        size = self.state.size
        menu_height = len(actions) * CONTEXT_MENU_ITEM_HEIGHT + CONTEXT_MENU_PADDING
        ctx.context_menu = ContextMenu(
            x=max(0.0, min(event.x, size.width - CONTEXT_MENU_OFFSET)),
            y=max(0.0, min(event.y, size.height - menu_height)),
            node=node,
        )
        self._notify(self.callbacks.on_node_right_click, event, node)

    def close_context_menu(self) -> None:
        if self.interaction is not None:
            self.interaction.context_menu = None

    @property
    def open_context_menu(self) -> ContextMenu | None:
        return self.interaction.context_menu if self.interaction else None

    def activate_context_action(self, action: ContextMenuAction) -> bool:
        """Run a menu action on the menu's node and close the menu."""
        menu = self.open_context_menu
        if menu is None or not action.enabled_for(menu.node):
            return False
        self.close_context_menu()
        action.on_select(menu.node)
        return True

    # ------------------------------------------------------------------
    # Rendering support
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        ctx = self.interaction
        s = self.state
        if ctx is None or s.phase != Phase.READY or not s.size.is_valid or s.transform is None:
            return Cursor.NOT_ALLOWED
        if ctx.pointer.is_pressed:
            return Cursor.GRABBING
        if ctx.hovered_node is not None or ctx.hovered_cluster is not None:
            return Cursor.POINTER
        return Cursor.GRAB

    def frame(self) -> RenderFrame:
        """Snapshot of everything the renderer needs for one frame."""
        s = self.state
        ctx = self.interaction
        return RenderFrame(
            size=s.size,
            transform=s.transform,
            nodes=tuple(s.nodes),
            edges=tuple(s.edges),
            mode=self.config.mode,
            device_pixel_ratio=s.device_pixel_ratio,
            position_clusters=tuple(s.position_clusters) if self.config.enable_position_clusters else (),
            opening_clusters=tuple(s.opening_clusters),
            performance_clusters=tuple(s.performance_clusters),
            current_node_id=s.current_node_id,
            hovered_node_id=ctx.hovered_node.id if ctx and ctx.hovered_node else None,
            hovered_cluster_id=ctx.hovered_cluster.id if ctx and ctx.hovered_cluster else None,
            hovered_next_move_node_id=s.hovered_next_move_node_id,
        )

    @staticmethod
    def _notify(callback, *args) -> None:
        if callback is not None:
            callback(*args)
