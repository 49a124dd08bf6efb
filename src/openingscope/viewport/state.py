"""Viewport state, interaction tracking and host-facing event types."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from openingscope.models import Cluster, Edge, GraphData, Point, PositionNode, Transform, ViewportSize
from openingscope.viewport.priority import PositionChange


class Phase(str, Enum):
    """Initial positioning lifecycle."""

    UNINITIALIZED = "uninitialized"
    POSITIONING = "positioning"
    READY = "ready"


class MouseButton(int, Enum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


@dataclass(frozen=True)
class PointerEvent:
    """Pointer event in canvas pixel coordinates."""

    x: float
    y: float
    button: MouseButton = MouseButton.LEFT
    buttons: int = 0  # Bitmask of pressed buttons, 1 = left


@dataclass(frozen=True)
class WheelEvent:
    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class KeyEvent:
    key: str
    from_text_input: bool = False  # Typed into an input or textarea


@dataclass
class ContextMenuAction:
    """Entry of the node context menu."""

    label: str
    on_select: Callable[[PositionNode], None]
    is_disabled: Callable[[PositionNode], bool] | None = None

    def enabled_for(self, node: PositionNode) -> bool:
        return self.is_disabled is None or not self.is_disabled(node)


@dataclass
class ContextMenu:
    """An open context menu."""

    x: float
    y: float
    node: PositionNode


@dataclass
class ViewportCallbacks:
    """Notifications to the host. Every callback is optional."""

    on_node_click: Callable[[PointerEvent, PositionNode], None] | None = None
    on_node_hover: Callable[[PointerEvent, PositionNode], None] | None = None
    on_node_hover_end: Callable[[PointerEvent], None] | None = None
    on_cluster_hover: Callable[[str, str], None] | None = None  # (name, colour)
    on_cluster_hover_end: Callable[[], None] | None = None
    on_node_right_click: Callable[[PointerEvent, PositionNode], None] | None = None
    on_auto_fit_complete: Callable[[], None] | None = None
    on_resize_state_change: Callable[[bool], None] | None = None
    on_initializing_state_change: Callable[[bool], None] | None = None
    on_transform_change: Callable[[Transform], None] | None = None


@dataclass
class PointerTracker:
    """Press and drag bookkeeping between pointer down and click."""

    last_position: Point | None = None
    is_pressed: bool = False
    drag_distance: float = 0.0  # Cumulative |dx| + |dy| since press
    is_dragging: bool = False

    def press(self, x: float, y: float) -> None:
        self.last_position = (x, y)
        self.is_pressed = True
        self.drag_distance = 0.0
        self.is_dragging = False

    def release(self) -> None:
        self.is_pressed = False


@dataclass
class InteractionContext:
    """Per-controller interaction state; discarded on teardown."""

    pointer: PointerTracker = field(default_factory=PointerTracker)
    hovered_node: PositionNode | None = None
    hovered_cluster: Cluster | None = None
    context_menu: ContextMenu | None = None
    last_change: PositionChange | None = None
    has_initial_position: bool = False
    # Log once per blocked period
    logged_blocked: bool = False


@dataclass
class ClusterHitPath:
    cluster: Cluster
    path: list[Point]
    color: str


@dataclass
class ViewportState:
    """Everything the controller owns; timers re-read it when they fire."""

    phase: Phase = Phase.UNINITIALIZED
    size: ViewportSize = field(default_factory=ViewportSize)
    device_pixel_ratio: float = 1.0
    transform: Transform | None = None

    graph: GraphData = field(default_factory=GraphData)
    nodes: list[PositionNode] = field(default_factory=list)  # Positioned
    edges: list[Edge] = field(default_factory=list)
    graph_signature: str | None = None

    is_resizing: bool = False
    is_auto_fit_pending: bool = False

    current_node_id: str | None = None
    current_position_fen: str | None = None
    hovered_next_move_node_id: str | None = None
    position_clusters: list[Cluster] = field(default_factory=list)
    opening_clusters: list[Cluster] = field(default_factory=list)
    performance_clusters: list[Cluster] = field(default_factory=list)
    cluster_hit_paths: list[ClusterHitPath] = field(default_factory=list)
    context_menu_actions: list[ContextMenuAction] = field(default_factory=list)

    @property
    def is_initializing(self) -> bool:
        return self.phase != Phase.READY

    def is_interaction_blocked(self) -> bool:
        """Pan, wheel, click and keys are ignored while this holds."""
        return (
            self.phase != Phase.READY
            or not self.size.is_valid
            or self.transform is None
            or self.is_auto_fit_pending
        )
