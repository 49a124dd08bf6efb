"""Viewport controller: transform, auto-fit scheduling and canvas input."""

from openingscope.viewport.timers import AsyncioScheduler, ManualScheduler, Scheduler, TimerKind
from openingscope.viewport.animation import TransformAnimation, ease_out_cubic
from openingscope.viewport.config import ViewportConfig
from openingscope.viewport.priority import ActionSource, PositionChange, is_suppressed
from openingscope.viewport.state import (
    ContextMenu,
    ContextMenuAction,
    KeyEvent,
    MouseButton,
    Phase,
    PointerEvent,
    ViewportCallbacks,
    ViewportState,
    WheelEvent,
)
from openingscope.viewport.controller import Cursor, ViewportController, ZoomTarget

__all__ = [
    "ViewportController",
    "ViewportConfig",
    "ViewportCallbacks",
    "ViewportState",
    "ZoomTarget",
    "Cursor",
    "Phase",
    "PointerEvent",
    "WheelEvent",
    "KeyEvent",
    "MouseButton",
    "ContextMenu",
    "ContextMenuAction",
    "ActionSource",
    "PositionChange",
    "is_suppressed",
    "TransformAnimation",
    "ease_out_cubic",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "TimerKind",
]
