"""Who moved the current position, and which automatic zooms that suppresses.

Several timers race to move the camera: resize settling, debounced
auto-fit and position-change auto-zoom. Each position change is
recorded with its source and time, and the rule tables below decide
which later automatic fits stand down.
"""

from dataclasses import dataclass
from enum import Enum


class ActionSource(str, Enum):
    """Origin of a current-position change."""

    CLICK = "click"  # User clicked a node on the canvas
    EXTERNAL_SYNC = "external-sync"  # Move made on the board component
    NAV_PREVIOUS = "nav-previous"  # Step back in the move list
    RESET = "reset"  # Back to the start position
    PROGRAMMATIC = "programmatic"
    SYNC = "sync"
    UNKNOWN = "unknown"


# Recent changes that cancel the auto-fit scheduled when a resize settles
RESIZE_SUPPRESSION: dict[ActionSource, float] = {
    ActionSource.CLICK: 0.5,
    ActionSource.NAV_PREVIOUS: 0.5,
    ActionSource.RESET: 0.5,
}

# Recent changes that keep schedule_auto_fit from raising the interaction lock
AUTO_FIT_LOCK_SUPPRESSION: dict[ActionSource, float] = {
    ActionSource.CLICK: 0.5,
    ActionSource.EXTERNAL_SYNC: 1.0,
    ActionSource.NAV_PREVIOUS: 0.5,
    ActionSource.RESET: 0.5,
}

# Recent changes that already zoomed directly, so the debounced auto-zoom skips
DIRECT_ZOOM_SOURCES: dict[ActionSource, float] = {
    ActionSource.CLICK: 1.0,
    ActionSource.RESET: 1.0,
}

# A click is not relabelled by these follow-up sources within the window
CLICK_PRESERVATION_WINDOW = 1.0
CLICK_PRESERVING_SOURCES = frozenset({ActionSource.PROGRAMMATIC, ActionSource.SYNC})


@dataclass(frozen=True)
class PositionChange:
    """The latest current-position change."""

    source: ActionSource
    timestamp: float


def is_suppressed(
    rules: dict[ActionSource, float],
    change: PositionChange | None,
    now: float,
) -> bool:
    """True when ``change`` is recent enough to trigger ``rules``."""
    if change is None:
        return False
    window = rules.get(change.source)
    return window is not None and now - change.timestamp < window


def record_change(
    previous: PositionChange | None,
    source: ActionSource,
    now: float,
) -> PositionChange:
    """New change record; a fresh click keeps its label against sync follow-ups."""
    if (
        previous is not None
        and previous.source == ActionSource.CLICK
        and now - previous.timestamp < CLICK_PRESERVATION_WINDOW
        and source in CLICK_PRESERVING_SOURCES
    ):
        return PositionChange(ActionSource.CLICK, now)
    return PositionChange(source, now)
