"""Transform math: fitting content, coordinate mapping and zooming."""

from collections.abc import Sequence

from openingscope.models import Bounds, Point, PositionNode, Transform, ViewportSize

MIN_FIT_SCALE = 0.001


def compute_bounds(nodes: Sequence[PositionNode]) -> Bounds | None:
    """World bounding box of the node boxes (centre +- half size).

    Unpositioned nodes are ignored; returns None when nothing is placed.
    """
    placed = [n for n in nodes if n.is_positioned]
    if not placed:
        return None
    return Bounds(
        min_x=min(n.x - n.width / 2 for n in placed),
        min_y=min(n.y - n.height / 2 for n in placed),
        max_x=max(n.x + n.width / 2 for n in placed),
        max_y=max(n.y + n.height / 2 for n in placed),
    )


def compute_optimal_transform(
    nodes: Sequence[PositionNode],
    viewport: ViewportSize,
    padding: float = 50.0,
) -> Transform:
    """
    Transform that fits every node inside the viewport.

    The scale is not capped above, so small graphs zoom in as far as the
    padding allows. After centring, an edge that still lands inside the
    padding is shifted back onto it (top/left take precedence).

    Args:
        nodes: Positioned nodes.
        viewport: Canvas size.
        padding: Screen margin in pixels.

    Returns:
        The fitted transform, or identity when there is nothing to fit.
    """
    if not nodes or not viewport.is_valid:
        return Transform.identity()

    bounds = compute_bounds(nodes)
    if bounds is None or bounds.width <= 0 or bounds.height <= 0:
        return Transform.identity()

    raw_scale = min(
        (viewport.width - padding * 2) / bounds.width,
        (viewport.height - padding * 2) / bounds.height,
    )
    scale = max(raw_scale, MIN_FIT_SCALE)
    center_x, center_y = bounds.center

    x = viewport.width / 2 - center_x * scale
    y = viewport.height / 2 - center_y * scale

    top = bounds.min_y * scale + y
    bottom = bounds.max_y * scale + y
    if top < padding:
        y = padding - bounds.min_y * scale
    elif bottom > viewport.height - padding:
        y = viewport.height - padding - bounds.max_y * scale

    left = bounds.min_x * scale + x
    right = bounds.max_x * scale + x
    if left < padding:
        x = padding - bounds.min_x * scale
    elif right > viewport.width - padding:
        x = viewport.width - padding - bounds.max_x * scale

    return Transform(x, y, scale)


def screen_to_world(point: Point, transform: Transform) -> Point:
    sx, sy = point
    return ((sx - transform.x) / transform.scale, (sy - transform.y) / transform.scale)


def world_to_screen(point: Point, transform: Transform) -> Point:
    wx, wy = point
    return (wx * transform.scale + transform.x, wy * transform.scale + transform.y)


def clamp_scale(scale: float, min_scale: float = 0.01, max_scale: float = 5.0) -> float:
    return max(min_scale, min(max_scale, scale))


def zoom_at_point(
    transform: Transform,
    factor: float,
    cursor: Point,
    min_scale: float = 0.01,
    max_scale: float = 5.0,
) -> Transform:
    """Scale by ``factor`` (clamped) keeping the world point under the cursor fixed."""
    new_scale = clamp_scale(transform.scale * factor, min_scale, max_scale)
    ratio = new_scale / transform.scale
    cx, cy = cursor
    return Transform(
        x=cx - (cx - transform.x) * ratio,
        y=cy - (cy - transform.y) * ratio,
        scale=new_scale,
    )


def pan(transform: Transform, dx: float, dy: float) -> Transform:
    return Transform(transform.x + dx, transform.y + dy, transform.scale)


def interpolate(start: Transform, end: Transform, t: float) -> Transform:
    """Linear blend of two transforms (t in [0, 1])."""
    return Transform(
        x=start.x + (end.x - start.x) * t,
        y=start.y + (end.y - start.y) * t,
        scale=start.scale + (end.scale - start.scale) * t,
    )
