"""Configuration for the viewport controller."""

from dataclasses import dataclass

from openingscope.config import Settings, settings
from openingscope.models import GraphMode


@dataclass
class ViewportConfig:
    """Geometry, timing and behaviour of the viewport (times in seconds)."""

    mode: GraphMode = GraphMode.PERFORMANCE

    # Padding
    default_padding: float = 50.0
    cluster_padding: float = 100.0
    position_cluster_padding: float = 80.0
    cluster_zoom_padding: float = 120.0

    # Zoom
    zoom_min: float = 0.01
    zoom_max: float = 5.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    drag_threshold: float = 3.0
    emergency_reset_scale: float = 0.5

    # Timing
    animation_duration: float = 0.3
    initialization_timeout: float = 3.0
    dimension_fallback_timeout: float = 1.0
    resize_debounce: float = 0.3
    resize_change_threshold: float = 10.0
    auto_fit_delay: float = 0.2
    resize_auto_fit_delay: float = 0.4
    auto_fit_settle_delay: float = 0.35
    auto_zoom_delay: float = 0.15

    fallback_width: int = 800
    fallback_height: int = 600

    # Behaviour
    enable_auto_fit: bool = True
    enable_click_auto_zoom: bool = True
    enable_position_clusters: bool = True
    enable_opening_clusters: bool = True

    def __post_init__(self) -> None:
        self.mode = GraphMode(self.mode)
        if not 0 < self.zoom_min <= self.zoom_max:
            raise ValueError(f"invalid zoom range [{self.zoom_min}, {self.zoom_max}]")

    @classmethod
    def from_settings(cls, s: Settings | None = None, **overrides) -> "ViewportConfig":
        s = s or settings
        values = dict(
            default_padding=s.default_padding,
            cluster_padding=s.cluster_padding,
            position_cluster_padding=s.position_cluster_padding,
            cluster_zoom_padding=s.cluster_zoom_padding,
            zoom_min=s.zoom_min,
            zoom_max=s.zoom_max,
            zoom_in_factor=s.zoom_in_factor,
            zoom_out_factor=s.zoom_out_factor,
            drag_threshold=s.drag_threshold,
            animation_duration=s.animation_duration,
            initialization_timeout=s.initialization_timeout,
            dimension_fallback_timeout=s.dimension_fallback_timeout,
            resize_debounce=s.resize_debounce,
            resize_change_threshold=s.resize_change_threshold,
            auto_fit_delay=s.auto_fit_delay,
            resize_auto_fit_delay=s.resize_auto_fit_delay,
            auto_fit_settle_delay=s.auto_fit_settle_delay,
            auto_zoom_delay=s.auto_zoom_delay,
            fallback_width=s.fallback_width,
            fallback_height=s.fallback_height,
            enable_auto_fit=s.enable_auto_fit,
            enable_click_auto_zoom=s.enable_click_auto_zoom,
            enable_position_clusters=s.enable_position_clusters,
            enable_opening_clusters=s.enable_opening_clusters,
            emergency_reset_scale=s.emergency_reset_scale,
        )
        values.update(overrides)
        return cls(**values)
