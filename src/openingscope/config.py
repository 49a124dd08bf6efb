"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OPENINGSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Padding (screen pixels for fits, world units for cluster hit areas)
    default_padding: float = 50.0
    cluster_padding: float = 100.0
    position_cluster_padding: float = 80.0
    cluster_zoom_padding: float = Field(
        default=120.0,
        description="Screen padding used when zooming to position clusters"
    )

    # Zoom and pan
    zoom_min: float = 0.01
    zoom_max: float = 5.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    drag_threshold: float = Field(
        default=3.0,
        description="Cumulative |dx|+|dy| in pixels before a press becomes a drag"
    )

    # Timing (seconds)
    animation_duration: float = 0.3
    initialization_timeout: float = Field(
        default=3.0,
        description="Force initial positioning to complete after this long"
    )
    dimension_fallback_timeout: float = 1.0
    resize_debounce: float = 0.3
    resize_change_threshold: float = Field(
        default=10.0,
        description="Size change in pixels that counts as a real resize"
    )
    auto_fit_delay: float = 0.2
    resize_auto_fit_delay: float = 0.4
    auto_fit_settle_delay: float = 0.35
    auto_zoom_delay: float = 0.15

    # Fallback viewport used when the host never reports a size
    fallback_width: int = 800
    fallback_height: int = 600

    # Auto-fit behaviour
    enable_auto_fit: bool = True
    enable_click_auto_zoom: bool = True
    enable_position_clusters: bool = True
    enable_opening_clusters: bool = True
    emergency_reset_scale: float = Field(
        default=0.5,
        description="Scale restored by the Escape key when no menu is open"
    )

    # Clustering
    clustering_method: str = Field(
        default="dbscan",
        description="'dbscan' or 'kmeans'"
    )
    clustering_eps: float = 0.35
    clustering_min_pts: int = 3
    clustering_k: int | None = Field(
        default=None,
        description="Fixed K for k-means; None selects K automatically"
    )
    clustering_max_k: int = 8
    kmeans_max_iterations: int = 100
    kmeans_tolerance: float = 0.001

    # Feature weights
    weight_win_rate: float = 1.0
    weight_game_count: float = 0.5
    weight_depth: float = 0.5

    # Graph filters
    filter_max_depth: int = 20
    filter_min_game_count: int = 1
    filter_win_rate_min: float = 0.0
    filter_win_rate_max: float = 100.0


def get_test_settings() -> Settings:
    """Get deterministic settings for tests (ignores the environment file)."""
    return Settings(
        _env_file=None,
        clustering_method="dbscan",
        clustering_eps=0.35,
        clustering_min_pts=3,
        clustering_k=None,
        filter_min_game_count=0,
    )


# Global settings instance
settings = Settings()
