"""Canvas rendering: colours, frame snapshots, surfaces and the renderer."""

from openingscope.render.frame import RenderFrame
from openingscope.render.loop import RenderLoop
from openingscope.render.palette import ColorScheme, cluster_colors, performance_colors
from openingscope.render.pipeline import Renderer, RenderStats
from openingscope.render.surface import DrawCommand, RecordingSurface, Surface

__all__ = [
    "RenderFrame",
    "Renderer",
    "RenderStats",
    "RenderLoop",
    "Surface",
    "RecordingSurface",
    "DrawCommand",
    "ColorScheme",
    "cluster_colors",
    "performance_colors",
]
