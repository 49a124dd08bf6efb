"""Redraw on every animation frame."""

import logging
from collections.abc import Callable

from openingscope.render.frame import RenderFrame
from openingscope.render.pipeline import Renderer, RenderStats
from openingscope.render.surface import Surface
from openingscope.viewport.timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class RenderLoop:
    """
    Continuous render loop.

    ``frame_source`` is called once per frame (usually
    ``ViewportController.frame``) and its snapshot is drawn onto
    ``surface``. The loop keeps requesting frames until ``stop``.
    """

    def __init__(
        self,
        frame_source: Callable[[], RenderFrame],
        renderer: Renderer,
        surface: Surface,
        scheduler: Scheduler,
    ) -> None:
        self.frame_source = frame_source
        self.renderer = renderer
        self.surface = surface
        self.scheduler = scheduler
        self.frames_drawn = 0
        self.last_stats: RenderStats | None = None
        self._handle: TimerHandle | None = None

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is None:
            self._handle = self.scheduler.request_frame(self._tick)
            logger.debug("Render loop started")

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug(f"Render loop stopped after {self.frames_drawn} frames")

    def _tick(self, timestamp: float) -> None:
        self._handle = self.scheduler.request_frame(self._tick)
        self.last_stats = self.renderer.draw(self.surface, self.frame_source())
        if self.last_stats.drawn:
            self.frames_drawn += 1
