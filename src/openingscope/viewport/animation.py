"""Transform animation."""

from dataclasses import dataclass

from openingscope.layout.transform import interpolate
from openingscope.models import Transform


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


@dataclass(frozen=True)
class TransformAnimation:
    """Eased transition from one transform to another."""

    start: Transform
    end: Transform
    started_at: float
    duration: float

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(max((now - self.started_at) / self.duration, 0.0), 1.0)

    def frame(self, now: float) -> tuple[Transform, bool]:
        """Transform at ``now`` and whether the animation has finished."""
        progress = self.progress(now)
        if progress >= 1.0:
            return self.end, True
        return interpolate(self.start, self.end, ease_out_cubic(progress)), False
