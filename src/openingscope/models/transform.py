"""Viewport geometry models."""

from dataclasses import dataclass

Point = tuple[float, float]


@dataclass(frozen=True)
class Transform:
    """Screen-space translation and uniform scale applied to world coordinates.

    screen = world * scale + (x, y)
    """

    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    @classmethod
    def identity(cls) -> "Transform":
        return cls(0.0, 0.0, 1.0)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "scale": self.scale}


@dataclass(frozen=True)
class ViewportSize:
    """Canvas size in CSS pixels."""

    width: int = 0
    height: int = 0

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned world bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y
