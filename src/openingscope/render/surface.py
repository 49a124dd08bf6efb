"""Drawing surfaces the renderer paints on.

The renderer only needs a small 2D-canvas-like API. Any backend that
implements ``Surface`` can be driven by it; ``RecordingSurface`` keeps
every call as data, which is what the tests and headless exports use.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Protocol


@dataclass
class DrawStyle:
    """Mutable drawing state saved and restored with the transform."""

    fill_style: str = "#000000"
    stroke_style: str = "#000000"
    line_width: float = 1.0
    global_alpha: float = 1.0
    shadow_color: str = "transparent"
    shadow_blur: float = 0.0
    font: str = "10px sans-serif"
    text_align: str = "start"
    text_baseline: str = "alphabetic"
    line_dash: tuple[float, ...] = ()


STYLE_FIELDS = frozenset(f.name for f in fields(DrawStyle))


class Surface(Protocol):
    """Subset of the 2D canvas API used by the renderer."""

    width: int
    height: int
    fill_style: str
    stroke_style: str
    line_width: float
    global_alpha: float
    shadow_color: str
    shadow_blur: float
    font: str
    text_align: str
    text_baseline: str

    def resize(self, width: int, height: int) -> None: ...
    def reset_transform(self) -> None: ...
    def scale(self, sx: float, sy: float) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...
    def begin_path(self) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> None: ...
    def round_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None: ...
    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None: ...
    def close_path(self) -> None: ...
    def fill(self) -> None: ...
    def stroke(self) -> None: ...
    def set_line_dash(self, segments: list[float]) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...
    def stroke_text(self, text: str, x: float, y: float) -> None: ...


@dataclass(frozen=True)
class DrawCommand:
    """One recorded call with the style in effect when it was made."""

    name: str
    args: tuple[Any, ...]
    style: DrawStyle


@dataclass
class RecordingSurface:
    """In-memory surface that records calls instead of painting pixels."""

    width: int = 0
    height: int = 0
    commands: list[DrawCommand] = field(default_factory=list)
    style: DrawStyle = field(default_factory=DrawStyle)
    resize_count: int = 0
    _stack: list[DrawStyle] = field(default_factory=list, repr=False)

    # Style attributes are forwarded to the current DrawStyle
    def __getattr__(self, name: str) -> Any:
        if name in STYLE_FIELDS:
            return getattr(self.__dict__["style"], name)
        raise AttributeError(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in STYLE_FIELDS:
            setattr(self.style, name, value)
        else:
            super().__setattr__(name, value)

    def _record(self, name: str, *args: Any) -> None:
        self.commands.append(DrawCommand(name, args, replace(self.style)))

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.resize_count += 1
        self._record("resize", width, height)

    def reset_transform(self) -> None:
        self._record("reset_transform")

    def scale(self, sx: float, sy: float) -> None:
        self._record("scale", sx, sy)

    def translate(self, dx: float, dy: float) -> None:
        self._record("translate", dx, dy)

    def save(self) -> None:
        self._stack.append(replace(self.style))
        self._record("save")

    def restore(self) -> None:
        if self._stack:
            self.style = self._stack.pop()
        self._record("restore")

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("fill_rect", x, y, width, height)

    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> None:
        self._record("quadratic_curve_to", cx, cy, x, y)

    def round_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None:
        self._record("round_rect", x, y, width, height, radius)

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        self._record("arc", x, y, radius, start, end)

    def close_path(self) -> None:
        self._record("close_path")

    def fill(self) -> None:
        self._record("fill")

    def stroke(self) -> None:
        self._record("stroke")

    def set_line_dash(self, segments: list[float]) -> None:
        self.style.line_dash = tuple(segments)
        self._record("set_line_dash", tuple(segments))

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._record("fill_text", text, x, y)

    def stroke_text(self, text: str, x: float, y: float) -> None:
        self._record("stroke_text", text, x, y)

    def calls(self, name: str) -> list[DrawCommand]:
        """Recorded commands with the given name, in order."""
        return [c for c in self.commands if c.name == name]

    def texts(self) -> list[str]:
        return [c.args[0] for c in self.commands if c.name == "fill_text"]

    def clear(self) -> None:
        self.commands.clear()
