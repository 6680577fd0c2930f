"""Paint values (colors, strokes, fills, gradients, markers) and styles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from .crumb import Crumb
from .geometry import Point, Rect
from .text import Font


def _channel(value: float) -> int:
    return int(round(max(0.0, min(1.0, value)) * 255.0))


@dataclass(frozen=True)
class Color:
    """Packed ``0xRRGGBBAA`` color."""

    rgba: int

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> "Color":
        return cls(((r & 255) << 24) | ((g & 255) << 16) | ((b & 255) << 8) | 0xFF)

    @classmethod
    def rgba8(cls, r: int, g: int, b: int, a: int) -> "Color":
        return cls(((r & 255) << 24) | ((g & 255) << 16) | ((b & 255) << 8) | (a & 255))

    @classmethod
    def rgb(cls, r: float, g: float, b: float) -> "Color":
        return cls.rgba8(_channel(r), _channel(g), _channel(b), 255)

    @classmethod
    def rgba(cls, r: float, g: float, b: float, a: float) -> "Color":
        return cls.rgba8(_channel(r), _channel(g), _channel(b), _channel(a))

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        digits = text.lstrip("#")
        if len(digits) == 6:
            digits += "ff"
        if len(digits) != 8:
            raise ValueError(f"expected #rrggbb or #rrggbbaa, got {text!r}")
        return cls(int(digits, 16))

    def with_alpha(self, a: float) -> "Color":
        return Color((self.rgba & ~0xFF) | _channel(a))

    def as_rgba8(self) -> Tuple[int, int, int, int]:
        return (
            (self.rgba >> 24) & 255,
            (self.rgba >> 16) & 255,
            (self.rgba >> 8) & 255,
            self.rgba & 255,
        )

    def to_hex(self) -> str:
        r, g, b, a = self.as_rgba8()
        if a == 255:
            return f"#{r:02x}{g:02x}{b:02x}"
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"

    def __repr__(self) -> str:
        return f"Color(#{self.rgba:08x})"


BLACK = Color.rgb8(0, 0, 0)
WHITE = Color.rgb8(255, 255, 255)


@dataclass(frozen=True)
class Stroke:
    brush: Color = BLACK
    width: float = 1.0

    def with_brush(self, brush: Color) -> "Stroke":
        return Stroke(brush, self.width)

    def with_width(self, width: float) -> "Stroke":
        return Stroke(self.brush, float(width))


FILL_COLOR = "color"
FILL_LINEAR = "linear"
FILL_RADIAL = "radial"


@dataclass(frozen=True)
class Fill:
    """Tagged paint: a plain color or the name of a theme gradient."""

    kind: str
    color: Optional[Color] = None
    gradient: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == FILL_COLOR:
            if self.color is None:
                raise ValueError("color fill needs a color")
        elif self.kind in (FILL_LINEAR, FILL_RADIAL):
            if not self.gradient:
                raise ValueError(f"{self.kind} fill needs a gradient name")
        else:
            raise ValueError(f"unknown fill kind {self.kind!r}")

    @classmethod
    def solid(cls, color: Color) -> "Fill":
        return cls(FILL_COLOR, color=color)

    @classmethod
    def linear(cls, name: str) -> "Fill":
        return cls(FILL_LINEAR, gradient=name)

    @classmethod
    def radial(cls, name: str) -> "Fill":
        return cls(FILL_RADIAL, gradient=name)

    @property
    def is_gradient(self) -> bool:
        return self.kind != FILL_COLOR


@dataclass(frozen=True)
class UnitPoint:
    """Point in the unit square of a shape's bounding box."""

    u: float
    v: float

    def resolve(self, rect: Rect) -> Point:
        return (
            rect.x0 + self.u * (rect.x1 - rect.x0),
            rect.y0 + self.v * (rect.y1 - rect.y0),
        )


UnitPoint.TOP_LEFT = UnitPoint(0.0, 0.0)  # type: ignore[attr-defined]
UnitPoint.TOP = UnitPoint(0.5, 0.0)  # type: ignore[attr-defined]
UnitPoint.TOP_RIGHT = UnitPoint(1.0, 0.0)  # type: ignore[attr-defined]
UnitPoint.LEFT = UnitPoint(0.0, 0.5)  # type: ignore[attr-defined]
UnitPoint.CENTER = UnitPoint(0.5, 0.5)  # type: ignore[attr-defined]
UnitPoint.RIGHT = UnitPoint(1.0, 0.5)  # type: ignore[attr-defined]
UnitPoint.BOTTOM_LEFT = UnitPoint(0.0, 1.0)  # type: ignore[attr-defined]
UnitPoint.BOTTOM = UnitPoint(0.5, 1.0)  # type: ignore[attr-defined]
UnitPoint.BOTTOM_RIGHT = UnitPoint(1.0, 1.0)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class GradientStop:
    pos: float
    color: Color


def gradient_stops(stops: Sequence[Union[Color, GradientStop]]) -> Tuple[GradientStop, ...]:
    """Accept explicit stops, or bare colors spread evenly over ``[0, 1]``."""

    if all(isinstance(stop, GradientStop) for stop in stops):
        return tuple(stops)  # type: ignore[arg-type]
    if not stops:
        return ()
    denom = max(len(stops) - 1, 1)
    result = []
    for idx, stop in enumerate(stops):
        if isinstance(stop, GradientStop):
            result.append(stop)
        else:
            result.append(GradientStop(idx / denom, stop))
    return tuple(result)


@dataclass(frozen=True)
class LinearGradient:
    start: UnitPoint
    end: UnitPoint
    stops: Tuple[GradientStop, ...]


@dataclass(frozen=True)
class RadialGradient:
    radius: float
    stops: Tuple[GradientStop, ...]


GradSpec = Union[LinearGradient, RadialGradient]


@dataclass
class Marker:
    """Shape painted at a path end; ``width`` is its extent along the path."""

    crumb: Crumb
    width: float = 0.0
    height: float = 0.0
    refx: float = 0.0
    refy: float = 0.0
    orient: Optional[float] = None
    style_name: Optional[str] = None

    def with_size(self, width: float, height: float) -> "Marker":
        self.width = float(width)
        self.height = float(height)
        return self

    def with_refxy(self, refx: float, refy: float) -> "Marker":
        self.refx = float(refx)
        self.refy = float(refy)
        return self

    def with_orient(self, orient: float) -> "Marker":
        self.orient = float(orient)
        return self

    def with_named_style(self, name: str) -> "Marker":
        self.style_name = name
        return self


@dataclass
class MarkerSuite:
    start_name: Optional[str] = None
    mid_name: Optional[str] = None
    end_name: Optional[str] = None


@dataclass
class Style:
    """Named paint references plus the values they currently resolve to.

    A Style is owned by the theme and shared by reference; the cascade
    rewrites ``stroke``/``fill`` in place whenever the variation changes.
    """

    stroke_name: Optional[str] = None
    fill_name: Optional[str] = None
    stroke: Optional[Stroke] = None
    fill: Optional[Fill] = None
    markers: MarkerSuite = field(default_factory=MarkerSuite)
    font: Optional[Font] = None
    font_name: Optional[str] = None

    def with_stroke(self, stroke: Stroke) -> "Style":
        self.stroke = stroke
        return self

    def with_named_stroke(self, name: str) -> "Style":
        self.stroke_name = name
        return self

    def with_fill(self, fill: Fill) -> "Style":
        self.fill = fill
        return self

    def with_named_fill(self, name: str) -> "Style":
        self.fill_name = name
        return self

    def with_named_start_marker(self, name: str) -> "Style":
        self.markers.start_name = name
        return self

    def with_named_mid_marker(self, name: str) -> "Style":
        self.markers.mid_name = name
        return self

    def with_named_end_marker(self, name: str) -> "Style":
        self.markers.end_name = name
        return self

    def with_font(self, font: Font) -> "Style":
        self.font = font
        return self

    def with_named_font(self, name: str) -> "Style":
        self.font_name = name
        return self

    def clear_stroke(self) -> None:
        self.stroke = None

    def clear_fill(self) -> None:
        self.fill = None

    @property
    def fill_color(self) -> Optional[Color]:
        if self.fill is not None and self.fill.kind == FILL_COLOR:
            return self.fill.color
        return None

    @property
    def fill_gradient_name(self) -> Optional[str]:
        if self.fill is not None and self.fill.is_gradient:
            return self.fill.gradient
        return None

    @property
    def stroke_width(self) -> float:
        return self.stroke.width if self.stroke is not None else 0.0


__all__ = [
    "Color",
    "BLACK",
    "WHITE",
    "Stroke",
    "Fill",
    "FILL_COLOR",
    "FILL_LINEAR",
    "FILL_RADIAL",
    "UnitPoint",
    "GradientStop",
    "gradient_stops",
    "LinearGradient",
    "RadialGradient",
    "GradSpec",
    "Marker",
    "MarkerSuite",
    "Style",
]
