"""Planar primitives and similarity transforms used by the scene graph.

Coordinates follow the canvas convention: x grows to the right, y grows
downwards.  Points and vectors are plain ``(x, y)`` float tuples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]
Vec2 = Tuple[float, float]

_ARC_SAMPLES = 64
_CURVE_SAMPLES = 32


def _vec2(a: Point, b: Point) -> Vec2:
    return b[0] - a[0], b[1] - a[1]


def _add2(a: Point, v: Vec2) -> Point:
    return a[0] + v[0], a[1] + v[1]


def _scale2(v: Vec2, k: float) -> Vec2:
    return v[0] * k, v[1] * k


def _norm2(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def _midpoint2(a: Point, b: Point) -> Point:
    return (a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _unit(v: Vec2) -> Vec2:
    norm = _norm2(v)
    if norm <= 0.0:
        raise ZeroDivisionError("cannot normalise a zero-length vector")
    return v[0] / norm, v[1] / norm


def normalize_angle(angle: float) -> float:
    """Map ``angle`` into the half-open interval ``(-pi, pi]``."""

    two_pi = 2.0 * math.pi
    angle = math.fmod(angle, two_pi)
    if angle <= -math.pi:
        angle += two_pi
    elif angle > math.pi:
        angle -= two_pi
    return angle


@dataclass(frozen=True)
class TranslateScale:
    """Similarity transform ``p -> scale * p + translation``.

    ``a * b`` composes like function application: ``b`` is applied first.
    """

    translation: Vec2 = (0.0, 0.0)
    scale: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "translation", (float(self.translation[0]), float(self.translation[1]))
        )
        object.__setattr__(self, "scale", float(self.scale))

    @classmethod
    def identity(cls) -> "TranslateScale":
        return cls()

    @classmethod
    def translate(cls, x: float, y: float) -> "TranslateScale":
        return cls((x, y), 1.0)

    @classmethod
    def scaled(cls, scale: float) -> "TranslateScale":
        return cls((0.0, 0.0), scale)

    def compose(self, inner: "TranslateScale") -> "TranslateScale":
        """Return ``self ∘ inner``."""

        tx = self.scale * inner.translation[0] + self.translation[0]
        ty = self.scale * inner.translation[1] + self.translation[1]
        return TranslateScale((tx, ty), self.scale * inner.scale)

    def __mul__(self, other: "TranslateScale") -> "TranslateScale":
        if not isinstance(other, TranslateScale):
            return NotImplemented
        return self.compose(other)

    def apply(self, point: Point) -> Point:
        return (
            self.scale * point[0] + self.translation[0],
            self.scale * point[1] + self.translation[1],
        )

    def apply_vec(self, vec: Vec2) -> Vec2:
        return self.scale * vec[0], self.scale * vec[1]

    def inverse(self) -> "TranslateScale":
        if self.scale == 0.0:
            raise ZeroDivisionError("degenerate transform has no inverse")
        inv = 1.0 / self.scale
        return TranslateScale((-self.translation[0] * inv, -self.translation[1] * inv), inv)

    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.translation == (0.0, 0.0)


IDENTITY = TranslateScale()


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "Rect":
        return cls(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center(self) -> Point:
        return (self.x0 + self.x1) * 0.5, (self.y0 + self.y1) * 0.5

    def bbox(self) -> "Rect":
        return Rect.from_points((self.x0, self.y0), (self.x1, self.y1))

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min(self.x0, other.x0),
            min(self.y0, other.y0),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )

    def transformed(self, ts: TranslateScale) -> "Rect":
        return Rect.from_points(ts.apply((self.x0, self.y0)), ts.apply((self.x1, self.y1)))


@dataclass(frozen=True)
class Line:
    p0: Point
    p1: Point

    def length(self) -> float:
        return _distance(self.p0, self.p1)

    def bbox(self) -> Rect:
        return Rect.from_points(self.p0, self.p1)

    def transformed(self, ts: TranslateScale) -> "Line":
        return Line(ts.apply(self.p0), ts.apply(self.p1))


@dataclass(frozen=True)
class RoundedRect:
    rect: Rect
    radius: float

    def bbox(self) -> Rect:
        return self.rect.bbox()

    def transformed(self, ts: TranslateScale) -> "RoundedRect":
        return RoundedRect(self.rect.transformed(ts), abs(ts.scale) * self.radius)


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float

    def bbox(self) -> Rect:
        cx, cy = self.center
        r = abs(self.radius)
        return Rect(cx - r, cy - r, cx + r, cy + r)

    def transformed(self, ts: TranslateScale) -> "Circle":
        return Circle(ts.apply(self.center), abs(ts.scale) * self.radius)


@dataclass(frozen=True)
class Arc:
    """Circular arc; angles in radians, positive sweep turns from +x towards +y."""

    center: Point
    radius: float
    start_angle: float
    sweep_angle: float

    def point_at(self, angle: float) -> Point:
        return (
            self.center[0] + self.radius * math.cos(angle),
            self.center[1] + self.radius * math.sin(angle),
        )

    @property
    def start_point(self) -> Point:
        return self.point_at(self.start_angle)

    @property
    def end_point(self) -> Point:
        return self.point_at(self.start_angle + self.sweep_angle)

    def sample(self, count: int = _ARC_SAMPLES) -> np.ndarray:
        angles = self.start_angle + np.linspace(0.0, self.sweep_angle, max(count, 2))
        xs = self.center[0] + self.radius * np.cos(angles)
        ys = self.center[1] + self.radius * np.sin(angles)
        return np.column_stack((xs, ys))

    def bbox(self) -> Rect:
        return bbox_of_points(self.sample())

    def transformed(self, ts: TranslateScale) -> "Arc":
        return Arc(ts.apply(self.center), abs(ts.scale) * self.radius, self.start_angle, self.sweep_angle)


PATH_MOVE = "move"
PATH_LINE = "line"
PATH_QUAD = "quad"
PATH_CURVE = "curve"
PATH_CLOSE = "close"

_PATH_ARITY = {PATH_MOVE: 1, PATH_LINE: 1, PATH_QUAD: 2, PATH_CURVE: 3, PATH_CLOSE: 0}


@dataclass(frozen=True)
class PathEl:
    kind: str
    points: Tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        arity = _PATH_ARITY.get(self.kind)
        if arity is None:
            raise ValueError(f"unknown path element kind {self.kind!r}")
        if len(self.points) != arity:
            raise ValueError(f"{self.kind} element needs {arity} point(s), got {len(self.points)}")

    @classmethod
    def move_to(cls, p: Point) -> "PathEl":
        return cls(PATH_MOVE, (p,))

    @classmethod
    def line_to(cls, p: Point) -> "PathEl":
        return cls(PATH_LINE, (p,))

    @classmethod
    def quad_to(cls, c: Point, p: Point) -> "PathEl":
        return cls(PATH_QUAD, (c, p))

    @classmethod
    def curve_to(cls, c1: Point, c2: Point, p: Point) -> "PathEl":
        return cls(PATH_CURVE, (c1, c2, p))

    @classmethod
    def close(cls) -> "PathEl":
        return cls(PATH_CLOSE, ())

    def transformed(self, ts: TranslateScale) -> "PathEl":
        return PathEl(self.kind, tuple(ts.apply(p) for p in self.points))


@dataclass(frozen=True)
class BezPath:
    elements: Tuple[PathEl, ...] = field(default_factory=tuple)

    @classmethod
    def from_elements(cls, elements: Iterable[PathEl]) -> "BezPath":
        return cls(tuple(elements))

    @classmethod
    def polyline(cls, points: Sequence[Point]) -> "BezPath":
        if not points:
            return cls()
        elements = [PathEl.move_to(points[0])]
        elements.extend(PathEl.line_to(p) for p in points[1:])
        return cls(tuple(elements))

    def vertices(self) -> List[Point]:
        """End points of every element, in order."""

        return [el.points[-1] for el in self.elements if el.points]

    def sample(self, count: int = _CURVE_SAMPLES) -> np.ndarray:
        samples: List[np.ndarray] = []
        current: Point = (0.0, 0.0)
        start: Point = current
        t = np.linspace(0.0, 1.0, max(count, 2))[:, None]
        for el in self.elements:
            if el.kind == PATH_MOVE:
                current = start = el.points[0]
                samples.append(np.asarray([current], dtype=float))
            elif el.kind == PATH_LINE:
                current = el.points[0]
                samples.append(np.asarray([current], dtype=float))
            elif el.kind == PATH_QUAD:
                p0 = np.asarray(current, dtype=float)
                c, p = (np.asarray(q, dtype=float) for q in el.points)
                samples.append((1 - t) ** 2 * p0 + 2 * (1 - t) * t * c + t ** 2 * p)
                current = el.points[1]
            elif el.kind == PATH_CURVE:
                p0 = np.asarray(current, dtype=float)
                c1, c2, p = (np.asarray(q, dtype=float) for q in el.points)
                samples.append(
                    (1 - t) ** 3 * p0
                    + 3 * (1 - t) ** 2 * t * c1
                    + 3 * (1 - t) * t ** 2 * c2
                    + t ** 3 * p
                )
                current = el.points[2]
            else:
                current = start
        if not samples:
            return np.zeros((0, 2), dtype=float)
        return np.vstack(samples)

    def bbox(self) -> Rect:
        return bbox_of_points(self.sample())

    def transformed(self, ts: TranslateScale) -> "BezPath":
        return BezPath(tuple(el.transformed(ts) for el in self.elements))


def bbox_of_points(points: object) -> Rect:
    """Bounding box of a sequence (or ``(n, 2)`` array) of points."""

    arr = np.asarray(points, dtype=float).reshape(-1, 2)
    if arr.size == 0:
        return Rect(0.0, 0.0, 0.0, 0.0)
    mins = arr.min(axis=0)
    maxs = arr.max(axis=0)
    return Rect(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


__all__ = [
    "Point",
    "Vec2",
    "TranslateScale",
    "IDENTITY",
    "Rect",
    "Line",
    "RoundedRect",
    "Circle",
    "Arc",
    "PathEl",
    "BezPath",
    "PATH_MOVE",
    "PATH_LINE",
    "PATH_QUAD",
    "PATH_CURVE",
    "PATH_CLOSE",
    "bbox_of_points",
    "normalize_angle",
    "_add2",
    "_distance",
    "_midpoint2",
    "_norm2",
    "_scale2",
    "_unit",
    "_vec2",
]
