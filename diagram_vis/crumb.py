"""Drawing primitives ("crumbs") and the opaque ids of the scene arenas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from .geometry import (
    IDENTITY,
    Arc,
    BezPath,
    Circle,
    Line,
    Rect,
    RoundedRect,
    TranslateScale,
)
from .text import TextLabel


@dataclass(frozen=True, order=True)
class CrumbId:
    index: int

    def __repr__(self) -> str:
        return f"CrumbId({self.index})"


@dataclass(frozen=True, order=True)
class GroupId:
    index: int

    def __repr__(self) -> str:
        return f"GroupId({self.index})"


@dataclass(frozen=True, order=True)
class StyleId:
    index: int

    def __repr__(self) -> str:
        return f"StyleId({self.index})"


CRUMB_LINE = "line"
CRUMB_RECT = "rect"
CRUMB_ROUNDED_RECT = "rounded_rect"
CRUMB_CIRCLE = "circle"
CRUMB_ARC = "arc"
CRUMB_PATH = "path"
CRUMB_PIN = "pin"
CRUMB_LABEL = "label"

CRUMB_KINDS = (
    CRUMB_LINE,
    CRUMB_RECT,
    CRUMB_ROUNDED_RECT,
    CRUMB_CIRCLE,
    CRUMB_ARC,
    CRUMB_PATH,
    CRUMB_PIN,
    CRUMB_LABEL,
)

Shape = Union[Line, Rect, RoundedRect, Circle, Arc, BezPath, TextLabel]

_SHAPE_TYPES = {
    CRUMB_LINE: Line,
    CRUMB_RECT: Rect,
    CRUMB_ROUNDED_RECT: RoundedRect,
    CRUMB_CIRCLE: Circle,
    CRUMB_ARC: Arc,
    CRUMB_PATH: BezPath,
    CRUMB_PIN: Circle,
    CRUMB_LABEL: TextLabel,
}


@dataclass
class Crumb:
    """Tagged geometric primitive; ``kind`` selects how ``shape`` is drawn."""

    kind: str
    shape: Shape

    def __post_init__(self) -> None:
        expected = _SHAPE_TYPES.get(self.kind)
        if expected is None:
            raise ValueError(f"unknown crumb kind {self.kind!r}")
        if not isinstance(self.shape, expected):
            raise TypeError(
                f"{self.kind} crumb needs {expected.__name__}, got {type(self.shape).__name__}"
            )

    @classmethod
    def line(cls, line: Line) -> "Crumb":
        return cls(CRUMB_LINE, line)

    @classmethod
    def rect(cls, rect: Rect) -> "Crumb":
        return cls(CRUMB_RECT, rect)

    @classmethod
    def rounded_rect(cls, rect: RoundedRect) -> "Crumb":
        return cls(CRUMB_ROUNDED_RECT, rect)

    @classmethod
    def circle(cls, circle: Circle) -> "Crumb":
        return cls(CRUMB_CIRCLE, circle)

    @classmethod
    def arc(cls, arc: Arc) -> "Crumb":
        return cls(CRUMB_ARC, arc)

    @classmethod
    def path(cls, path: BezPath) -> "Crumb":
        return cls(CRUMB_PATH, path)

    @classmethod
    def pin(cls, circle: Circle) -> "Crumb":
        return cls(CRUMB_PIN, circle)

    @classmethod
    def label(cls, label: TextLabel) -> "Crumb":
        return cls(CRUMB_LABEL, label)

    @property
    def is_circular(self) -> bool:
        return self.kind in (CRUMB_CIRCLE, CRUMB_PIN)

    def circle_geometry(self) -> Optional[Circle]:
        """Center and radius of a circle or pin, ``None`` for other kinds."""

        if self.is_circular:
            return self.shape  # type: ignore[return-value]
        return None

    def bbox(self, ts: TranslateScale = IDENTITY) -> Rect:
        return self.shape.transformed(ts).bbox()

    def transformed(self, ts: TranslateScale) -> "Crumb":
        return Crumb(self.kind, self.shape.transformed(ts))


class CrumbItem(NamedTuple):
    """Reference from a group to a crumb."""

    crumb_id: CrumbId
    transform: TranslateScale = IDENTITY
    style_id: Optional[StyleId] = None


class DrawItem(NamedTuple):
    """One entry of the flattened draw list."""

    crumb_id: CrumbId
    transform: TranslateScale
    style_id: Optional[StyleId]


__all__ = [
    "CrumbId",
    "GroupId",
    "StyleId",
    "Crumb",
    "CrumbItem",
    "DrawItem",
    "Shape",
    "CRUMB_KINDS",
    "CRUMB_LINE",
    "CRUMB_RECT",
    "CRUMB_ROUNDED_RECT",
    "CRUMB_CIRCLE",
    "CRUMB_ARC",
    "CRUMB_PATH",
    "CRUMB_PIN",
    "CRUMB_LABEL",
]
