from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from .geometry import Point, Rect, TranslateScale

GENERIC_FAMILIES = ("serif", "sans-serif", "cursive", "monospace")

ANCHOR_START = "start"
ANCHOR_MIDDLE = "middle"
ANCHOR_END = "end"


@dataclass(frozen=True)
class Font:
    """Font request; the first resolvable family wins."""

    family: Tuple[str, ...] = ("serif",)
    size: float = 12.0
    weight: str = "normal"
    style: str = "normal"

    @classmethod
    def serif(cls) -> "Font":
        return cls(family=("serif",))

    @classmethod
    def sans_serif(cls) -> "Font":
        return cls(family=("sans-serif",))

    def with_family(self, names: Sequence[str]) -> "Font":
        return replace(self, family=tuple(names) + self.family)

    def with_size(self, size: float) -> "Font":
        return replace(self, size=float(size))

    def with_weight(self, weight: str) -> "Font":
        return replace(self, weight=weight)

    def with_style(self, style: str) -> "Font":
        return replace(self, style=style)

    @property
    def generic_family(self) -> str:
        for name in reversed(self.family):
            if name in GENERIC_FAMILIES:
                return name
        return "serif"


@dataclass
class TextLabel:
    text: str = ""
    origin: Point = (0.0, 0.0)
    anchor: str = ANCHOR_START
    dx: List[float] = field(default_factory=list)
    dy: List[float] = field(default_factory=list)
    font_size: Optional[float] = None
    font: Optional[Font] = None
    spans: List["TextLabel"] = field(default_factory=list)

    def with_text(self, text: str) -> "TextLabel":
        self.text = text
        return self

    def with_origin(self, origin: Point) -> "TextLabel":
        self.origin = (float(origin[0]), float(origin[1]))
        return self

    def with_start_anchor(self) -> "TextLabel":
        self.anchor = ANCHOR_START
        return self

    def with_middle_anchor(self) -> "TextLabel":
        self.anchor = ANCHOR_MIDDLE
        return self

    def with_end_anchor(self) -> "TextLabel":
        self.anchor = ANCHOR_END
        return self

    def with_dx(self, dx: Sequence[float]) -> "TextLabel":
        self.dx = [float(v) for v in dx]
        return self

    def with_dy(self, dy: Sequence[float]) -> "TextLabel":
        self.dy = [float(v) for v in dy]
        return self

    def with_font_size(self, size: float) -> "TextLabel":
        self.font_size = float(size)
        return self

    def with_font(self, font: Font) -> "TextLabel":
        self.font = font
        return self

    def append_span(self, span: "TextLabel") -> None:
        self.spans.append(span)

    @property
    def offset(self) -> Point:
        return (self.dx[0] if self.dx else 0.0, self.dy[0] if self.dy else 0.0)

    def bbox(self) -> Rect:
        # Text is not shaped here; the origin stands in for the extent.
        x, y = self.origin
        return Rect(x, y, x, y)

    def transformed(self, ts: TranslateScale) -> "TextLabel":
        return TextLabel(
            text=self.text,
            origin=ts.apply(self.origin),
            anchor=self.anchor,
            dx=[ts.scale * v for v in self.dx],
            dy=[ts.scale * v for v in self.dy],
            font_size=None if self.font_size is None else abs(ts.scale) * self.font_size,
            font=self.font,
            spans=[span.transformed(ts) for span in self.spans],
        )


__all__ = [
    "Font",
    "TextLabel",
    "GENERIC_FAMILIES",
    "ANCHOR_START",
    "ANCHOR_MIDDLE",
    "ANCHOR_END",
]
