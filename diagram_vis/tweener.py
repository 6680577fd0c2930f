"""Gradual transitions between resolved paint values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from .style import FILL_COLOR, Color, Fill, Stroke

T = TypeVar("T")


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_color(a: Color, b: Color, t: float) -> Color:
    channels = [
        max(0, min(255, int(round(_lerp(x, y, t)))))
        for x, y in zip(a.as_rgba8(), b.as_rgba8())
    ]
    return Color.rgba8(*channels)


def lerp_stroke(a: Stroke, b: Stroke, t: float) -> Stroke:
    return Stroke(lerp_color(a.brush, b.brush, t), _lerp(a.width, b.width, t))


def lerp_fill(a: Fill, b: Fill, t: float) -> Fill:
    if a.kind == FILL_COLOR and b.kind == FILL_COLOR:
        return Fill.solid(lerp_color(a.color, b.color, t))  # type: ignore[arg-type]
    # gradients cannot be blended by name; switch once the tween completes
    return b if t >= 1.0 else a


_LERPS: Dict[type, Callable] = {Color: lerp_color, Stroke: lerp_stroke, Fill: lerp_fill}


def lerp(a: T, b: T, t: float) -> T:
    func = _LERPS.get(type(a))
    if func is None:
        raise TypeError(f"cannot tween values of type {type(a).__name__}")
    return func(a, b, t)


def breakdown(start: T, stop: T, max_inner: int) -> List[T]:
    """``start``, ``max_inner`` evenly spaced inner values, then ``stop``."""

    count = max(int(max_inner), 0)
    inner = [lerp(start, stop, (i + 1) / (count + 1)) for i in range(count)]
    return [start, *inner, stop]


@dataclass
class Tweener(Generic[T]):
    start: T
    stop: T
    max_inner: int = 1
    position: float = 0.0
    breakpoints: List[T] = field(init=False)
    value: T = field(init=False)

    def __post_init__(self) -> None:
        self.breakpoints = breakdown(self.start, self.stop, self.max_inner)
        self.value = self.start

    @property
    def num_segments(self) -> int:
        return len(self.breakpoints) - 1

    @property
    def is_finished(self) -> bool:
        return self.position >= 1.0

    def tween_on(self, amount: float) -> Optional[T]:
        """Advance by ``amount`` in tween space; ``None`` if nothing moved.

        The accumulated amount saturates at 1, where the value equals
        ``stop`` exactly.
        """

        if amount <= 0.0:
            return None
        self.position = min(self.position + amount, 1.0)
        if self.position >= 1.0:
            self.value = self.breakpoints[-1]
            return self.value
        scaled = self.position * self.num_segments
        index = int(scaled)
        self.value = lerp(self.breakpoints[index], self.breakpoints[index + 1], scaled - index)
        return self.value

    def reverse(self) -> None:
        self.breakpoints.reverse()
        self.start, self.stop = self.stop, self.start
        self.position = 0.0
        self.value = self.start


@dataclass
class LinearEasing:
    """Maps elapsed time fractions to increments in tween space."""

    position: float = 0.0

    def ease(self, time: float) -> float:
        time = min(time, 1.0)
        if time > self.position:
            delta = time - self.position
            self.position = time
            return delta
        return 0.0

    def restart(self) -> None:
        self.position = 0.0


__all__ = [
    "Tweener",
    "LinearEasing",
    "breakdown",
    "lerp",
    "lerp_color",
    "lerp_fill",
    "lerp_stroke",
]
