"""Theme: style table, named paints and the variation cascade.

Styles refer to strokes and fills by name.  The theme resolves every name
against the active variation path and writes the resulting value into the
shared :class:`~diagram_vis.style.Style` object, so switching variations
touches the style table only, never the scene.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import get_vis_config
from .crumb import StyleId
from .errors import GradientMissingForName
from .style import (
    WHITE,
    Color,
    Fill,
    GradSpec,
    GradientStop,
    LinearGradient,
    Marker,
    RadialGradient,
    Stroke,
    Style,
    UnitPoint,
    gradient_stops,
)
from .text import Font, TextLabel
from .tweener import Tweener

logger = logging.getLogger(__name__)

VariationPath = Union[str, Sequence[str], None]
Stops = Sequence[Union[Color, GradientStop]]


@dataclass
class Variation:
    strokes: Dict[str, Stroke] = field(default_factory=dict)
    fills: Dict[str, Fill] = field(default_factory=dict)
    variations: Dict[str, "Variation"] = field(default_factory=dict)

    def with_strokes(self, strokes: Iterable[Tuple[str, Stroke]]) -> "Variation":
        self.strokes.update(strokes)
        return self

    def with_fills(self, fills: Iterable[Tuple[str, Fill]]) -> "Variation":
        self.fills.update(fills)
        return self

    def with_variations(self, variations: Iterable[Tuple[str, "Variation"]]) -> "Variation":
        self.variations.update(variations)
        return self

    def get_variation(self, name: str) -> Optional["Variation"]:
        return self.variations.get(name)


def _as_path(path: VariationPath) -> Tuple[str, ...]:
    if path is None:
        return ()
    if isinstance(path, str):
        return (path,)
    return tuple(path)


@dataclass
class _PendingTween:
    style: Style
    attr: str
    tweener: Tweener


@dataclass
class Theme:
    default_style: Style = field(default_factory=Style)
    scene_style: Style = field(default_factory=Style)
    original: Variation = field(default_factory=Variation)
    styles: List[Style] = field(default_factory=list)
    named_styles: Dict[str, StyleId] = field(default_factory=dict)
    gradspecs: Dict[str, GradSpec] = field(default_factory=dict)
    markers: Dict[str, Marker] = field(default_factory=dict)
    fonts: Dict[str, Font] = field(default_factory=dict)
    default_font: Font = field(default_factory=Font)
    active_path: Tuple[str, ...] = ()
    _tweens: List[_PendingTween] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def with_default_style(self, style: Style) -> "Theme":
        self.default_style = style
        self._resolve_all(self.active_path)
        return self

    def with_scene_style(self, style: Style) -> "Theme":
        self.scene_style = style
        self._resolve_all(self.active_path)
        return self

    def with_default_font(self, font: Font) -> "Theme":
        self.default_font = font
        return self

    def with_strokes(self, strokes: Iterable[Tuple[str, Stroke]]) -> "Theme":
        self.original.with_strokes(strokes)
        self._resolve_all(self.active_path)
        return self

    def with_fills(self, fills: Iterable[Tuple[str, Fill]]) -> "Theme":
        self.original.with_fills(fills)
        self._resolve_all(self.active_path)
        return self

    def with_variations(self, variations: Iterable[Tuple[str, Variation]]) -> "Theme":
        self.original.with_variations(variations)
        self._resolve_all(self.active_path)
        return self

    def with_styles(self, styles: Iterable[Tuple[str, Style]]) -> "Theme":
        nodes = self._variation_chain(self.active_path)
        for name, style in styles:
            style_id = StyleId(len(self.styles))
            self.styles.append(style)
            self.named_styles[name] = style_id
            self._resolve_style(style, nodes)
        return self

    def with_gradients(
        self,
        linear: Iterable[Tuple[str, UnitPoint, UnitPoint, Stops]] = (),
        radial: Iterable[Tuple[str, float, Stops]] = (),
    ) -> "Theme":
        for name, start, end, stops in linear:
            self.gradspecs[name] = LinearGradient(start, end, gradient_stops(stops))
        for name, radius, stops in radial:
            self.gradspecs[name] = RadialGradient(float(radius), gradient_stops(stops))
        return self

    def with_markers(self, markers: Iterable[Tuple[str, Marker]]) -> "Theme":
        self.markers.update(markers)
        return self

    def with_fonts(self, fonts: Iterable[Tuple[str, Font]]) -> "Theme":
        self.fonts.update(fonts)
        return self

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[StyleId]:
        return self.named_styles.get(name)

    def get_style(self, style_id: Optional[StyleId]) -> Optional[Style]:
        if style_id is None or not 0 <= style_id.index < len(self.styles):
            return None
        return self.styles[style_id.index]

    def get_style_by_name(self, name: str) -> Optional[Style]:
        return self.get_style(self.get(name))

    def get_default_style(self) -> Style:
        return self.default_style

    def get_stroke(self, style_id: Optional[StyleId]) -> Optional[Stroke]:
        style = self.get_style(style_id)
        return style.stroke if style is not None else None

    def get_fill(self, style_id: Optional[StyleId]) -> Optional[Fill]:
        style = self.get_style(style_id)
        return style.fill if style is not None else None

    def get_bg_color(self) -> Color:
        return self.scene_style.fill_color or WHITE

    def get_gradient(self, name: str) -> GradSpec:
        try:
            return self.gradspecs[name]
        except KeyError:
            raise GradientMissingForName(name) from None

    def get_gradspecs(self) -> Dict[str, GradSpec]:
        return dict(self.gradspecs)

    def get_marker(self, name: Optional[str]) -> Optional[Marker]:
        if name is None:
            return None
        return self.markers.get(name)

    def get_font(self, name: Optional[str]) -> Optional[Font]:
        if name is None:
            return None
        return self.fonts.get(name)

    def get_marker_lengths(self, style_id: Optional[StyleId]) -> Tuple[float, float]:
        """Extents of the start and end markers of a style (0 when absent)."""

        style = self.get_style(style_id)
        if style is None:
            return 0.0, 0.0
        start = self.get_marker(style.markers.start_name)
        end = self.get_marker(style.markers.end_name)
        for name, marker in (
            (style.markers.start_name, start),
            (style.markers.end_name, end),
        ):
            if name is not None and marker is None:
                logger.warning("Unknown marker %r in %r; treating as absent", name, style_id)
        return (
            start.width if start is not None else 0.0,
            end.width if end is not None else 0.0,
        )

    def resolve_font(self, style_id: Optional[StyleId], label: Optional[TextLabel] = None) -> Font:
        if label is not None and label.font is not None:
            return label.font
        style = self.get_style(style_id)
        if style is not None:
            if style.font is not None:
                return style.font
            named = self.get_font(style.font_name)
            if named is not None:
                return named
        return self.default_font

    # ------------------------------------------------------------------
    # Variation cascade
    # ------------------------------------------------------------------

    def _variation_chain(self, path: Tuple[str, ...]) -> List[Variation]:
        """Variations along ``path``, least specific (original) first."""

        chain = [self.original]
        current = self.original
        for name in path:
            nested = current.get_variation(name)
            if nested is None:
                logger.warning("Unknown variation %r in path %r; truncating", name, list(path))
                break
            chain.append(nested)
            current = nested
        return chain

    @staticmethod
    def _lookup(chain: List[Variation], table: str, name: str):
        for variation in reversed(chain):
            value = getattr(variation, table).get(name)
            if value is not None:
                return value
        return None

    def _target_values(
        self, style: Style, chain: List[Variation]
    ) -> Tuple[Optional[Stroke], Optional[Fill]]:
        stroke = style.stroke
        fill = style.fill
        if style.stroke_name is not None:
            stroke = self._lookup(chain, "strokes", style.stroke_name)
            if stroke is None and style is not self.default_style:
                stroke = self.default_style.stroke
        if style.fill_name is not None:
            fill = self._lookup(chain, "fills", style.fill_name)
            if fill is None and style is not self.default_style:
                fill = self.default_style.fill
        return stroke, fill

    def _resolve_style(self, style: Style, chain: List[Variation]) -> None:
        style.stroke, style.fill = self._target_values(style, chain)

    def _all_styles(self) -> List[Style]:
        return [self.default_style, self.scene_style, *self.styles]

    def _resolve_all(self, path: Tuple[str, ...]) -> None:
        chain = self._variation_chain(path)
        for style in self._all_styles():
            self._resolve_style(style, chain)

    def use_variation(self, path: VariationPath) -> None:
        """Re-resolve every style against the variation at ``path``."""

        self._tweens = []
        self.active_path = _as_path(path)
        self._resolve_all(self.active_path)
        logger.debug(
            "Resolved %d style(s) for variation %r", len(self.styles), list(self.active_path)
        )

    def use_original_variation(self) -> None:
        self.use_variation(())

    def start_variation(self, path: VariationPath, max_subdivision: Optional[int] = None) -> None:
        """Begin a gradual switch to ``path``; advance it with :meth:`step_variation`."""

        if max_subdivision is None:
            max_subdivision = get_vis_config().tween_max_subdivision
        self.active_path = _as_path(path)
        chain = self._variation_chain(self.active_path)
        self._tweens = []
        for style in self._all_styles():
            stroke, fill = self._target_values(style, chain)
            for attr, target in (("stroke", stroke), ("fill", fill)):
                current = getattr(style, attr)
                if current is None or target is None:
                    setattr(style, attr, target)
                elif current != target:
                    self._tweens.append(
                        _PendingTween(style, attr, Tweener(current, target, max_subdivision))
                    )
        logger.debug(
            "Started variation %r with %d tween(s)", list(self.active_path), len(self._tweens)
        )

    def start_original_variation(self, max_subdivision: Optional[int] = None) -> None:
        self.start_variation((), max_subdivision)

    def step_variation(self, amount: float) -> bool:
        """Advance the running transition; return ``True`` once it has completed."""

        for pending in self._tweens:
            value = pending.tweener.tween_on(amount)
            if value is not None:
                setattr(pending.style, pending.attr, value)
        finished = all(pending.tweener.is_finished for pending in self._tweens)
        if finished:
            self._tweens = []
        return finished

    @property
    def is_transitioning(self) -> bool:
        return bool(self._tweens)

    def debug_summary(self) -> str:
        return f"Theme(styles={len(self.styles)}, variation={list(self.active_path)})"


__all__ = ["Theme", "Variation", "VariationPath"]
