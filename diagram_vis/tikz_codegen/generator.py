"""TikZ backend: paints a flattened scene in draw-list order."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .utils import format_float, format_point, latex_escape, latex_escape_keep_math, tex_name
from ..config import get_vis_config
from ..crumb import (
    CRUMB_ARC,
    CRUMB_CIRCLE,
    CRUMB_LABEL,
    CRUMB_LINE,
    CRUMB_PATH,
    CRUMB_PIN,
    CRUMB_RECT,
    CRUMB_ROUNDED_RECT,
    Crumb,
    DrawItem,
)
from ..geometry import (
    PATH_CLOSE,
    PATH_CURVE,
    PATH_LINE,
    PATH_MOVE,
    PATH_QUAD,
    Point,
    TranslateScale,
)
from ..scene import Scene
from ..style import FILL_LINEAR, Color, GradSpec, LinearGradient, Style
from ..text import ANCHOR_END, ANCHOR_MIDDLE, Font, TextLabel
from ..theme import Theme

logger = logging.getLogger(__name__)

PT_PER_CM = 28.3464567
# extent of a pgf shading definition, in big points
SHADING_SIZE_BP = 100.0

_TEXT_ANCHORS = {ANCHOR_MIDDLE: "base", ANCHOR_END: "base east"}
_FAMILY_SWITCHES = {"sans-serif": r"\sffamily", "monospace": r"\ttfamily"}


standalone_tpl = r"""\documentclass[border=2pt]{standalone}
\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{xcolor}
\usepackage{tikz}
\usetikzlibrary{arrows.meta}
\begin{document}
\begin{minipage}[t]{%s}
%s
%s
\end{minipage}
\end{document}
"""


@dataclass
class _TikzContext:
    theme: Theme
    units_per_cm: float
    colors: Dict[int, str] = field(default_factory=dict)
    shadings: Dict[str, str] = field(default_factory=dict)
    definitions: List[str] = field(default_factory=list)
    pins: int = 0

    def point(self, p: Point) -> str:
        # canvas y grows downwards, TikZ y grows upwards
        return format_point((p[0] / self.units_per_cm, -p[1] / self.units_per_cm))

    def length_cm(self, value: float) -> float:
        return value / self.units_per_cm

    def length_pt(self, value: float) -> str:
        return f"{format_float(value / self.units_per_cm * PT_PER_CM)}pt"

    def color(self, color: Color) -> str:
        rgb = color.rgba & ~0xFF
        name = self.colors.get(rgb)
        if name is None:
            name = tex_name("viscolor", "", len(self.colors))
            r, g, b, _ = color.as_rgba8()
            self.definitions.append(f"\\definecolor{{{name}}}{{RGB}}{{{r},{g},{b}}}")
            self.colors[rgb] = name
        return name

    def shading(self, gradient_name: str) -> Tuple[str, GradSpec]:
        spec = self.theme.get_gradient(gradient_name)
        name = self.shadings.get(gradient_name)
        if name is None:
            name = tex_name("visshading", gradient_name, len(self.shadings))
            self.definitions.append(self._declare_shading(name, spec))
            self.shadings[gradient_name] = name
        return name, spec

    def _declare_shading(self, name: str, spec: GradSpec) -> str:
        if isinstance(spec, LinearGradient):
            extent = SHADING_SIZE_BP
        else:
            extent = 0.5 * SHADING_SIZE_BP * max(spec.radius, 0.0)
        stops = "; ".join(
            f"color({format_float(stop.pos * extent)}bp)=({self.color(stop.color)})"
            for stop in spec.stops
        )
        if isinstance(spec, LinearGradient):
            return f"\\pgfdeclarehorizontalshading{{{name}}}{{{format_float(SHADING_SIZE_BP)}bp}}{{{stops}}}"
        return f"\\pgfdeclareradialshading{{{name}}}{{\\pgfpoint{{0bp}}{{0bp}}}}{{{stops}}}"


def _opacity(color: Color) -> Optional[float]:
    alpha = color.as_rgba8()[3]
    return None if alpha == 255 else alpha / 255.0


def _shading_angle(spec: LinearGradient) -> float:
    # pgf horizontal shadings run left to right; TikZ rotates them counterclockwise
    dx = spec.end.u - spec.start.u
    dy = -(spec.end.v - spec.start.v)
    if dx == 0.0 and dy == 0.0:
        return 0.0
    return math.degrees(math.atan2(dy, dx)) - 90.0


def _paint_options(
    ctx: _TikzContext, style: Style, scale: float, *, fill: bool = True
) -> Tuple[str, List[str]]:
    """TikZ command name and options for a resolved style."""

    options: List[str] = []
    stroked = style.stroke is not None and style.stroke.width > 0.0
    if stroked:
        assert style.stroke is not None
        options.append(f"draw={ctx.color(style.stroke.brush)}")
        options.append(f"line width={ctx.length_pt(abs(scale) * style.stroke.width)}")
        opacity = _opacity(style.stroke.brush)
        if opacity is not None:
            options.append(f"draw opacity={format_float(opacity)}")

    shaded = filled = False
    if fill and style.fill is not None:
        if style.fill.is_gradient:
            assert style.fill.gradient is not None
            name, spec = ctx.shading(style.fill.gradient)
            options.append(f"shading={name}")
            if style.fill.kind == FILL_LINEAR and isinstance(spec, LinearGradient):
                options.append(f"shading angle={format_float(_shading_angle(spec))}")
            shaded = True
        else:
            assert style.fill.color is not None
            options.append(f"fill={ctx.color(style.fill.color)}")
            opacity = _opacity(style.fill.color)
            if opacity is not None:
                options.append(f"fill opacity={format_float(opacity)}")
            filled = True

    if shaded:
        command = "shadedraw" if stroked else "shade"
    elif filled:
        command = "filldraw" if stroked else "fill"
    else:
        command = "draw" if stroked else "path"
    return command, options


def _arrow_options(ctx: _TikzContext, style: Style, scale: float) -> List[str]:
    start = ctx.theme.get_marker(style.markers.start_name)
    end = ctx.theme.get_marker(style.markers.end_name)
    if start is None and end is None:
        return []

    def tip(marker) -> str:
        if marker is None:
            return ""
        return (
            f"{{Stealth[length={ctx.length_pt(abs(scale) * marker.width)}, "
            f"width={ctx.length_pt(abs(scale) * max(marker.height, marker.width))}]}}"
        )

    return [f"{tip(start)}-{tip(end)}"]


def _path_data(ctx: _TikzContext, crumb: Crumb) -> Optional[str]:
    shape = crumb.shape
    if crumb.kind == CRUMB_LINE:
        return f"{ctx.point(shape.p0)} -- {ctx.point(shape.p1)}"
    if crumb.kind == CRUMB_RECT:
        return f"{ctx.point((shape.x0, shape.y0))} rectangle {ctx.point((shape.x1, shape.y1))}"
    if crumb.kind == CRUMB_ROUNDED_RECT:
        rect = shape.rect
        return f"{ctx.point((rect.x0, rect.y0))} rectangle {ctx.point((rect.x1, rect.y1))}"
    if crumb.kind == CRUMB_CIRCLE:
        return f"{ctx.point(shape.center)} circle ({format_float(ctx.length_cm(shape.radius))})"
    if crumb.kind == CRUMB_ARC:
        return (
            f"{ctx.point(shape.start_point)} arc[start angle={format_float(-math.degrees(shape.start_angle))}, "
            f"delta angle={format_float(-math.degrees(shape.sweep_angle))}, "
            f"radius={format_float(ctx.length_cm(shape.radius))}]"
        )
    if crumb.kind == CRUMB_PATH:
        return _bez_path_data(ctx, shape)
    return None


def _bez_path_data(ctx: _TikzContext, path) -> Optional[str]:
    parts: List[str] = []
    current: Point = (0.0, 0.0)
    for el in path.elements:
        if el.kind == PATH_MOVE:
            parts.append(ctx.point(el.points[0]))
        elif el.kind == PATH_LINE:
            parts.append(f"-- {ctx.point(el.points[0])}")
        elif el.kind == PATH_QUAD:
            ctrl, end = el.points
            # raise the quadratic to a cubic with the same shape
            c1 = (current[0] + 2.0 / 3.0 * (ctrl[0] - current[0]), current[1] + 2.0 / 3.0 * (ctrl[1] - current[1]))
            c2 = (end[0] + 2.0 / 3.0 * (ctrl[0] - end[0]), end[1] + 2.0 / 3.0 * (ctrl[1] - end[1]))
            parts.append(f".. controls {ctx.point(c1)} and {ctx.point(c2)} .. {ctx.point(end)}")
        elif el.kind == PATH_CURVE:
            c1, c2, end = el.points
            parts.append(f".. controls {ctx.point(c1)} and {ctx.point(c2)} .. {ctx.point(end)}")
        elif el.kind == PATH_CLOSE:
            parts.append("-- cycle")
        if el.points:
            current = el.points[-1]
    return " ".join(parts) if parts else None


def _font_command(ctx: _TikzContext, font: Font, size: float) -> str:
    size_pt = size / ctx.units_per_cm * PT_PER_CM
    tokens = [f"\\fontsize{{{format_float(size_pt)}}}{{{format_float(1.2 * size_pt)}}}\\selectfont"]
    switch = _FAMILY_SWITCHES.get(font.generic_family)
    if switch:
        tokens.append(switch)
    if font.weight == "bold":
        tokens.append(r"\bfseries")
    if font.style in ("italic", "oblique"):
        tokens.append(r"\itshape")
    return "".join(tokens)


def _label_nodes(ctx: _TikzContext, label: TextLabel, style: Style, font: Font) -> str:
    color = style.fill_color or (style.stroke.brush if style.stroke is not None else None)
    anchor = _TEXT_ANCHORS.get(label.anchor, "base west")
    nodes: List[str] = []
    for part in [label, *label.spans]:
        dx, dy = part.offset
        origin = (part.origin[0] + dx, part.origin[1] + dy)
        size = part.font_size if part.font_size is not None else font.size
        options = [
            f"anchor={anchor}",
            "inner sep=0pt",
            f"font={_font_command(ctx, part.font or font, size)}",
        ]
        if color is not None:
            options.append(f"text={ctx.color(color)}")
        nodes.append(
            f"{ctx.point(origin)} node[{', '.join(options)}] {{{latex_escape_keep_math(part.text)}}}"
        )
    return f"\\path {' '.join(nodes)};"


def _emit_item(ctx: _TikzContext, crumb: Crumb, item: DrawItem, style: Style) -> Optional[str]:
    crumb = crumb.transformed(item.transform)
    scale = item.transform.scale

    if crumb.kind == CRUMB_PIN:
        ctx.pins += 1
        return f"\\coordinate ({tex_name('pin', '', ctx.pins - 1)}) at {ctx.point(crumb.shape.center)};"
    if crumb.kind == CRUMB_LABEL:
        font = ctx.theme.resolve_font(item.style_id, crumb.shape)
        return _label_nodes(ctx, crumb.shape, style, font)

    data = _path_data(ctx, crumb)
    if data is None:
        return None
    open_shape = crumb.kind in (CRUMB_LINE, CRUMB_ARC) or (
        crumb.kind == CRUMB_PATH and not any(el.kind == PATH_CLOSE for el in crumb.shape.elements)
    )
    command, options = _paint_options(ctx, style, scale, fill=crumb.kind != CRUMB_LINE)
    if open_shape:
        options.extend(_arrow_options(ctx, style, scale))
    if crumb.kind == CRUMB_ROUNDED_RECT:
        options.append(f"rounded corners={ctx.length_pt(crumb.shape.radius)}")
    if command == "path" and not options:
        return None
    rendered = f"[{', '.join(options)}]" if options else ""
    return f"\\{command}{rendered} {data};"


def generate_tikz_code(
    scene: Scene,
    theme: Theme,
    *,
    root_transform: Optional[TranslateScale] = None,
    visible_only: bool = True,
) -> str:
    """Color/shading definitions followed by a ``tikzpicture`` of the scene.

    Raises :class:`~diagram_vis.errors.GradientMissingForName` when a style
    fills with a gradient the theme does not define.
    """

    if not isinstance(scene, Scene):
        raise TypeError("scene must be an instance of Scene")
    root = root_transform if root_transform is not None else TranslateScale.identity()
    draw_list = scene.flatten_visible(root) if visible_only else scene.flatten(root)

    ctx = _TikzContext(theme, get_vis_config().tikz_units_per_cm)
    lines: List[str] = []

    width, height = scene.get_size()
    if width > 0.0 and height > 0.0:
        corner0 = root.apply((0.0, 0.0))
        corner1 = root.apply((width, height))
        lines.append(
            f"  \\fill[{ctx.color(theme.get_bg_color())}] {ctx.point(corner0)} rectangle {ctx.point(corner1)};"
        )

    default_style = theme.get_default_style()
    for crumb, item in scene.iter_crumbs(draw_list):
        style = theme.get_style(item.style_id) or default_style
        command = _emit_item(ctx, crumb, item, style)
        if command is not None:
            lines.append("  " + command)

    logger.debug(
        "Emitted %d TikZ command(s) for %d draw item(s)", len(lines), len(draw_list)
    )
    body = "\n".join(["\\begin{tikzpicture}", *lines, "\\end{tikzpicture}"])
    return "\n".join([*ctx.definitions, body])


def generate_tikz_document(
    scene: Scene,
    theme: Theme,
    *,
    title: Optional[str] = None,
    root_transform: Optional[TranslateScale] = None,
    visible_only: bool = True,
) -> str:
    """Render a standalone LaTeX document containing the scene."""

    header = ""
    if title:
        header = "\\noindent\\textbf{" + latex_escape(title.strip()) + "}\\par\\vspace{4pt}"
    tikz_code = generate_tikz_code(
        scene, theme, root_transform=root_transform, visible_only=visible_only
    )
    width, _ = scene.get_size()
    root = root_transform if root_transform is not None else TranslateScale.identity()
    page_width = f"{format_float(max(abs(root.scale) * width / get_vis_config().tikz_units_per_cm, 1.0))}cm"
    return standalone_tpl % (page_width, header, tikz_code)


__all__ = ["generate_tikz_code", "generate_tikz_document", "PT_PER_CM"]
