from __future__ import annotations

import logging
from typing import Optional

from .builder import NodeLabelBuilder, PinBuilder
from .crumb import Crumb, CrumbItem
from .geometry import BezPath, Circle, Line, Rect, TranslateScale
from .group import Group, GroupItem
from .scene import Scene
from .style import BLACK, WHITE, Color, Fill, Marker, Stroke, Style, UnitPoint
from .text import Font
from .theme import Theme, Variation
from .tikz_codegen import generate_tikz_document

logger = logging.getLogger(__name__)

SCENE_NAME = "scene"

NODE_POSITIONS = [
    (200.0, 400.0),
    (200.0, 600.0),
    (400.0, 200.0),
    (600.0, 200.0),
    (800.0, 400.0),
    (800.0, 600.0),
    (400.0, 800.0),
    (600.0, 800.0),
    (400.0, 400.0),
    (400.0, 600.0),
    (600.0, 400.0),
    (600.0, 600.0),
]


def roundabout_theme() -> Theme:
    green = Color.rgb8(0, 0x60, 0)
    arrowhead = Marker(
        Crumb.path(BezPath.polyline([(0.0, 0.0), (10.0, 5.0), (0.0, 10.0)]))
    ).with_size(10.0, 10.0).with_refxy(10.0, 5.0).with_named_style("arrowhead")

    dark = Variation().with_strokes([
        ("node", Stroke(Color.rgb8(0, 0x60, 0xFF), 3.0)),
        ("line-thick", Stroke(WHITE, 3.0)),
        ("line-thin", Stroke(WHITE, 0.5)),
    ]).with_fills([
        (SCENE_NAME, Fill.solid(BLACK)),
        ("node", Fill.radial("node-dark")),
        ("token", Fill.radial("token-dark")),
        ("label", Fill.solid(WHITE)),
    ])

    return (
        Theme()
        .with_gradients(
            linear=[("frame", UnitPoint.TOP, UnitPoint.BOTTOM, [WHITE, BLACK])],  # type: ignore[attr-defined]
            radial=[
                ("node", 1.0, [WHITE, green]),
                ("node-dark", 1.0, [BLACK, Color.rgb8(0, 0x80, 0xFF)]),
                ("token", 1.0, [Color.rgb8(0x80, 0, 0x80), Color.rgb8(0xFF, 0, 0)]),
                ("token-dark", 1.0, [BLACK, Color.rgb8(0xFF, 0, 0xFF)]),
            ],
        )
        .with_strokes([
            ("frame", Stroke(BLACK, 0.5)),
            ("node", Stroke(Color.rgb8(0, 0x80, 0), 3.0)),
            ("line-thick", Stroke(BLACK, 3.0)),
            ("line-thin", Stroke(BLACK, 0.5)),
        ])
        .with_fills([
            (SCENE_NAME, Fill.solid(WHITE)),
            ("frame", Fill.linear("frame")),
            ("node", Fill.radial("node")),
            ("token", Fill.radial("token")),
            ("label", Fill.solid(BLACK)),
        ])
        .with_variations([("dark", dark)])
        .with_markers([("arrowhead", arrowhead)])
        .with_fonts([("label", Font.sans_serif().with_size(28.0))])
        .with_scene_style(Style().with_named_fill(SCENE_NAME))
        .with_styles([
            ("frame", Style().with_named_fill("frame").with_named_stroke("frame")),
            ("node", Style().with_named_fill("node").with_named_stroke("node")),
            ("token", Style().with_named_fill("token")),
            ("line-thick", Style().with_named_stroke("line-thick")),
            ("line-thin", Style().with_named_stroke("line-thin")),
            ("arrow", Style().with_named_stroke("line-thin").with_named_end_marker("arrowhead")),
            ("label", Style().with_named_fill("label").with_named_font("label")),
        ])
    )


def roundabout_scene(theme: Theme) -> Scene:
    scene = Scene((1000.0, 1000.0))

    frame = scene.add_rect(Rect(0.0, 0.0, 1000.0, 1000.0))
    node = scene.add_circle(Circle((0.0, 0.0), 40.0))
    token = scene.add_circle(Circle((0.0, 0.0), 10.0))

    node_style = theme.get("node")
    nodes = scene.add_grouped_crumb_items(
        CrumbItem(node, TranslateScale.translate(x, y), node_style) for x, y in NODE_POSITIONS
    )
    tokens = scene.add_grouped_crumb_items(
        CrumbItem(token, TranslateScale.translate(x, y), theme.get("token"))
        for x, y in (NODE_POSITIONS[0], NODE_POSITIONS[7])
    )
    lines = scene.add_grouped_lines([
        (Line((0.0, 500.0), (100.0, 500.0)), theme.get("line-thick")),
        (Line((900.0, 500.0), (1000.0, 500.0)), theme.get("line-thick")),
    ])

    thin = theme.get("line-thin")
    arrow = theme.get("arrow")
    outer = (
        scene.join(nodes, nodes)
        .with_name("outer")
        .with_arcs(arrow, [(0, 2, 300.0), (3, 4, 300.0), (5, 7, 300.0), (6, 1, 300.0)])
        .with_lines(thin, [(2, 3), (4, 5), (7, 6), (1, 0)])
        .as_group(theme)
    )
    inner = (
        scene.join(nodes, nodes)
        .with_name("inner")
        .with_lines(arrow, [(8, 10), (11, 9)])
        .with_polylines(thin, [(10, 11, [(40.0, 0.0)]), (9, 8, [(-40.0, 0.0)])])
        .with_curves(arrow, [(0, 8, [(0.0, -60.0)]), (11, 5, [(20.0, 40.0), (60.0, 40.0)])])
        .as_group(theme)
    )

    pins = (
        PinBuilder()
        .with_name("pins")
        .with_group(nodes)
        .with_indices(range(8, 12))
        .with_offsets([(-40.0, 0.0), (-40.0, 0.0), (40.0, 0.0), (40.0, 0.0)])
        .with_style(thin)
        .build(scene, theme)
    )
    labels = (
        NodeLabelBuilder([f"p{ndx}" for ndx in range(len(NODE_POSITIONS))])
        .with_name("labels")
        .with_group(nodes)
        .with_indices(range(len(NODE_POSITIONS)))
        .with_offsets([(-45.0, -45.0)] * len(NODE_POSITIONS))
        .with_spans(["in"] * 8, ["", "out"])
        .with_style(theme.get("label"))
        .build(scene, theme)
    )
    for result in (outer, inner, pins, labels):
        if result.errors:
            logger.warning("Demo group %r built with %d problem(s)", result.group_id, len(result.errors))

    scene.add_layer(
        Group.from_crumbs([(frame, theme.get("frame"))])
        .with_name(SCENE_NAME)
        .with_group(lines)
        .with_group(outer.group_id)
        .with_group(inner.group_id)
        .with_group(nodes)
        .with_group(tokens)
        .with_group(pins.group_id)
    )
    overlay = scene.add_layer(Group.from_groups([labels.group_id]).with_name("overlay"))
    scene.set_z_index(overlay, 1)
    return scene


def simple_demo_scene(theme: Theme) -> Scene:
    """Small instancing example: one group drawn three times at two scales."""

    scene = Scene((1000.0, 1000.0))
    border = scene.add_rect(Rect(0.0, 0.0, 1000.0, 1000.0))
    circle = scene.add_circle(Circle((133.0, 500.0), 110.0))
    lines = scene.add_grouped_lines([
        (Line((0.0, 500.0), (250.0, 0.0)), theme.get("line-thick")),
        (Line((0.0, 500.0), (250.0, 1000.0)), theme.get("line-thin")),
        (Line((250.0, 1000.0), (250.0, 0.0)), theme.get("line-thin")),
    ])
    mixed = scene.add_group(Group.from_groups([lines]).with_crumb(circle, theme.get("node")))
    half = TranslateScale.scaled(0.5)
    triple = scene.add_group(
        Group.from_groups([mixed])
        .with_group_item(GroupItem(mixed, half * TranslateScale.translate(750.0, 0.0)))
        .with_group_item(GroupItem(mixed, half * TranslateScale.translate(750.0, 1000.0)))
    )
    scene.add_layer(
        Group.from_crumbs([(border, theme.get("frame"))])
        .with_group(triple)
        .with_group_item(GroupItem(triple, TranslateScale.translate(500.0, 0.0)))
    )
    return scene


def run(variation: Optional[str] = None, amount: Optional[float] = None, simple: bool = False) -> str:
    theme = roundabout_theme()
    scene = simple_demo_scene(theme) if simple else roundabout_scene(theme)
    if variation:
        if amount is not None:
            theme.start_variation([variation])
            theme.step_variation(amount)
        else:
            theme.use_variation([variation])
    return generate_tikz_document(scene, theme, title="roundabout" if not simple else "instancing")


if __name__ == "__main__":
    print(run())
