from __future__ import annotations

import logging

import pytest

from diagram_vis import (
    BLACK,
    WHITE,
    Color,
    Crumb,
    Circle,
    Fill,
    Font,
    GradientStop,
    LinearGradient,
    Marker,
    RadialGradient,
    Stroke,
    Style,
    StyleId,
    TextLabel,
    Theme,
    UnitPoint,
    Variation,
)
from diagram_vis.errors import GradientMissingForName


def _node_theme() -> Theme:
    return (
        Theme()
        .with_fills([("node", Fill.radial("G1")), ("scene", Fill.solid(WHITE))])
        .with_strokes([("node", Stroke(BLACK, 2.0))])
        .with_variations([
            (
                "dark",
                Variation()
                .with_fills([("node", Fill.radial("G2")), ("scene", Fill.solid(BLACK))])
                .with_variations([
                    ("contrast", Variation().with_strokes([("node", Stroke(WHITE, 4.0))])),
                ]),
            ),
        ])
        .with_scene_style(Style().with_named_fill("scene"))
        .with_styles([("node", Style().with_named_fill("node").with_named_stroke("node"))])
    )


def test_named_fill_follows_active_variation() -> None:
    theme = _node_theme()
    node = theme.get("node")
    style = theme.get_style(node)

    assert theme.get_fill(node) == Fill.radial("G1")

    theme.use_variation(["dark"])
    assert theme.get_fill(node) == Fill.radial("G2")
    assert theme.get_style(node) is style

    theme.use_original_variation()
    assert theme.get_fill(node) == Fill.radial("G1")


def test_nested_variation_falls_back_to_enclosing_levels() -> None:
    theme = _node_theme()
    node = theme.get("node")

    theme.use_variation(["dark", "contrast"])

    assert theme.get_stroke(node) == Stroke(WHITE, 4.0)
    assert theme.get_fill(node) == Fill.radial("G2")
    assert theme.active_path == ("dark", "contrast")


def test_unknown_variation_truncates_path(caplog: pytest.LogCaptureFixture) -> None:
    theme = _node_theme()
    node = theme.get("node")

    with caplog.at_level(logging.WARNING, logger="diagram_vis.theme"):
        theme.use_variation(["dark", "neon"])

    assert theme.get_fill(node) == Fill.radial("G2")
    assert theme.get_stroke(node) == Stroke(BLACK, 2.0)
    assert any("neon" in record.getMessage() for record in caplog.records)


def test_missing_name_uses_default_style_values() -> None:
    theme = (
        Theme()
        .with_default_style(Style().with_stroke(Stroke(BLACK, 0.5)).with_fill(Fill.solid(WHITE)))
        .with_styles([("ghost", Style().with_named_stroke("nope").with_named_fill("nope"))])
    )
    ghost = theme.get("ghost")

    assert theme.get_stroke(ghost) == Stroke(BLACK, 0.5)
    assert theme.get_fill(ghost) == Fill.solid(WHITE)


def test_unnamed_values_are_left_alone() -> None:
    theme = Theme().with_styles([("fixed", Style().with_stroke(Stroke(BLACK, 3.0)))])
    fixed = theme.get("fixed")

    theme.use_variation("dark")

    assert theme.get_stroke(fixed) == Stroke(BLACK, 3.0)
    assert theme.get_fill(fixed) is None


def test_lookups_by_missing_id_or_name() -> None:
    theme = _node_theme()

    assert theme.get("missing") is None
    assert theme.get_style(None) is None
    assert theme.get_style(StyleId(99)) is None
    assert theme.get_stroke(StyleId(99)) is None
    assert theme.get_style_by_name("node") is theme.styles[0]


def test_background_color_follows_scene_style() -> None:
    theme = _node_theme()
    assert theme.get_bg_color() == WHITE

    theme.use_variation("dark")
    assert theme.get_bg_color() == BLACK

    assert Theme().get_bg_color() == WHITE


def test_stroke_tween_reaches_target_in_steps() -> None:
    theme = (
        Theme()
        .with_strokes([("edge", Stroke(BLACK, 1.0))])
        .with_variations([("bold", Variation().with_strokes([("edge", Stroke(WHITE, 3.0))]))])
        .with_styles([("edge", Style().with_named_stroke("edge"))])
    )
    edge = theme.get("edge")

    theme.start_variation(["bold"], max_subdivision=1)
    assert theme.is_transitioning

    assert theme.step_variation(0.5) is False
    halfway = theme.get_stroke(edge)
    assert halfway.width == pytest.approx(2.0)
    assert halfway.brush.as_rgba8() == (128, 128, 128, 255)

    assert theme.step_variation(0.5) is True
    assert theme.get_stroke(edge) == Stroke(WHITE, 3.0)
    assert not theme.is_transitioning


def test_gradient_fill_switches_at_the_end_of_a_tween() -> None:
    theme = _node_theme()
    node = theme.get("node")

    theme.start_variation("dark")
    theme.step_variation(0.4)
    assert theme.get_fill(node) == Fill.radial("G1")

    theme.step_variation(1.0)
    assert theme.get_fill(node) == Fill.radial("G2")


def test_start_original_variation_returns_home() -> None:
    theme = _node_theme()
    node = theme.get("node")
    theme.use_variation("dark")

    theme.start_original_variation()
    while not theme.step_variation(0.25):
        pass

    assert theme.get_fill(node) == Fill.radial("G1")
    assert theme.active_path == ()


def test_marker_lengths(caplog: pytest.LogCaptureFixture) -> None:
    head = Marker(Crumb.circle(Circle((0.0, 0.0), 1.0))).with_size(10, 6)
    theme = (
        Theme()
        .with_markers([("head", head)])
        .with_styles([
            ("arrow", Style().with_named_end_marker("head")),
            ("broken", Style().with_named_start_marker("gone")),
        ])
    )

    assert theme.get_marker_lengths(theme.get("arrow")) == (0.0, 10.0)
    assert theme.get_marker_lengths(None) == (0.0, 0.0)
    with caplog.at_level(logging.WARNING, logger="diagram_vis.theme"):
        assert theme.get_marker_lengths(theme.get("broken")) == (0.0, 0.0)
    assert any("gone" in record.getMessage() for record in caplog.records)


def test_gradients_are_registered_by_name() -> None:
    theme = Theme().with_gradients(
        linear=[("sky", UnitPoint.TOP, UnitPoint.BOTTOM, [WHITE, BLACK])],
        radial=[("glow", 0.8, [GradientStop(0.0, WHITE), GradientStop(0.5, BLACK)])],
    )

    sky = theme.get_gradient("sky")
    assert isinstance(sky, LinearGradient)
    assert [stop.pos for stop in sky.stops] == [0.0, 1.0]
    assert isinstance(theme.get_gradient("glow"), RadialGradient)
    assert set(theme.get_gradspecs()) == {"sky", "glow"}

    with pytest.raises(GradientMissingForName):
        theme.get_gradient("nope")


def test_font_resolution_order() -> None:
    mono = Font(("monospace",), 12.0)
    serif = Font.serif()
    theme = (
        Theme()
        .with_default_font(Font(("sans-serif",), 10.0))
        .with_fonts([("mono", mono)])
        .with_styles([
            ("direct", Style().with_font(serif)),
            ("named", Style().with_named_font("mono")),
            ("plain", Style()),
        ])
    )
    label = TextLabel("x").with_font(Font(("fantasy",), 9.0))

    assert theme.resolve_font(theme.get("named"), label) == label.font
    assert theme.resolve_font(theme.get("direct")) == serif
    assert theme.resolve_font(theme.get("named")) == mono
    assert theme.resolve_font(theme.get("plain")) == Font(("sans-serif",), 10.0)
    assert theme.resolve_font(None) == theme.default_font


def test_color_helpers() -> None:
    assert Color.from_hex("#ff8000").as_rgba8() == (255, 128, 0, 255)
    assert Color.rgb(1.0, 0.0, 0.0).to_hex() == "#ff0000"
    assert WHITE.with_alpha(0.0).to_hex() == "#ffffff00"
    with pytest.raises(ValueError):
        Color.from_hex("#fff")
