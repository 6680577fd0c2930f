from __future__ import annotations

import pytest

from diagram_vis import BLACK, WHITE, Color, Fill, LinearEasing, Stroke, Tweener
from diagram_vis.tweener import breakdown, lerp, lerp_color


def test_lerp_color_interpolates_channels() -> None:
    mid = lerp_color(Color.rgba8(0, 100, 200, 0), Color.rgba8(100, 200, 0, 255), 0.5)

    assert mid.as_rgba8() == (50, 150, 100, 128)


def test_lerp_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        lerp(1.0, 2.0, 0.5)


def test_breakdown_inserts_inner_points() -> None:
    points = breakdown(Stroke(BLACK, 0.0), Stroke(BLACK, 4.0), 3)

    assert [p.width for p in points] == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert breakdown(Stroke(BLACK, 0.0), Stroke(BLACK, 4.0), 0) == [Stroke(BLACK, 0.0), Stroke(BLACK, 4.0)]


def test_tweener_saturates_at_stop() -> None:
    tweener = Tweener(Stroke(BLACK, 0.0), Stroke(BLACK, 8.0), max_inner=1)

    assert tweener.tween_on(0.0) is None
    assert tweener.tween_on(0.25).width == pytest.approx(2.0)
    assert not tweener.is_finished
    assert tweener.tween_on(5.0) == Stroke(BLACK, 8.0)
    assert tweener.is_finished
    assert tweener.position == 1.0


def test_tweener_reverse_restarts_from_stop() -> None:
    tweener = Tweener(Fill.solid(BLACK), Fill.solid(WHITE))
    tweener.tween_on(0.5)

    tweener.reverse()

    assert tweener.value == Fill.solid(WHITE)
    assert tweener.tween_on(1.0) == Fill.solid(BLACK)


def test_gradient_fills_switch_only_when_finished() -> None:
    tweener = Tweener(Fill.radial("a"), Fill.linear("b"), max_inner=2)

    assert tweener.tween_on(0.9) == Fill.radial("a")
    assert tweener.tween_on(0.5) == Fill.linear("b")


def test_linear_easing_reports_increments() -> None:
    easing = LinearEasing()

    assert easing.ease(0.25) == pytest.approx(0.25)
    assert easing.ease(0.25) == 0.0
    assert easing.ease(2.0) == pytest.approx(0.75)

    easing.restart()
    assert easing.ease(0.5) == pytest.approx(0.5)
