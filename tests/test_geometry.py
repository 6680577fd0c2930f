from __future__ import annotations

import math

import pytest

from diagram_vis import IDENTITY, Arc, BezPath, Circle, PathEl, Rect, TranslateScale
from diagram_vis.geometry import bbox_of_points, normalize_angle


def test_compose_applies_inner_transform_first() -> None:
    outer = TranslateScale((1.0, 2.0), 2.0)
    inner = TranslateScale((3.0, -1.0), 0.5)

    composed = outer * inner

    assert composed == outer.compose(inner)
    assert composed.apply((4.0, 4.0)) == outer.apply(inner.apply((4.0, 4.0)))
    assert (IDENTITY * outer) == outer
    assert (outer * IDENTITY) == outer


def test_inverse_round_trips_points() -> None:
    ts = TranslateScale((10.0, -4.0), 4.0)

    assert (ts * ts.inverse()).is_identity()
    assert ts.inverse().apply(ts.apply((3.0, 5.0))) == pytest.approx((3.0, 5.0))
    with pytest.raises(ZeroDivisionError):
        TranslateScale.scaled(0.0).inverse()


@pytest.mark.parametrize(
    "angle, expected",
    [
        (0.0, 0.0),
        (math.pi, math.pi),
        (-math.pi, math.pi),
        (3 * math.pi / 2, -math.pi / 2),
        (-5 * math.pi / 2, -math.pi / 2),
    ],
)
def test_normalize_angle_range(angle: float, expected: float) -> None:
    assert normalize_angle(angle) == pytest.approx(expected)


def test_rect_helpers() -> None:
    rect = Rect.from_points((10.0, 5.0), (0.0, 15.0))

    assert (rect.x0, rect.y0, rect.x1, rect.y1) == (0.0, 5.0, 10.0, 15.0)
    assert (rect.width, rect.height, rect.center) == (10.0, 10.0, (5.0, 10.0))
    assert rect.union(Rect(-5, 0, 1, 1)) == Rect(-5, 0, 10, 15)
    assert rect.transformed(TranslateScale((1.0, 1.0), 2.0)) == Rect(1, 11, 21, 31)


def test_circle_transform_scales_radius() -> None:
    circle = Circle((1.0, 1.0), 2.0).transformed(TranslateScale((0.0, 10.0), 3.0))

    assert circle == Circle((3.0, 13.0), 6.0)


def test_quarter_arc_bbox() -> None:
    arc = Arc((0.0, 0.0), 10.0, 0.0, math.pi / 2)

    box = arc.bbox()

    assert arc.start_point == pytest.approx((10.0, 0.0))
    assert arc.end_point == pytest.approx((0.0, 10.0))
    assert (box.x0, box.y0, box.x1, box.y1) == pytest.approx((0.0, 0.0, 10.0, 10.0))


def test_bezpath_vertices_and_bbox() -> None:
    path = BezPath.from_elements([
        PathEl.move_to((0.0, 0.0)),
        PathEl.quad_to((5.0, 10.0), (10.0, 0.0)),
        PathEl.line_to((10.0, -4.0)),
        PathEl.close(),
    ])

    assert path.vertices() == [(0.0, 0.0), (10.0, 0.0), (10.0, -4.0)]
    box = path.bbox()
    assert box.y1 == pytest.approx(5.0, abs=0.01)
    assert box.y0 == pytest.approx(-4.0)


def test_path_element_arity_is_checked() -> None:
    with pytest.raises(ValueError):
        PathEl("quad", ((0.0, 0.0),))
    with pytest.raises(ValueError):
        PathEl("spline", ())


def test_bbox_of_no_points_is_empty() -> None:
    assert bbox_of_points([]) == Rect(0.0, 0.0, 0.0, 0.0)
