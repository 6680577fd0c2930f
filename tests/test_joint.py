from __future__ import annotations

import math

import pytest

from diagram_vis import (
    Anchor,
    AnchorRef,
    Arc,
    BezPath,
    Circle,
    CrumbItem,
    Group,
    Line,
    Rect,
    Scene,
    Stroke,
    Style,
    Theme,
    TranslateScale,
    arc_between,
    curve_joint,
    line_joint,
    trim_cubic,
    trim_line,
    trim_polyline,
    trim_quad,
)
from diagram_vis.anchor import ANCHOR_CRUMB, ANCHOR_GROUP_INDEX, ANCHOR_RESOLVED
from diagram_vis.errors import BuilderOverflow, CrumbMismatch, CrumbsOfAGroupOverflow, JointRejected
from diagram_vis.geometry import PATH_CURVE, PATH_MOVE, PATH_QUAD, _distance


TAIL = Anchor((200.0, 400.0), 35.0)
HEAD = Anchor((600.0, 400.0), 35.0)


def _close(a, b, tol: float = 1e-3) -> bool:
    return math.isclose(a[0], b[0], abs_tol=tol) and math.isclose(a[1], b[1], abs_tol=tol)


def test_positive_radius_places_center_below_chord() -> None:
    arc = arc_between(TAIL, HEAD, 300.0)

    assert isinstance(arc, Arc)
    assert _close(arc.center, (400.0, 623.607))
    assert arc.radius == pytest.approx(300.0)
    assert arc.sweep_angle > 0.0


def test_negative_radius_mirrors_the_arc() -> None:
    arc = arc_between(TAIL, HEAD, -300.0)

    assert arc is not None
    assert _close(arc.center, (400.0, 176.393))
    assert arc.radius == pytest.approx(300.0)
    assert arc.sweep_angle < 0.0


@pytest.mark.parametrize("radius", [300.0, -300.0, 201.0, 1000.0, -450.0])
def test_arc_ends_on_anchor_borders(radius: float) -> None:
    arc = arc_between(TAIL, HEAD, radius)

    assert arc is not None
    assert _distance(arc.start_point, TAIL.center) == pytest.approx(35.0)
    assert _distance(arc.end_point, HEAD.center) == pytest.approx(35.0)


def test_arc_endpoints_account_for_stroke_and_markers() -> None:
    tail = Anchor((200.0, 400.0), 35.0, stroke_width=4.0)
    arc = arc_between(tail, HEAD, 300.0, markers=(3.0, 10.0))

    assert arc is not None
    assert _distance(arc.start_point, tail.center) == pytest.approx(40.0)
    assert _distance(arc.end_point, HEAD.center) == pytest.approx(45.0)


def test_half_circle_follows_radius_sign() -> None:
    negative = arc_between(TAIL, HEAD, -200.0)
    positive = arc_between(TAIL, HEAD, 200.0)

    assert negative is not None and positive is not None
    assert _close(negative.center, (400.0, 400.0))
    assert negative.sweep_angle < 0.0
    assert positive.sweep_angle > 0.0


def test_arc_rejections() -> None:
    # chord longer than the diameter
    assert arc_between(TAIL, HEAD, 150.0) is None
    # anchors overlap
    assert arc_between(Anchor((0.0, 0.0), 35.0), Anchor((60.0, 0.0), 35.0), 300.0) is None
    # attachment offset longer than the diameter
    assert arc_between(TAIL, HEAD, 300.0, markers=(0.0, 700.0)) is None


def test_trim_line_uses_offsets_at_both_ends() -> None:
    line = trim_line(Anchor((0.0, 0.0), 10.0, 2.0), Anchor((100.0, 0.0), 20.0), (0.0, 5.0))

    assert line == Line((11.0, 0.0), (75.0, 0.0))


def test_trim_line_rejects_coincident_or_overlapping_anchors() -> None:
    assert trim_line(Anchor((0.0, 0.0), 10.0), Anchor((0.0, 0.0), 10.0)) is None
    assert trim_line(Anchor((0.0, 0.0), 10.0), Anchor((15.0, 0.0), 10.0)) is None


def test_polyline_vertex_counts() -> None:
    tail = Anchor((0.0, 0.0), 10.0)
    head = Anchor((100.0, 0.0), 10.0)

    straight = trim_polyline(tail, head)
    one = trim_polyline(tail, head, [(0.0, 50.0)])
    two = trim_polyline(tail, head, [(-20.0, 50.0), (20.0, 50.0)])

    assert len(straight.vertices()) == 2
    assert len(one.vertices()) == 3
    assert len(two.vertices()) == 4
    assert two.vertices()[1] == (30.0, 50.0)
    assert _distance(two.vertices()[0], tail.center) == pytest.approx(10.0)


def test_polyline_through_anchor_center_is_rejected() -> None:
    tail = Anchor((0.0, 0.0), 10.0)
    head = Anchor((100.0, 0.0), 10.0)

    assert trim_polyline(tail, head, [(-50.0, 0.0)]) is None


def test_curves_use_quadratic_and_cubic_elements() -> None:
    tail = Anchor((0.0, 0.0), 10.0)
    head = Anchor((100.0, 0.0), 10.0)

    quad = trim_quad(tail, head, (0.0, 40.0))
    cubic = trim_cubic(tail, head, (-25.0, 40.0), (25.0, 40.0))

    assert [el.kind for el in quad.elements] == [PATH_MOVE, PATH_QUAD]
    assert quad.elements[1].points[0] == (50.0, 40.0)
    assert [el.kind for el in cubic.elements] == [PATH_MOVE, PATH_CURVE]
    assert _distance(cubic.elements[-1].points[-1], head.center) == pytest.approx(10.0)


def _anchor_scene():
    scene = Scene((400, 100))
    theme = Theme().with_styles([("rim", Style().with_stroke(Stroke(width=4.0)))])
    circle = scene.add_circle(Circle((0.0, 0.0), 10.0))
    rect = scene.add_rect(Rect(0, 0, 5, 5))
    nodes = scene.add_group(Group.from_crumb_items([
        CrumbItem(circle, TranslateScale.translate(100.0, 0.0)),
        CrumbItem(circle, TranslateScale.translate(300.0, 0.0)),
        CrumbItem(rect),
        CrumbItem(circle, TranslateScale((300.0, 50.0), 2.0), theme.get("rim")),
    ]))
    return scene, theme, nodes


def test_anchor_resolution_applies_item_transform() -> None:
    scene, theme, nodes = _anchor_scene()

    line = line_joint(scene, theme, None, (nodes, 0), (nodes, 1))

    assert line == Line((110.0, 0.0), (290.0, 0.0))


def test_anchor_reference_is_resolved_in_place() -> None:
    scene, theme, nodes = _anchor_scene()
    ref = AnchorRef.group_index(nodes, 3)

    anchor = ref.resolve(scene, theme)

    assert ref.is_resolved
    assert anchor == Anchor((300.0, 50.0), 20.0, 4.0)
    assert ref.resolve(scene) is anchor


def test_unstyled_anchor_takes_the_default_stroke() -> None:
    scene, theme, nodes = _anchor_scene()
    theme.with_default_style(Style().with_stroke(Stroke(width=6.0)))

    anchor = AnchorRef.group_index(nodes, 0).resolve(scene, theme)
    line = line_joint(scene, theme, None, (nodes, 0), (nodes, 1))

    assert anchor.stroke_width == 6.0
    assert line == Line((113.0, 0.0), (287.0, 0.0))


def test_incomplete_anchor_reference_is_rejected() -> None:
    scene, theme, nodes = _anchor_scene()

    with pytest.raises(ValueError):
        AnchorRef(ANCHOR_CRUMB).resolve(scene, theme)
    with pytest.raises(ValueError):
        AnchorRef(ANCHOR_GROUP_INDEX, index=0).resolve(scene, theme)
    with pytest.raises(ValueError):
        AnchorRef(ANCHOR_RESOLVED).resolve(scene, theme)


def test_non_circular_anchor_is_a_mismatch() -> None:
    scene, theme, nodes = _anchor_scene()

    with pytest.raises(CrumbMismatch):
        curve_joint(scene, theme, None, (nodes, 0), (nodes, 2))
    with pytest.raises(CrumbsOfAGroupOverflow):
        curve_joint(scene, theme, None, (nodes, 0), (nodes, 9))


def test_curve_joint_dispatches_on_pull_count() -> None:
    scene, theme, nodes = _anchor_scene()

    assert isinstance(curve_joint(scene, theme, None, (nodes, 0), (nodes, 1)), Line)
    quad = curve_joint(scene, theme, None, (nodes, 0), (nodes, 1), [(0.0, 30.0)])
    cubic = curve_joint(scene, theme, None, (nodes, 0), (nodes, 1), [(0.0, 30.0), (0.0, 30.0)])
    assert isinstance(quad, BezPath) and quad.elements[-1].kind == PATH_QUAD
    assert isinstance(cubic, BezPath) and cubic.elements[-1].kind == PATH_CURVE


def test_joint_builder_collects_errors_and_keeps_good_joints() -> None:
    scene, theme, nodes = _anchor_scene()

    result = (
        scene.join(nodes, nodes)
        .with_name("links")
        .with_lines(None, [(0, 1), (0, 2), (0, 7)])
        .with_arcs(None, [(0, 1, 500.0), (0, 1, 50.0)])
        .with_polylines(None, [(0, 1, [(0, 10), (0, 20), (0, 30)])])
        .as_group(theme)
    )

    group = scene.get_group(result.group_id)
    assert len(group.crumbs) == 3
    assert [scene.get_crumb(item.crumb_id).kind for item in group.crumbs] == ["line", "arc", "path"]
    assert scene.get_group_by_name("links") == result.group_id
    assert not result.ok

    kinds = [type(error) for error in result.errors]
    assert kinds.count(BuilderOverflow) == 1
    assert kinds.count(CrumbMismatch) == 1
    assert kinds.count(CrumbsOfAGroupOverflow) == 1
    assert kinds.count(JointRejected) == 1


def test_unbound_joint_builder_needs_a_scene() -> None:
    from diagram_vis import JointBuilder

    scene, theme, nodes = _anchor_scene()
    builder = JointBuilder(nodes, nodes).with_lines(None, [(0, 1)])

    with pytest.raises(ValueError):
        builder.as_group(theme)

    result = builder.build(scene, theme)
    assert result.ok
