from __future__ import annotations

import pytest

from diagram_vis import (
    Circle,
    Crumb,
    CrumbId,
    CrumbItem,
    CrumbsOfAGroupOverflow,
    Group,
    GroupId,
    GroupItem,
    GroupMissingForId,
    GroupReuseAttempt,
    GroupsOfAGroupOverflow,
    LayerMissingForId,
    Line,
    Rect,
    Scene,
    StyleId,
    TranslateScale,
)


def test_arena_ids_are_sequential_and_stable() -> None:
    scene = Scene((100, 50))

    first = scene.add_rect(Rect(0, 0, 10, 10))
    second = scene.add_circle(Circle((5.0, 5.0), 2.0))
    third = scene.add_line(Line((0.0, 0.0), (1.0, 1.0)))

    assert [first, second, third] == [CrumbId(0), CrumbId(1), CrumbId(2)]
    assert scene.crumb_count == 3
    assert scene.get_crumb(second).kind == "circle"
    assert scene.get_crumb(CrumbId(7)) is None
    assert scene.get_size() == (100.0, 50.0)


def test_crumb_rejects_mismatched_shape() -> None:
    with pytest.raises(TypeError):
        Crumb("circle", Rect(0, 0, 1, 1))
    with pytest.raises(ValueError):
        Crumb("blob", Rect(0, 0, 1, 1))


def test_grouped_crumbs_share_one_group() -> None:
    scene = Scene()
    group_id = scene.add_grouped_crumbs([
        (Crumb.rect(Rect(0, 0, 1, 1)), StyleId(0)),
        (Crumb.circle(Circle((0.0, 0.0), 1.0)), None),
    ])

    group = scene.get_group(group_id)
    assert [item.crumb_id for item in group.crumbs] == [CrumbId(0), CrumbId(1)]
    assert [item.style_id for item in group.crumbs] == [StyleId(0), None]
    assert scene.group_count == 1


def test_named_groups_are_looked_up_by_name() -> None:
    scene = Scene()
    first = scene.add_named_crumbs("nodes", [(Crumb.circle(Circle((0.0, 0.0), 1.0)), None)])
    scene.add_group(Group().with_name("nodes"))

    assert scene.get_group_by_name("nodes") == first
    assert scene.get_group_by_name("missing") is None


def test_group_referencing_itself_is_rejected() -> None:
    scene = Scene()
    group_id = scene.add_group(Group())

    with pytest.raises(GroupReuseAttempt):
        scene.add_group_item(group_id, GroupItem(group_id))


def test_transitive_cycle_is_rejected_at_insertion() -> None:
    scene = Scene()
    bottom = scene.add_group(Group())
    middle = scene.add_group(Group.from_groups([bottom]))
    top = scene.add_group(Group.from_groups([middle]))

    with pytest.raises(GroupReuseAttempt) as excinfo:
        scene.add_group_item(bottom, GroupItem(top))

    assert excinfo.value.group_id == bottom
    assert scene.get_group(bottom).groups == []


def test_new_group_cannot_reference_its_own_future_id() -> None:
    scene = Scene()
    scene.add_group(Group())

    with pytest.raises(GroupReuseAttempt):
        scene.add_group(Group.from_groups([GroupId(1)]))
    assert scene.group_count == 1


def test_forward_reference_is_checked_once_it_exists() -> None:
    scene = Scene()
    first = scene.add_group(Group.from_groups([GroupId(1)]))

    with pytest.raises(GroupReuseAttempt):
        scene.add_group(Group.from_groups([first]))


def test_dag_sharing_is_not_a_cycle() -> None:
    scene = Scene()
    shared = scene.add_group(Group())
    left = scene.add_group(Group.from_groups([shared]))
    right = scene.add_group(Group.from_groups([shared]))

    scene.add_group(Group.from_groups([left, right, shared]))
    assert scene.group_count == 4


def test_inserted_group_is_copied() -> None:
    scene = Scene()
    crumb = scene.add_circle(Circle((0.0, 0.0), 1.0))
    group = Group.from_crumbs([(crumb, None)])
    group_id = scene.add_layer(group)

    group.with_group(group_id)

    assert scene.get_group(group_id).groups == []
    assert len(scene.flatten()) == 1


def test_cycle_made_behind_the_scene_is_reported_by_traversal() -> None:
    scene = Scene()
    crumb = scene.add_circle(Circle((0.0, 0.0), 1.0))
    child = scene.add_group(Group.from_crumbs([(crumb, None)]))
    root = scene.add_layer(Group.from_groups([child]))

    scene.get_group(child).with_group(root)

    with pytest.raises(GroupReuseAttempt):
        scene.flatten()
    with pytest.raises(GroupReuseAttempt):
        scene.all_groups()


def test_item_lookups_raise_overflow_errors() -> None:
    scene = Scene()
    crumb = scene.add_circle(Circle((0.0, 0.0), 1.0))
    child = scene.add_group(Group())
    group_id = scene.add_group(Group.from_crumbs([(crumb, None)]).with_group(child))

    assert scene.get_crumb_item(group_id, 0) == CrumbItem(crumb)
    assert scene.get_group_item(group_id, 0) == GroupItem(child)
    with pytest.raises(CrumbsOfAGroupOverflow):
        scene.get_crumb_item(group_id, 1)
    with pytest.raises(GroupsOfAGroupOverflow):
        scene.get_group_item(group_id, 3)
    with pytest.raises(GroupMissingForId):
        scene.get_crumb_item(GroupId(42), 0)


def test_add_crumb_item_appends_reference() -> None:
    scene = Scene()
    crumb = scene.add_rect(Rect(0, 0, 1, 1))
    group_id = scene.add_group(Group())

    scene.add_crumb_item(group_id, CrumbItem(crumb, TranslateScale.translate(1.0, 2.0)))

    assert scene.get_group(group_id).crumbs[0].transform.translation == (1.0, 2.0)


def test_layer_ordering_uses_stable_z_index() -> None:
    scene = Scene()
    a = scene.add_layer(Group())
    b = scene.add_layer(Group())
    c = scene.add_layer(Group())

    assert scene.get_layers() == [a, b, c]

    scene.set_z_index(a, 1)
    scene.set_z_index(c, -1)
    assert scene.get_layers() == [c, b, a]

    scene.set_z_index(a, 0)
    assert scene.get_layers() == [c, a, b]


def test_layer_operations_need_a_layer() -> None:
    scene = Scene()
    plain = scene.add_group(Group())

    with pytest.raises(LayerMissingForId):
        scene.set_z_index(plain, 2)
    with pytest.raises(LayerMissingForId):
        scene.hide_layer(plain)
    with pytest.raises(LayerMissingForId):
        scene.show_layer(plain)


def test_add_layer_by_id_rejects_reused_groups() -> None:
    scene = Scene()
    child = scene.add_group(Group())
    scene.add_layer(Group.from_groups([child]))

    with pytest.raises(GroupReuseAttempt):
        scene.add_layer_by_id(child)
    with pytest.raises(GroupMissingForId):
        scene.add_layer_by_id(GroupId(99))

    fresh = scene.add_group(Group())
    scene.add_layer_by_id(fresh)
    assert scene.get_layers()[-1] == fresh


def test_all_groups_lists_levels() -> None:
    scene = Scene()
    leaf = scene.add_group(Group())
    mid = scene.add_group(Group.from_groups([leaf]))
    root = scene.add_layer(Group.from_groups([mid, leaf]))

    assert scene.all_groups() == [(0, root), (1, mid), (2, leaf), (1, leaf)]


def test_fit_transform_centres_canvas() -> None:
    scene = Scene((100, 50))

    ts = scene.fit_transform((220, 220), (10, 10))

    assert ts.scale == pytest.approx(2.0)
    assert ts.apply((0.0, 0.0)) == pytest.approx((10.0, 60.0))
    assert ts.apply((100.0, 50.0)) == pytest.approx((210.0, 160.0))
