"""Scene: crumb and group arenas, layers, and the draw-list traversal."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple, TYPE_CHECKING

from .crumb import Crumb, CrumbId, CrumbItem, DrawItem, GroupId, StyleId
from .errors import (
    CrumbMissingForId,
    CrumbsOfAGroupOverflow,
    GroupMissingForId,
    GroupReuseAttempt,
    GroupsOfAGroupOverflow,
    LayerMissingForId,
)
from .geometry import (
    IDENTITY,
    Arc,
    BezPath,
    Circle,
    Line,
    Rect,
    RoundedRect,
    TranslateScale,
)
from .group import Group, GroupItem
from .text import TextLabel

if TYPE_CHECKING:  # pragma: no cover
    from .joint import JointBuilder

logger = logging.getLogger(__name__)

Size = Tuple[float, float]


@dataclass
class Layer:
    group_id: GroupId
    is_visible: bool = True
    z_index: int = 0


@dataclass
class Scene:
    size: Size = (0.0, 0.0)
    crumbs: List[Crumb] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    layers: List[Layer] = field(default_factory=list)
    hidden_groups: Set[GroupId] = field(default_factory=set)
    group_names: Dict[str, GroupId] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.size = (float(self.size[0]), float(self.size[1]))

    # ------------------------------------------------------------------
    # Arena lookups
    # ------------------------------------------------------------------

    def get_size(self) -> Size:
        return self.size

    @property
    def crumb_count(self) -> int:
        return len(self.crumbs)

    @property
    def group_count(self) -> int:
        return len(self.groups)

    def get_crumb(self, crumb_id: CrumbId) -> Optional[Crumb]:
        if 0 <= crumb_id.index < len(self.crumbs):
            return self.crumbs[crumb_id.index]
        return None

    def get_group(self, group_id: GroupId) -> Optional[Group]:
        if 0 <= group_id.index < len(self.groups):
            return self.groups[group_id.index]
        return None

    def require_crumb(self, crumb_id: CrumbId) -> Crumb:
        crumb = self.get_crumb(crumb_id)
        if crumb is None:
            raise CrumbMissingForId(crumb_id)
        return crumb

    def require_group(self, group_id: GroupId) -> Group:
        group = self.get_group(group_id)
        if group is None:
            raise GroupMissingForId(group_id)
        return group

    def get_group_by_name(self, name: str) -> Optional[GroupId]:
        return self.group_names.get(name)

    def get_crumb_item(self, group_id: GroupId, index: int) -> CrumbItem:
        group = self.require_group(group_id)
        if not 0 <= index < len(group.crumbs):
            raise CrumbsOfAGroupOverflow(group_id, index)
        return group.crumbs[index]

    def get_group_item(self, group_id: GroupId, index: int) -> GroupItem:
        group = self.require_group(group_id)
        if not 0 <= index < len(group.groups):
            raise GroupsOfAGroupOverflow(group_id, index)
        return group.groups[index]

    # ------------------------------------------------------------------
    # Crumb arena
    # ------------------------------------------------------------------

    def add_crumb(self, crumb: Crumb) -> CrumbId:
        crumb_id = CrumbId(len(self.crumbs))
        self.crumbs.append(crumb)
        return crumb_id

    def add_line(self, line: Line) -> CrumbId:
        return self.add_crumb(Crumb.line(line))

    def add_rect(self, rect: Rect) -> CrumbId:
        return self.add_crumb(Crumb.rect(rect))

    def add_rounded_rect(self, rect: RoundedRect) -> CrumbId:
        return self.add_crumb(Crumb.rounded_rect(rect))

    def add_circle(self, circle: Circle) -> CrumbId:
        return self.add_crumb(Crumb.circle(circle))

    def add_arc(self, arc: Arc) -> CrumbId:
        return self.add_crumb(Crumb.arc(arc))

    def add_path(self, path: BezPath) -> CrumbId:
        return self.add_crumb(Crumb.path(path))

    def add_pin(self, circle: Circle) -> CrumbId:
        return self.add_crumb(Crumb.pin(circle))

    def add_label(self, label: TextLabel) -> CrumbId:
        return self.add_crumb(Crumb.label(label))

    # ------------------------------------------------------------------
    # Group graph
    # ------------------------------------------------------------------

    def _reaches(self, start: GroupId, target: GroupId) -> bool:
        """Depth-first search from ``start`` along group references."""

        stack = [start]
        visited: Set[GroupId] = set()
        while stack:
            current = stack.pop()
            if current == target:
                return True
            if current in visited:
                continue
            visited.add(current)
            group = self.get_group(current)
            if group is None:
                # forward reference to a group that does not exist yet
                continue
            stack.extend(group.child_group_ids())
        return False

    def _check_no_cycle(self, parent_id: GroupId, child_ids: Iterable[GroupId]) -> None:
        for child_id in child_ids:
            if child_id == parent_id or self._reaches(child_id, parent_id):
                logger.error("Rejecting %r under %r: group would contain itself", child_id, parent_id)
                raise GroupReuseAttempt(parent_id).with_details(
                    f"{child_id!r} reaches {parent_id!r}"
                )

    def _register_name(self, group: Group, group_id: GroupId) -> None:
        if group.name is not None:
            self.group_names.setdefault(group.name, group_id)

    def add_group(self, group: Group) -> GroupId:
        group_id = GroupId(len(self.groups))
        self._check_no_cycle(group_id, group.child_group_ids())
        # stored groups change only through add_group_item and add_crumb_item
        self.groups.append(Group(list(group.crumbs), list(group.groups), group.name))
        self._register_name(group, group_id)
        return group_id

    def add_group_item(self, parent_id: GroupId, item: GroupItem) -> None:
        parent = self.require_group(parent_id)
        self._check_no_cycle(parent_id, [item.group_id])
        parent.groups.append(item)

    def add_crumb_item(self, group_id: GroupId, item: CrumbItem) -> None:
        self.require_group(group_id).crumbs.append(item)

    def add_grouped_crumbs(self, crumbs: Iterable[Tuple[Crumb, Optional[StyleId]]]) -> GroupId:
        items = [(self.add_crumb(crumb), style_id) for crumb, style_id in crumbs]
        return self.add_group(Group.from_crumbs(items))

    def add_named_crumbs(
        self, name: str, crumbs: Iterable[Tuple[Crumb, Optional[StyleId]]]
    ) -> GroupId:
        items = [(self.add_crumb(crumb), style_id) for crumb, style_id in crumbs]
        return self.add_group(Group.from_crumbs(items).with_name(name))

    def add_grouped_crumb_items(self, items: Iterable[CrumbItem]) -> GroupId:
        return self.add_group(Group.from_crumb_items(items))

    def add_grouped_lines(self, lines: Iterable[Tuple[Line, Optional[StyleId]]]) -> GroupId:
        return self.add_grouped_crumbs((Crumb.line(line), style_id) for line, style_id in lines)

    def join(self, tail_group: GroupId, head_group: GroupId) -> "JointBuilder":
        """Start a batch of joints from the crumbs of ``tail_group`` to those of ``head_group``."""

        from .joint import JointBuilder

        return JointBuilder(tail_group, head_group, scene=self)

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def add_layer(self, group: Group) -> GroupId:
        group_id = self.add_group(group)
        self.layers.append(Layer(group_id))
        return group_id

    def add_layer_by_id(self, group_id: GroupId) -> None:
        self.require_group(group_id)
        if any(used == group_id for _, used in self.all_groups()):
            raise GroupReuseAttempt(group_id).with_details("group is already part of a layer")
        self.layers.append(Layer(group_id))

    def _find_layer(self, group_id: GroupId) -> Layer:
        for layer in self.layers:
            if layer.group_id == group_id:
                return layer
        raise LayerMissingForId(group_id)

    def set_z_index(self, group_id: GroupId, z_index: int) -> None:
        self._find_layer(group_id).z_index = int(z_index)

    def hide_layer(self, group_id: GroupId) -> None:
        self._find_layer(group_id).is_visible = False

    def show_layer(self, group_id: GroupId) -> None:
        self._find_layer(group_id).is_visible = True

    def hide_group(self, group_id: GroupId) -> None:
        self.require_group(group_id)
        self.hidden_groups.add(group_id)

    def show_group(self, group_id: GroupId) -> None:
        self.hidden_groups.discard(group_id)

    def get_layers(self) -> List[GroupId]:
        """Top-level groups in paint order (bottom-most first).

        ``sorted`` is stable, so layers sharing a z-index keep their
        insertion order.
        """

        return [layer.group_id for layer in sorted(self.layers, key=lambda layer: layer.z_index)]

    def get_visible_layers(self) -> List[GroupId]:
        visible = [layer for layer in self.layers if layer.is_visible]
        return [layer.group_id for layer in sorted(visible, key=lambda layer: layer.z_index)]

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _traverse(
        self, roots: List[GroupId], root_transform: TranslateScale, skip_hidden: bool
    ) -> List[DrawItem]:
        draw_list: List[DrawItem] = []
        root_frame = iter([GroupItem(group_id, IDENTITY) for group_id in roots])
        stack: List[Tuple[Iterator, TranslateScale, Optional[GroupId]]] = [
            (root_frame, root_transform, None)
        ]
        path: Set[GroupId] = set()

        while stack:
            references, accumulated, owner = stack[-1]
            item = next(references, None)
            if item is None:
                stack.pop()
                path.discard(owner)
                continue
            if isinstance(item, GroupItem):
                if skip_hidden and item.group_id in self.hidden_groups:
                    continue
                if item.group_id in path:
                    logger.error("Group %r is its own descendant", item.group_id)
                    raise GroupReuseAttempt(item.group_id).with_details("group contains itself")
                group = self.require_group(item.group_id)
                path.add(item.group_id)
                stack.append(
                    (group.references(), accumulated.compose(item.transform), item.group_id)
                )
            else:
                if item.crumb_id.index >= len(self.crumbs) or item.crumb_id.index < 0:
                    raise CrumbMissingForId(item.crumb_id)
                draw_list.append(
                    DrawItem(item.crumb_id, accumulated.compose(item.transform), item.style_id)
                )

        logger.debug("Flattened %d layer(s) into %d draw item(s)", len(roots), len(draw_list))
        return draw_list

    def flatten(self, root_transform: TranslateScale = IDENTITY) -> List[DrawItem]:
        """Draw list of every crumb reachable from the layers, in paint order."""

        return self._traverse(self.get_layers(), root_transform, skip_hidden=False)

    def flatten_visible(self, root_transform: TranslateScale = IDENTITY) -> List[DrawItem]:
        """Like :meth:`flatten`, skipping hidden layers and hidden groups."""

        return self._traverse(self.get_visible_layers(), root_transform, skip_hidden=True)

    def all_groups(self) -> List[Tuple[int, GroupId]]:
        """``(level, group_id)`` of every group reference reachable from the layers."""

        result: List[Tuple[int, GroupId]] = []
        stack: List[Tuple[int, Iterator[GroupId], Optional[GroupId]]] = [
            (0, iter([layer.group_id for layer in self.layers]), None)
        ]
        path: Set[GroupId] = set()
        while stack:
            level, ids, owner = stack[-1]
            group_id = next(ids, None)
            if group_id is None:
                stack.pop()
                path.discard(owner)
                continue
            if group_id in path:
                raise GroupReuseAttempt(group_id).with_details("group contains itself")
            group = self.require_group(group_id)
            result.append((level, group_id))
            path.add(group_id)
            stack.append((level + 1, iter(group.child_group_ids()), group_id))
        return result

    def iter_crumbs(self, draw_list: Iterable[DrawItem]) -> Iterator[Tuple[Crumb, DrawItem]]:
        for item in draw_list:
            yield self.require_crumb(item.crumb_id), item

    def bbox(self, root_transform: TranslateScale = IDENTITY) -> Optional[Rect]:
        result: Optional[Rect] = None
        for crumb, item in self.iter_crumbs(self.flatten(root_transform)):
            box = crumb.bbox(item.transform)
            result = box if result is None else result.union(box)
        return result

    def fit_transform(
        self, out_size: Size, out_margin: Size = (0.0, 0.0)
    ) -> TranslateScale:
        """Root transform that centres the canvas inside ``out_size`` minus margins."""

        width, height = self.size
        avail_w = max(out_size[0] - 2.0 * out_margin[0], 0.0)
        avail_h = max(out_size[1] - 2.0 * out_margin[1], 0.0)
        if width <= 0.0 or height <= 0.0:
            return TranslateScale.translate(out_margin[0], out_margin[1])
        scale = min(avail_w / width, avail_h / height)
        dx = out_margin[0] + 0.5 * (avail_w - scale * width)
        dy = out_margin[1] + 0.5 * (avail_h - scale * height)
        return TranslateScale((dx, dy), scale)

    def debug_summary(self) -> str:
        return (
            f"Scene(size={self.size}, crumbs={len(self.crumbs)}, "
            f"groups={len(self.groups)}, layers={len(self.layers)})"
        )


__all__ = ["Scene", "Layer", "Size"]
