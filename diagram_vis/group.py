from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from .crumb import CrumbId, CrumbItem, GroupId, StyleId
from .geometry import IDENTITY, TranslateScale


class GroupItem(NamedTuple):
    """Reference from a group to a nested group."""

    group_id: GroupId
    transform: TranslateScale = IDENTITY


Reference = Union[CrumbItem, GroupItem]


@dataclass
class Group:
    """Ordered crumb references followed by ordered group references."""

    crumbs: List[CrumbItem] = field(default_factory=list)
    groups: List[GroupItem] = field(default_factory=list)
    name: Optional[str] = None

    @classmethod
    def from_crumb_items(cls, items: Iterable[CrumbItem]) -> "Group":
        return cls(crumbs=list(items))

    @classmethod
    def from_group_items(cls, items: Iterable[GroupItem]) -> "Group":
        return cls(groups=list(items))

    @classmethod
    def from_crumbs(cls, crumbs: Iterable[Tuple[CrumbId, Optional[StyleId]]]) -> "Group":
        return cls(crumbs=[CrumbItem(crumb_id, IDENTITY, style_id) for crumb_id, style_id in crumbs])

    @classmethod
    def from_groups(cls, group_ids: Iterable[GroupId]) -> "Group":
        return cls(groups=[GroupItem(group_id, IDENTITY) for group_id in group_ids])

    def with_name(self, name: str) -> "Group":
        self.name = name
        return self

    def with_crumb(self, crumb_id: CrumbId, style_id: Optional[StyleId] = None) -> "Group":
        self.crumbs.append(CrumbItem(crumb_id, IDENTITY, style_id))
        return self

    def with_crumb_item(self, item: CrumbItem) -> "Group":
        self.crumbs.append(item)
        return self

    def with_crumb_items(self, items: Iterable[CrumbItem]) -> "Group":
        self.crumbs.extend(items)
        return self

    def with_group(self, group_id: GroupId) -> "Group":
        self.groups.append(GroupItem(group_id, IDENTITY))
        return self

    def with_group_item(self, item: GroupItem) -> "Group":
        self.groups.append(item)
        return self

    def with_group_items(self, items: Iterable[GroupItem]) -> "Group":
        self.groups.extend(items)
        return self

    def add_crumbs(self, crumbs: Iterable[Tuple[CrumbId, Optional[StyleId]]]) -> None:
        self.crumbs.extend(CrumbItem(crumb_id, IDENTITY, style_id) for crumb_id, style_id in crumbs)

    def child_group_ids(self) -> List[GroupId]:
        return [item.group_id for item in self.groups]

    def references(self) -> Iterator[Reference]:
        """Crumb references first, then group references, in insertion order."""

        yield from self.crumbs
        yield from self.groups


__all__ = ["Group", "GroupItem", "Reference"]
