"""Circular anchors and the deferred references that name them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, TYPE_CHECKING

from .crumb import CrumbId, GroupId, StyleId
from .errors import CrumbMismatch, VisError
from .geometry import IDENTITY, Circle, Point, TranslateScale

if TYPE_CHECKING:  # pragma: no cover
    from .scene import Scene
    from .theme import Theme

logger = logging.getLogger(__name__)

ANCHOR_GROUP_INDEX = "group_index"
ANCHOR_CRUMB = "crumb"
ANCHOR_RESOLVED = "resolved"


@dataclass(frozen=True)
class Anchor:
    """Resolved circular anchor in canvas coordinates."""

    center: Point
    radius: float
    stroke_width: float = 0.0

    @classmethod
    def from_circle(cls, circle: Circle, stroke_width: float = 0.0) -> "Anchor":
        return cls(circle.center, circle.radius, float(stroke_width))

    def attachment_offset(self, marker_length: float = 0.0) -> float:
        """Distance from the center at which a connector should start or end."""

        return self.radius + 0.5 * self.stroke_width + marker_length


@dataclass
class AnchorRef:
    """Symbolic reference to an anchor, resolved in place by :meth:`resolve`.

    ``group_index`` names the N-th crumb reference of a group, ``crumb`` an
    explicit crumb id, and ``resolved`` carries the anchor geometry itself.
    """

    kind: str
    group_id: Optional[GroupId] = None
    index: int = 0
    crumb_id: Optional[CrumbId] = None
    style_id: Optional[StyleId] = None
    transform: TranslateScale = IDENTITY
    anchor: Optional[Anchor] = None

    @classmethod
    def group_index(cls, group_id: GroupId, index: int) -> "AnchorRef":
        return cls(ANCHOR_GROUP_INDEX, group_id=group_id, index=int(index))

    @classmethod
    def crumb(
        cls,
        crumb_id: CrumbId,
        style_id: Optional[StyleId] = None,
        transform: TranslateScale = IDENTITY,
    ) -> "AnchorRef":
        return cls(ANCHOR_CRUMB, crumb_id=crumb_id, style_id=style_id, transform=transform)

    @classmethod
    def resolved(cls, anchor: Anchor) -> "AnchorRef":
        return cls(ANCHOR_RESOLVED, anchor=anchor)

    @property
    def is_resolved(self) -> bool:
        return self.kind == ANCHOR_RESOLVED

    def resolve(self, scene: "Scene", theme: Optional["Theme"] = None) -> Anchor:
        """Look the reference up in ``scene`` and turn it into a ``resolved`` one.

        Raises :class:`CrumbsOfAGroupOverflow` for an index past the group's
        crumbs and :class:`CrumbMismatch` when the target is not a circle or
        pin; dangling ids raise the structural errors of the scene.
        """

        if self.kind == ANCHOR_RESOLVED:
            if self.anchor is None:
                raise ValueError("resolved anchor reference carries no anchor")
            return self.anchor

        if self.kind == ANCHOR_GROUP_INDEX:
            if self.group_id is None:
                raise ValueError("group index anchor reference needs a group_id")
            item = scene.get_crumb_item(self.group_id, self.index)
            self.crumb_id, self.transform, self.style_id = item.crumb_id, item.transform, item.style_id
        elif self.kind != ANCHOR_CRUMB:
            raise ValueError(f"unknown anchor reference kind {self.kind!r}")

        if self.crumb_id is None:
            raise ValueError("crumb anchor reference needs a crumb_id")
        crumb = scene.require_crumb(self.crumb_id)
        circle = crumb.circle_geometry()
        if circle is None:
            raise CrumbMismatch("circle", crumb.kind, self.crumb_id)

        stroke_width = 0.0
        if theme is not None:
            # unstyled or unknown styles paint with the default style
            style = theme.get_style(self.style_id) or theme.get_default_style()
            stroke_width = style.stroke_width

        self.anchor = Anchor.from_circle(circle.transformed(self.transform), stroke_width)
        self.kind = ANCHOR_RESOLVED
        return self.anchor


class BuildResult(NamedTuple):
    """Group created by a builder together with the problems it skipped over."""

    group_id: GroupId
    errors: List[VisError]

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ErrorLog:
    """Collects recoverable builder errors and logs each one at WARNING."""

    errors: List[VisError] = field(default_factory=list)

    def record(self, error: VisError) -> None:
        logger.warning("%s", error)
        self.errors.append(error)

    def extend(self, errors: List[VisError]) -> None:
        for error in errors:
            self.record(error)


__all__ = [
    "Anchor",
    "AnchorRef",
    "BuildResult",
    "ErrorLog",
    "ANCHOR_CRUMB",
    "ANCHOR_GROUP_INDEX",
    "ANCHOR_RESOLVED",
]
