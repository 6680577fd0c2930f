"""Connector geometry between circular anchors.

Every connector starts and ends on the border of its anchors: the anchor
center is moved along a local tangent by the attachment offset (radius,
half the border stroke and the marker length at that end).  The tangent is
the bearing to the other anchor for straight lines and arcs, and the
bearing to the nearest pull point for polylines and curves.

The ``trim_*`` helpers and :func:`arc_between` are pure geometry; the
``*_joint`` functions resolve anchor references against a scene and a
theme first; :class:`JointBuilder` batches joints into a new group.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from .anchor import Anchor, AnchorRef, BuildResult, ErrorLog
from .config import get_vis_config
from .crumb import Crumb, GroupId, StyleId
from .errors import BuilderOverflow, CrumbMismatch, CrumbsOfAGroupOverflow, JointRejected
from .geometry import (
    Arc,
    BezPath,
    Line,
    PathEl,
    Point,
    Vec2,
    _add2,
    _distance,
    _midpoint2,
    _scale2,
    _unit,
    _vec2,
    normalize_angle,
)
from .group import Group
from .logging_utils import apply_debug_logging

if TYPE_CHECKING:  # pragma: no cover
    from .scene import Scene
    from .theme import Theme

logger = logging.getLogger(__name__)

MarkerLengths = Tuple[float, float]
AnchorLike = Union[Anchor, AnchorRef, Tuple[GroupId, int]]

_NO_MARKERS: MarkerLengths = (0.0, 0.0)
MAX_PULLS = 2


def _attach(anchor: Anchor, toward: Point, marker_length: float) -> Optional[Point]:
    """Point at the attachment offset from ``anchor`` in the direction of ``toward``."""

    direction = _vec2(anchor.center, toward)
    try:
        versor = _unit(direction)
    except ZeroDivisionError:
        return None
    return _add2(anchor.center, _scale2(versor, anchor.attachment_offset(marker_length)))


def _pull_points(tail: Anchor, head: Anchor, pulls: Sequence[Vec2]) -> List[Point]:
    mid = _midpoint2(tail.center, head.center)
    return [_add2(mid, (float(dx), float(dy))) for dx, dy in pulls]


# ----------------------------------------------------------------------
# Pure geometry
# ----------------------------------------------------------------------


def trim_line(tail: Anchor, head: Anchor, markers: MarkerLengths = _NO_MARKERS) -> Optional[Line]:
    distance = _distance(tail.center, head.center)
    if distance <= 0.0:
        return None
    if distance <= tail.attachment_offset(markers[0]) + head.attachment_offset(markers[1]):
        # anchors overlap once their borders and markers are accounted for
        return None
    start = _attach(tail, head.center, markers[0])
    end = _attach(head, tail.center, markers[1])
    if start is None or end is None:
        return None
    return Line(start, end)


def trim_polyline(
    tail: Anchor,
    head: Anchor,
    pulls: Sequence[Vec2] = (),
    markers: MarkerLengths = _NO_MARKERS,
) -> Optional[BezPath]:
    """Open path through up to two pull points offset from the chord midpoint."""

    if not pulls:
        line = trim_line(tail, head, markers)
        if line is None:
            return None
        return BezPath.polyline([line.p0, line.p1])

    points = _pull_points(tail, head, pulls[:MAX_PULLS])
    start = _attach(tail, points[0], markers[0])
    end = _attach(head, points[-1], markers[1])
    if start is None or end is None:
        return None
    return BezPath.polyline([start, *points, end])


def trim_quad(
    tail: Anchor, head: Anchor, pull: Vec2, markers: MarkerLengths = _NO_MARKERS
) -> Optional[BezPath]:
    (ctrl,) = _pull_points(tail, head, [pull])
    start = _attach(tail, ctrl, markers[0])
    end = _attach(head, ctrl, markers[1])
    if start is None or end is None:
        return None
    return BezPath.from_elements([PathEl.move_to(start), PathEl.quad_to(ctrl, end)])


def trim_cubic(
    tail: Anchor,
    head: Anchor,
    pull1: Vec2,
    pull2: Vec2,
    markers: MarkerLengths = _NO_MARKERS,
) -> Optional[BezPath]:
    ctrl1, ctrl2 = _pull_points(tail, head, [pull1, pull2])
    start = _attach(tail, ctrl1, markers[0])
    end = _attach(head, ctrl2, markers[1])
    if start is None or end is None:
        return None
    return BezPath.from_elements([PathEl.move_to(start), PathEl.curve_to(ctrl1, ctrl2, end)])


def _apex_angle(offset: float, radius: float) -> Optional[float]:
    ratio = offset / (2.0 * radius)
    if ratio > 1.0:
        return None
    return 2.0 * math.asin(ratio)


def arc_between(
    tail: Anchor,
    head: Anchor,
    radius: float,
    markers: MarkerLengths = _NO_MARKERS,
    eps: Optional[float] = None,
) -> Optional[Arc]:
    """Circular arc of signed ``radius`` through both anchor centers, trimmed at the anchors.

    On a y-down canvas a positive radius bends the arc so that it sweeps
    clockwise on screen (center below a left-to-right chord); a negative
    radius mirrors it.  ``None`` means there is no connector: the anchors
    overlap, the chord is longer than the diameter, or the trimmed sweep
    would vanish.
    """

    if eps is None:
        eps = get_vis_config().arc_overlap_eps

    t, h = tail.center, head.center
    distance = _distance(t, h)
    if distance < tail.radius + head.radius + eps:
        return None
    half = 0.5 * distance
    abs_radius = abs(radius)
    if abs_radius < half:
        return None

    sign = 1.0 if radius > 0.0 else -1.0
    normal = ((t[1] - h[1]) / distance, (h[0] - t[0]) / distance)
    rise = math.sqrt(max(radius * radius - half * half, 0.0))
    center = _add2(_midpoint2(t, h), _scale2(normal, sign * rise))

    start_angle = math.atan2(t[1] - center[1], t[0] - center[0])
    end_angle = math.atan2(h[1] - center[1], h[0] - center[0])
    sweep_angle = normalize_angle(end_angle - start_angle)
    if sign < 0.0 and sweep_angle == math.pi:
        # half circle: the direction is ambiguous, follow the radius sign
        sweep_angle = -math.pi

    tail_apex = _apex_angle(tail.attachment_offset(markers[0]), abs_radius)
    head_apex = _apex_angle(head.attachment_offset(markers[1]), abs_radius)
    if tail_apex is None or head_apex is None:
        return None
    total_apex = tail_apex + head_apex

    if sweep_angle > total_apex:
        return Arc(center, abs_radius, start_angle + tail_apex, sweep_angle - total_apex)
    if sweep_angle < -total_apex:
        return Arc(center, abs_radius, start_angle - tail_apex, sweep_angle + total_apex)
    return None


# ----------------------------------------------------------------------
# Scene-level joints
# ----------------------------------------------------------------------


def _as_ref(anchor: AnchorLike) -> AnchorRef:
    if isinstance(anchor, AnchorRef):
        return anchor
    if isinstance(anchor, Anchor):
        return AnchorRef.resolved(anchor)
    group_id, index = anchor
    return AnchorRef.group_index(group_id, index)


def _resolve_pair(
    scene: "Scene", theme: "Theme", tail: AnchorLike, head: AnchorLike
) -> Tuple[Anchor, Anchor]:
    return _as_ref(tail).resolve(scene, theme), _as_ref(head).resolve(scene, theme)


def line_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
) -> Optional[Line]:
    tail_anchor, head_anchor = _resolve_pair(scene, theme, tail, head)
    return trim_line(tail_anchor, head_anchor, theme.get_marker_lengths(style_id))


def polyline_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
    pulls: Sequence[Vec2] = (),
) -> Optional[BezPath]:
    tail_anchor, head_anchor = _resolve_pair(scene, theme, tail, head)
    return trim_polyline(tail_anchor, head_anchor, pulls, theme.get_marker_lengths(style_id))


def quad_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
    pull: Vec2,
) -> Optional[BezPath]:
    tail_anchor, head_anchor = _resolve_pair(scene, theme, tail, head)
    return trim_quad(tail_anchor, head_anchor, pull, theme.get_marker_lengths(style_id))


def cubic_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
    pull1: Vec2,
    pull2: Vec2,
) -> Optional[BezPath]:
    tail_anchor, head_anchor = _resolve_pair(scene, theme, tail, head)
    return trim_cubic(tail_anchor, head_anchor, pull1, pull2, theme.get_marker_lengths(style_id))


def curve_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
    pulls: Sequence[Vec2] = (),
) -> Optional[Union[Line, BezPath]]:
    """Straight line, quadratic or cubic curve for 0, 1 or 2 pulls."""

    if not pulls:
        return line_joint(scene, theme, style_id, tail, head)
    if len(pulls) == 1:
        return quad_joint(scene, theme, style_id, tail, head, pulls[0])
    return cubic_joint(scene, theme, style_id, tail, head, pulls[0], pulls[1])


def arc_joint(
    scene: "Scene",
    theme: "Theme",
    style_id: Optional[StyleId],
    tail: AnchorLike,
    head: AnchorLike,
    radius: float,
) -> Optional[Arc]:
    tail_anchor, head_anchor = _resolve_pair(scene, theme, tail, head)
    return arc_between(tail_anchor, head_anchor, radius, theme.get_marker_lengths(style_id))


# ----------------------------------------------------------------------
# Builder
# ----------------------------------------------------------------------

JOINT_LINE = "line"
JOINT_POLYLINE = "polyline"
JOINT_ARC = "arc"
JOINT_CURVE = "curve"


@dataclass
class _JointSpec:
    kind: str
    style_id: Optional[StyleId]
    tail_index: int
    head_index: int
    param: Any = None


def _as_crumb(shape: Union[Line, BezPath, Arc]) -> Crumb:
    if isinstance(shape, Line):
        return Crumb.line(shape)
    if isinstance(shape, Arc):
        return Crumb.arc(shape)
    return Crumb.path(shape)


_JOINT_FUNCS: Dict[str, Callable[..., Any]] = {
    JOINT_LINE: lambda scene, theme, style_id, tail, head, _: line_joint(
        scene, theme, style_id, tail, head
    ),
    JOINT_POLYLINE: polyline_joint,
    JOINT_ARC: arc_joint,
    JOINT_CURVE: curve_joint,
}


@dataclass
class JointBuilder:
    """Batch of joints between the crumbs of two anchor groups.

    Joints are recorded by index into the tail and head groups and only
    resolved in :meth:`build`; each recorded batch carries one style.
    """

    tail_group: GroupId
    head_group: GroupId
    scene: Optional["Scene"] = field(default=None, repr=False)
    name: Optional[str] = None
    joints: List[_JointSpec] = field(default_factory=list)
    _log: ErrorLog = field(default_factory=ErrorLog, repr=False)

    def _pulls(self, pulls: Iterable[Vec2]) -> List[Vec2]:
        pulls = [(float(dx), float(dy)) for dx, dy in pulls]
        if len(pulls) > MAX_PULLS:
            self._log.record(BuilderOverflow("pulls", MAX_PULLS).with_details(
                f"got {len(pulls)}, keeping the first {MAX_PULLS}"
            ))
            pulls = pulls[:MAX_PULLS]
        return pulls

    def with_name(self, name: str) -> "JointBuilder":
        self.name = name
        return self

    def with_lines(
        self, style_id: Optional[StyleId], lines: Iterable[Tuple[int, int]]
    ) -> "JointBuilder":
        for tail, head in lines:
            self.joints.append(_JointSpec(JOINT_LINE, style_id, tail, head))
        return self

    def with_polylines(
        self, style_id: Optional[StyleId], polylines: Iterable[Tuple[int, int, Iterable[Vec2]]]
    ) -> "JointBuilder":
        for tail, head, pulls in polylines:
            self.joints.append(_JointSpec(JOINT_POLYLINE, style_id, tail, head, self._pulls(pulls)))
        return self

    def with_arcs(
        self, style_id: Optional[StyleId], arcs: Iterable[Tuple[int, int, float]]
    ) -> "JointBuilder":
        for tail, head, radius in arcs:
            self.joints.append(_JointSpec(JOINT_ARC, style_id, tail, head, float(radius)))
        return self

    def with_curves(
        self, style_id: Optional[StyleId], curves: Iterable[Tuple[int, int, Iterable[Vec2]]]
    ) -> "JointBuilder":
        for tail, head, pulls in curves:
            self.joints.append(_JointSpec(JOINT_CURVE, style_id, tail, head, self._pulls(pulls)))
        return self

    def build(self, scene: "Scene", theme: "Theme") -> BuildResult:
        log = ErrorLog(list(self._log.errors))
        items = []
        for spec in self.joints:
            tail = AnchorRef.group_index(self.tail_group, spec.tail_index)
            head = AnchorRef.group_index(self.head_group, spec.head_index)
            try:
                shape = _JOINT_FUNCS[spec.kind](scene, theme, spec.style_id, tail, head, spec.param)
            except (CrumbMismatch, CrumbsOfAGroupOverflow) as exc:
                log.record(exc)
                continue
            if shape is None:
                log.record(JointRejected(
                    spec.kind,
                    (self.tail_group, spec.tail_index),
                    (self.head_group, spec.head_index),
                    "geometry leaves no room for a connector",
                ))
                continue
            items.append((scene.add_crumb(_as_crumb(shape)), spec.style_id))

        group = Group.from_crumbs(items)
        if self.name is not None:
            group.with_name(self.name)
        group_id = scene.add_group(group)
        logger.debug(
            "Built %d of %d joint(s) into %r", len(items), len(self.joints), group_id
        )
        return BuildResult(group_id, log.errors)

    def as_group(self, theme: "Theme") -> BuildResult:
        if self.scene is None:
            raise ValueError("JointBuilder is not bound to a scene; call build(scene, theme)")
        return self.build(self.scene, theme)


__all__ = [
    "Anchor",
    "AnchorLike",
    "JointBuilder",
    "MarkerLengths",
    "arc_between",
    "arc_joint",
    "cubic_joint",
    "curve_joint",
    "line_joint",
    "polyline_joint",
    "quad_joint",
    "trim_cubic",
    "trim_line",
    "trim_polyline",
    "trim_quad",
]

apply_debug_logging(globals(), logger=logger)
