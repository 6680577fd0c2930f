"""Two-phase builders that derive pins and node labels from anchor groups.

Builders only record references while being configured; ``build`` looks
them up in the scene, skips anchors that cannot be used (logging and
returning the reason) and adds everything else to one new group.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from .anchor import Anchor, AnchorRef, BuildResult, ErrorLog
from .config import get_vis_config
from .crumb import Crumb, GroupId, StyleId
from .errors import BuilderOverflow, CrumbMismatch, CrumbsOfAGroupOverflow
from .geometry import Circle, Vec2, _add2
from .group import Group
from .text import TextLabel

if TYPE_CHECKING:  # pragma: no cover
    from .scene import Scene
    from .theme import Theme

logger = logging.getLogger(__name__)


@dataclass
class _AnchoredBuilder:
    name: Optional[str] = None
    group_id: Optional[GroupId] = None
    anchors: List[AnchorRef] = field(default_factory=list)
    offsets: List[Vec2] = field(default_factory=list)
    style_id: Optional[StyleId] = None
    _log: ErrorLog = field(default_factory=ErrorLog, repr=False)

    def _slots(self) -> Optional[int]:
        """Number of declared entries, ``None`` when anchors declare them."""

        return None

    def _truncate(self, what: str, values: list, limit: int) -> list:
        if len(values) > limit:
            self._log.record(BuilderOverflow(what, limit).with_details(
                f"got {len(values)}, keeping the first {limit}"
            ))
            return values[:limit]
        return values

    def with_name(self, name: str):
        self.name = name
        return self

    def with_group(self, group_id: GroupId):
        self.group_id = group_id
        return self

    def with_style(self, style_id: Optional[StyleId]):
        self.style_id = style_id
        return self

    def with_anchors(self, anchors: Iterable[AnchorRef]):
        anchors = list(anchors)
        slots = self._slots()
        if slots is not None:
            anchors = self._truncate("anchors", anchors, max(slots - len(self.anchors), 0))
        self.anchors.extend(anchors)
        return self

    def with_indices(self, indices: Iterable[int]):
        """Anchor on the crumbs of the group given to :meth:`with_group`, by index."""

        if self.group_id is None:
            raise ValueError("with_group() must be called before with_indices()")
        return self.with_anchors(AnchorRef.group_index(self.group_id, ndx) for ndx in indices)

    def with_offsets(self, offsets: Iterable[Vec2]):
        """Per-anchor offsets, matched by position in any call order.

        Without declared slots the overflow check waits for ``build``,
        when the final number of anchors is known.
        """

        values = [(float(dx), float(dy)) for dx, dy in offsets]
        slots = self._slots()
        self.offsets = values if slots is None else self._truncate("offsets", values, slots)
        return self

    def _check_offsets(self, log: ErrorLog) -> None:
        if len(self.offsets) > len(self.anchors):
            log.record(BuilderOverflow("offsets", len(self.anchors)).with_details(
                f"got {len(self.offsets)}, ignoring the last {len(self.offsets) - len(self.anchors)}"
            ))

    def _offset(self, ndx: int) -> Vec2:
        if ndx < len(self.offsets):
            return self.offsets[ndx]
        return (0.0, 0.0)

    def _resolved(
        self, scene: "Scene", theme: Optional["Theme"], log: ErrorLog
    ) -> Iterable[Tuple[int, Anchor]]:
        for ndx, ref in enumerate(self.anchors):
            try:
                yield ndx, ref.resolve(scene, theme)
            except (CrumbMismatch, CrumbsOfAGroupOverflow) as exc:
                log.record(exc)

    def _finish(self, scene: "Scene", items: list, log: ErrorLog) -> BuildResult:
        group = Group.from_crumbs(items)
        if self.name is not None:
            group.with_name(self.name)
        group_id = scene.add_group(group)
        logger.debug(
            "%s built %d of %d item(s) into %r",
            type(self).__name__,
            len(items),
            len(self.anchors),
            group_id,
        )
        return BuildResult(group_id, log.errors)


@dataclass
class PinBuilder(_AnchoredBuilder):
    """Small circles placed at an offset from each anchor's center."""

    radius: Optional[float] = None

    def with_radius(self, radius: float) -> "PinBuilder":
        self.radius = float(radius)
        return self

    def build(self, scene: "Scene", theme: Optional["Theme"] = None) -> BuildResult:
        radius = self.radius if self.radius is not None else get_vis_config().pin_radius
        log = ErrorLog(list(self._log.errors))
        self._check_offsets(log)
        items = []
        for ndx, anchor in self._resolved(scene, theme, log):
            center = _add2(anchor.center, self._offset(ndx))
            items.append((scene.add_crumb(Crumb.pin(Circle(center, radius))), self.style_id))
        return self._finish(scene, items, log)


def _span_text(span: Optional[str]) -> Optional[str]:
    return span if span else None


@dataclass(init=False)
class NodeLabelBuilder(_AnchoredBuilder):
    """Text labels for anchors, with optional upper and lower spans.

    The label names declare the number of entries; indices, offsets and
    spans beyond that count are dropped with a :class:`BuilderOverflow`.
    """

    names: List[str] = field(default_factory=list)
    upper: List[Optional[str]] = field(default_factory=list)
    lower: List[Optional[str]] = field(default_factory=list)

    def __init__(self, names: Sequence[str] = (), **kwargs) -> None:
        super().__init__(**kwargs)
        self.names = [str(name) for name in names]
        self.upper = [None] * len(self.names)
        self.lower = [None] * len(self.names)

    def _slots(self) -> Optional[int]:
        return len(self.names)

    def with_spans(
        self, upper: Iterable[Optional[str]], lower: Iterable[Optional[str]]
    ) -> "NodeLabelBuilder":
        """Per-entry upper and lower spans; empty strings mean no span."""

        for ndx, span in enumerate(self._truncate("upper spans", list(upper), len(self.names))):
            self.upper[ndx] = _span_text(span)
        for ndx, span in enumerate(self._truncate("lower spans", list(lower), len(self.names))):
            self.lower[ndx] = _span_text(span)
        return self

    def _label(self, ndx: int, origin) -> TextLabel:
        config = get_vis_config()
        label = (
            TextLabel()
            .with_text(self.names[ndx])
            .with_end_anchor()
            .with_origin(origin)
            .with_font_size(config.label_font_size)
        )
        if self.upper[ndx] is not None:
            label.append_span(
                TextLabel()
                .with_text(self.upper[ndx])
                .with_origin(origin)
                .with_dy([-config.span_dy])
                .with_font_size(config.span_font_size)
            )
        if self.lower[ndx] is not None:
            label.append_span(
                TextLabel()
                .with_text(self.lower[ndx])
                .with_origin(origin)
                .with_dy([config.span_dy])
                .with_font_size(config.span_font_size)
            )
        return label

    def build(self, scene: "Scene", theme: Optional["Theme"] = None) -> BuildResult:
        log = ErrorLog(list(self._log.errors))
        if len(self.anchors) < len(self.names):
            logger.debug(
                "%d label(s) have no anchor and are left out", len(self.names) - len(self.anchors)
            )
        items = []
        for ndx, anchor in self._resolved(scene, theme, log):
            origin = _add2(anchor.center, self._offset(ndx))
            items.append((scene.add_crumb(Crumb.label(self._label(ndx, origin))), self.style_id))
        return self._finish(scene, items, log)


__all__ = ["NodeLabelBuilder", "PinBuilder"]
