"""Error types raised or collected by the scene graph, theme and builders."""

from __future__ import annotations

from typing import Any, Optional


class VisError(Exception):
    """Base class for every scene, theme and builder error."""

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def with_details(self, details: str) -> "VisError":
        self.details = details
        return self

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class CrumbMissingForId(VisError):
    def __init__(self, crumb_id: Any) -> None:
        super().__init__(f"Crumb missing for {crumb_id!r}")
        self.crumb_id = crumb_id


class GroupMissingForId(VisError):
    def __init__(self, group_id: Any) -> None:
        super().__init__(f"Group missing for {group_id!r}")
        self.group_id = group_id


class LayerMissingForId(VisError):
    def __init__(self, group_id: Any) -> None:
        super().__init__(f"Layer missing for {group_id!r}")
        self.group_id = group_id


class GroupReuseAttempt(VisError):
    """Raised when inserting a reference would make a group contain itself."""

    def __init__(self, group_id: Any) -> None:
        super().__init__(f"Reuse attempt for {group_id!r}")
        self.group_id = group_id


class CrumbMismatch(VisError):
    """A builder expected a circular anchor and found another shape."""

    def __init__(self, expected: str, kind: str, crumb_id: Any) -> None:
        super().__init__(f"Unexpected {kind} instead of {expected} for {crumb_id!r}")
        self.expected = expected
        self.kind = kind
        self.crumb_id = crumb_id


class CrumbsOfAGroupOverflow(VisError):
    def __init__(self, group_id: Any, index: int) -> None:
        super().__init__(f"Index {index} overflows grouped crumbs for {group_id!r}")
        self.group_id = group_id
        self.index = index


class GroupsOfAGroupOverflow(VisError):
    def __init__(self, group_id: Any, index: int) -> None:
        super().__init__(f"Index {index} overflows grouped groups for {group_id!r}")
        self.group_id = group_id
        self.index = index


class BuilderOverflow(VisError):
    """More items were passed to a builder than it has declared slots for."""

    def __init__(self, name: str, num_items: int) -> None:
        super().__init__(
            f"Attempt to override declared number of {num_items} {name} in a builder"
        )
        self.name = name
        self.num_items = num_items


class JointRejected(VisError):
    """Joint geometry produced no connector for a pair of anchors."""

    def __init__(self, kind: str, tail: Any, head: Any, reason: str) -> None:
        super().__init__(f"No {kind} joint between {tail!r} and {head!r} ({reason})")
        self.kind = kind
        self.tail = tail
        self.head = head
        self.reason = reason


class GradientMissingForName(VisError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Gradient missing for name {name!r}")
        self.name = name


__all__ = [
    "VisError",
    "CrumbMissingForId",
    "GroupMissingForId",
    "LayerMissingForId",
    "GroupReuseAttempt",
    "CrumbMismatch",
    "CrumbsOfAGroupOverflow",
    "GroupsOfAGroupOverflow",
    "BuilderOverflow",
    "JointRejected",
    "GradientMissingForName",
]
