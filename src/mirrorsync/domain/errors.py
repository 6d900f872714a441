"""Rejected-action errors raised by the chapter graph.

All of these are locally recoverable: callers surface them as a refused action
and carry on. Violations of structural invariants that only a buggy caller can
produce raise ``ValueError`` from the model instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class RejectedActionError(Exception):
    """Base class for recoverable errors of the mirror/chapter subsystem."""


class DuplicateMirrorError(RejectedActionError):
    """Raised when a work already has a mirror from the same source."""

    def __init__(self, work_id: UUID, source_id: str) -> None:
        super().__init__(f"Work {work_id} already has a mirror from source {source_id!r}")
        self.work_id = work_id
        self.source_id = source_id


class NotFoundError(RejectedActionError, LookupError):
    """Raised when an entity id does not resolve."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class LastMirrorError(RejectedActionError):
    """Raised when removing a work's only mirror; remove the work instead."""

    def __init__(self, work_id: UUID) -> None:
        super().__init__(f"Cannot remove the only mirror of work {work_id}")
        self.work_id = work_id


class InvalidRangeError(RejectedActionError, IndexError):
    """Raised when reorder indices fall outside the priority list."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} out of range for {size} entries")
        self.index = index
        self.size = size
