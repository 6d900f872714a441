"""Typed change events exchanged between mutation paths and the reconciliation worker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from mirrorsync.domain.model import EntityRef


@dataclass(frozen=True, slots=True)
class MirrorAdded:
    work_id: UUID
    mirror_id: UUID


@dataclass(frozen=True, slots=True)
class MirrorRemoved:
    work_id: UUID
    mirror_id: UUID


@dataclass(frozen=True, slots=True)
class ChaptersIngested:
    work_id: UUID
    mirror_id: UUID
    added: int = 0
    removed: int = 0
    labels_changed: bool = False


@dataclass(frozen=True, slots=True)
class ProgressChanged:
    work_id: UUID
    chapter_ids: tuple[UUID, ...] = ()


@dataclass(frozen=True, slots=True)
class PrioritiesReordered:
    work_id: UUID


@dataclass(frozen=True, slots=True)
class WorkRemoved:
    work_id: UUID


@dataclass(frozen=True, slots=True)
class EntitiesChanged:
    """Write notification from persistence: every entity touched by one flush."""

    refs: frozenset[EntityRef] = field(default_factory=frozenset)


type StructuralChange = MirrorAdded | MirrorRemoved | ChaptersIngested
type ChangeEvent = (
    StructuralChange | ProgressChanged | PrioritiesReordered | WorkRemoved | EntitiesChanged
)
