"""Priority table: mirror and scanlator-group ranks owned by one work.

Entries are only ever created, re-ranked and pruned by the reconciler
(``mirrorsync.domain.reconciliation``); everything else reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from mirrorsync.domain.model.entity import Entity
from mirrorsync.domain.model.enums import EntityType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from mirrorsync.domain.model.primitives import AttributionLabel


@dataclass(eq=False, kw_only=True)
class MirrorPriorityEntry(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MIRROR_PRIORITY

    mirror_id: UUID
    rank: int


@dataclass(eq=False, kw_only=True)
class GroupPriorityEntry(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GROUP_PRIORITY

    label: AttributionLabel
    # mirror shown next to the label; the best-ranked mirror publishing it
    display_mirror_id: UUID | None
    rank: int


@dataclass(eq=False, kw_only=True)
class PriorityTable(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PRIORITY_TABLE

    work_id: UUID | None = None

    _mirror_entries: list[MirrorPriorityEntry] = field(
        default_factory=list["MirrorPriorityEntry"], repr=False
    )
    _group_entries: list[GroupPriorityEntry] = field(
        default_factory=list["GroupPriorityEntry"], repr=False
    )

    @property
    def mirror_entries(self) -> tuple[MirrorPriorityEntry, ...]:
        return tuple(sorted(self._mirror_entries, key=lambda entry: entry.rank))

    @property
    def group_entries(self) -> tuple[GroupPriorityEntry, ...]:
        return tuple(sorted(self._group_entries, key=lambda entry: entry.rank))

    def mirror_ranks(self) -> dict[UUID, int]:
        return {entry.mirror_id: entry.rank for entry in self._mirror_entries}

    def group_ranks(self) -> dict[AttributionLabel, int]:
        return {entry.label: entry.rank for entry in self._group_entries}

    def mirror_rank(self, mirror_id: UUID) -> int | None:
        return self.mirror_ranks().get(mirror_id)

    def group_rank(self, label: AttributionLabel) -> int | None:
        return self.group_ranks().get(label)

    # Friend primitives (called only by the reconciler)
    def _set_mirror_entries(self, ordered: Sequence[MirrorPriorityEntry]) -> None:
        _replace_ranked(self._mirror_entries, ordered)

    def _set_group_entries(self, ordered: Sequence[GroupPriorityEntry]) -> None:
        _replace_ranked(self._group_entries, ordered)


def _replace_ranked[TEntry: MirrorPriorityEntry | GroupPriorityEntry](
    current: list[TEntry],
    ordered: Sequence[TEntry],
) -> None:
    """Make ``current`` hold exactly ``ordered``, renumbered densely from 0.

    Entries are kept by identity so persisted rows are updated, not recreated.
    """

    keep = {id(entry) for entry in ordered}
    for entry in [entry for entry in current if id(entry) not in keep]:
        current.remove(entry)
    present = {id(entry) for entry in current}
    for entry in ordered:
        if id(entry) not in present:
            current.append(entry)
    for rank, entry in enumerate(ordered):
        if entry.rank != rank:
            entry.rank = rank
    current.sort(key=lambda entry: entry.rank)
