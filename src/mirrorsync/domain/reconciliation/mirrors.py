"""Mirror priority reconciliation.

Rules:
- every mirror still attached keeps its relative order from the previous table
- mirrors without an entry are appended in the order they were added to the work
- ranks are renumbered densely to ``0..N-1``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mirrorsync.domain.model import MirrorPriorityEntry

if TYPE_CHECKING:
    from uuid import UUID

    from mirrorsync.domain.model import Work

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MirrorReconciliation:
    added: tuple[UUID, ...] = ()
    pruned: tuple[UUID, ...] = ()


def reconcile_mirror_priorities(work: Work) -> MirrorReconciliation:
    table = work.priorities
    live = {mirror.id: mirror for mirror in work.mirrors}

    kept: list[MirrorPriorityEntry] = []
    seen: set[UUID] = set()
    pruned: list[UUID] = []
    for entry in table.mirror_entries:
        if entry.mirror_id not in live or entry.mirror_id in seen:
            pruned.append(entry.mirror_id)
            continue
        seen.add(entry.mirror_id)
        kept.append(entry)

    appended = [
        MirrorPriorityEntry(mirror_id=mirror.id, rank=len(kept) + offset)
        for offset, mirror in enumerate(m for m in work.mirrors if m.id not in seen)
    ]
    ordered = [*kept, *appended]
    table._set_mirror_entries(ordered)  # pyright: ignore[reportPrivateUsage] # noqa: SLF001
    sync_mirror_priorities(work)

    if appended or pruned:
        log.debug(
            "Work %s mirror priorities: added=%d pruned=%d",
            work.id,
            len(appended),
            len(pruned),
        )
    return MirrorReconciliation(
        added=tuple(entry.mirror_id for entry in appended),
        pruned=tuple(pruned),
    )


def sync_mirror_priorities(work: Work) -> None:
    """Copy table ranks onto ``Mirror.priority``."""

    ranks = work.priorities.mirror_ranks()
    for mirror in work.mirrors:
        rank = ranks.get(mirror.id)
        if rank is not None and mirror.priority != rank:
            mirror.priority = rank
