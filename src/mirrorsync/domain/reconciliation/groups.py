"""Scanlator-group priority reconciliation.

Labels are observed by walking mirrors in ascending mirror rank and each
mirror's chapters in ingestion order. A label already in the table keeps its
rank and only has its display mirror refreshed; new labels are appended in
``(best mirror rank, first-seen index)`` order; labels no longer published by
any mirror are pruned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mirrorsync.domain.model import GroupPriorityEntry

if TYPE_CHECKING:
    from uuid import UUID

    from mirrorsync.domain.model import AttributionLabel, Mirror, Work

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LabelObservation:
    best_mirror_rank: int
    insertion_index: int
    mirror_id: UUID

    @property
    def order_key(self) -> tuple[int, int]:
        return (self.best_mirror_rank, self.insertion_index)


@dataclass(slots=True, frozen=True)
class GroupReconciliation:
    added: tuple[AttributionLabel, ...] = ()
    pruned: tuple[AttributionLabel, ...] = ()


def mirrors_by_rank(work: Work) -> list[Mirror]:
    ranks = work.priorities.mirror_ranks()
    unranked = len(ranks)
    return sorted(
        work.mirrors,
        key=lambda mirror: (ranks.get(mirror.id, unranked), mirror.added_index),
    )


def observe_labels(work: Work) -> dict[AttributionLabel, LabelObservation]:
    observations: dict[AttributionLabel, LabelObservation] = {}
    for mirror_rank, mirror in enumerate(mirrors_by_rank(work)):
        for label in mirror.labels:
            if label in observations:
                continue
            observations[label] = LabelObservation(
                best_mirror_rank=mirror_rank,
                insertion_index=len(observations),
                mirror_id=mirror.id,
            )
    return observations


def reconcile_group_priorities(work: Work) -> GroupReconciliation:
    table = work.priorities
    observations = observe_labels(work)

    kept: list[GroupPriorityEntry] = []
    seen: set[AttributionLabel] = set()
    pruned: list[AttributionLabel] = []
    for entry in table.group_entries:
        observation = observations.get(entry.label)
        if observation is None or entry.label in seen:
            pruned.append(entry.label)
            continue
        seen.add(entry.label)
        if entry.display_mirror_id != observation.mirror_id:
            entry.display_mirror_id = observation.mirror_id
        kept.append(entry)

    new_labels = sorted(
        (label for label in observations if label not in seen),
        key=lambda label: observations[label].order_key,
    )
    appended = [
        GroupPriorityEntry(
            label=label,
            display_mirror_id=observations[label].mirror_id,
            rank=len(kept) + offset,
        )
        for offset, label in enumerate(new_labels)
    ]
    table._set_group_entries([*kept, *appended])  # pyright: ignore[reportPrivateUsage] # noqa: SLF001

    if appended or pruned:
        log.debug(
            "Work %s group priorities: added=%s pruned=%s",
            work.id,
            new_labels,
            pruned,
        )
    return GroupReconciliation(added=tuple(new_labels), pruned=tuple(pruned))


def refresh_display_mirrors(work: Work) -> None:
    """Point each group entry at its current best mirror without touching ranks."""

    observations = observe_labels(work)
    for entry in work.priorities.group_entries:
        observation = observations.get(entry.label)
        if observation is not None and entry.display_mirror_id != observation.mirror_id:
            entry.display_mirror_id = observation.mirror_id
