"""Deduplicate and order a work's chapters across all of its mirrors.

Everything here is a pure function of the work, its priority table and a
display policy. Records missing from the priority table rank as +infinity and
therefore never beat a ranked record.
"""

from __future__ import annotations

import math
from datetime import UTC
from typing import TYPE_CHECKING

from mirrorsync.config.unification import HALF_CHAPTER_EPSILON
from mirrorsync.domain.model import SortKey, is_whole_number

from .views import ChapterView

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime
    from uuid import UUID

    from mirrorsync.domain.model import (
        AttributionLabel,
        ChapterNumber,
        ChapterRecord,
        DisplayPolicy,
        PriorityTable,
        Work,
    )

type PriorityKey = tuple[float, float]


def collect_chapters(work: Work) -> list[ChapterRecord]:
    return list(work.chapters())


def without_half_chapters(
    records: Iterable[ChapterRecord],
    *,
    epsilon: float = HALF_CHAPTER_EPSILON,
) -> list[ChapterRecord]:
    return [record for record in records if is_whole_number(record.number, epsilon=epsilon)]


def priority_key(
    record: ChapterRecord,
    *,
    mirror_ranks: Mapping[UUID, int],
    group_ranks: Mapping[AttributionLabel, int],
) -> PriorityKey:
    mirror_rank = mirror_ranks.get(record.mirror_id)
    group_rank = group_ranks.get(record.attribution)
    return (
        math.inf if mirror_rank is None else float(mirror_rank),
        math.inf if group_rank is None else float(group_rank),
    )


def canonical_chapters(
    records: Iterable[ChapterRecord],
    table: PriorityTable,
) -> list[ChapterRecord]:
    """Keep one record per chapter number: lowest (mirror rank, group rank) wins.

    On a full tie the record seen first is kept.
    """

    mirror_ranks = table.mirror_ranks()
    group_ranks = table.group_ranks()
    chosen: dict[ChapterNumber, tuple[PriorityKey, ChapterRecord]] = {}
    for record in records:
        key = priority_key(record, mirror_ranks=mirror_ranks, group_ranks=group_ranks)
        current = chosen.get(record.number)
        if current is None or key < current[0]:
            chosen[record.number] = (key, record)
    return [record for _key, record in chosen.values()]


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def sort_chapters(records: Iterable[ChapterRecord], policy: DisplayPolicy) -> list[ChapterRecord]:
    """Sort by the policy's key; ties fall back to chapter number in the same direction."""

    if policy.sort_key is SortKey.DATE:
        return sorted(
            records,
            key=lambda record: (_as_utc(record.published_at), record.number),
            reverse=policy.descending,
        )
    return sorted(records, key=lambda record: record.number, reverse=policy.descending)


def unify(work: Work, policy: DisplayPolicy | None = None) -> tuple[ChapterView, ...]:
    """Return the chapter sequence shown for ``work`` under ``policy``.

    ``policy`` defaults to the work's own display policy.
    """

    effective = policy or work.display_policy
    records = collect_chapters(work)
    if not effective.include_half_chapters:
        records = without_half_chapters(records)
    if not effective.show_all_duplicates:
        records = canonical_chapters(records, work.priorities)
    return tuple(ChapterView.from_record(record) for record in sort_chapters(records, effective))
