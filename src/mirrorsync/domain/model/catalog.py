"""Catalog entities: works, their mirrors, and per-mirror chapter records.

Ownership runs strictly downwards (Work -> Mirror -> ChapterRecord). Children
refer to their parent by handle only (``Mirror.work_id``,
``ChapterRecord.mirror_id``), so the graph holds no reference cycles.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from mirrorsync.domain.errors import DuplicateMirrorError, LastMirrorError, NotFoundError
from mirrorsync.domain.model.entity import Entity
from mirrorsync.domain.model.enums import ContentRating, EntityType, IngestMode, PublishStatus
from mirrorsync.domain.model.policy import DisplayPolicy
from mirrorsync.domain.model.primitives import format_chapter_number
from mirrorsync.domain.model.priority import PriorityTable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime
    from uuid import UUID

    from mirrorsync.domain.model.primitives import AttributionLabel, ChapterNumber, SourceId


def _validate_progress(progress: float) -> None:
    if not 0.0 <= progress <= 1.0:
        raise ValueError(f"progress must be within [0.0, 1.0], got {progress}")


def _validate_number(number: float) -> None:
    if not math.isfinite(number):
        raise ValueError(f"chapter number must be finite, got {number}")


@dataclass(frozen=True, slots=True, kw_only=True)
class ChapterDraft:
    """Raw chapter fields as delivered by remote retrieval."""

    number: ChapterNumber
    attribution: AttributionLabel
    published_at: datetime
    slug: str = ""
    title: str | None = None

    def __post_init__(self) -> None:
        _validate_number(self.number)


@dataclass(slots=True)
class IngestResult:
    added: int = 0
    updated: int = 0
    removed: int = 0
    labels_changed: bool = False


@dataclass(eq=False, kw_only=True)
class ChapterRecord(Entity):
    """One chapter as published by one mirror; read progress lives here."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CHAPTER

    mirror_id: UUID
    number: ChapterNumber
    attribution: AttributionLabel
    published_at: datetime
    slug: str = ""
    title: str | None = None
    position: int = 0
    progress: float = 0.0
    local_path: str | None = None

    def __post_init__(self) -> None:
        _validate_progress(self.progress)
        _validate_number(self.number)

    @property
    def is_read(self) -> bool:
        return self.progress == 1.0

    @property
    def is_downloaded(self) -> bool:
        return self.local_path is not None

    @property
    def display_number(self) -> str:
        return format_chapter_number(self.number)

    def label(self) -> str:
        if self.title:
            return f"Chapter {self.display_number} - {self.title}"
        return f"Chapter {self.display_number}"

    def set_progress(self, progress: float) -> None:
        _validate_progress(progress)
        self.progress = progress

    def _apply_draft(self, draft: ChapterDraft) -> None:
        _validate_number(draft.number)
        self.number = draft.number
        self.attribution = draft.attribution
        self.published_at = draft.published_at
        self.slug = draft.slug
        self.title = draft.title


@dataclass(eq=False, kw_only=True)
class Mirror(Entity):
    """One source's version of a work."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MIRROR

    source_id: SourceId
    slug: str
    work_id: UUID | None = None
    url: str = ""
    cover_url: str | None = None
    referer: str | None = None
    rating: float = 0.0
    publish_status: PublishStatus = PublishStatus.UNKNOWN
    content_rating: ContentRating = ContentRating.SAFE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # 0 = preferred; kept in sync with the work's mirror priority entry
    priority: int = 0
    added_index: int = 0

    _chapters: list[ChapterRecord] = field(default_factory=list["ChapterRecord"], repr=False)

    @property
    def chapters(self) -> tuple[ChapterRecord, ...]:
        return tuple(self._chapters)

    @property
    def labels(self) -> tuple[AttributionLabel, ...]:
        """Distinct attribution labels in first-seen ingestion order."""
        return tuple(dict.fromkeys(chapter.attribution for chapter in self._chapters))

    def chapter(self, chapter_id: UUID) -> ChapterRecord | None:
        for chapter in self._chapters:
            if chapter.id == chapter_id:
                return chapter
        return None

    def ingest(
        self,
        drafts: Iterable[ChapterDraft],
        *,
        mode: IngestMode = IngestMode.REPLACE,
    ) -> IngestResult:
        """Fold a fetched listing into this mirror.

        Drafts match existing records by chapter number (same attribution label
        preferred); matched records keep their id, progress and local path.
        """

        result = IngestResult()
        labels_before = set(self.labels)
        unmatched = list(self._chapters)
        batch_order: list[ChapterRecord] = []
        fresh: list[ChapterRecord] = []

        for draft in drafts:
            record = _take_match(unmatched, draft)
            if record is None:
                record = ChapterRecord(
                    mirror_id=self.id,
                    number=draft.number,
                    attribution=draft.attribution,
                    published_at=draft.published_at,
                    slug=draft.slug,
                    title=draft.title,
                )
                fresh.append(record)
                result.added += 1
            else:
                record._apply_draft(draft)  # noqa: SLF001
                result.updated += 1
            batch_order.append(record)

        if mode is IngestMode.REPLACE:
            for record in unmatched:
                self._chapters.remove(record)
            result.removed = len(unmatched)
            final_order = batch_order
        else:
            final_order = [*self._chapters, *fresh]

        self._chapters.extend(fresh)
        for position, record in enumerate(final_order):
            if record.position != position:
                record.position = position
        self._chapters.sort(key=lambda record: record.position)

        result.labels_changed = set(self.labels) != labels_before
        return result

    def remove_chapter(self, chapter_id: UUID) -> ChapterRecord:
        chapter = self.chapter(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter", chapter_id)
        self._chapters.remove(chapter)
        return chapter


def _take_match(candidates: list[ChapterRecord], draft: ChapterDraft) -> ChapterRecord | None:
    same_number = [record for record in candidates if record.number == draft.number]
    if not same_number:
        return None
    match = next(
        (record for record in same_number if record.attribution == draft.attribution),
        same_number[0],
    )
    candidates.remove(match)
    return match


@dataclass(eq=False, kw_only=True)
class Work(Entity):
    """A tracked title. Owns its mirrors and its priority table."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.WORK

    title: str
    authors: list[str] = field(default_factory=list[str])
    synopsis: str = ""
    tags: list[str] = field(default_factory=list[str])
    alternative_titles: list[str] = field(default_factory=list[str])
    in_library: bool = False
    display_policy: DisplayPolicy = field(default_factory=DisplayPolicy)

    # advisory; durably stored so a crash between mutation and reconciliation is recoverable
    needs_reconciliation: bool = False

    _mirrors: list[Mirror] = field(default_factory=list["Mirror"], repr=False)
    _priorities: PriorityTable = field(default_factory=PriorityTable, repr=False)

    def __post_init__(self) -> None:
        self._priorities.work_id = self.id

    @property
    def mirrors(self) -> tuple[Mirror, ...]:
        """Mirrors in the order they were added."""
        return tuple(sorted(self._mirrors, key=lambda mirror: mirror.added_index))

    @property
    def priorities(self) -> PriorityTable:
        return self._priorities

    def mirror(self, mirror_id: UUID) -> Mirror | None:
        for mirror in self._mirrors:
            if mirror.id == mirror_id:
                return mirror
        return None

    def mirror_for_source(self, source_id: SourceId) -> Mirror | None:
        for mirror in self._mirrors:
            if mirror.source_id == source_id:
                return mirror
        return None

    def chapters(self) -> Iterator[ChapterRecord]:
        for mirror in self.mirrors:
            yield from mirror.chapters

    def chapter(self, chapter_id: UUID) -> ChapterRecord | None:
        for chapter in self.chapters():
            if chapter.id == chapter_id:
                return chapter
        return None

    def mark_dirty(self) -> None:
        self.needs_reconciliation = True

    def mark_reconciled(self) -> None:
        self.needs_reconciliation = False

    # Commands (ownership here)
    def attach_mirror(self, mirror: Mirror) -> Mirror:
        if self.mirror_for_source(mirror.source_id) is not None:
            raise DuplicateMirrorError(self.id, mirror.source_id)
        if mirror.work_id is not None and mirror.work_id != self.id:
            raise ValueError("mirror already belongs to another work")
        mirror.work_id = self.id
        mirror.added_index = max((m.added_index for m in self._mirrors), default=-1) + 1
        self._mirrors.append(mirror)
        self.mark_dirty()
        return mirror

    def detach_mirror(self, mirror_id: UUID) -> Mirror:
        mirror = self.mirror(mirror_id)
        if mirror is None:
            raise NotFoundError("Mirror", mirror_id)
        if len(self._mirrors) == 1:
            raise LastMirrorError(self.id)
        self._mirrors.remove(mirror)
        self.mark_dirty()
        return mirror
