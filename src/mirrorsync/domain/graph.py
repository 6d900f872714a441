"""In-memory arena of tracked works and the mutation API over it.

Works are addressed by id. Mirrors and chapter records are reachable only
through their owning work; the arena keeps id indexes so a chapter or mirror
id can be resolved to the work that owns it without walking every work.

Every mutation runs under the work's write lock, leaves the work reconciled
before returning, and publishes a typed event on the change channel. ``unify``
only ever reads.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from mirrorsync.domain.errors import NotFoundError
from mirrorsync.domain.locking import WorkLocks
from mirrorsync.domain.model import EntityRef, EntityType, IngestMode
from mirrorsync.domain.propagation import (
    ChangeChannel,
    ChaptersIngested,
    MirrorAdded,
    MirrorRemoved,
    PrioritiesReordered,
    ProgressChanged,
    WorkRemoved,
)
from mirrorsync.domain.reconciliation import (
    Reconciler,
    move_group_priority,
    move_mirror_priority,
)
from mirrorsync.domain.unification import continue_index as continue_index_of
from mirrorsync.domain.unification import select_range
from mirrorsync.domain.unification import unify as unify_work

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from uuid import UUID

    from mirrorsync.domain.model import (
        ChapterDraft,
        ChapterRecord,
        DisplayPolicy,
        IngestResult,
        MarkDirection,
        Mirror,
        SortKey,
        Work,
    )
    from mirrorsync.domain.reconciliation import ReconciliationReport
    from mirrorsync.domain.unification import ChapterView

log = logging.getLogger(__name__)


class EntityGraph:
    def __init__(
        self,
        *,
        channel: ChangeChannel | None = None,
        reconciler: Reconciler | None = None,
    ) -> None:
        self._channel = channel if channel is not None else ChangeChannel()
        self._reconciler = reconciler if reconciler is not None else Reconciler()
        self._locks = WorkLocks()
        self._guard = threading.Lock()
        self._works: dict[UUID, Work] = {}
        self._mirror_owner: dict[UUID, UUID] = {}
        self._chapter_owner: dict[UUID, UUID] = {}

    @property
    def channel(self) -> ChangeChannel:
        return self._channel

    @property
    def works(self) -> tuple[Work, ...]:
        with self._guard:
            return tuple(self._works.values())

    def __contains__(self, work_id: object) -> bool:
        with self._guard:
            return work_id in self._works

    def get_work(self, work_id: UUID) -> Work:
        with self._guard:
            work = self._works.get(work_id)
        if work is None:
            raise NotFoundError("Work", work_id)
        return work

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def add_work(self, work: Work) -> Work:
        """Register a newly materialised work and build its priority table."""

        work.mark_dirty()
        self.track(work)
        log.info("Added work %r with %d mirror(s)", work.title, len(work.mirrors))
        return work

    def track(self, work: Work) -> Work:
        """(Re)register a work, reconciling it first if its flag is set."""

        if not work.mirrors:
            raise ValueError(f"work {work.id} has no mirrors")
        with self._locks.write(work.id):
            with self._guard:
                self._works[work.id] = work
            self._reindex(work)
            if work.needs_reconciliation:
                self._reconcile(work)
        return work

    def remove_work(self, work_id: UUID) -> Work:
        with self._locked(work_id, write=True):
            with self._guard:
                work = self._works.pop(work_id, None)
                if work is None:
                    raise NotFoundError("Work", work_id)
                self._drop_index(work_id)
        log.info("Removed work %r", work.title)
        self._channel.publish(WorkRemoved(work_id=work_id))
        return work

    # ------------------------------------------------------------------
    # Structural mutations
    # ------------------------------------------------------------------
    def add_mirror(self, work_id: UUID, mirror: Mirror) -> Mirror:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            work.attach_mirror(mirror)
            self._reindex(work)
            self._reconcile(work)
        log.info("Attached mirror %s to work %r", mirror.source_id, work.title)
        self._channel.publish(MirrorAdded(work_id=work_id, mirror_id=mirror.id))
        return mirror

    def remove_mirror(self, work_id: UUID, mirror_id: UUID) -> Mirror:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            mirror = work.detach_mirror(mirror_id)
            self._reindex(work)
            self._reconcile(work)
        log.info("Detached mirror %s from work %r", mirror.source_id, work.title)
        self._channel.publish(MirrorRemoved(work_id=work_id, mirror_id=mirror_id))
        return mirror

    def ingest_chapters(
        self,
        work_id: UUID,
        mirror_id: UUID,
        drafts: Iterable[ChapterDraft],
        *,
        mode: IngestMode = IngestMode.REPLACE,
    ) -> IngestResult:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            mirror = work.mirror(mirror_id)
            if mirror is None:
                raise NotFoundError("Mirror", mirror_id)
            result = mirror.ingest(drafts, mode=mode)
            if result.added or result.removed or result.labels_changed:
                work.mark_dirty()
            self._reindex(work)
            self._reconcile(work)
        log.info(
            "Ingested chapters for %s on work %r: %d added, %d updated, %d removed",
            mirror.source_id,
            work.title,
            result.added,
            result.updated,
            result.removed,
        )
        self._channel.publish(
            ChaptersIngested(
                work_id=work_id,
                mirror_id=mirror_id,
                added=result.added,
                removed=result.removed,
                labels_changed=result.labels_changed,
            )
        )
        return result

    # ------------------------------------------------------------------
    # Progress and archival state
    # ------------------------------------------------------------------
    def set_progress(self, chapter_id: UUID, progress: float) -> ChapterRecord:
        work_id = self._work_for_chapter(chapter_id)
        with self._locked(work_id, write=True):
            chapter = self._chapter(work_id, chapter_id)
            chapter.set_progress(progress)
        self._channel.publish(ProgressChanged(work_id=work_id, chapter_ids=(chapter_id,)))
        return chapter

    def set_local_path(self, chapter_id: UUID, local_path: str | None) -> ChapterRecord:
        """Record (or clear) where the archival collaborator stored a chapter."""

        work_id = self._work_for_chapter(chapter_id)
        with self._locked(work_id, write=True):
            chapter = self._chapter(work_id, chapter_id)
            chapter.local_path = local_path
        return chapter

    def mark_range(
        self,
        work_id: UUID,
        sequence: Sequence[ChapterView],
        anchor_id: UUID,
        direction: MarkDirection,
        *,
        is_read: bool,
    ) -> tuple[UUID, ...]:
        """Write read/unread progress to every record on one side of ``anchor_id``.

        Returns the ids of the records whose progress actually changed.
        """

        selected = select_range(sequence, anchor_id, direction)
        progress = 1.0 if is_read else 0.0
        changed: list[UUID] = []
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            records = {record.id: record for record in work.chapters()}
            for view in selected:
                record = records.get(view.id)
                if record is None:
                    raise NotFoundError("Chapter", view.id)
                if record.progress != progress:
                    record.set_progress(progress)
                    changed.append(record.id)
        log.info(
            "Marked %d chapter(s) of work %r as %s",
            len(changed),
            work.title,
            "read" if is_read else "unread",
        )
        if changed:
            self._channel.publish(ProgressChanged(work_id=work_id, chapter_ids=tuple(changed)))
        return tuple(changed)

    # ------------------------------------------------------------------
    # Priorities and display policy
    # ------------------------------------------------------------------
    def reorder_mirror_priority(self, work_id: UUID, from_index: int, to_index: int) -> None:
        with self._locked(work_id, write=True):
            move_mirror_priority(self.get_work(work_id), from_index, to_index)
        self._channel.publish(PrioritiesReordered(work_id=work_id))

    def reorder_group_priority(self, work_id: UUID, from_index: int, to_index: int) -> None:
        with self._locked(work_id, write=True):
            move_group_priority(self.get_work(work_id), from_index, to_index)
        self._channel.publish(PrioritiesReordered(work_id=work_id))

    def set_display_policy(self, work_id: UUID, policy: DisplayPolicy) -> DisplayPolicy:
        with self._locked(work_id, write=True):
            self.get_work(work_id).display_policy = policy
        return policy

    def toggle_sort(self, work_id: UUID, key: SortKey) -> DisplayPolicy:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            work.display_policy = work.display_policy.toggled(key)
            return work.display_policy

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def unify(self, work_id: UUID, policy: DisplayPolicy | None = None) -> tuple[ChapterView, ...]:
        with self._locked(work_id, write=False):
            return unify_work(self.get_work(work_id), policy)

    def continue_index(self, work_id: UUID, policy: DisplayPolicy | None = None) -> int | None:
        return continue_index_of(self.unify(work_id, policy))

    # ------------------------------------------------------------------
    # Reconciliation hooks used by the propagation worker
    # ------------------------------------------------------------------
    def reconcile(self, work_id: UUID) -> ReconciliationReport:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            self._reindex(work)
            return self._reconcile(work)

    def reconcile_if_dirty(self, work_id: UUID) -> ReconciliationReport | None:
        with self._locked(work_id, write=True):
            work = self.get_work(work_id)
            if not work.needs_reconciliation:
                return None
            self._reindex(work)
            return self._reconcile(work)

    def mark_dirty(self, work_id: UUID) -> None:
        with self._locked(work_id, write=True):
            self.get_work(work_id).mark_dirty()

    def resolve_work_id(self, ref: EntityRef) -> UUID | None:
        """Map an entity reference to the id of the tracked work that owns it."""

        with self._guard:
            match ref.entity_type:
                case EntityType.WORK:
                    return ref.id if ref.id in self._works else None
                case EntityType.MIRROR:
                    owner = self._mirror_owner.get(ref.id)
                    if owner is None:
                        owner = self._scan(lambda work: work.mirror(ref.id) is not None)
                    return owner
                case EntityType.CHAPTER:
                    owner = self._chapter_owner.get(ref.id)
                    if owner is None:
                        owner = self._scan(lambda work: work.chapter(ref.id) is not None)
                    return owner
                case _:
                    return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _reconcile(self, work: Work) -> ReconciliationReport:
        report = self._reconciler.reconcile(work)
        if report.changed:
            log.debug(
                "Reconciled work %r: mirrors +%d/-%d, groups +%d/-%d",
                work.title,
                len(report.mirrors.added),
                len(report.mirrors.pruned),
                len(report.groups.added),
                len(report.groups.pruned),
            )
        return report

    def _work_for_chapter(self, chapter_id: UUID) -> UUID:
        work_id = self.resolve_work_id(_chapter_ref(chapter_id))
        if work_id is None:
            raise NotFoundError("Chapter", chapter_id)
        return work_id

    def _chapter(self, work_id: UUID, chapter_id: UUID) -> ChapterRecord:
        chapter = self.get_work(work_id).chapter(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter", chapter_id)
        return chapter

    def _reindex(self, work: Work) -> None:
        with self._guard:
            self._drop_index(work.id)
            for mirror in work.mirrors:
                self._mirror_owner[mirror.id] = work.id
                for chapter in mirror.chapters:
                    self._chapter_owner[chapter.id] = work.id

    @contextmanager
    def _locked(self, work_id: UUID, *, write: bool) -> Iterator[None]:
        """Hold the lock of a tracked work; untracked ids never keep a lock registered."""

        if work_id not in self:
            raise NotFoundError("Work", work_id)
        lock = self._locks.write(work_id) if write else self._locks.read(work_id)
        try:
            with lock:
                yield
        finally:
            if work_id not in self:
                self._locks.discard(work_id)

    def _drop_index(self, work_id: UUID) -> None:
        # caller holds self._guard
        for index in (self._mirror_owner, self._chapter_owner):
            for entity_id in [key for key, owner in index.items() if owner == work_id]:
                del index[entity_id]

    def _scan(self, owns: _Ownership) -> UUID | None:
        # caller holds self._guard
        for work_id, work in self._works.items():
            if owns(work):
                return work_id
        return None


type _Ownership = Callable[[Work], bool]


def _chapter_ref(chapter_id: UUID) -> EntityRef:
    return EntityRef(EntityType.CHAPTER, chapter_id)
