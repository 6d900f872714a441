"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from mirrorsync.adapters.listings import (
    listing_from_payload,
    mirror_from_payload,
    parse_mirror_payload,
    parse_work_payload,
    work_from_payload,
)
from mirrorsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLibraryUnitOfWork,
    is_started,
    startup,
)
from mirrorsync.config import DisplayDefaults, get_display_defaults
from mirrorsync.domain.errors import NotFoundError
from mirrorsync.domain.graph import EntityGraph
from mirrorsync.domain.model import DisplayPolicy, IngestMode, SortDirection, SortKey
from mirrorsync.domain.ports.unit_of_work import LibraryUnitOfWork
from mirrorsync.domain.propagation import ChangeChannel, ReconciliationWorker
from mirrorsync.domain.unification import continue_index

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from uuid import UUID

    from mirrorsync.domain.model import IngestResult, MarkDirection, Mirror, Work
    from mirrorsync.domain.ports.fetching import ChapterListingFetcher
    from mirrorsync.domain.ports.unit_of_work import LibraryRepositories
    from mirrorsync.domain.unification import ChapterView

UnitOfWorkFactory = Callable[[ChangeChannel], LibraryUnitOfWork]


log = getLogger(__name__)


def policy_from_defaults(defaults: DisplayDefaults) -> DisplayPolicy:
    return DisplayPolicy(
        show_all_duplicates=defaults.show_all_duplicates,
        include_half_chapters=defaults.include_half_chapters,
        sort_key=SortKey(defaults.sort_key),
        sort_direction=SortDirection(defaults.sort_direction),
    )


def _sqlalchemy_unit_of_work(channel: ChangeChannel) -> LibraryUnitOfWork:
    return SqlAlchemyLibraryUnitOfWork(channel=channel)


class Library:
    """Library operations over persisted works.

    Every operation runs in one unit of work: load the work, register it with
    the entity graph, mutate, flush, let the reconciliation worker consume the
    flush notifications, then commit.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory | None = None,
        fetcher: ChapterListingFetcher | None = None,
        default_policy: DisplayPolicy | None = None,
        graph: EntityGraph | None = None,
    ) -> None:
        if unit_of_work_factory is None and not is_started():
            startup()
        self._uow_factory = unit_of_work_factory or _sqlalchemy_unit_of_work
        self._fetcher = fetcher
        self.default_policy = default_policy or policy_from_defaults(get_display_defaults())
        self.graph = graph or EntityGraph()
        self.worker = ReconciliationWorker(self.graph.channel, self.graph)

    @contextmanager
    def _transaction(self) -> Iterator[LibraryRepositories]:
        with self._uow_factory(self.graph.channel) as uow:
            yield uow.repositories
            uow.flush()
            while self.worker.drain():
                uow.flush()
            uow.commit()

    def _load(self, repositories: LibraryRepositories, work_id: UUID) -> Work:
        work = repositories.works.get(work_id)
        if work is None:
            raise NotFoundError("Work", work_id)
        return self.graph.track(work)

    # Works ---------------------------------------------------------------------
    def import_listing(self, raw: Mapping[str, object]) -> Work:
        """Create a work from a listing payload, or refresh the work it already maps to."""

        payload = parse_work_payload(raw)
        with self._transaction() as repositories:
            existing = None
            for source in payload.sources:
                existing = repositories.works.find(source.source_id, source.manga_slug)
                if existing is not None:
                    break
            if existing is None:
                work = work_from_payload(payload, display_policy=self.default_policy)
                self.graph.add_work(work)
                repositories.works.add(work)
                return work

            work = self.graph.track(existing)
            for source in payload.sources:
                mirror = work.mirror_for_source(source.source_id)
                if mirror is None:
                    self.graph.add_mirror(work.id, mirror_from_payload(source))
                else:
                    listing = listing_from_payload(source)
                    self.graph.ingest_chapters(work.id, mirror.id, listing.drafts)
            log.info("Refreshed existing work %r from listing", work.title)
            return work

    def work(self, work_id: UUID) -> Work:
        with self._transaction() as repositories:
            return self._load(repositories, work_id)

    def list_works(self) -> list[Work]:
        with self._transaction() as repositories:
            return repositories.works.list_works()

    def remove_work(self, work_id: UUID) -> None:
        with self._transaction() as repositories:
            work = self._load(repositories, work_id)
            self.graph.remove_work(work_id)
            repositories.works.remove(work)

    # Mirrors -------------------------------------------------------------------
    def attach_mirror(self, work_id: UUID, raw: Mapping[str, object]) -> Mirror:
        payload = parse_mirror_payload(raw)
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            return self.graph.add_mirror(work_id, mirror_from_payload(payload))

    def detach_mirror(self, work_id: UUID, mirror_id: UUID) -> Mirror:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            return self.graph.remove_mirror(work_id, mirror_id)

    def refresh_mirror(
        self,
        work_id: UUID,
        mirror_id: UUID,
        *,
        mode: IngestMode = IngestMode.REPLACE,
    ) -> IngestResult:
        if self._fetcher is None:
            raise ValueError("No chapter listing fetcher configured")
        with self._transaction() as repositories:
            work = self._load(repositories, work_id)
            mirror = work.mirror(mirror_id)
            if mirror is None:
                raise NotFoundError("Mirror", mirror_id)
            listing = self._fetcher(mirror)
            if listing.source_id != mirror.source_id:
                raise ValueError(
                    f"listing for {listing.source_id} does not match mirror {mirror.source_id}"
                )
            return self.graph.ingest_chapters(work_id, mirror_id, listing.drafts, mode=mode)

    # Chapters ------------------------------------------------------------------
    def chapters(
        self,
        work_id: UUID,
        policy: DisplayPolicy | None = None,
    ) -> tuple[ChapterView, ...]:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            return self.graph.unify(work_id, policy)

    def continue_reading(
        self,
        work_id: UUID,
        policy: DisplayPolicy | None = None,
    ) -> ChapterView | None:
        sequence = self.chapters(work_id, policy)
        index = continue_index(sequence)
        return None if index is None else sequence[index]

    def mark_range(
        self,
        work_id: UUID,
        anchor_id: UUID,
        direction: MarkDirection,
        *,
        is_read: bool = True,
        policy: DisplayPolicy | None = None,
    ) -> tuple[UUID, ...]:
        """Mark the displayed chapters on one side of ``anchor_id`` and persist."""

        with self._transaction() as repositories:
            self._load(repositories, work_id)
            sequence = self.graph.unify(work_id, policy)
            return self.graph.mark_range(
                work_id, sequence, anchor_id, direction, is_read=is_read
            )

    # Priorities and display ----------------------------------------------------
    def reorder_mirrors(self, work_id: UUID, from_index: int, to_index: int) -> None:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            self.graph.reorder_mirror_priority(work_id, from_index, to_index)

    def reorder_groups(self, work_id: UUID, from_index: int, to_index: int) -> None:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            self.graph.reorder_group_priority(work_id, from_index, to_index)

    def update_policy(self, work_id: UUID, policy: DisplayPolicy) -> DisplayPolicy:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            return self.graph.set_display_policy(work_id, policy)

    def toggle_sort(self, work_id: UUID, key: SortKey) -> DisplayPolicy:
        with self._transaction() as repositories:
            self._load(repositories, work_id)
            return self.graph.toggle_sort(work_id, key)
