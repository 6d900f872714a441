"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from mirrorsync.adapters.sqlalchemy.mappings import mirror_table, work_table
from mirrorsync.domain.model import Work

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session

    from mirrorsync.domain.model import SourceId


class SqlAlchemyWorkRepository:
    """Works with their mirrors, chapters and priority table (loaded eagerly)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Work) -> None:
        self.session.add(entity)

    def get(self, work_id: uuid.UUID) -> Work | None:
        return self.session.get(Work, work_id)

    def find(self, source_id: SourceId, slug: str) -> Work | None:
        """Return the work that already has a mirror for ``(source_id, slug)``."""

        stmt = (
            select(Work)
            .join(mirror_table, mirror_table.c.work_id == work_table.c.id)
            .where(mirror_table.c.source_id == source_id)
            .where(mirror_table.c.slug == slug)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_works(self) -> list[Work]:
        stmt = select(Work).order_by(work_table.c.title)
        return list(self.session.execute(stmt).scalars().all())

    def remove(self, work: Work) -> None:
        self.session.delete(work)


if TYPE_CHECKING:
    from mirrorsync.domain.ports.persistence import WorkRepository

    _session_stub = cast("Session", object())
    _repo_check: WorkRepository = SqlAlchemyWorkRepository(_session_stub)
