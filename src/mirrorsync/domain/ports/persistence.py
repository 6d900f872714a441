"""Ports for persisting works and everything they own."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mirrorsync.domain.model import Work

if TYPE_CHECKING:
    from uuid import UUID

    from mirrorsync.domain.model import SourceId


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class WorkRepository(Repository[Work], Protocol):
    """Persistence contract for works; mirrors and chapters travel with their work."""

    def get(self, work_id: UUID) -> Work | None: ...

    def find(self, source_id: SourceId, slug: str) -> Work | None: ...

    def list_works(self) -> list[Work]: ...

    def remove(self, work: Work) -> None: ...
