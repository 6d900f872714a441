"""Read-only chapter views handed to presentation and collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from mirrorsync.domain.model import AttributionLabel, ChapterNumber, ChapterRecord


@dataclass(frozen=True, slots=True, kw_only=True)
class ChapterView:
    id: UUID
    number: ChapterNumber
    display_number: str
    title: str | None
    attribution: AttributionLabel
    timestamp: datetime
    progress: float
    owning_mirror_id: UUID
    is_downloaded: bool = False

    @property
    def is_read(self) -> bool:
        return self.progress == 1.0

    @classmethod
    def from_record(cls, record: ChapterRecord) -> ChapterView:
        return cls(
            id=record.id,
            number=record.number,
            display_number=record.display_number,
            title=record.title,
            attribution=record.attribution,
            timestamp=record.published_at,
            progress=record.progress,
            owning_mirror_id=record.mirror_id,
            is_downloaded=record.is_downloaded,
        )
