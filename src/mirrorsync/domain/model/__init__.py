"""Public domain model surface."""

from __future__ import annotations

from mirrorsync.domain.model.catalog import (
    ChapterDraft,
    ChapterRecord,
    IngestResult,
    Mirror,
    Work,
)
from mirrorsync.domain.model.entity import Entity, EntityRef, new_id
from mirrorsync.domain.model.enums import (
    ContentRating,
    EntityType,
    IngestMode,
    MarkDirection,
    PublishStatus,
    SortDirection,
    SortKey,
)
from mirrorsync.domain.model.policy import DisplayPolicy
from mirrorsync.domain.model.primitives import (
    AttributionLabel,
    ChapterNumber,
    SourceId,
    format_chapter_number,
    is_whole_number,
)
from mirrorsync.domain.model.priority import (
    GroupPriorityEntry,
    MirrorPriorityEntry,
    PriorityTable,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "EntityRef",
    "new_id",
    # catalog
    "Work",
    "Mirror",
    "ChapterRecord",
    "ChapterDraft",
    "IngestResult",
    # priorities
    "PriorityTable",
    "MirrorPriorityEntry",
    "GroupPriorityEntry",
    # policy
    "DisplayPolicy",
    # enums
    "ContentRating",
    "EntityType",
    "IngestMode",
    "MarkDirection",
    "PublishStatus",
    "SortDirection",
    "SortKey",
    # primitives
    "AttributionLabel",
    "ChapterNumber",
    "SourceId",
    "format_chapter_number",
    "is_whole_number",
]
