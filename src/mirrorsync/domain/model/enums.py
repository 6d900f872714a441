"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Typed-reference discriminator used by change notifications."""

    WORK = "work"
    MIRROR = "mirror"
    CHAPTER = "chapter"

    # Priority bookkeeping, owned by the work's priority table
    PRIORITY_TABLE = "priority_table"
    MIRROR_PRIORITY = "mirror_priority"
    GROUP_PRIORITY = "group_priority"


class SortKey(StrEnum):
    NUMBER = "number"
    DATE = "date"


class SortDirection(StrEnum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggled(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


class PublishStatus(StrEnum):
    UNKNOWN = "unknown"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    HIATUS = "hiatus"
    CANCELLED = "cancelled"


class ContentRating(StrEnum):
    SAFE = "safe"
    SUGGESTIVE = "suggestive"
    EXPLICIT = "explicit"


class IngestMode(StrEnum):
    """How a fetched listing is combined with a mirror's existing chapters."""

    REPLACE = "replace"
    MERGE = "merge"


class MarkDirection(StrEnum):
    """Which side of an anchor chapter a bulk progress update covers."""

    TOWARD_START = "toward_start"
    TOWARD_END = "toward_end"
