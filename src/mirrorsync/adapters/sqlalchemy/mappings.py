"""SQLAlchemy mapping metadata for the mirrorsync domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import composite, configure_mappers, relationship

from mirrorsync.domain.model import (
    ChapterRecord,
    ContentRating,
    DisplayPolicy,
    GroupPriorityEntry,
    Mirror,
    MirrorPriorityEntry,
    PriorityTable,
    PublishStatus,
    SortDirection,
    SortKey,
    Work,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class StringListType(TypeDecorator[list[str]]):
    """Ordered list of strings stored as a JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [item for item in items if isinstance(item, str)]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog tables --------------------------------------------------------------

work_table = Table(
    "work",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("authors", StringListType, nullable=False),
    Column("synopsis", Text, nullable=False, default=""),
    Column("tags", StringListType, nullable=False),
    Column("alternative_titles", StringListType, nullable=False),
    Column("in_library", Boolean, nullable=False, default=False),
    Column("show_all_duplicates", Boolean, nullable=False, default=False),
    Column("include_half_chapters", Boolean, nullable=False, default=True),
    Column("sort_key", Enum(SortKey, native_enum=False), nullable=False),
    Column("sort_direction", Enum(SortDirection, native_enum=False), nullable=False),
    Column("needs_reconciliation", Boolean, nullable=False, default=False),
)

mirror_table = Table(
    "mirror",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "work_id",
        UUIDColumnType,
        ForeignKey("work.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source_id", String, nullable=False),
    Column("slug", String, nullable=False),
    Column("url", String, nullable=False, default=""),
    Column("cover_url", String, nullable=True),
    Column("referer", String, nullable=True),
    Column("rating", Float, nullable=False, default=0.0),
    Column("publish_status", Enum(PublishStatus, native_enum=False), nullable=False),
    Column("content_rating", Enum(ContentRating, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("priority", Integer, nullable=False, default=0),
    Column("added_index", Integer, nullable=False, default=0),
    UniqueConstraint("work_id", "source_id", name="uq_mirror_work_source"),
    Index("ix_mirror_source_slug", "source_id", "slug"),
)

chapter_table = Table(
    "chapter",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "mirror_id",
        UUIDColumnType,
        ForeignKey("mirror.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("number", Float, nullable=False),
    Column("attribution", String, nullable=False),
    Column("published_at", UTCDateTime(), nullable=False),
    Column("slug", String, nullable=False, default=""),
    Column("title", String, nullable=True),
    Column("position", Integer, nullable=False, default=0),
    Column("progress", Float, nullable=False, default=0.0),
    Column("local_path", String, nullable=True),
    Index("ix_chapter_mirror_number", "mirror_id", "number"),
)

# Priority tables -------------------------------------------------------------

work_priorities_table = Table(
    "priority_table",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "work_id",
        UUIDColumnType,
        ForeignKey("work.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
)

# mirror/display-mirror ids are handles only: an entry may outlive its mirror
# until the next reconciliation prunes it
mirror_priority_table = Table(
    "mirror_priority",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "table_id",
        UUIDColumnType,
        ForeignKey("priority_table.id", ondelete="CASCADE"),
        key="_table_id",
        nullable=False,
    ),
    Column("mirror_id", UUIDColumnType, nullable=False),
    Column("rank", Integer, nullable=False),
)

group_priority_table = Table(
    "group_priority",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "table_id",
        UUIDColumnType,
        ForeignKey("priority_table.id", ondelete="CASCADE"),
        key="_table_id",
        nullable=False,
    ),
    Column("label", String, nullable=False),
    Column("display_mirror_id", UUIDColumnType, nullable=True),
    Column("rank", Integer, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.debug("Starting mappers")

    mapper_registry.map_imperatively(
        Work,
        work_table,
        properties={
            "_mirrors": relationship(
                Mirror,
                cascade="all, delete-orphan",
                order_by=mirror_table.c.added_index,
                lazy="selectin",
            ),
            "_priorities": relationship(
                PriorityTable,
                uselist=False,
                cascade="all, delete-orphan",
                lazy="selectin",
            ),
            "display_policy": composite(
                DisplayPolicy,
                work_table.c.show_all_duplicates,
                work_table.c.include_half_chapters,
                work_table.c.sort_key,
                work_table.c.sort_direction,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Mirror,
        mirror_table,
        properties={
            "_chapters": relationship(
                ChapterRecord,
                cascade="all, delete-orphan",
                order_by=chapter_table.c.position,
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(
        ChapterRecord,
        chapter_table,
    )

    mapper_registry.map_imperatively(
        PriorityTable,
        work_priorities_table,
        properties={
            "_mirror_entries": relationship(
                MirrorPriorityEntry,
                cascade="all, delete-orphan",
                order_by=mirror_priority_table.c.rank,
                lazy="selectin",
            ),
            "_group_entries": relationship(
                GroupPriorityEntry,
                cascade="all, delete-orphan",
                order_by=group_priority_table.c.rank,
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(
        MirrorPriorityEntry,
        mirror_priority_table,
    )

    mapper_registry.map_imperatively(
        GroupPriorityEntry,
        group_priority_table,
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
