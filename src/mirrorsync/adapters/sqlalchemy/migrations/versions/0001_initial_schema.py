"""initial library schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from mirrorsync.adapters.sqlalchemy.mappings import StringListType, UTCDateTime
from mirrorsync.domain.model import ContentRating, PublishStatus, SortDirection, SortKey

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "work",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("authors", StringListType(), nullable=False),
        sa.Column("synopsis", sa.Text(), nullable=False),
        sa.Column("tags", StringListType(), nullable=False),
        sa.Column("alternative_titles", StringListType(), nullable=False),
        sa.Column("in_library", sa.Boolean(), nullable=False),
        sa.Column("show_all_duplicates", sa.Boolean(), nullable=False),
        sa.Column("include_half_chapters", sa.Boolean(), nullable=False),
        sa.Column("sort_key", sa.Enum(SortKey, native_enum=False), nullable=False),
        sa.Column("sort_direction", sa.Enum(SortDirection, native_enum=False), nullable=False),
        sa.Column("needs_reconciliation", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_work")),
    )
    op.create_table(
        "mirror",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("work_id", sa.Uuid(), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("cover_url", sa.String(), nullable=True),
        sa.Column("referer", sa.String(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("publish_status", sa.Enum(PublishStatus, native_enum=False), nullable=False),
        sa.Column("content_rating", sa.Enum(ContentRating, native_enum=False), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("added_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["work_id"],
            ["work.id"],
            name=op.f("fk_mirror_work_id_work"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_mirror")),
        sa.UniqueConstraint("work_id", "source_id", name="uq_mirror_work_source"),
    )
    op.create_index("ix_mirror_source_slug", "mirror", ["source_id", "slug"], unique=False)
    op.create_table(
        "chapter",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("mirror_id", sa.Uuid(), nullable=False),
        sa.Column("number", sa.Float(), nullable=False),
        sa.Column("attribution", sa.String(), nullable=False),
        sa.Column("published_at", UTCDateTime(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("progress", sa.Float(), nullable=False),
        sa.Column("local_path", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["mirror_id"],
            ["mirror.id"],
            name=op.f("fk_chapter_mirror_id_mirror"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_chapter")),
    )
    op.create_index("ix_chapter_mirror_number", "chapter", ["mirror_id", "number"], unique=False)
    op.create_table(
        "priority_table",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("work_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["work_id"],
            ["work.id"],
            name=op.f("fk_priority_table_work_id_work"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_priority_table")),
        sa.UniqueConstraint("work_id", name=op.f("uq_priority_table_work_id")),
    )
    op.create_table(
        "mirror_priority",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("table_id", sa.Uuid(), nullable=False),
        sa.Column("mirror_id", sa.Uuid(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["table_id"],
            ["priority_table.id"],
            name=op.f("fk_mirror_priority_table_id_priority_table"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_mirror_priority")),
    )
    op.create_table(
        "group_priority",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("table_id", sa.Uuid(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("display_mirror_id", sa.Uuid(), nullable=True),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["table_id"],
            ["priority_table.id"],
            name=op.f("fk_group_priority_table_id_priority_table"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_group_priority")),
    )


def downgrade() -> None:
    op.drop_table("group_priority")
    op.drop_table("mirror_priority")
    op.drop_table("priority_table")
    op.drop_index("ix_chapter_mirror_number", table_name="chapter")
    op.drop_table("chapter")
    op.drop_index("ix_mirror_source_slug", table_name="mirror")
    op.drop_table("mirror")
    op.drop_table("work")
