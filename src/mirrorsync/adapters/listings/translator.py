"""Translate listing payloads into domain records."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from mirrorsync.domain.model import (
    ChapterDraft,
    ContentRating,
    Mirror,
    PublishStatus,
    Work,
)
from mirrorsync.domain.ports import MirrorListing

from .schema import MirrorPayload, WorkPayload

if TYPE_CHECKING:
    from mirrorsync.domain.model import DisplayPolicy

    from .schema import ChapterPayload, MirrorPayloadInput, WorkPayloadInput

log = getLogger(__name__)


class ListingPayloadError(ValueError):
    """Raised when a listing payload does not match the expected schema."""


def parse_work_payload(raw: WorkPayloadInput) -> WorkPayload:
    if isinstance(raw, WorkPayload):
        return raw
    try:
        return WorkPayload.model_validate(raw)
    except ValidationError as exc:
        raise ListingPayloadError(f"invalid work listing: {exc}") from exc


def parse_mirror_payload(raw: MirrorPayloadInput) -> MirrorPayload:
    if isinstance(raw, MirrorPayload):
        return raw
    try:
        return MirrorPayload.model_validate(raw)
    except ValidationError as exc:
        raise ListingPayloadError(f"invalid mirror listing: {exc}") from exc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _publish_status(raw: str) -> PublishStatus:
    try:
        return PublishStatus(raw.strip().lower())
    except ValueError:
        log.warning("Unknown publishing status %r, using %s", raw, PublishStatus.UNKNOWN)
        return PublishStatus.UNKNOWN


def _content_rating(raw: str) -> ContentRating:
    try:
        return ContentRating(raw.strip().lower())
    except ValueError:
        log.warning("Unknown content rating %r, using %s", raw, ContentRating.SAFE)
        return ContentRating.SAFE


def _draft(payload: ChapterPayload) -> ChapterDraft:
    return ChapterDraft(
        number=payload.number,
        attribution=payload.scanlator,
        published_at=_as_utc(payload.date),
        slug=payload.chapter_slug,
        title=payload.title,
    )


def drafts_from_payload(raw: MirrorPayloadInput) -> list[ChapterDraft]:
    payload = parse_mirror_payload(raw)
    return [_draft(chapter) for chapter in payload.chapters]


def listing_from_payload(raw: MirrorPayloadInput) -> MirrorListing:
    payload = parse_mirror_payload(raw)
    return MirrorListing(source_id=payload.source_id, drafts=drafts_from_payload(payload))


def mirror_from_payload(raw: MirrorPayloadInput) -> Mirror:
    """Build a detached mirror with its chapters ingested; attach it to a work afterwards."""

    payload = parse_mirror_payload(raw)
    mirror = Mirror(
        source_id=payload.source_id,
        slug=payload.manga_slug,
        url=payload.url,
        cover_url=payload.cover_url,
        referer=payload.referer,
        rating=payload.rating,
        publish_status=_publish_status(payload.publishing_status),
        content_rating=_content_rating(payload.content_rating),
        created_at=_as_utc(payload.created_at) if payload.created_at else None,
        updated_at=_as_utc(payload.updated_at) if payload.updated_at else None,
    )
    mirror.ingest(drafts_from_payload(payload))
    return mirror


def work_from_payload(
    raw: WorkPayloadInput,
    *,
    display_policy: DisplayPolicy | None = None,
) -> Work:
    """Materialise a new work with one mirror per listed source.

    Sources repeating an already-seen source id are skipped. The returned work
    is not reconciled yet; register it with the entity graph.
    """

    payload = parse_work_payload(raw)
    work = Work(
        title=payload.title,
        authors=list(payload.authors),
        synopsis=payload.synopsis,
        tags=list(payload.tags),
        alternative_titles=list(payload.alternative_titles),
    )
    if display_policy is not None:
        work.display_policy = display_policy
    for source in payload.sources:
        if work.mirror_for_source(source.source_id) is not None:
            log.warning("Skipping repeated source %s for %r", source.source_id, payload.title)
            continue
        work.attach_mirror(mirror_from_payload(source))
    if not work.mirrors:
        raise ListingPayloadError(f"listing for {payload.title!r} has no sources")
    return work
