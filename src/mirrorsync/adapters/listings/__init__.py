"""Public interface for the chapter-listing adapter."""

from __future__ import annotations

from .schema import ChapterPayload, MirrorPayload, WorkPayload
from .translator import (
    ListingPayloadError,
    drafts_from_payload,
    listing_from_payload,
    mirror_from_payload,
    parse_mirror_payload,
    parse_work_payload,
    work_from_payload,
)

__all__ = [
    "ChapterPayload",
    "ListingPayloadError",
    "MirrorPayload",
    "WorkPayload",
    "drafts_from_payload",
    "listing_from_payload",
    "mirror_from_payload",
    "parse_mirror_payload",
    "parse_work_payload",
    "work_from_payload",
]
