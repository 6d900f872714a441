"""Pydantic models describing a remote work listing.

A listing carries the work's metadata and one entry per source that publishes
it, each with its full chapter list. Field names follow the wire format
(camelCase); unknown keys are kept and reported once per key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ListingBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Listing %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ChapterPayload(ListingBaseModel):
    host_slug: str = Field(alias="hostSlug")
    source_slug: str = Field(alias="sourceSlug")
    manga_slug: str = Field(alias="mangaSlug")
    chapter_slug: str = Field(alias="chapterSlug")
    title: str | None = None
    number: float = Field(allow_inf_nan=False)
    scanlator: str
    date: datetime

    _normalize_title = field_validator("title", mode="before")(_blank_to_none)

    @field_validator("scanlator", mode="before")
    @classmethod
    def _default_scanlator(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Unknown"
        return value


class MirrorPayload(ListingBaseModel):
    host_slug: str = Field(alias="hostSlug")
    source_slug: str = Field(alias="sourceSlug")
    manga_slug: str = Field(alias="mangaSlug")
    url: str = ""
    cover_url: str | None = Field(default=None, alias="coverUrl")
    referer: str | None = None
    publishing_status: str = Field(default="Unknown", alias="publishingStatus")
    content_rating: str = Field(default="Safe", alias="contentRating")
    rating: float = 0.0
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    chapters: list[ChapterPayload] = Field(default_factory=list[ChapterPayload])

    _normalize_urls = field_validator("cover_url", "referer", mode="before")(_blank_to_none)

    @property
    def source_id(self) -> str:
        return f"{self.host_slug}/{self.source_slug}"


class WorkPayload(ListingBaseModel):
    host_slug: str = Field(alias="hostSlug")
    source_slug: str = Field(alias="sourceSlug")
    manga_slug: str = Field(alias="mangaSlug")
    title: str
    alternative_titles: list[str] = Field(default_factory=list[str], alias="alternativeTitles")
    authors: list[str] = Field(default_factory=list[str])
    synopsis: str = ""
    tags: list[str] = Field(default_factory=list[str])
    sources: list[MirrorPayload] = Field(default_factory=list[MirrorPayload])


type WorkPayloadInput = WorkPayload | Mapping[str, object]
type MirrorPayloadInput = MirrorPayload | Mapping[str, object]
