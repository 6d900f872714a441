"""Builders for works, mirrors and listing payloads used across tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from mirrorsync.domain.model import ChapterDraft, Mirror, Work
from mirrorsync.domain.ports.fetching import ChapterListingFetcher, MirrorListing

if TYPE_CHECKING:
    from collections.abc import Iterable

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def draft(
    number: float,
    attribution: str = "TeamX",
    *,
    day: int | None = None,
    title: str | None = None,
) -> ChapterDraft:
    """Chapter draft published ``day`` days after the epoch (defaults to the number)."""

    offset = int(number) if day is None else day
    return ChapterDraft(
        number=number,
        attribution=attribution,
        published_at=EPOCH + timedelta(days=offset),
        slug=f"chapter-{number}",
        title=title,
    )


def make_mirror(source_id: str, drafts: Iterable[ChapterDraft] = ()) -> Mirror:
    mirror = Mirror(source_id=source_id, slug=f"{source_id}-slug")
    mirror.ingest(drafts)
    return mirror


def make_work(*mirrors: Mirror, title: str = "Example Work") -> Work:
    work = Work(title=title)
    for mirror in mirrors:
        work.attach_mirror(mirror)
    return work


def two_mirror_work() -> tuple[Work, Mirror, Mirror]:
    """A has 5.0 by TeamX; B has 5.0 and 5.5 by TeamY."""

    mirror_a = make_mirror("host/a", [draft(5.0, "TeamX")])
    mirror_b = make_mirror("host/b", [draft(5.0, "TeamY"), draft(5.5, "TeamY")])
    return make_work(mirror_a, mirror_b), mirror_a, mirror_b


def numbered_work(count: int = 5, *, source_id: str = "host/a") -> Work:
    """Single-mirror work with chapters ``1..count`` by one group."""

    return make_work(make_mirror(source_id, [draft(float(n)) for n in range(1, count + 1)]))


@dataclass
class FakeListingFetcher(ChapterListingFetcher):
    """In-memory implementation of the chapter listing port."""

    listings: dict[str, list[ChapterDraft]] = field(default_factory=dict[str, list[ChapterDraft]])
    calls: list[str] = field(default_factory=list[str])

    def __call__(self, mirror: Mirror) -> MirrorListing:
        self.calls.append(mirror.source_id)
        return MirrorListing(
            source_id=mirror.source_id,
            drafts=list(self.listings.get(mirror.source_id, [])),
        )


def chapter_payload(
    number: float,
    scanlator: str = "TeamX",
    *,
    source: str = "alpha",
    date: str = "2024-11-04T09:30:27.000Z",
    title: str | None = None,
) -> dict[str, object]:
    return {
        "hostSlug": "host",
        "sourceSlug": source,
        "mangaSlug": "example-work",
        "chapterSlug": f"{source}-{number}",
        "title": title,
        "number": number,
        "scanlator": scanlator,
        "date": date,
    }


def mirror_payload(
    source: str = "alpha",
    chapters: Iterable[dict[str, object]] = (),
    **overrides: object,
) -> dict[str, object]:
    payload: dict[str, object] = {
        "hostSlug": "host",
        "sourceSlug": source,
        "mangaSlug": "example-work",
        "url": f"https://{source}.example/example-work",
        "coverUrl": f"https://{source}.example/cover.png",
        "referer": f"https://{source}.example",
        "publishingStatus": "Ongoing",
        "rating": 4.5,
        "createdAt": "2024-11-04T09:30:27.000Z",
        "updatedAt": "2024-11-05T09:30:27.000Z",
        "chapters": list(chapters),
    }
    payload.update(overrides)
    return payload


def work_payload(*sources: dict[str, object], title: str = "Example Work") -> dict[str, object]:
    return {
        "hostSlug": "host",
        "sourceSlug": "alpha",
        "mangaSlug": "example-work",
        "title": title,
        "alternativeTitles": ["Beispiel"],
        "authors": ["A. Author"],
        "synopsis": "A work used in tests.",
        "tags": ["Action", "Drama"],
        "sources": list(sources),
    }
