"""Port for the remote retrieval collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mirrorsync.domain.model import ChapterDraft, Mirror, SourceId


@dataclass(slots=True)
class MirrorListing:
    """One mirror's full chapter listing as fetched from its source."""

    source_id: SourceId
    drafts: list[ChapterDraft] = field(default_factory=list["ChapterDraft"])


@runtime_checkable
class ChapterListingFetcher(Protocol):
    """Callable port returning the current chapter listing of a mirror."""

    def __call__(self, mirror: Mirror) -> MirrorListing: ...


__all__ = ["ChapterListingFetcher", "MirrorListing"]
