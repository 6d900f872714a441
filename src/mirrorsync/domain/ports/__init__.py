"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import ChapterListingFetcher, MirrorListing
from .persistence import Repository, WorkRepository
from .unit_of_work import (
    LibraryRepositories,
    LibraryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ChapterListingFetcher",
    "LibraryRepositories",
    "LibraryUnitOfWork",
    "MirrorListing",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "WorkRepository",
]
