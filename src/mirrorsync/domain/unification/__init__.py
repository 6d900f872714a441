"""Chapter unification: the deduplicated, ordered list a reader sees."""

from __future__ import annotations

from mirrorsync.domain.model import MarkDirection

from .progress import continue_index, select_range
from .unify import (
    canonical_chapters,
    collect_chapters,
    priority_key,
    sort_chapters,
    unify,
    without_half_chapters,
)
from .views import ChapterView

__all__ = [
    "ChapterView",
    "MarkDirection",
    "canonical_chapters",
    "collect_chapters",
    "continue_index",
    "priority_key",
    "select_range",
    "sort_chapters",
    "unify",
    "without_half_chapters",
]
