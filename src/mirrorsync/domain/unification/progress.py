"""Reading-progress helpers over a displayed chapter sequence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mirrorsync.domain.errors import NotFoundError
from mirrorsync.domain.model import MarkDirection

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from .views import ChapterView


def continue_index(sequence: Sequence[ChapterView]) -> int | None:
    """Index of the unfinished chapter nearest the tail, or ``None`` when all are read.

    For the default newest-first list this is the oldest unread chapter.
    """

    for index in range(len(sequence) - 1, -1, -1):
        if sequence[index].progress != 1.0:
            return index
    return None


def select_range(
    sequence: Sequence[ChapterView],
    anchor_id: UUID,
    direction: MarkDirection,
) -> tuple[ChapterView, ...]:
    """Return the views on one side of the anchor, anchor included."""

    for index, view in enumerate(sequence):
        if view.id == anchor_id:
            break
    else:
        raise NotFoundError("Chapter", anchor_id)

    if direction is MarkDirection.TOWARD_START:
        return tuple(sequence[: index + 1])
    return tuple(sequence[index:])
