"""Manual priority reordering (array-move semantics)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mirrorsync.domain.errors import InvalidRangeError

from .groups import refresh_display_mirrors
from .mirrors import sync_mirror_priorities

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mirrorsync.domain.model import Work

log = logging.getLogger(__name__)


def _moved[T](entries: Sequence[T], from_index: int, to_index: int) -> list[T]:
    size = len(entries)
    for index in (from_index, to_index):
        if not 0 <= index < size:
            raise InvalidRangeError(index, size)
    reordered = list(entries)
    reordered.insert(to_index, reordered.pop(from_index))
    return reordered


def move_mirror_priority(work: Work, from_index: int, to_index: int) -> None:
    table = work.priorities
    reordered = _moved(table.mirror_entries, from_index, to_index)
    table._set_mirror_entries(reordered)  # pyright: ignore[reportPrivateUsage] # noqa: SLF001
    sync_mirror_priorities(work)
    refresh_display_mirrors(work)
    log.debug("Work %s mirror priority moved %d -> %d", work.id, from_index, to_index)


def move_group_priority(work: Work, from_index: int, to_index: int) -> None:
    table = work.priorities
    reordered = _moved(table.group_entries, from_index, to_index)
    table._set_group_entries(reordered)  # pyright: ignore[reportPrivateUsage] # noqa: SLF001
    log.debug("Work %s group priority moved %d -> %d", work.id, from_index, to_index)
