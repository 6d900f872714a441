from __future__ import annotations

import pytest

from mirrorsync.domain.errors import NotFoundError
from mirrorsync.domain.model import MarkDirection, Work, new_id
from mirrorsync.domain.reconciliation import reconcile_work
from mirrorsync.domain.unification import continue_index, select_range, unify
from tests.helpers.works import numbered_work


def _work() -> Work:
    work = numbered_work(5)
    reconcile_work(work)
    return work


def _mark_read(work: Work, *numbers: float) -> None:
    for record in work.chapters():
        if record.number in numbers:
            record.set_progress(1.0)


def test_continue_points_at_oldest_unread_chapter() -> None:
    work = _work()
    _mark_read(work, 1.0, 2.0)
    sequence = unify(work)

    index = continue_index(sequence)

    assert index is not None
    assert sequence[index].number == 3.0


def test_continue_without_progress_starts_at_the_first_chapter() -> None:
    sequence = unify(_work())

    index = continue_index(sequence)

    assert index == len(sequence) - 1
    assert sequence[index].number == 1.0


def test_partially_read_chapter_counts_as_unfinished() -> None:
    work = _work()
    _mark_read(work, 1.0, 2.0, 3.0, 4.0, 5.0)
    next(record for record in work.chapters() if record.number == 4.0).set_progress(0.5)

    sequence = unify(work)
    index = continue_index(sequence)

    assert index is not None
    assert sequence[index].number == 4.0


def test_continue_is_none_when_everything_is_read() -> None:
    work = _work()
    _mark_read(work, 1.0, 2.0, 3.0, 4.0, 5.0)

    assert continue_index(unify(work)) is None
    assert continue_index(()) is None


def test_select_range_toward_start_includes_anchor() -> None:
    sequence = unify(_work())
    anchor = next(view for view in sequence if view.number == 3.0)

    selected = select_range(sequence, anchor.id, MarkDirection.TOWARD_START)

    assert [view.number for view in selected] == [5.0, 4.0, 3.0]


def test_select_range_toward_end_includes_anchor() -> None:
    sequence = unify(_work())
    anchor = next(view for view in sequence if view.number == 3.0)

    selected = select_range(sequence, anchor.id, MarkDirection.TOWARD_END)

    assert [view.number for view in selected] == [3.0, 2.0, 1.0]


def test_select_range_rejects_unknown_anchor() -> None:
    sequence = unify(_work())

    with pytest.raises(NotFoundError):
        select_range(sequence, new_id(), MarkDirection.TOWARD_START)
