from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from mirrorsync.domain.model import DisplayPolicy, SortDirection, SortKey
from mirrorsync.domain.reconciliation import (
    move_group_priority,
    move_mirror_priority,
    reconcile_work,
)
from mirrorsync.domain.unification import (
    canonical_chapters,
    collect_chapters,
    unify,
    without_half_chapters,
)
from tests.helpers.works import draft, make_mirror, make_work, two_mirror_work

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mirrorsync.domain.model import Mirror, Work
    from mirrorsync.domain.unification import ChapterView


def _numbers(views: Sequence[ChapterView]) -> list[float]:
    return [view.number for view in views]


def _reconciled_two_mirror_work() -> tuple[Work, Mirror, Mirror]:
    work, mirror_a, mirror_b = two_mirror_work()
    reconcile_work(work)
    return work, mirror_a, mirror_b


def test_half_chapters_are_hidden_and_best_mirror_wins() -> None:
    work, mirror_a, _mirror_b = _reconciled_two_mirror_work()
    policy = DisplayPolicy(include_half_chapters=False)

    views = unify(work, policy)

    assert len(views) == 1
    (view,) = views
    assert view.number == 5.0
    assert view.owning_mirror_id == mirror_a.id
    assert view.attribution == "TeamX"


def test_half_chapters_are_shown_newest_first() -> None:
    work, mirror_a, mirror_b = _reconciled_two_mirror_work()

    views = unify(work, DisplayPolicy())

    assert _numbers(views) == [5.5, 5.0]
    assert [view.owning_mirror_id for view in views] == [mirror_b.id, mirror_a.id]
    assert views[0].display_number == "5.5"
    assert views[1].display_number == "5"


def test_mirror_rank_beats_group_rank() -> None:
    work, _mirror_a, mirror_b = _reconciled_two_mirror_work()
    move_mirror_priority(work, 1, 0)

    views = unify(work, DisplayPolicy(include_half_chapters=False))

    assert [view.owning_mirror_id for view in views] == [mirror_b.id]


def test_group_rank_decides_within_one_mirror() -> None:
    mirror = make_mirror("host/a", [draft(1.0, "TeamX"), draft(1.0, "TeamY")])
    work = make_work(mirror)
    reconcile_work(work)

    assert [view.attribution for view in unify(work)] == ["TeamX"]

    move_group_priority(work, 1, 0)

    assert [view.attribution for view in unify(work)] == ["TeamY"]


def test_show_all_duplicates_keeps_every_record() -> None:
    work, mirror_a, mirror_b = _reconciled_two_mirror_work()

    views = unify(work, DisplayPolicy(show_all_duplicates=True))

    assert _numbers(views) == [5.5, 5.0, 5.0]
    assert {view.owning_mirror_id for view in views} == {mirror_a.id, mirror_b.id}
    assert len({view.id for view in views}) == 3


def test_every_number_appears_exactly_once_without_duplicates() -> None:
    a = make_mirror("host/a", [draft(1.0, "TeamX"), draft(3.0, "TeamX")])
    b = make_mirror("host/b", [draft(1.0, "TeamY"), draft(2.0, "TeamY"), draft(2.5, "TeamY")])
    work = make_work(a, b)
    reconcile_work(work)

    views = unify(work)

    assert _numbers(views) == [3.0, 2.5, 2.0, 1.0]


def test_ascending_number_sort() -> None:
    work, _a, _b = _reconciled_two_mirror_work()
    policy = DisplayPolicy(sort_direction=SortDirection.ASCENDING)

    assert _numbers(unify(work, policy)) == [5.0, 5.5]


def test_date_sort_orders_by_publication_then_number() -> None:
    mirror = make_mirror(
        "host/a",
        [
            draft(1.0, day=10),
            draft(2.0, day=3),
            draft(3.0, day=3),
            draft(4.0, day=1),
        ],
    )
    work = make_work(mirror)
    reconcile_work(work)
    policy = DisplayPolicy(sort_key=SortKey.DATE)

    assert _numbers(unify(work, policy)) == [1.0, 3.0, 2.0, 4.0]
    ascending = replace(policy, sort_direction=SortDirection.ASCENDING)
    assert _numbers(unify(work, ascending)) == [4.0, 2.0, 3.0, 1.0]


def test_unranked_records_never_beat_ranked_ones() -> None:
    work, mirror_a, _mirror_b = _reconciled_two_mirror_work()
    work.attach_mirror(make_mirror("host/c", [draft(5.0, "TeamNew")]))

    views = unify(work, DisplayPolicy(include_half_chapters=False))

    assert [view.owning_mirror_id for view in views] == [mirror_a.id]


def test_policy_defaults_to_the_work_policy() -> None:
    work, _a, _b = _reconciled_two_mirror_work()
    work.display_policy = DisplayPolicy(include_half_chapters=False)

    assert _numbers(unify(work)) == [5.0]


def test_unify_does_not_mutate_the_graph() -> None:
    work, _a, _b = _reconciled_two_mirror_work()
    before = [(record.id, record.progress, record.position) for record in collect_chapters(work)]

    unify(work, DisplayPolicy(show_all_duplicates=True, sort_key=SortKey.DATE))

    after = [(record.id, record.progress, record.position) for record in collect_chapters(work)]
    assert after == before
    assert not work.needs_reconciliation


def test_building_blocks_compose() -> None:
    work, mirror_a, _b = _reconciled_two_mirror_work()

    whole = without_half_chapters(collect_chapters(work))
    canonical = canonical_chapters(whole, work.priorities)

    assert [record.mirror_id for record in canonical] == [mirror_a.id]
