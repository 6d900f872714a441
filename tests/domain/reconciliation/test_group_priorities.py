from __future__ import annotations

from mirrorsync.domain.model import Work
from mirrorsync.domain.reconciliation import (
    move_mirror_priority,
    observe_labels,
    reconcile_group_priorities,
    reconcile_work,
)
from tests.helpers.works import draft, make_mirror, make_work


def _labels(work: Work) -> list[str]:
    return [entry.label for entry in work.priorities.group_entries]


def _setup() -> Work:
    a = make_mirror("host/a", [draft(1.0, "TeamX"), draft(2.0, "TeamZ"), draft(3.0, "TeamX")])
    b = make_mirror("host/b", [draft(1.0, "TeamY"), draft(2.0, "TeamX")])
    work = make_work(a, b)
    reconcile_work(work)
    return work


def test_labels_are_ranked_by_mirror_rank_then_first_sighting() -> None:
    work = _setup()
    a, b = work.mirrors

    assert _labels(work) == ["TeamX", "TeamZ", "TeamY"]
    display = {entry.label: entry.display_mirror_id for entry in work.priorities.group_entries}
    assert display == {"TeamX": a.id, "TeamZ": a.id, "TeamY": b.id}
    assert [entry.rank for entry in work.priorities.group_entries] == [0, 1, 2]


def test_observation_walks_mirrors_in_rank_order() -> None:
    work = _setup()
    _a, b = work.mirrors
    move_mirror_priority(work, 1, 0)

    observations = observe_labels(work)

    assert observations["TeamY"].order_key == (0, 0)
    assert observations["TeamX"].mirror_id == b.id


def test_reobserved_label_keeps_rank_and_updates_display_mirror() -> None:
    work = _setup()
    _a, b = work.mirrors

    move_mirror_priority(work, 1, 0)
    report = reconcile_group_priorities(work)

    assert report.added == ()
    assert report.pruned == ()
    assert _labels(work) == ["TeamX", "TeamZ", "TeamY"]
    team_x = work.priorities.group_entries[0]
    assert team_x.display_mirror_id == b.id


def test_new_labels_are_appended_after_existing_ranks() -> None:
    work = _setup()
    a, _b = work.mirrors

    a.ingest([draft(1.0, "TeamX"), draft(2.0, "TeamZ"), draft(4.0, "TeamW")])
    report = reconcile_group_priorities(work)

    assert report.added == ("TeamW",)
    assert _labels(work) == ["TeamX", "TeamZ", "TeamY", "TeamW"]


def test_simultaneous_new_labels_follow_mirror_rank_then_insertion() -> None:
    a = make_mirror("host/a", [draft(1.0, "TeamX")])
    b = make_mirror("host/b", [draft(1.0, "TeamX")])
    work = make_work(a, b)
    reconcile_work(work)

    b.ingest([draft(1.0, "TeamX"), draft(2.0, "Quill")])
    a.ingest([draft(1.0, "TeamX"), draft(2.0, "Reed")])
    report = reconcile_group_priorities(work)

    assert report.added == ("Reed", "Quill")
    assert _labels(work) == ["TeamX", "Reed", "Quill"]


def test_labels_absent_from_every_mirror_are_pruned() -> None:
    work = _setup()
    a, b = work.mirrors

    work.detach_mirror(a.id)
    reconcile_work(work)

    assert _labels(work) == ["TeamX", "TeamY"]
    assert [entry.rank for entry in work.priorities.group_entries] == [0, 1]
    assert work.priorities.group_entries[0].display_mirror_id == b.id


def test_group_reconciliation_is_idempotent() -> None:
    work = _setup()
    before = [(e.id, e.label, e.rank, e.display_mirror_id) for e in work.priorities.group_entries]

    report = reconcile_group_priorities(work)

    after = [(e.id, e.label, e.rank, e.display_mirror_id) for e in work.priorities.group_entries]
    assert not report.added
    assert not report.pruned
    assert after == before
