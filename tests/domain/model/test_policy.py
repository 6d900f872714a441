from __future__ import annotations

from mirrorsync.domain.model import DisplayPolicy, SortDirection, SortKey


def test_default_policy() -> None:
    policy = DisplayPolicy()

    assert not policy.show_all_duplicates
    assert policy.include_half_chapters
    assert policy.sort_key is SortKey.NUMBER
    assert policy.descending


def test_toggle_same_key_flips_direction() -> None:
    policy = DisplayPolicy().toggled(SortKey.NUMBER)

    assert policy.sort_key is SortKey.NUMBER
    assert policy.sort_direction is SortDirection.ASCENDING
    assert policy.toggled(SortKey.NUMBER).sort_direction is SortDirection.DESCENDING


def test_toggle_other_key_resets_to_descending() -> None:
    ascending = DisplayPolicy(sort_direction=SortDirection.ASCENDING)

    policy = ascending.toggled(SortKey.DATE)

    assert policy.sort_key is SortKey.DATE
    assert policy.sort_direction is SortDirection.DESCENDING
