from __future__ import annotations

from typing import TYPE_CHECKING

from mirrorsync.adapters.sqlalchemy.notifications import collect_refs, install_change_listener
from mirrorsync.domain.model import EntityRef, EntityType
from mirrorsync.domain.propagation import ChangeChannel, EntitiesChanged
from mirrorsync.domain.reconciliation import reconcile_work
from tests.helpers.works import two_mirror_work

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_collect_refs_names_pending_entities(sqlite_session: Session) -> None:
    work, mirror_a, mirror_b = two_mirror_work()
    reconcile_work(work)
    sqlite_session.add(work)

    refs = collect_refs(sqlite_session)

    assert work.ref() in refs
    assert {mirror_a.ref(), mirror_b.ref()} <= refs
    assert {chapter.ref() for chapter in work.chapters()} <= refs
    assert work.priorities.ref() in refs
    types = {ref.entity_type for ref in refs}
    assert EntityType.MIRROR_PRIORITY in types
    assert EntityType.GROUP_PRIORITY in types


def test_flush_publishes_one_event_per_flush(sqlite_session: Session) -> None:
    channel = ChangeChannel()
    install_change_listener(sqlite_session, channel)
    work, _mirror_a, mirror_b = two_mirror_work()
    reconcile_work(work)

    sqlite_session.add(work)
    sqlite_session.flush()

    (created,) = channel.drain()
    assert isinstance(created, EntitiesChanged)
    assert work.ref() in created.refs

    chapter = mirror_b.chapters[0]
    chapter.set_progress(1.0)
    sqlite_session.flush()

    (updated,) = channel.drain()
    assert isinstance(updated, EntitiesChanged)
    assert updated.refs == frozenset({chapter.ref(), EntityRef(EntityType.MIRROR, mirror_b.id)})


def test_flush_without_changes_publishes_nothing(sqlite_session: Session) -> None:
    channel = ChangeChannel()
    install_change_listener(sqlite_session, channel)
    work, _a, mirror_b = two_mirror_work()
    reconcile_work(work)
    sqlite_session.add(work)
    sqlite_session.flush()
    channel.drain()

    chapter = mirror_b.chapters[0]
    chapter.progress = chapter.progress
    sqlite_session.flush()

    assert channel.drain() == []
