"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from sqlalchemy.orm import Session  # noqa: TC002

from mirrorsync.adapters.sqlalchemy.repositories import SqlAlchemyWorkRepository
from mirrorsync.domain.model import new_id
from mirrorsync.domain.ports import WorkRepository
from mirrorsync.domain.reconciliation import reconcile_work
from tests.helpers.works import draft, make_mirror, make_work, numbered_work


def test_repository_satisfies_port(sqlite_session: Session) -> None:
    assert isinstance(SqlAlchemyWorkRepository(sqlite_session), WorkRepository)


def test_get_returns_stored_work(sqlite_session: Session) -> None:
    repository = SqlAlchemyWorkRepository(sqlite_session)
    work = numbered_work(3)
    reconcile_work(work)

    repository.add(work)
    sqlite_session.commit()

    assert repository.get(work.id) is work
    assert repository.get(new_id()) is None


def test_find_matches_source_and_slug(sqlite_session: Session) -> None:
    repository = SqlAlchemyWorkRepository(sqlite_session)
    work = make_work(make_mirror("host/a", [draft(1.0)]), make_mirror("host/b", [draft(1.0)]))
    other = make_work(make_mirror("host/c", [draft(1.0)]), title="Other")
    repository.add(work)
    repository.add(other)
    sqlite_session.commit()

    assert repository.find("host/b", "host/b-slug") is work
    assert repository.find("host/c", "host/c-slug") is other
    assert repository.find("host/b", "another-slug") is None
    assert repository.find("host/z", "host/b-slug") is None


def test_list_works_orders_by_title(sqlite_session: Session) -> None:
    repository = SqlAlchemyWorkRepository(sqlite_session)
    repository.add(make_work(make_mirror("host/a"), title="Zeta"))
    repository.add(make_work(make_mirror("host/b"), title="Alpha"))
    sqlite_session.commit()

    assert [work.title for work in repository.list_works()] == ["Alpha", "Zeta"]


def test_remove_deletes_work(sqlite_session: Session) -> None:
    repository = SqlAlchemyWorkRepository(sqlite_session)
    work = numbered_work(2)
    repository.add(work)
    sqlite_session.commit()

    repository.remove(work)
    sqlite_session.commit()

    assert repository.get(work.id) is None
    assert repository.list_works() == []
