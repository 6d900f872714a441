from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from mirrorsync.adapters.sqlalchemy import start_mappers
from mirrorsync.adapters.sqlalchemy.migrations import upgrade_head
from mirrorsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLibraryUnitOfWork,
    shutdown,
    startup,
)
from mirrorsync.app import Library
from mirrorsync.domain.model import DisplayPolicy

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from mirrorsync.domain.propagation import ChangeChannel


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[ChangeChannel], SqlAlchemyLibraryUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory(channel: ChangeChannel) -> SqlAlchemyLibraryUnitOfWork:
        return SqlAlchemyLibraryUnitOfWork(channel=channel)

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def library(
    sqlite_unit_of_work: Callable[[ChangeChannel], SqlAlchemyLibraryUnitOfWork],
) -> Library:
    return Library(unit_of_work_factory=sqlite_unit_of_work, default_policy=DisplayPolicy())
