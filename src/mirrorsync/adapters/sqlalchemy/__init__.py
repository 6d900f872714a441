"""SQLAlchemy adapter package for mirrorsync."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .notifications import collect_refs, install_change_listener
from .repositories import SqlAlchemyWorkRepository
from .unit_of_work import (
    SqlAlchemyLibraryUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyLibraryUnitOfWork",
    "SqlAlchemyWorkRepository",
    "StartupError",
    "collect_refs",
    "create_all_tables",
    "install_change_listener",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
