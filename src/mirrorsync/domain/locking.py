"""Per-work reader/writer locks.

Mutations on a work are exclusive; reads may overlap each other but never a
mutation. Waiting writers block new readers so a pending mutation is not
starved by a stream of reads.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID


class ReadWriteLock:
    """Writer-preferring, non-reentrant reader/writer lock."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._condition:
            while self._writer_active or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._condition:
                self._writer_active = False
                self._condition.notify_all()


class WorkLocks:
    """Registry handing out one lock per work id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[UUID, ReadWriteLock] = {}

    def lock_for(self, work_id: UUID) -> ReadWriteLock:
        with self._guard:
            lock = self._locks.get(work_id)
            if lock is None:
                lock = self._locks[work_id] = ReadWriteLock()
            return lock

    def discard(self, work_id: UUID) -> None:
        with self._guard:
            self._locks.pop(work_id, None)

    def __contains__(self, work_id: object) -> bool:
        with self._guard:
            return work_id in self._locks

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def read(self, work_id: UUID) -> Iterator[None]:
        with self.lock_for(work_id).read():
            yield

    @contextmanager
    def write(self, work_id: UUID) -> Iterator[None]:
        with self.lock_for(work_id).write():
            yield
