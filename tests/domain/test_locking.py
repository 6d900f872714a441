from __future__ import annotations

import threading
import time

from mirrorsync.domain.locking import ReadWriteLock, WorkLocks
from mirrorsync.domain.model import new_id


def test_readers_overlap() -> None:
    lock = ReadWriteLock()
    barrier = threading.Barrier(2, timeout=2.0)
    errors: list[BaseException] = []

    def reader() -> None:
        try:
            with lock.read():
                barrier.wait()
        except threading.BrokenBarrierError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=3.0)

    assert errors == []


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader() -> None:
        with lock.read():
            entered.set()

    with lock.write():
        thread = threading.Thread(target=reader)
        thread.start()
        assert not entered.wait(0.05)

    assert entered.wait(2.0)
    thread.join(timeout=2.0)


def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    def writer() -> None:
        with lock.write():
            order.append("writer")

    def late_reader() -> None:
        with lock.read():
            order.append("reader")

    with lock.read():
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        deadline = time.monotonic() + 2.0
        while not lock._writers_waiting and time.monotonic() < deadline:  # noqa: SLF001
            time.sleep(0.005)
        reader_thread = threading.Thread(target=late_reader)
        reader_thread.start()
        time.sleep(0.05)
        assert order == []

    writer_thread.join(timeout=2.0)
    reader_thread.join(timeout=2.0)
    assert order == ["writer", "reader"]


def test_work_locks_hand_out_one_lock_per_work() -> None:
    locks = WorkLocks()
    work_id = new_id()

    first = locks.lock_for(work_id)

    assert locks.lock_for(work_id) is first
    assert locks.lock_for(new_id()) is not first

    locks.discard(work_id)
    assert locks.lock_for(work_id) is not first


def test_work_locks_report_registered_ids() -> None:
    locks = WorkLocks()
    work_id = new_id()
    assert work_id not in locks

    locks.lock_for(work_id)
    assert work_id in locks
    assert len(locks) == 1

    locks.discard(work_id)
    assert len(locks) == 0
