"""In-process channel carrying change events to the reconciliation worker."""

from __future__ import annotations

import logging
import queue
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .events import ChangeEvent

log = logging.getLogger(__name__)


class ChangeChannel:
    """Thread-safe FIFO of change events; many publishers, one consumer."""

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[ChangeEvent] = queue.SimpleQueue()

    def publish(self, event: ChangeEvent) -> None:
        log.debug("Publishing %s", type(event).__name__)
        self._queue.put(event)

    def drain(self) -> list[ChangeEvent]:
        """Remove and return every event queued so far."""

        events: list[ChangeEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def get(self, *, timeout: float | None = None) -> ChangeEvent | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()
