"""Reconciliation worker: turns change events into per-work dirty flags and reconciles.

Persistence write notifications mark a work dirty when one of its mirrors or
chapter records changed. Work refs only count when the persisted flag is
already set. Priority bookkeeping refs are ignored, so the worker's own
writes do not feed back into it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from mirrorsync.domain.model import EntityType

from .events import ChaptersIngested, EntitiesChanged, MirrorAdded, MirrorRemoved

if TYPE_CHECKING:
    from collections.abc import Iterable, Set
    from threading import Event
    from uuid import UUID

    from mirrorsync.domain.model import EntityRef
    from mirrorsync.domain.reconciliation import ReconciliationReport

    from .channel import ChangeChannel
    from .events import ChangeEvent

log = logging.getLogger(__name__)

_MARKING_TYPES = frozenset({EntityType.MIRROR, EntityType.CHAPTER})
_STRUCTURAL = (MirrorAdded, MirrorRemoved, ChaptersIngested)


class ReconcilableGraph(Protocol):
    def resolve_work_id(self, ref: EntityRef) -> UUID | None: ...

    def mark_dirty(self, work_id: UUID) -> None: ...

    def reconcile_if_dirty(self, work_id: UUID) -> ReconciliationReport | None: ...


class ReconciliationWorker:
    """Single consumer of a :class:`ChangeChannel`."""

    def __init__(self, channel: ChangeChannel, graph: ReconcilableGraph) -> None:
        self._channel = channel
        self._graph = graph

    def on_entities_changed(self, updated: Set[EntityRef]) -> set[UUID]:
        """Reconcile every work affected by ``updated``; return the ids reconciled."""

        return self._reconcile(self._affected_works(updated))

    def drain(self) -> set[UUID]:
        """Process every queued event; return the ids of works that were reconciled."""

        affected: list[UUID] = []
        for event in self._channel.drain():
            affected.extend(self._works_for_event(event))
        return self._reconcile(affected)

    def serve(self, stop: Event, *, poll_interval: float = 0.25) -> None:
        """Consume events until ``stop`` is set. Intended for a dedicated thread."""

        while not stop.is_set():
            event = self._channel.get(timeout=poll_interval)
            if event is None:
                continue
            self._reconcile(self._works_for_event(event))

    def _works_for_event(self, event: ChangeEvent) -> list[UUID]:
        if isinstance(event, EntitiesChanged):
            return self._affected_works(event.refs)
        if isinstance(event, _STRUCTURAL):
            # the graph reconciled before publishing; only a left-over flag needs work
            return [event.work_id]
        return []

    def _affected_works(self, refs: Iterable[EntityRef]) -> list[UUID]:
        affected: dict[UUID, None] = {}
        for ref in refs:
            if ref.entity_type is not EntityType.WORK and ref.entity_type not in _MARKING_TYPES:
                continue
            work_id = self._graph.resolve_work_id(ref)
            if work_id is None:
                log.debug("Ignoring change to untracked %s %s", ref.entity_type, ref.id)
                continue
            if ref.entity_type in _MARKING_TYPES:
                self._mark(work_id)
            affected[work_id] = None
        return list(affected)

    def _mark(self, work_id: UUID) -> None:
        try:
            self._graph.mark_dirty(work_id)
        except LookupError:
            log.debug("Work %s no longer tracked", work_id)

    def _reconcile(self, work_ids: Iterable[UUID]) -> set[UUID]:
        reconciled: set[UUID] = set()
        for work_id in dict.fromkeys(work_ids):
            try:
                report = self._graph.reconcile_if_dirty(work_id)
            except LookupError:
                log.debug("Work %s no longer tracked", work_id)
                continue
            if report is not None:
                reconciled.add(work_id)
        if reconciled:
            log.debug("Reconciled %d work(s) after change notifications", len(reconciled))
        return reconciled
