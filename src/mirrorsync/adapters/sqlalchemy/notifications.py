"""Bridge SQLAlchemy flushes into change-propagation events.

After every flush the session's new, modified and deleted domain instances
are turned into entity references and published as one ``EntitiesChanged``
event. A chapter change also names its mirror, so the owning work can be
found even when the chapter itself is not indexed yet.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import event

from mirrorsync.domain.model import ChapterRecord, Entity, EntityRef, EntityType
from mirrorsync.domain.propagation import EntitiesChanged

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy.orm import Session, UOWTransaction

    from mirrorsync.domain.propagation import ChangeChannel

log = logging.getLogger(__name__)


def _refs_for(instance: object) -> Iterator[EntityRef]:
    if not isinstance(instance, Entity):
        return
    yield instance.ref()
    if isinstance(instance, ChapterRecord) and instance.mirror_id is not None:
        yield EntityRef(EntityType.MIRROR, instance.mirror_id)


def collect_refs(session: Session) -> frozenset[EntityRef]:
    """Entity references for everything the pending flush writes."""

    modified: Iterable[object] = (
        instance for instance in session.dirty if session.is_modified(instance)
    )
    refs: set[EntityRef] = set()
    for batch in (session.new, modified, session.deleted):
        for instance in batch:
            refs.update(_refs_for(instance))
    return frozenset(refs)


def install_change_listener(session: Session, channel: ChangeChannel) -> None:
    """Publish an ``EntitiesChanged`` event on ``channel`` after each flush of ``session``."""

    def _after_flush(flushed: Session, flush_context: UOWTransaction) -> None:
        _ = flush_context
        refs = collect_refs(flushed)
        if not refs:
            return
        log.debug("Flush touched %d entities", len(refs))
        channel.publish(EntitiesChanged(refs=refs))

    event.listen(session, "after_flush", _after_flush)
