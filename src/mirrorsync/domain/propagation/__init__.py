"""Change propagation: typed events, the channel, and the reconciliation worker."""

from __future__ import annotations

from .channel import ChangeChannel
from .events import (
    ChangeEvent,
    ChaptersIngested,
    EntitiesChanged,
    MirrorAdded,
    MirrorRemoved,
    PrioritiesReordered,
    ProgressChanged,
    StructuralChange,
    WorkRemoved,
)
from .worker import ReconcilableGraph, ReconciliationWorker

__all__ = [
    "ChangeChannel",
    "ChangeEvent",
    "ChaptersIngested",
    "EntitiesChanged",
    "MirrorAdded",
    "MirrorRemoved",
    "PrioritiesReordered",
    "ProgressChanged",
    "ReconcilableGraph",
    "ReconciliationWorker",
    "StructuralChange",
    "WorkRemoved",
]
