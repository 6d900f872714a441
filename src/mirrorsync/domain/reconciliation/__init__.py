"""Priority-table reconciliation for works.

Flow:
1) reconcile mirror ranks (stable for surviving mirrors, append new ones)
2) reconcile group ranks (stable for re-observed labels, append new, prune gone)
3) clear the work's ``needs_reconciliation`` flag

Manual reorders are the only other writers of relative rank.
"""

from __future__ import annotations

from .engine import ReconciliationReport, Reconciler, reconcile_work
from .groups import (
    GroupReconciliation,
    LabelObservation,
    observe_labels,
    reconcile_group_priorities,
    refresh_display_mirrors,
)
from .mirrors import MirrorReconciliation, reconcile_mirror_priorities, sync_mirror_priorities
from .reorder import move_group_priority, move_mirror_priority

__all__ = [
    "GroupReconciliation",
    "LabelObservation",
    "MirrorReconciliation",
    "ReconciliationReport",
    "Reconciler",
    "move_group_priority",
    "move_mirror_priority",
    "observe_labels",
    "reconcile_group_priorities",
    "reconcile_mirror_priorities",
    "reconcile_work",
    "refresh_display_mirrors",
    "sync_mirror_priorities",
]
