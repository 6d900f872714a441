"""Orchestrator for priority reconciliation.

Mirror ranks are reconciled first because group observation walks mirrors in
rank order. Running the reconciler twice without a graph change leaves the
table untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from .groups import GroupReconciliation, reconcile_group_priorities
from .mirrors import MirrorReconciliation, reconcile_mirror_priorities

if TYPE_CHECKING:
    from mirrorsync.domain.model import Work


class ReconcileMirrors(Protocol):
    def __call__(self, work: Work) -> MirrorReconciliation: ...


class ReconcileGroups(Protocol):
    def __call__(self, work: Work) -> GroupReconciliation: ...


@dataclass(slots=True, frozen=True)
class ReconciliationReport:
    mirrors: MirrorReconciliation = field(default_factory=MirrorReconciliation)
    groups: GroupReconciliation = field(default_factory=GroupReconciliation)

    @property
    def changed(self) -> bool:
        return bool(
            self.mirrors.added or self.mirrors.pruned or self.groups.added or self.groups.pruned
        )


@dataclass(slots=True)
class Reconciler:
    """Recompute a work's priority table from its current mirrors and chapters."""

    mirrors: ReconcileMirrors = reconcile_mirror_priorities
    groups: ReconcileGroups = reconcile_group_priorities

    def reconcile(self, work: Work) -> ReconciliationReport:
        mirror_report = self.mirrors(work)
        group_report = self.groups(work)
        work.mark_reconciled()
        return ReconciliationReport(mirrors=mirror_report, groups=group_report)


def reconcile_work(work: Work) -> ReconciliationReport:
    return Reconciler().reconcile(work)
