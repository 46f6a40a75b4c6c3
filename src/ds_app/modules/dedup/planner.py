# src/ds_app/modules/dedup/planner.py
from __future__ import annotations

from collections.abc import Iterable

from .schemas import DuplicateGroup, Plan


class PlanBuilder:
    """Assembles finalized groups into a Plan. No I/O."""

    def build(self, groups: Iterable[DuplicateGroup]) -> Plan:
        kept = [g for g in groups if len(g.members) > 1]
        return Plan(
            groups=kept,
            total_files_to_delete=sum(len(g.delete) for g in kept),
        )
