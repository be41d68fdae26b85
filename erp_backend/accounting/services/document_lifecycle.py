"""
DOCUMENT LIFECYCLE DOMAIN RULES

Generic approval-gated state machine shared by quotes, revaluations,
depreciation records and payroll periods. Each entity declares its own
table (see the *_lifecycle modules of each app).

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Tables are exhaustive: every state has an entry (terminal = empty set)
- Only transitions into a posting state may invoke a calculator
"""

from __future__ import annotations

import logging

from django.db import models

from accounting.services.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class DocumentLifecycle:
    def __init__(
        self,
        *,
        name: str,
        states: type[models.TextChoices],
        transitions: dict,
        posting_states=(),
    ):
        self.name = name
        self.states = states

        known = {str(v) for v in states.values}
        table = {str(s): frozenset(str(t) for t in targets) for s, targets in transitions.items()}

        missing = known - set(table)
        unknown = set(table) - known
        for targets in table.values():
            unknown |= targets - known

        if missing:
            raise ValueError(f"{name} lifecycle has no entry for: {sorted(missing)}")
        if unknown:
            raise ValueError(f"{name} lifecycle references unknown states: {sorted(unknown)}")

        self.transitions = table
        self.posting_states = frozenset(str(s) for s in posting_states)

    @property
    def terminal_states(self) -> frozenset:
        return frozenset(s for s, targets in self.transitions.items() if not targets)

    def can_transition(self, *, from_status: str, to_status: str) -> bool:
        return str(to_status) in self.transitions.get(str(from_status), frozenset())

    def is_posting_transition(self, *, to_status: str) -> bool:
        return str(to_status) in self.posting_states

    def validate_transition(self, *, obj, target_status: str, status_field: str = "status"):
        current = getattr(obj, status_field)
        if not self.can_transition(from_status=current, to_status=target_status):
            raise InvalidTransitionError(
                f"{self.name} {getattr(obj, 'pk', None)} cannot transition from "
                f"'{current}' to '{target_status}'"
            )

    def apply(self, obj, target_status: str, *, status_field: str = "status"):
        """
        Validate and set the new status in memory. Caller saves.
        """
        previous = getattr(obj, status_field)
        self.validate_transition(obj=obj, target_status=target_status, status_field=status_field)
        setattr(obj, status_field, target_status)
        logger.info(
            "%s status change",
            self.name,
            extra={"object_id": getattr(obj, "pk", None), "from": previous, "to": target_status},
        )
        return obj
