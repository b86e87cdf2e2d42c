"""Coach ownership checks for child resources.

A resource is owned by a coach either directly (a ``coach_id`` column) or
through a parent row, e.g. an exercise belongs to a program which belongs
to a coach. Checks are read-only and safe to repeat.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from supabase import Client

from coaching_api.errors import BackendError, ForbiddenError, NotFoundError
from coaching_api.services.crud_service import TableService

logger = logging.getLogger(__name__)


class OwnershipResult(str, Enum):
    AUTHORIZED = "authorized"
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class OwnershipRule:
    """
    How to find the owning coach of a row.

    If ``parent`` is None, ``owner_column`` holds the coach id. Otherwise it
    holds the id of a parent row, resolved with the parent's rule.
    """
    table: str
    owner_column: str
    label: str
    parent: Optional["OwnershipRule"] = None


PROGRAM_RULE = OwnershipRule("programs", "coach_id", "Program")

OWNERSHIP_RULES: Dict[str, OwnershipRule] = {
    "client": OwnershipRule("clients", "coach_id", "Client"),
    "program": PROGRAM_RULE,
    "goal": OwnershipRule("client_goals", "coach_id", "Goal"),
    "exercise": OwnershipRule("exercises", "program_id", "Exercise", parent=PROGRAM_RULE),
}


class OwnershipGuard:
    """Verifies that a coach owns a client, program, goal or exercise."""

    def __init__(self, client: Client):
        self.client = client

    def check(self, kind: str, child_id: Any, expected_coach_id: Optional[str]) -> OwnershipResult:
        """
        Compare the owning coach of ``child_id`` with ``expected_coach_id``.

        Args:
            kind: Key of OWNERSHIP_RULES ("client", "program", "goal", "exercise")
            child_id: Id of the row being mutated
            expected_coach_id: Coach the caller claims to be

        Returns:
            OwnershipResult.AUTHORIZED only on an exact match.

        Raises:
            KeyError: Unknown kind.
            BackendError: The lookup itself failed.
        """
        rule = OWNERSHIP_RULES[kind]
        owner_id = child_id

        while rule is not None:
            row = self._read(rule, owner_id)
            if row is None:
                return OwnershipResult.NOT_FOUND
            owner_id = row.get(rule.owner_column)
            if rule.parent is not None and owner_id is None:
                # Orphaned child: no parent to own it
                return OwnershipResult.NOT_FOUND
            rule = rule.parent

        if not expected_coach_id or owner_id is None or str(owner_id) != str(expected_coach_id):
            return OwnershipResult.FORBIDDEN
        return OwnershipResult.AUTHORIZED

    def ensure(self, kind: str, child_id: Any, expected_coach_id: Optional[str], action: str = "modify") -> None:
        """Like check(), but raises NotFoundError / ForbiddenError instead of returning."""
        result = self.check(kind, child_id, expected_coach_id)
        label = OWNERSHIP_RULES[kind].label
        if result is OwnershipResult.NOT_FOUND:
            raise NotFoundError(f"{label} not found")
        if result is OwnershipResult.FORBIDDEN:
            logger.warning(f"Coach {expected_coach_id} denied {action} on {kind} {child_id}")
            raise ForbiddenError(f"Not authorized to {action} this {label.lower()}")

    def _read(self, rule: OwnershipRule, row_id: Any) -> Optional[Dict[str, Any]]:
        try:
            return TableService(self.client, rule.table).get(row_id, columns=f"id, {rule.owner_column}")
        except BackendError as e:
            raise BackendError(f"{rule.label} lookup failed: {e.message}") from e
