"""Base classes for session completion strategies."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from supabase import Client

SESSIONS_TABLE = "workout_sessions"
SESSION_EXERCISES_TABLE = "workout_session_exercises"
SESSION_SETS_TABLE = "workout_session_sets"
LEGACY_SETS_TABLE = "workout_sets"

STATUS_COMPLETED = "completed"


class StrategyUnavailable(RuntimeError):
    """Raised when a strategy could not complete the session and the next one should run."""


@dataclass
class CompletionRequest:
    """A validated complete_with_details payload.

    ``exercises`` is kept exactly as received so it can be stored verbatim
    if structured persistence fails.
    """
    session_id: str
    exercises: List[Dict[str, Any]] = field(default_factory=list)
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class CompletionResult:
    session: Optional[Dict[str, Any]]
    exercises: Optional[List[Dict[str, Any]]] = None
    sets: Optional[List[Dict[str, Any]]] = None
    rpc: bool = False
    fallback_saved: bool = False

    def to_response(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"session": self.session}
        if self.exercises is not None:
            data["exercises"] = self.exercises
        if self.sets is not None:
            data["sets"] = self.sets

        response: Dict[str, Any] = {"ok": True, "data": data}
        if self.rpc:
            response["rpc"] = True
        if self.fallback_saved:
            response["fallback_saved"] = True
        return response


class CompletionStrategy(ABC):
    """Abstract base class for the ways a session can be persisted as completed."""

    @staticmethod
    @abstractmethod
    def strategy_name() -> str:
        """Return the strategy identifier (e.g. 'rpc')."""
        ...

    @abstractmethod
    def complete(self, client: Client, request: CompletionRequest) -> CompletionResult:
        """Persist the completion.

        Raises:
            StrategyUnavailable: The strategy could not run; try the next one.
            CoachingAPIError: A hard failure that must be reported to the caller.
        """
        ...
