"""
Session completion pipeline.

Persists a workout session as completed together with per-exercise and
per-set performance data. Strategies are tried in priority order:

1. ``rpc`` - one server-side procedure, expected to run as a single transaction
2. ``sequential`` - table-by-table writes with a raw-payload fallback

A strategy that cannot run raises StrategyUnavailable and the next one is
tried. Any other error is a hard failure and reaches the caller.
"""
import logging
from typing import Any, List, Optional, Sequence

from supabase import Client

from coaching_api.config import settings
from coaching_api.errors import BackendError, ValidationError
from coaching_api.services.completion import (
    CompletionRequest,
    CompletionResult,
    CompletionStrategy,
    StrategyUnavailable,
    select_strategies,
)
from coaching_api.utils import first_present, to_int

logger = logging.getLogger(__name__)


def parse_completion_payload(payload: Any) -> CompletionRequest:
    """
    Validate a complete_with_details payload.

    Raises:
        ValidationError: payload not an object, ``session_id`` missing, or
            ``exercises`` not a list.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("payload must be an object")
    session_id = first_present(payload, "session_id", "sessionId")
    if session_id is None or session_id == "":
        raise ValidationError("session_id is required")

    exercises = payload.get("exercises")
    if exercises is None:
        exercises = []
    if not isinstance(exercises, list) or not all(isinstance(ex, dict) for ex in exercises):
        raise ValidationError("exercises must be a list of objects")

    notes = payload.get("notes")
    return CompletionRequest(
        session_id=str(session_id),
        exercises=exercises,
        duration_minutes=to_int(first_present(payload, "duration_minutes", "durationMinutes")),
        notes=str(notes) if notes is not None else None,
    )


class SessionCompletionService:
    """Runs the completion strategies for one request."""

    def __init__(self, client: Client, strategies: Optional[Sequence[CompletionStrategy]] = None):
        self.client = client
        self.strategies: List[CompletionStrategy] = (
            list(strategies) if strategies is not None
            else select_strategies(settings.COMPLETION_RPC_ENABLED)
        )

    def complete(self, request: CompletionRequest) -> CompletionResult:
        last_error: Optional[StrategyUnavailable] = None
        for strategy in self.strategies:
            try:
                return strategy.complete(self.client, request)
            except StrategyUnavailable as e:
                logger.warning(
                    f"Completion strategy '{strategy.strategy_name()}' unavailable "
                    f"for session {request.session_id}: {e}"
                )
                last_error = e

        raise BackendError(f"Could not complete workout session: {last_error}")

    def complete_with_details(self, payload: Any) -> CompletionResult:
        """Validate then complete. Validation happens before any backend call."""
        return self.complete(parse_completion_payload(payload))
