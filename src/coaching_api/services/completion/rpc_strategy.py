"""Atomic completion through a single server-side procedure."""
import logging
from typing import Any, Dict, Optional

from supabase import Client

from coaching_api.database import execute
from coaching_api.errors import BackendError, backend_error_message
from . import register_strategy
from .base import (
    SESSIONS_TABLE,
    STATUS_COMPLETED,
    CompletionRequest,
    CompletionResult,
    CompletionStrategy,
    StrategyUnavailable,
)

logger = logging.getLogger(__name__)

COMPLETE_SESSION_RPC = "complete_workout_session"


def rpc_reported_success(data: Any) -> bool:
    """The procedure returns ``true``, ``{"success": true}`` or a one-row set of the latter."""
    if isinstance(data, list):
        return len(data) == 1 and rpc_reported_success(data[0])
    if isinstance(data, dict):
        return data.get("success") is True
    return data is True


class RpcCompletionStrategy(CompletionStrategy):
    """Completes the session in one backend transaction via ``complete_workout_session``."""

    @staticmethod
    def strategy_name() -> str:
        return "rpc"

    def complete(self, client: Client, request: CompletionRequest) -> CompletionResult:
        params = {
            "p_session_id": request.session_id,
            "p_duration_minutes": request.duration_minutes,
            "p_notes": request.notes,
            "p_exercises": request.exercises,
        }
        try:
            result = client.rpc(COMPLETE_SESSION_RPC, params).execute()
        except Exception as e:
            raise StrategyUnavailable(
                f"{COMPLETE_SESSION_RPC} failed: {backend_error_message(e)}"
            ) from e

        if not rpc_reported_success(result.data):
            raise StrategyUnavailable(f"{COMPLETE_SESSION_RPC} reported failure: {result.data!r}")

        logger.info(f"Session {request.session_id} completed via {COMPLETE_SESSION_RPC}")
        return CompletionResult(session=self._refetch(client, request.session_id), rpc=True)

    @staticmethod
    def _refetch(client: Client, session_id: str) -> Optional[Dict[str, Any]]:
        # The writes are committed at this point; a failed read must not trigger the fallback.
        try:
            result = execute(
                client.table(SESSIONS_TABLE).select("*").eq("id", session_id).limit(1),
                "session refetch",
            )
        except BackendError as e:
            logger.warning(f"Session {session_id} completed but could not be re-read: {e.message}")
            return {"id": session_id, "status": STATUS_COMPLETED}
        rows = result.data or []
        return rows[0] if rows else {"id": session_id, "status": STATUS_COMPLETED}


register_strategy(RpcCompletionStrategy)
