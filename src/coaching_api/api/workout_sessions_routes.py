"""
Workout session API routes.

POST /workout-sessions
  {action: "create", payload}                 -> insert a session row
  {action: "update", payload: {id, ...}}      -> update a session row
  {action: "complete_with_details", payload}  -> run the completion pipeline
DELETE /workout-sessions {id}                 -> delete a session row
POST /workout-session-exercises               -> insert one session exercise
"""
import logging
from typing import Any, Dict, get_args

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from supabase import Client

from coaching_api.database import get_db
from coaching_api.errors import CoachingAPIError, ConflictError, ValidationError
from coaching_api.models import ActionRequest, DeleteRequest, SessionExerciseCreate, SessionStatus
from coaching_api.services.completion.base import (
    SESSION_EXERCISES_TABLE,
    SESSIONS_TABLE,
    STATUS_COMPLETED,
)
from coaching_api.services.crud_service import TableService
from coaching_api.services.session_completion import SessionCompletionService
from coaching_api.utils import without_keys

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Workout Sessions"])


def _check_status_transition(sessions: TableService, session_id: Any, new_status: Any) -> None:
    """Statuses only move forward; a completed session stays completed."""
    if new_status not in get_args(SessionStatus):
        raise ValidationError(f"invalid status: {new_status!r}")
    if new_status == STATUS_COMPLETED:
        return
    current = sessions.get(session_id, columns="id, status")
    if current and current.get("status") == STATUS_COMPLETED:
        raise ConflictError(f"Workout session {session_id} is already completed")


def _complete_with_details(client: Client, payload: Any) -> JSONResponse:
    """Completion responses use the ``{ok, data}`` / ``{ok: false, error}`` envelope."""
    try:
        result = SessionCompletionService(client).complete_with_details(payload)
    except CoachingAPIError as e:
        if e.status_code >= 500:
            logger.error(f"complete_with_details failed: {e.message}")
        body: Dict[str, Any] = {"ok": False, "error": e.message}
        if e.details:
            body["details"] = e.details
        return JSONResponse(body, status_code=e.status_code)
    return JSONResponse(result.to_response())


@router.post("/workout-sessions")
def post_workout_session(request: ActionRequest, client: Client = Depends(get_db)):
    """Create, update or complete a workout session."""
    action = request.action

    if action == "complete_with_details":
        return _complete_with_details(client, request.payload)

    payload = request.payload_dict()

    sessions = TableService(client, SESSIONS_TABLE)

    if action == "create":
        return {"data": sessions.insert(payload)}

    if action == "update":
        session_id = payload.get("id")
        if not session_id:
            raise ValidationError("missing id")
        updates = without_keys(payload, "id")
        if "status" in updates:
            _check_status_transition(sessions, session_id, updates["status"])
        return {"data": sessions.update(session_id, updates)}

    raise ValidationError("unknown action")


@router.delete("/workout-sessions")
def delete_workout_session(request: DeleteRequest, client: Client = Depends(get_db)):
    if not request.id:
        raise ValidationError("missing id")
    return {"data": TableService(client, SESSIONS_TABLE).delete(request.id)}


@router.post("/workout-session-exercises", status_code=201)
def create_session_exercise(request: SessionExerciseCreate, client: Client = Depends(get_db)):
    """Insert a single exercise row into a workout session."""
    if not request.workout_session_id or not request.exercise_name:
        raise ValidationError("workout_session_id and exercise_name are required")
    row = TableService(client, SESSION_EXERCISES_TABLE).insert(request.model_dump())
    return {"data": row}
