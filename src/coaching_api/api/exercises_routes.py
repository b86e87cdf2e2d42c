"""Program exercise API routes."""
from fastapi import APIRouter, Depends
from supabase import Client

from coaching_api.auth import get_current_coach_id, resolve_coach_id
from coaching_api.database import get_db
from coaching_api.errors import ValidationError
from coaching_api.models import ActionRequest, DeleteRequest
from coaching_api.services import workout_exercise_rows
from coaching_api.services.crud_service import TableService
from coaching_api.services.ownership import OwnershipGuard
from coaching_api.utils import without_keys

EXERCISES_TABLE = "exercises"
WORKOUT_EXERCISES_TABLE = "workout_exercises"

router = APIRouter(tags=["Exercises"])


@router.post("/exercises")
def post_exercise(
    request: ActionRequest,
    coach_id: str = Depends(get_current_coach_id),
    client: Client = Depends(get_db),
):
    """
    Create, update or list exercises.

    - create: requires ``name`` and a ``program_id`` owned by the coach. With a
      ``workout_id`` the exercise is attached to that workout as a
      workout_exercises row instead.
    - update: requires ``id``; the exercise's program must belong to the coach.
    - list: optional ``program_id`` filter, always scoped to the coach.
    """
    if not request.action:
        raise ValidationError("Missing action")

    payload = request.payload_dict()
    coach_id = resolve_coach_id(payload.get("coach_id"), coach_id)
    guard = OwnershipGuard(client)
    exercises = TableService(client, EXERCISES_TABLE)

    if request.action == "create":
        if not payload.get("name") or not payload.get("program_id"):
            raise ValidationError("Missing required fields")

        guard.ensure("program", payload["program_id"], coach_id, action="add exercises to")

        if payload.get("workout_id"):
            row = workout_exercise_rows.from_program_exercise(payload)
            return {"data": TableService(client, WORKOUT_EXERCISES_TABLE).insert(row)}

        return {"data": exercises.insert({**payload, "coach_id": coach_id})}

    if request.action == "update":
        exercise_id = payload.get("id")
        if not exercise_id:
            raise ValidationError("Missing id")
        guard.ensure("exercise", exercise_id, coach_id, action="update")
        return {"data": exercises.update(exercise_id, without_keys(payload, "id", "coach_id"))}

    if request.action == "list":
        filters = {"program_id": payload.get("program_id"), "coach_id": coach_id}
        return {"data": exercises.list(filters)}

    raise ValidationError("Unknown action")


@router.delete("/exercises")
def delete_exercise(
    request: DeleteRequest,
    coach_id: str = Depends(get_current_coach_id),
    client: Client = Depends(get_db),
):
    if not request.id:
        raise ValidationError("Missing id")
    coach_id = resolve_coach_id(request.coach_id, coach_id)
    OwnershipGuard(client).ensure("exercise", request.id, coach_id, action="delete")
    return {"data": TableService(client, EXERCISES_TABLE).delete(request.id)}
