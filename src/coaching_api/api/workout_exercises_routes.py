"""Workout exercise (join row) API routes."""
from fastapi import APIRouter, Depends
from supabase import Client

from coaching_api.auth import require_session
from coaching_api.database import get_db
from coaching_api.errors import ValidationError
from coaching_api.models import WorkoutExerciseRequest
from coaching_api.services import workout_exercise_rows
from coaching_api.services.crud_service import TableService

WORKOUT_EXERCISES_TABLE = "workout_exercises"

router = APIRouter(tags=["Workout Exercises"], dependencies=[Depends(require_session)])


@router.post("/workout-exercises", status_code=201)
def create_workout_exercise(request: WorkoutExerciseRequest, client: Client = Depends(get_db)):
    """Attach an exercise to a workout with default sets/reps/rest."""
    if not request.workout_id or not request.exercise:
        raise ValidationError("Missing workout_id or exercise")
    row = workout_exercise_rows.from_exercise_request(request.workout_id, request.exercise)
    return {"ok": True, "data": TableService(client, WORKOUT_EXERCISES_TABLE).insert(row)}
