"""Third-party exercise search proxy."""
from fastapi import APIRouter

from coaching_api.models import ExternalExerciseQuery
from coaching_api.services.exercise_lookup_service import ExerciseLookupService

router = APIRouter(tags=["External Exercises"])


@router.post("/external-exercises")
def search_external_exercises(query: ExternalExerciseQuery):
    """Search the exercise API by muscle and/or name. Upstream failures map to 502."""
    return {"data": ExerciseLookupService.search(muscle=query.muscle, name=query.name)}
