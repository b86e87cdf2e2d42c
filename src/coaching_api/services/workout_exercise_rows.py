"""Builders for workout_exercises join rows."""
from typing import Any, Dict

from coaching_api.utils import first_present

DEFAULT_SETS = 3
DEFAULT_REPS = "12"
DEFAULT_REST_SECONDS = 60


def from_exercise_request(workout_id: Any, exercise: Dict[str, Any]) -> Dict[str, Any]:
    """Row for POST /workout-exercises. An explicit ``sets`` of 0 is kept."""
    sets = exercise.get("sets")
    return {
        "workout_id": workout_id,
        "exercise_id": exercise.get("exercise_id") or None,
        "exercise_name": exercise.get("exercise_name") or exercise.get("name") or None,
        "exercise_category": exercise.get("exercise_category") or None,
        "exercise_equipment": exercise.get("exercise_equipment") or None,
        "order_in_workout": exercise.get("order_in_workout") or exercise.get("order") or None,
        "sets": sets if sets is not None else DEFAULT_SETS,
        "reps": exercise.get("reps") or DEFAULT_REPS,
        "weight": exercise.get("weight") or None,
        "rest_time": exercise.get("rest_time") or DEFAULT_REST_SECONDS,
        "notes": exercise.get("notes") or None,
    }


def from_program_exercise(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Row for an exercise created on /exercises with a ``workout_id``."""
    return {
        "workout_id": payload["workout_id"],
        "exercise_id": first_present(payload, "exercise_external_id", "exercise_id", "name"),
        "exercise_name": payload.get("name"),
        "exercise_category": payload.get("category") or payload.get("exercise_category") or None,
        "exercise_equipment": payload.get("equipment") or payload.get("exercise_equipment") or None,
        "order_in_workout": payload.get("order_in_workout") or 1,
        "sets": payload.get("sets") or DEFAULT_SETS,
        "reps": payload.get("reps") or DEFAULT_REPS,
        "weight": payload.get("weight") or None,
        "rest_time": payload.get("rest_time") or DEFAULT_REST_SECONDS,
        "notes": payload.get("notes") or "",
    }
