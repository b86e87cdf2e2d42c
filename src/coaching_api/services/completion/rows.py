"""Row builders for session exercises, sets, and legacy mirror sets.

Input exercises come from the client as loosely-shaped dicts in either
snake_case or camelCase. Missing fields become None; nothing here raises.
"""
from typing import Any, Dict, List, Optional, Sequence

from coaching_api.utils import first_present, to_float, to_int


def _workout_exercise_id(exercise: Dict[str, Any]) -> Any:
    return first_present(exercise, "workout_exercise_id", "workoutExerciseId")


def completed_sets_of(exercise: Dict[str, Any]) -> List[Dict[str, Any]]:
    sets = first_present(exercise, "completed_sets", "completedSets")
    if not isinstance(sets, list):
        return []
    return [s for s in sets if isinstance(s, dict)]


def count_completed_sets(exercises: Sequence[Dict[str, Any]]) -> int:
    return sum(len(completed_sets_of(ex)) for ex in exercises)


def build_session_exercise_row(session_id: str, exercise: Dict[str, Any], position: int) -> Dict[str, Any]:
    """
    Map one input exercise onto a workout_session_exercises row.

    Explicit values win over planned ones (``sets`` over ``planned_sets``,
    ``reps`` over ``planned_reps``, ...). ``position`` is 1-based and used
    when no ``order`` is given.
    """
    order = to_int(exercise.get("order"))
    return {
        "workout_session_id": session_id,
        "workout_exercise_id": _workout_exercise_id(exercise),
        "exercise_id": first_present(exercise, "exercise_id", "exerciseId"),
        "exercise_name": first_present(exercise, "exercise_name", "exerciseName", "name"),
        "order": order if order is not None else position,
        "sets": to_int(first_present(exercise, "sets", "planned_sets", "plannedSets")),
        "reps": first_present(exercise, "reps", "planned_reps", "plannedReps"),
        "weight": first_present(exercise, "weight", "planned_weight", "plannedWeight"),
        "rest_seconds": to_int(first_present(
            exercise, "rest_seconds", "restSeconds", "planned_rest_seconds", "plannedRestSeconds",
        )),
        "notes": exercise.get("notes"),
    }


def build_session_set_rows(session_exercise_id: Any, exercise: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Build workout_session_sets rows for one inserted session exercise."""
    rows = []
    for position, completed in enumerate(completed_sets_of(exercise), start=1):
        set_number = to_int(first_present(completed, "set_number", "setNumber"))
        rows.append({
            "workout_session_exercise_id": session_exercise_id,
            "set_number": set_number if set_number is not None else position,
            "reps_completed": to_int(first_present(completed, "reps_completed", "repsCompleted", "reps")),
            "weight_used": to_float(first_present(completed, "weight_used", "weightUsed", "weight")),
            "duration_seconds": to_int(first_present(
                completed, "duration_seconds", "durationSeconds", "duration",
            )),
        })
    return rows


def resolve_mirror_key(
    session_exercise: Optional[Dict[str, Any]],
    session_exercise_id: Any,
    input_exercises: Sequence[Dict[str, Any]],
) -> Any:
    """
    Key a mirrored set by the originating workout exercise when one of the
    input exercises carries the same workout_exercise_id, else by the
    session exercise id.
    """
    workout_exercise_id = session_exercise.get("workout_exercise_id") if session_exercise else None
    if workout_exercise_id is not None:
        for exercise in input_exercises:
            if _workout_exercise_id(exercise) == workout_exercise_id:
                return workout_exercise_id
    return session_exercise_id


def build_mirror_rows(
    session_id: str,
    session_exercises: Sequence[Dict[str, Any]],
    session_sets: Sequence[Dict[str, Any]],
    input_exercises: Sequence[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Project inserted session sets onto the legacy workout_sets table."""
    by_id = {row.get("id"): row for row in session_exercises}
    rows = []
    for session_set in session_sets:
        session_exercise_id = session_set.get("workout_session_exercise_id")
        rows.append({
            "workout_exercise_id": resolve_mirror_key(
                by_id.get(session_exercise_id), session_exercise_id, input_exercises,
            ),
            "workout_session_id": session_id,
            "set_number": session_set.get("set_number"),
            "reps": session_set.get("reps_completed"),
            "weight": session_set.get("weight_used"),
            "duration_seconds": session_set.get("duration_seconds"),
        })
    return rows
