"""Request models for the coaching API.

Bodies are intentionally permissive: required fields are checked by the
handlers so that a missing field yields a 400 with a readable message
rather than a 422 validation dump.
"""
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Literal, Optional, Union

from coaching_api.errors import ValidationError

SessionStatus = Literal["not-started", "in-progress", "completed"]

Identifier = Union[str, int]


class ActionRequest(BaseModel):
    """``{action, payload}`` body used by the POST handlers."""
    model_config = ConfigDict(extra="ignore")

    action: Optional[str] = None
    # Shape is checked per action so errors stay 400s in each route's format
    payload: Any = None

    def payload_dict(self) -> Dict[str, Any]:
        """``payload`` as a dict; missing is empty, any other shape is a 400."""
        if self.payload is None:
            return {}
        if not isinstance(self.payload, dict):
            raise ValidationError("payload must be an object")
        return self.payload


class DeleteRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Identifier] = None
    coach_id: Optional[Identifier] = None


class WorkoutExerciseRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    workout_id: Optional[Identifier] = None
    exercise: Optional[Dict[str, Any]] = None


class SessionExerciseCreate(BaseModel):
    """A single workout_session_exercises row."""
    model_config = ConfigDict(extra="ignore")

    workout_session_id: Optional[Identifier] = None
    exercise_id: Optional[Identifier] = None
    exercise_name: Optional[str] = None
    order: Optional[int] = None
    sets: Optional[int] = None
    reps: Optional[Union[str, int]] = None
    weight: Optional[Union[str, float]] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None


class ExternalExerciseQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    muscle: Optional[str] = None
    name: Optional[str] = None
