"""Client-orchestrated completion: one table write at a time, no transaction."""
import logging
from typing import Any, Dict, List

from supabase import Client

from coaching_api.database import execute
from coaching_api.errors import BackendError, ConflictError, NotFoundError
from . import register_strategy
from .base import (
    LEGACY_SETS_TABLE,
    SESSION_EXERCISES_TABLE,
    SESSION_SETS_TABLE,
    SESSIONS_TABLE,
    STATUS_COMPLETED,
    CompletionRequest,
    CompletionResult,
    CompletionStrategy,
)
from .rows import build_mirror_rows, build_session_exercise_row, build_session_set_rows

logger = logging.getLogger(__name__)


class SequentialCompletionStrategy(CompletionStrategy):
    """
    Writes the completion step by step:

    1. mark the session completed (fatal on failure)
    2. insert session exercises in input order
       - on failure, store the raw exercises on the session instead
    3. insert all session sets in one batch (fatal on failure)
    4. mirror sets into the legacy table (errors logged, never raised)
    """

    @staticmethod
    def strategy_name() -> str:
        return "sequential"

    def complete(self, client: Client, request: CompletionRequest) -> CompletionResult:
        session = self._mark_completed(client, request)

        if not request.exercises:
            return CompletionResult(session=session, exercises=[], sets=[])

        try:
            exercise_rows = self._insert_exercises(client, request)
        except BackendError as exercise_error:
            return self._save_exercises_blob(client, request, exercise_error)

        set_rows: List[Dict[str, Any]] = []
        # Inserted rows come back in input order, so index i pairs with input exercise i
        for row, exercise in zip(exercise_rows, request.exercises):
            set_rows.extend(build_session_set_rows(row["id"], exercise))

        inserted_sets: List[Dict[str, Any]] = []
        if set_rows:
            try:
                result = execute(
                    client.table(SESSION_SETS_TABLE).insert(set_rows),
                    f"{SESSION_SETS_TABLE} insert",
                )
            except BackendError:
                # No blob fallback for sets: the exercise rows stay committed without sets.
                logger.error(
                    f"Session {request.session_id}: set insert failed, "
                    f"{len(exercise_rows)} session exercise row(s) left without sets"
                )
                raise
            inserted_sets = result.data or []

        self._mirror_legacy_sets(client, request, exercise_rows, inserted_sets)

        logger.info(
            f"Session {request.session_id} completed sequentially: "
            f"{len(exercise_rows)} exercise(s), {len(inserted_sets)} set(s)"
        )
        return CompletionResult(session=session, exercises=exercise_rows, sets=inserted_sets)

    def _mark_completed(self, client: Client, request: CompletionRequest) -> Dict[str, Any]:
        """
        Move the session to ``completed``.

        The update only matches sessions that are not completed yet, so a
        second completion of the same session matches nothing and is rejected.
        """
        values: Dict[str, Any] = {
            "status": STATUS_COMPLETED,
            "exercise_count": len(request.exercises),
        }
        if request.duration_minutes is not None:
            values["duration_minutes"] = request.duration_minutes
        if request.notes is not None:
            values["notes"] = request.notes

        result = execute(
            client.table(SESSIONS_TABLE)
            .update(values)
            .eq("id", request.session_id)
            .or_(f"status.is.null,status.neq.{STATUS_COMPLETED}"),
            f"{SESSIONS_TABLE} update",
        )
        if result.data:
            return result.data[0]

        existing = execute(
            client.table(SESSIONS_TABLE).select("id, status").eq("id", request.session_id).limit(1),
            f"{SESSIONS_TABLE} lookup",
        ).data
        if not existing:
            raise NotFoundError(f"Workout session {request.session_id} not found")
        raise ConflictError(f"Workout session {request.session_id} is already completed")

    def _insert_exercises(self, client: Client, request: CompletionRequest) -> List[Dict[str, Any]]:
        rows = [
            build_session_exercise_row(request.session_id, exercise, position)
            for position, exercise in enumerate(request.exercises, start=1)
        ]
        result = execute(
            client.table(SESSION_EXERCISES_TABLE).insert(rows),
            f"{SESSION_EXERCISES_TABLE} insert",
        )
        inserted = result.data or []
        if len(inserted) != len(rows):
            raise BackendError(
                f"{SESSION_EXERCISES_TABLE} insert returned {len(inserted)} row(s) for {len(rows)} exercise(s)"
            )
        return inserted

    def _save_exercises_blob(
        self,
        client: Client,
        request: CompletionRequest,
        exercise_error: BackendError,
    ) -> CompletionResult:
        """Keep the raw payload on the session row when structured inserts fail."""
        logger.warning(
            f"Session {request.session_id}: exercise insert failed ({exercise_error.message}), "
            f"saving raw exercises on the session"
        )
        try:
            result = execute(
                client.table(SESSIONS_TABLE)
                .update({"exercises": request.exercises})
                .eq("id", request.session_id),
                f"{SESSIONS_TABLE} exercises fallback save",
            )
        except BackendError as blob_error:
            raise BackendError(
                f"Failed to save exercises: {exercise_error.message}; "
                f"fallback save failed: {blob_error.message}",
                details={
                    "exercise_error": exercise_error.message,
                    "fallback_error": blob_error.message,
                },
            ) from blob_error

        rows = result.data or []
        session = rows[0] if rows else {"id": request.session_id, "exercises": request.exercises}
        return CompletionResult(session=session, fallback_saved=True)

    def _mirror_legacy_sets(
        self,
        client: Client,
        request: CompletionRequest,
        exercise_rows: List[Dict[str, Any]],
        inserted_sets: List[Dict[str, Any]],
    ) -> None:
        if not inserted_sets:
            return
        try:
            mirror_rows = build_mirror_rows(request.session_id, exercise_rows, inserted_sets, request.exercises)
            execute(client.table(LEGACY_SETS_TABLE).insert(mirror_rows), f"{LEGACY_SETS_TABLE} mirror insert")
        except Exception as e:
            logger.warning(f"Session {request.session_id}: legacy set mirror skipped: {e}")


register_strategy(SequentialCompletionStrategy)
