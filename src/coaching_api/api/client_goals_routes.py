"""Client goal API routes. Coach-only; every mutation is ownership-checked."""
from fastapi import APIRouter, Depends
from supabase import Client

from coaching_api.auth import get_current_coach_id, resolve_coach_id
from coaching_api.database import get_db
from coaching_api.errors import ValidationError
from coaching_api.models import ActionRequest, DeleteRequest
from coaching_api.services.crud_service import TableService
from coaching_api.services.ownership import OwnershipGuard
from coaching_api.utils import without_keys

GOALS_TABLE = "client_goals"

router = APIRouter(tags=["Client Goals"])


@router.post("/client-goals")
def post_client_goal(
    request: ActionRequest,
    coach_id: str = Depends(get_current_coach_id),
    client: Client = Depends(get_db),
):
    """
    Create or update a client goal.

    - create: ``payload.client_id`` must belong to the coach
    - update: ``payload.id`` must be a goal owned by the coach
    """
    if not request.action or request.payload is None:
        raise ValidationError("Missing action or payload")

    payload = request.payload_dict()
    coach_id = resolve_coach_id(payload.get("coach_id"), coach_id)
    guard = OwnershipGuard(client)
    goals = TableService(client, GOALS_TABLE)

    if request.action == "create":
        client_id = payload.get("client_id")
        if not client_id:
            raise ValidationError("client_id required")
        guard.ensure("client", client_id, coach_id, action="add goals for")
        return {"data": goals.insert({**payload, "coach_id": coach_id})}

    if request.action == "update":
        goal_id = payload.get("id")
        if not goal_id:
            raise ValidationError("id required")
        guard.ensure("goal", goal_id, coach_id, action="update")
        return {"data": goals.update(goal_id, without_keys(payload, "id", "coach_id"))}

    raise ValidationError("Unknown action")


@router.delete("/client-goals")
def delete_client_goal(
    request: DeleteRequest,
    coach_id: str = Depends(get_current_coach_id),
    client: Client = Depends(get_db),
):
    if not request.id:
        raise ValidationError("id required")
    coach_id = resolve_coach_id(request.coach_id, coach_id)
    OwnershipGuard(client).ensure("goal", request.id, coach_id, action="delete")
    return {"data": TableService(client, GOALS_TABLE).delete(request.id)}
