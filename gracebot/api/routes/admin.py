"""Admin endpoints for reading persisted activities."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from gracebot.api.dependencies import PersistenceDep

logger = structlog.get_logger()

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/activities/{activity_id}")
async def get_activity(
    activity_id: str,
    persistence: PersistenceDep,
) -> dict[str, Any]:
    """Get a persisted activity by id."""
    activity = await persistence.find_activity(activity_id)
    if activity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Activity not found: {activity_id}",
        )
    return activity.to_wire()


@router.get("/conversations/{conversation_id}/activities")
async def get_conversation_activities(
    conversation_id: str,
    persistence: PersistenceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> dict[str, Any]:
    """Get the most recent activities of a conversation, oldest first."""
    activities = await persistence.get_conversation_history(conversation_id, limit=limit)
    return {
        "conversation_id": conversation_id,
        "count": len(activities),
        "activities": [activity.to_wire() for activity in activities],
    }
