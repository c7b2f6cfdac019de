"""Messaging endpoint for the Bot Framework connector."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Response, status
from fastapi.responses import JSONResponse

from gracebot.api.dependencies import ChannelDep, EngineDep

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Messages"])


@router.post("/messages")
async def receive_activity(
    payload: Annotated[dict[str, Any], Body()],
    channel: ChannelDep,
    engine: EngineDep,
) -> Response:
    """Handle an inbound activity.

    Returns the sent reply activity, or 202 when the activity needs no reply.
    Failures propagate to the application exception handlers.
    """
    activity = channel.parse_activity(payload)
    reply = await engine.handle(activity)

    if reply is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)

    return JSONResponse(status_code=status.HTTP_200_OK, content=reply.to_wire())
