"""API routes."""

from gracebot.api.routes.admin import router as admin_router
from gracebot.api.routes.health import router as health_router
from gracebot.api.routes.messages import router as messages_router

__all__ = ["admin_router", "health_router", "messages_router"]
