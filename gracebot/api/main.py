"""FastAPI application factory and configuration."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from gracebot import __version__
from gracebot.api.container import ServiceContainer
from gracebot.api.routes import admin_router, health_router, messages_router
from gracebot.core.config import Settings, get_settings
from gracebot.core.exceptions import AppException
from gracebot.core.logging import configure_logging

logger = structlog.get_logger()

ERROR_STATUS = {
    "VALIDATION_ERROR": 422,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "STORAGE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "DUPLICATE_RECORD": status.HTTP_409_CONFLICT,
    "INVALID_ACTIVITY": status.HTTP_400_BAD_REQUEST,
    "CHANNEL_ERROR": status.HTTP_502_BAD_GATEWAY,
    "CLASSIFICATION_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def create_app(
    settings: Settings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Services are built once here and shared through ``app.state``; pass a
    prebuilt container to swap in test doubles.
    """
    settings = settings or (services.settings if services else get_settings())
    configure_logging(settings.log_level, settings.log_format)
    services = services or ServiceContainer.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info(
            "Starting GraceBot",
            environment=settings.app_env,
            debug=settings.app_debug,
        )
        await services.startup()

        yield

        await services.shutdown()
        logger.info("Shutting down GraceBot")

    app = FastAPI(
        title="GraceBot",
        description="Chat bot backend with word filtering, definitions and activity history",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.services = services

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle application-specific exceptions."""
        status_code = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
        logger.warning(
            "Application exception",
            code=exc.code,
            message=exc.message,
            details=exc.details,
            status_code=status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.code,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error("Unhandled exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(messages_router)
    app.include_router(admin_router)

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "GraceBot",
            "version": __version__,
            "status": "running",
        }

    return app


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gracebot.api.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
