"""FastAPI application for the facility calendar."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from facility_calendar import __version__
from facility_calendar.api.middleware import APIKeyMiddleware, RequestLoggingMiddleware
from facility_calendar.api.routes import board, calendar, health
from facility_calendar.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Facility Calendar API")

    settings = get_settings()

    from facility_calendar.interaction.board import CalendarBoard

    app.state.board = CalendarBoard.from_file(settings.board_seed_path, settings=settings)

    logger.info("Facility Calendar API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Facility Calendar API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Facility Calendar API",
        description="Facility scheduling calendar with lane layout and drag-and-drop rescheduling",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    if settings.api_key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.api_key)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(calendar.router, prefix="/api/v1", tags=["calendar"])
    app.include_router(board.router, prefix="/api/v1", tags=["board"])

    # Exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.exception(f"[{request_id}] Unhandled exception on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "request_id": request_id,
                "detail": str(exc) if settings.debug_mode else None,
            },
        )

    return app
