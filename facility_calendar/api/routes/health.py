"""Health check endpoints."""

from fastapi import APIRouter, Request

from facility_calendar import __version__

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "facility-calendar",
    }


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict:
    """Readiness check - verifies the seeded board is available."""
    board = getattr(request.app.state, "board", None)
    if board is None:
        return {
            "status": "not_ready",
            "errors": ["Calendar board not loaded"],
        }

    return {
        "status": "ready",
        "facilities": len(board.facilities),
        "appointments": len(board.appointments),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - basic process health."""
    return {"status": "alive"}


@router.get("/api-info")
async def api_info(request: Request) -> dict:
    """API information for frontend integration."""
    base_url = str(request.base_url).rstrip("/")

    return {
        "name": "Facility Calendar API",
        "version": __version__,
        "base_url": base_url,
        "openapi_url": f"{base_url}/openapi.json",
        "docs_url": f"{base_url}/docs",
        "endpoints": {
            "layout": {
                "day": "/api/v1/calendar/day",
                "week": "/api/v1/calendar/week",
                "month": "/api/v1/calendar/month",
                "method": "POST",
            },
            "reschedule": "/api/v1/calendar/reschedule",
            "reorder": "/api/v1/calendar/groups/reorder",
            "board": {
                "view": "/api/v1/board/{view}",
                "drop_appointment": "/api/v1/board/appointments/{appointment_id}/drop",
                "drop_group": "/api/v1/board/groups/{group_id}/drop",
            },
        },
        "authentication": {
            "type": "api_key",
            "header": "X-API-Key",
        },
    }
