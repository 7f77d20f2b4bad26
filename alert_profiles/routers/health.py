"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from alert_profiles.database import check_database_connection

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=None)
async def health_check() -> Response:
    """
    Health check with database status.

    Returns 200 {"status": "healthy", "database": "connected"} when the
    alert store is reachable, 503 {"status": "degraded", ...} otherwise.
    """
    if await check_database_connection():
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "healthy", "database": "connected"},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "degraded", "database": "disconnected"},
    )


@router.get("/health/live")
async def liveness_probe() -> dict[str, Any]:
    """Process is up. Does not touch the database."""
    return {"status": "alive"}
