"""Alert Profiles FastAPI application."""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from alert_profiles.config import settings
from alert_profiles.core.migrations import run_migrations
from alert_profiles.database import close_database, create_tables
from alert_profiles.logging_config import get_logger, setup_logging
from alert_profiles.routers import alert_entries, alert_types, health

setup_logging(
    log_format=settings.log_format,
    log_level=settings.log_level,
    service_name=settings.service_name,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    if settings.database_url.startswith("sqlite"):
        await create_tables()
    else:
        # env.py drives its own event loop
        await asyncio.to_thread(run_migrations)
    logger.info("Alert Profiles API started", glucose_unit=settings.glucose_unit.value)

    yield

    await close_database()
    logger.info("Alert Profiles API shutdown complete")


app = FastAPI(
    title="Alert Profiles API",
    description="Alert types and per-kind alert schedules for glucose monitoring",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(alert_types.router)
app.include_router(alert_entries.router)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": "Alert Profiles API",
        "version": "0.1.0",
        "docs": "/docs",
    }
