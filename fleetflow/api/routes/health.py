"""
Health endpoints
================

GET /api/health    -- liveness
GET /api/health/db -- database connectivity
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.api.dependencies import get_db
from fleetflow.api.schemas import HealthResponse
from fleetflow.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse(
        message=f"{settings.app_name} is running",
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/db", response_model=HealthResponse, summary="Database health check")
async def health_db(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return HealthResponse(
        message="Database connection is healthy",
        timestamp=datetime.now(timezone.utc),
    )
