"""
Driver endpoints
================

GET /api/drivers             -- list drivers
PUT /api/drivers/{id}/status -- set duty status (On Duty / Off Duty / Suspended)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.api.dependencies import get_db
from fleetflow.api.schemas import (
    DriverResponse,
    Envelope,
    StatusChangeResponse,
    StatusUpdateRequest,
)
from fleetflow.services.fleet import DriverRoster

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=Envelope[list[DriverResponse]])
async def list_drivers(db: AsyncSession = Depends(get_db)):
    drivers = await DriverRoster(db).list_drivers()
    return Envelope(
        data=[DriverResponse.model_validate(d) for d in drivers],
        count=len(drivers),
    )


@router.put("/{driver_id}/status", response_model=Envelope[StatusChangeResponse])
async def update_driver_status(
    driver_id: int, body: StatusUpdateRequest, db: AsyncSession = Depends(get_db)
):
    change = await DriverRoster(db).update_status(driver_id, body.status)
    return Envelope(
        data=StatusChangeResponse(id=change.id, status=change.status),
        message=f"Driver status updated to {change.status}",
    )
