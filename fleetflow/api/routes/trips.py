"""
Trip endpoints
==============

GET  /api/trips             -- list trips with vehicle / driver names
POST /api/trips             -- create a Draft trip (201)
PUT  /api/trips/{id}/status -- drive the trip state machine
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.api.dependencies import get_db
from fleetflow.api.schemas import (
    Envelope,
    StatusChangeResponse,
    StatusUpdateRequest,
    TripCreateRequest,
    TripListItem,
    TripResponse,
)
from fleetflow.services.trips import TripLifecycle

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get(
    "",
    response_model=Envelope[list[TripListItem]],
    summary="List trips, newest first",
)
async def list_trips(db: AsyncSession = Depends(get_db)):
    rows = await TripLifecycle(db).list_trips()
    items = [
        TripListItem(
            **TripResponse.model_validate(row["trip"]).model_dump(),
            vehicle_name=row["vehicle_name"],
            license_plate=row["license_plate"],
            max_load_capacity=row["max_load_capacity"],
            driver_name=row["driver_name"],
        )
        for row in rows
    ]
    return Envelope(data=items, count=len(items))


@router.post(
    "",
    status_code=201,
    response_model=Envelope[TripResponse],
    summary="Create a trip",
    responses={201: {"description": "Trip created in Draft status."}},
)
async def create_trip(body: TripCreateRequest, db: AsyncSession = Depends(get_db)):
    trip = await TripLifecycle(db).create_trip(
        origin=body.origin,
        destination=body.destination,
        cargo_weight=body.cargo_weight,
        vehicle_id=body.vehicle_id,
        driver_id=body.driver_id,
        revenue=body.revenue,
    )
    return Envelope(data=TripResponse.model_validate(trip))


@router.put(
    "/{trip_id}/status",
    response_model=Envelope[StatusChangeResponse],
    summary="Change trip status",
    description=(
        "Draft -> Dispatched seizes the assigned vehicle (must be Idle) after "
        "checking the driver is On Duty with a valid licence. Completing or "
        "cancelling a dispatched trip returns the vehicle to Idle. Repeating "
        "the current status is a no-op."
    ),
)
async def update_trip_status(
    trip_id: int, body: StatusUpdateRequest, db: AsyncSession = Depends(get_db)
):
    change = await TripLifecycle(db).update_trip_status(trip_id, body.status)
    message = None if change.changed else f"Trip is already in '{change.status}' state."
    return Envelope(
        data=StatusChangeResponse(id=change.id, status=change.status), message=message
    )
