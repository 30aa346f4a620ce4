"""
Maintenance endpoints
=====================

GET  /api/maintenance             -- list records with their vehicle
POST /api/maintenance             -- open a record (201)
PUT  /api/maintenance/{id}/status -- move a record, updating its vehicle
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.api.dependencies import get_db
from fleetflow.api.schemas import (
    Envelope,
    MaintenanceCreateRequest,
    MaintenanceListItem,
    MaintenanceResponse,
    StatusChangeResponse,
    StatusUpdateRequest,
)
from fleetflow.services.maintenance import MaintenanceLifecycle

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.get("", response_model=Envelope[list[MaintenanceListItem]])
async def list_records(db: AsyncSession = Depends(get_db)):
    rows = await MaintenanceLifecycle(db).list_records()
    items = [
        MaintenanceListItem(
            **MaintenanceResponse.model_validate(row["record"]).model_dump(),
            vehicle_name=row["vehicle_name"],
            license_plate=row["license_plate"],
            vehicle_status=row["vehicle_status"],
        )
        for row in rows
    ]
    return Envelope(data=items, count=len(items))


@router.post(
    "",
    status_code=201,
    response_model=Envelope[MaintenanceResponse],
    summary="Create a maintenance record",
)
async def create_record(
    body: MaintenanceCreateRequest, db: AsyncSession = Depends(get_db)
):
    record = await MaintenanceLifecycle(db).create_record(
        vehicle_id=body.vehicle_id,
        service_type=body.service_type,
        description=body.description,
        cost=body.cost,
        service_date=body.service_date,
        status=body.status,
        next_service_due=body.next_service_due,
    )
    return Envelope(data=MaintenanceResponse.model_validate(record))


@router.put(
    "/{record_id}/status",
    response_model=Envelope[StatusChangeResponse],
    summary="Change maintenance status",
)
async def update_record_status(
    record_id: int, body: StatusUpdateRequest, db: AsyncSession = Depends(get_db)
):
    change = await MaintenanceLifecycle(db).update_status(record_id, body.status)
    message = None if change.changed else f"Status is already {change.status}"
    return Envelope(
        data=StatusChangeResponse(id=change.id, status=change.status), message=message
    )
