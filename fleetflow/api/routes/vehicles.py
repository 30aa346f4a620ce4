"""
Vehicle registry endpoints
==========================

GET    /api/vehicles      -- list vehicles
POST   /api/vehicles      -- register a vehicle (409 on duplicate plate)
PUT    /api/vehicles/{id} -- partial update
DELETE /api/vehicles/{id} -- soft delete (Out of Service)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.api.dependencies import get_db
from fleetflow.api.schemas import (
    Envelope,
    VehicleCreateRequest,
    VehicleResponse,
    VehicleUpdateRequest,
)
from fleetflow.services.fleet import VehicleRegistry

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=Envelope[list[VehicleResponse]])
async def list_vehicles(db: AsyncSession = Depends(get_db)):
    vehicles = await VehicleRegistry(db).list_vehicles()
    return Envelope(
        data=[VehicleResponse.model_validate(v) for v in vehicles],
        count=len(vehicles),
    )


@router.post("", status_code=201, response_model=Envelope[VehicleResponse])
async def register_vehicle(
    body: VehicleCreateRequest, db: AsyncSession = Depends(get_db)
):
    vehicle = await VehicleRegistry(db).register(**body.model_dump())
    return Envelope(data=VehicleResponse.model_validate(vehicle))


@router.put("/{vehicle_id}", response_model=Envelope[VehicleResponse])
async def update_vehicle(
    vehicle_id: int, body: VehicleUpdateRequest, db: AsyncSession = Depends(get_db)
):
    vehicle = await VehicleRegistry(db).update(
        vehicle_id, **body.model_dump(exclude_unset=True)
    )
    return Envelope(data=VehicleResponse.model_validate(vehicle))


@router.delete("/{vehicle_id}", response_model=Envelope[VehicleResponse])
async def retire_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    vehicle = await VehicleRegistry(db).retire(vehicle_id)
    return Envelope(
        data=VehicleResponse.model_validate(vehicle),
        message=f"Vehicle {vehicle.id} has been set to 'Out of Service'.",
    )
