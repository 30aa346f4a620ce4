"""Pydantic request / response schemas for the REST API.

Status fields on requests are plain strings: the lifecycle engines parse
them against the shared enums and answer ``INVALID_STATUS`` (400) rather
than a generic validation error.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, model_serializer

from fleetflow.domain.enums import (
    DriverStatus,
    MaintenanceStatus,
    TripStatus,
    VehicleStatus,
    VehicleType,
)

T = TypeVar("T")


# ── Envelope ──────────────────────────────────────────────────────────


class ErrorBody(BaseModel):
    message: str
    code: str
    details: Optional[list[dict[str, Any]]] = None


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None
    error: Optional[ErrorBody] = None

    @model_serializer(mode="wrap")
    def _omit_empty_members(self, handler) -> dict[str, Any]:
        # Optional members are left out rather than sent as null.
        return {k: v for k, v in handler(self).items() if v is not None}


# ── Requests ──────────────────────────────────────────────────────────


class StatusUpdateRequest(BaseModel):
    status: str


class TripCreateRequest(BaseModel):
    origin: str = Field(..., min_length=1, max_length=255)
    destination: str = Field(..., min_length=1, max_length=255)
    cargo_weight: float = Field(..., ge=0)
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    revenue: Optional[float] = None


class MaintenanceCreateRequest(BaseModel):
    vehicle_id: int = Field(..., ge=1)
    service_type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    service_date: date
    status: str = "Scheduled"
    next_service_due: Optional[date] = None


class VehicleCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    license_plate: str = Field(..., min_length=1, max_length=20)
    max_load_capacity: Optional[float] = Field(None, ge=0)
    odometer: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    vehicle_type: VehicleType
    region: str = Field(..., min_length=1, max_length=50)


class VehicleUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    license_plate: Optional[str] = Field(None, max_length=20)
    max_load_capacity: Optional[float] = Field(None, ge=0)
    odometer: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    vehicle_type: Optional[VehicleType] = None
    region: Optional[str] = Field(None, max_length=50)


# ── Responses ─────────────────────────────────────────────────────────


class StatusChangeResponse(BaseModel):
    id: int
    status: str


class VehicleResponse(BaseModel):
    id: int
    name: str
    model: str
    license_plate: str
    max_load_capacity: float
    odometer: int
    status: VehicleStatus
    vehicle_type: VehicleType
    region: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DriverResponse(BaseModel):
    id: int
    name: str
    license_number: str
    license_expiry: date
    safety_score: int
    region: Optional[str] = None
    status: DriverStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TripResponse(BaseModel):
    id: int
    origin: str
    destination: str
    cargo_weight: float
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    status: TripStatus
    revenue: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TripListItem(TripResponse):
    vehicle_name: Optional[str] = None
    license_plate: Optional[str] = None
    max_load_capacity: Optional[float] = None
    driver_name: Optional[str] = None


class MaintenanceResponse(BaseModel):
    id: int
    vehicle_id: int
    service_type: str
    description: Optional[str] = None
    cost: float
    service_date: date
    status: MaintenanceStatus
    next_service_due: Optional[date] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MaintenanceListItem(MaintenanceResponse):
    vehicle_name: str
    license_plate: str
    vehicle_status: VehicleStatus


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    environment: Optional[str] = None
    timestamp: datetime
