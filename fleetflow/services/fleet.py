"""
Vehicle registry and driver duty administration.

Administrative writes go through the same guards as the lifecycle
engines: an administrator cannot put a vehicle "On Trip" by hand, nor
pull a vehicle out from under a dispatched trip.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.domain.enums import DriverStatus, VehicleStatus, VehicleType, parse_status
from fleetflow.domain.errors import ConstraintViolation, InvalidStateTransition, NotFound
from fleetflow.domain.guards import assert_admin_vehicle_status
from fleetflow.domain.lifecycle import StatusChange
from fleetflow.infrastructure.models import DriverModel, VehicleModel
from fleetflow.infrastructure.repositories import DriverRepository, VehicleRepository

logger = logging.getLogger(__name__)


def _duplicate_plate(plate: str, other: bool = False) -> ConstraintViolation:
    prefix = "Another vehicle" if other else "A vehicle"
    return ConstraintViolation(
        f"{prefix} with license plate '{plate}' already exists.",
        code="DUPLICATE_PLATE",
    )


class VehicleRegistry:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.vehicles = VehicleRepository(session)

    async def list_vehicles(self) -> list[VehicleModel]:
        return await self.vehicles.list_all()

    async def register(
        self,
        *,
        name: str,
        model: str,
        license_plate: str,
        vehicle_type: VehicleType,
        region: str,
        max_load_capacity=None,
        odometer: int | None = None,
        status=None,
    ) -> VehicleModel:
        initial = parse_status(VehicleStatus, status or VehicleStatus.IDLE)
        if initial == VehicleStatus.ON_TRIP:
            raise InvalidStateTransition(
                "A vehicle can only be put 'On Trip' by dispatching a trip."
            )

        async with self.session.begin():
            if await self.vehicles.get_by_plate(license_plate):
                raise _duplicate_plate(license_plate)
            try:
                vehicle = await self.vehicles.create(
                    VehicleModel(
                        name=name,
                        model=model,
                        license_plate=license_plate,
                        max_load_capacity=Decimal(str(max_load_capacity or 0)),
                        odometer=odometer or 0,
                        status=initial,
                        vehicle_type=VehicleType(vehicle_type),
                        region=region,
                    )
                )
            except IntegrityError as exc:
                raise _duplicate_plate(license_plate) from exc

        logger.info("Vehicle %d registered (%s)", vehicle.id, license_plate)
        return vehicle

    async def update(self, vehicle_id: int, **changes) -> VehicleModel:
        """Partial update; ``None`` values leave the column untouched."""
        changes = {k: v for k, v in changes.items() if v is not None}
        new_status = (
            parse_status(VehicleStatus, changes.pop("status"))
            if "status" in changes
            else None
        )

        async with self.session.begin():
            vehicle = await self.vehicles.get_for_update(vehicle_id)
            if vehicle is None:
                raise NotFound(f"Vehicle with ID {vehicle_id} not found.")

            plate = changes.get("license_plate")
            if plate and await self.vehicles.get_by_plate(plate, exclude_id=vehicle.id):
                raise _duplicate_plate(plate, other=True)

            if new_status is not None:
                assert_admin_vehicle_status(vehicle, new_status)

            if "max_load_capacity" in changes:
                changes["max_load_capacity"] = Decimal(str(changes["max_load_capacity"]))
            if "vehicle_type" in changes:
                changes["vehicle_type"] = VehicleType(changes["vehicle_type"])
            for field, value in changes.items():
                setattr(vehicle, field, value)

            try:
                if new_status is not None:
                    await self.vehicles.set_status(vehicle, new_status)
                await self.session.flush()
            except IntegrityError as exc:
                raise _duplicate_plate(plate or vehicle.license_plate, other=True) from exc

        updated = sorted(changes) + (["status"] if new_status is not None else [])
        logger.info("Vehicle %d updated: %s", vehicle.id, ", ".join(updated) or "-")
        return vehicle

    async def retire(self, vehicle_id: int) -> VehicleModel:
        """Soft delete: the row stays, the vehicle goes Out of Service."""
        async with self.session.begin():
            vehicle = await self.vehicles.get_for_update(vehicle_id)
            if vehicle is None:
                raise NotFound(f"Vehicle with ID {vehicle_id} not found.")
            assert_admin_vehicle_status(vehicle, VehicleStatus.OUT_OF_SERVICE)
            await self.vehicles.set_status(vehicle, VehicleStatus.OUT_OF_SERVICE)

        logger.info("Vehicle %d set to 'Out of Service'", vehicle.id)
        return vehicle


class DriverRoster:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.drivers = DriverRepository(session)

    async def list_drivers(self) -> list[DriverModel]:
        return await self.drivers.list_all()

    async def update_status(self, driver_id: int, status) -> StatusChange:
        target = parse_status(DriverStatus, status)

        async with self.session.begin():
            driver = await self.drivers.get_for_update(driver_id)
            if driver is None:
                raise NotFound(f"Driver {driver_id} not found.")
            if driver.status == target:
                return StatusChange(driver.id, target.value, changed=False)
            driver.status = target

        logger.info("Driver %d status set to '%s'", driver.id, target.value)
        return StatusChange(driver.id, target.value)
