"""
Maintenance Lifecycle Engine
============================

Couples maintenance-ticket status to the serviced vehicle's availability:

* ``In Progress``  -> vehicle ``In Shop`` (written only if not already)
* ``Completed``    -> vehicle ``Idle``
* ``Scheduled``    -> vehicle ``Idle``

Tickets themselves have no transition restrictions; a repeated status is
an idempotent no-op.  The ticket and its vehicle are locked together so
a concurrent dispatch of the same vehicle waits for the commit.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.domain.enums import MaintenanceStatus, VehicleStatus, parse_status
from fleetflow.domain.errors import NotFound
from fleetflow.domain.lifecycle import StatusChange, maintenance_vehicle_effect
from fleetflow.infrastructure.models import MaintenanceRecordModel
from fleetflow.infrastructure.repositories import (
    MaintenanceRepository,
    VehicleRepository,
)

logger = logging.getLogger(__name__)


class MaintenanceLifecycle:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.records = MaintenanceRepository(session)
        self.vehicles = VehicleRepository(session)

    async def create_record(
        self,
        *,
        vehicle_id: int,
        service_type: str,
        service_date: date,
        status=MaintenanceStatus.SCHEDULED,
        cost=None,
        description: str | None = None,
        next_service_due: date | None = None,
    ) -> MaintenanceRecordModel:
        initial = parse_status(MaintenanceStatus, status)

        async with self.session.begin():
            vehicle = await self.vehicles.get_for_update(vehicle_id)
            if vehicle is None:
                raise NotFound(f"Vehicle {vehicle_id} not found.")

            record = await self.records.create(
                MaintenanceRecordModel(
                    vehicle_id=vehicle.id,
                    service_type=service_type,
                    description=description or None,
                    cost=Decimal(str(cost)) if cost else Decimal("0"),
                    service_date=service_date,
                    status=initial,
                    next_service_due=next_service_due,
                )
            )

            # Only an in-progress ticket pulls the vehicle into the shop at creation.
            if (
                initial == MaintenanceStatus.IN_PROGRESS
                and vehicle.status != VehicleStatus.IN_SHOP
            ):
                await self.vehicles.set_status(vehicle, VehicleStatus.IN_SHOP)

        logger.info(
            "Maintenance record %d created for vehicle %d (%s)",
            record.id,
            vehicle.id,
            initial.value,
        )
        return record

    async def update_status(self, record_id: int, status) -> StatusChange:
        target = parse_status(MaintenanceStatus, status)

        async with self.session.begin():
            locked = await self.records.get_with_vehicle_for_update(record_id)
            if locked is None:
                raise NotFound(f"Maintenance record {record_id} not found.")
            record, vehicle = locked

            if record.status == target:
                return StatusChange(record.id, target.value, changed=False)

            previous = record.status
            record.status = target
            new_vehicle_status = maintenance_vehicle_effect(target, vehicle.status)
            if new_vehicle_status is not None:
                if vehicle.status == VehicleStatus.ON_TRIP:
                    logger.warning(
                        "Vehicle %d moved from 'On Trip' to '%s' by maintenance record %d",
                        vehicle.id,
                        new_vehicle_status.value,
                        record.id,
                    )
                await self.vehicles.set_status(vehicle, new_vehicle_status)
            await self.session.flush()

        logger.info(
            "Maintenance record %d: %s -> %s",
            record.id,
            MaintenanceStatus(previous).value,
            target.value,
        )
        return StatusChange(record.id, target.value)

    async def list_records(self) -> list[dict]:
        rows = await self.records.list_with_vehicle()
        return [
            {
                "record": record,
                "vehicle_name": name,
                "license_plate": plate,
                "vehicle_status": vehicle_status,
            }
            for record, name, plate, vehicle_status in rows
        ]
