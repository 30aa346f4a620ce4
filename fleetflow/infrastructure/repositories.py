"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  ``*_for_update`` reads issue
``SELECT ... FOR UPDATE`` and always refresh the identity map, so a
caller holding the lock sees the committed state, never a cached one.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import DriverModel, MaintenanceRecordModel, TripModel, VehicleModel
from fleetflow.domain.enums import VehicleStatus


class VehicleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, vehicle: VehicleModel) -> VehicleModel:
        self.session.add(vehicle)
        await self.session.flush()
        return vehicle

    async def get_by_id(self, vehicle_id: int) -> Optional[VehicleModel]:
        return await self.session.get(VehicleModel, vehicle_id)

    async def get_for_update(self, vehicle_id: int) -> Optional[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel)
            .where(VehicleModel.id == vehicle_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_plate(
        self, license_plate: str, exclude_id: int | None = None
    ) -> Optional[VehicleModel]:
        query = select(VehicleModel).where(VehicleModel.license_plate == license_plate)
        if exclude_id is not None:
            query = query.where(VehicleModel.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel).order_by(
                VehicleModel.created_at.desc(), VehicleModel.id.desc()
            )
        )
        return list(result.scalars().all())

    async def seize_for_trip(self, vehicle: VehicleModel) -> bool:
        """Atomically move an Idle vehicle to On Trip.

        ``UPDATE ... WHERE status = 'Idle'``; returns False when no row
        matched, i.e. another transaction got there first.
        """
        result = await self.session.execute(
            update(VehicleModel)
            .where(
                VehicleModel.id == vehicle.id,
                VehicleModel.status == VehicleStatus.IDLE,
            )
            .values(status=VehicleStatus.ON_TRIP)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        await self.session.refresh(vehicle, ["status"])
        return True

    async def set_status(
        self, vehicle: VehicleModel, status: VehicleStatus
    ) -> VehicleModel:
        """Single writer for ``vehicles.status`` outside of dispatch."""
        vehicle.status = status
        await self.session.flush()
        return vehicle


class DriverRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, driver: DriverModel) -> DriverModel:
        self.session.add(driver)
        await self.session.flush()
        return driver

    async def get_by_id(self, driver_id: int) -> Optional[DriverModel]:
        return await self.session.get(DriverModel, driver_id)

    async def get_for_update(self, driver_id: int) -> Optional[DriverModel]:
        result = await self.session.execute(
            select(DriverModel)
            .where(DriverModel.id == driver_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[DriverModel]:
        result = await self.session.execute(
            select(DriverModel).order_by(
                DriverModel.created_at.desc(), DriverModel.id.desc()
            )
        )
        return list(result.scalars().all())


class TripRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, trip: TripModel) -> TripModel:
        self.session.add(trip)
        await self.session.flush()
        return trip

    async def get_by_id(self, trip_id: int) -> Optional[TripModel]:
        return await self.session.get(TripModel, trip_id)

    async def get_for_update(self, trip_id: int) -> Optional[TripModel]:
        result = await self.session.execute(
            select(TripModel)
            .where(TripModel.id == trip_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_with_assets(self) -> list[tuple]:
        """Trips joined with vehicle name / plate / capacity and driver name."""
        result = await self.session.execute(
            select(
                TripModel,
                VehicleModel.name,
                VehicleModel.license_plate,
                VehicleModel.max_load_capacity,
                DriverModel.name,
            )
            .outerjoin(VehicleModel, TripModel.vehicle_id == VehicleModel.id)
            .outerjoin(DriverModel, TripModel.driver_id == DriverModel.id)
            .order_by(TripModel.created_at.desc(), TripModel.id.desc())
        )
        return [tuple(row) for row in result.all()]


class MaintenanceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: MaintenanceRecordModel) -> MaintenanceRecordModel:
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_by_id(self, record_id: int) -> Optional[MaintenanceRecordModel]:
        return await self.session.get(MaintenanceRecordModel, record_id)

    async def get_with_vehicle_for_update(
        self, record_id: int
    ) -> Optional[tuple[MaintenanceRecordModel, VehicleModel]]:
        """Lock the ticket *and* its vehicle in one statement."""
        result = await self.session.execute(
            select(MaintenanceRecordModel, VehicleModel)
            .join(VehicleModel, MaintenanceRecordModel.vehicle_id == VehicleModel.id)
            .where(MaintenanceRecordModel.id == record_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def list_with_vehicle(self) -> list[tuple]:
        result = await self.session.execute(
            select(
                MaintenanceRecordModel,
                VehicleModel.name,
                VehicleModel.license_plate,
                VehicleModel.status,
            )
            .join(VehicleModel, MaintenanceRecordModel.vehicle_id == VehicleModel.id)
            .order_by(
                MaintenanceRecordModel.created_at.desc(),
                MaintenanceRecordModel.id.desc(),
            )
        )
        return [tuple(row) for row in result.all()]
