"""
Trip Lifecycle Engine
=====================

Owns every trip status change and the vehicle side effects it carries.

Concurrency safety
------------------
* The trip row is read with **SELECT ... FOR UPDATE**, so two updates of
  the same trip serialize and the second observes the first's commit.
* On dispatch the vehicle row is locked *before* the availability check,
  and the seizure itself is a conditional
  ``UPDATE ... WHERE status = 'Idle'``.  Two Draft trips racing for one
  vehicle therefore produce exactly one dispatch.
* Everything runs inside ``session.begin()``; any exception rolls back
  the trip and vehicle writes together.

Driver duty status is read and guarded on dispatch but never written
here; it is managed independently by driver administration.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.config import settings
from fleetflow.domain.enums import TripStatus, VehicleStatus, parse_status
from fleetflow.domain.errors import InvalidStateTransition, NotFound
from fleetflow.domain.guards import (
    assert_assignable,
    assert_dispatchable,
    assert_eligible_for_trip,
    assert_within_capacity,
)
from fleetflow.domain.lifecycle import StatusChange, plan_trip_transition
from fleetflow.infrastructure.models import TripModel
from fleetflow.infrastructure.repositories import (
    DriverRepository,
    TripRepository,
    VehicleRepository,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


class TripLifecycle:
    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utcnow,
        tz: tzinfo | None = None,
    ):
        self.session = session
        self.clock = clock
        self.tz = tz or ZoneInfo(settings.timezone)
        self.trips = TripRepository(session)
        self.vehicles = VehicleRepository(session)
        self.drivers = DriverRepository(session)

    def _local(self, instant: datetime) -> datetime:
        """Licence days are calendar days in the configured fleet zone."""
        return instant.astimezone(self.tz) if instant.tzinfo else instant

    # ── Creation ──────────────────────────────────────────────────────

    async def create_trip(
        self,
        *,
        origin: str,
        destination: str,
        cargo_weight,
        vehicle_id: int | None = None,
        driver_id: int | None = None,
        revenue=None,
    ) -> TripModel:
        """Create a Draft trip after capacity and driver feasibility checks.

        No vehicle or driver status is touched; assets are seized only
        when the trip is dispatched.
        """
        cargo = _to_decimal(cargo_weight)

        async with self.session.begin():
            if vehicle_id is not None:
                vehicle = await self.vehicles.get_by_id(vehicle_id)
                if vehicle is None:
                    raise NotFound(f"Vehicle {vehicle_id} not found.")
                assert_within_capacity(cargo, vehicle)

            if driver_id is not None:
                driver = await self.drivers.get_by_id(driver_id)
                if driver is None:
                    raise NotFound(f"Driver {driver_id} not found.")
                assert_eligible_for_trip(driver, self._local(self.clock()))

            trip = await self.trips.create(
                TripModel(
                    origin=origin,
                    destination=destination,
                    cargo_weight=cargo,
                    vehicle_id=vehicle_id,
                    driver_id=driver_id,
                    revenue=_to_decimal(revenue),
                    status=TripStatus.DRAFT,
                )
            )

        logger.info(
            "Trip %d created (vehicle=%s, driver=%s)", trip.id, vehicle_id, driver_id
        )
        return trip

    # ── Status transitions ────────────────────────────────────────────

    async def update_trip_status(self, trip_id: int, status) -> StatusChange:
        target = parse_status(TripStatus, status)

        try:
            async with self.session.begin():
                trip = await self.trips.get_for_update(trip_id)
                if trip is None:
                    raise NotFound(f"Trip {trip_id} not found.")

                transition = plan_trip_transition(trip.status, target)
                if transition.is_noop:
                    return StatusChange(trip.id, target.value, changed=False)

                now = self.clock()
                if transition.seizes_vehicle:
                    await self._seize_assets(trip, now)
                if transition.releases_vehicle:
                    await self._release_vehicle(trip)

                if transition.stamps_start:
                    trip.start_date = now
                if transition.stamps_end:
                    trip.end_date = now
                trip.status = target
                await self.session.flush()
        except InvalidStateTransition as exc:
            logger.warning(
                "Trip %s -> %s rejected: %s", trip_id, target.value, exc.message
            )
            raise

        logger.info(
            "Trip %d: %s -> %s", trip.id, transition.current.value, target.value
        )
        return StatusChange(trip.id, target.value)

    async def _seize_assets(self, trip: TripModel, now: datetime) -> None:
        vehicle = None
        if trip.vehicle_id is not None:
            vehicle = await self.vehicles.get_for_update(trip.vehicle_id)
            if vehicle is None:
                raise NotFound(f"Vehicle {trip.vehicle_id} not found.")
            assert_dispatchable(vehicle)

        if trip.driver_id is not None:
            driver = await self.drivers.get_for_update(trip.driver_id)
            if driver is None:
                raise NotFound(f"Driver {trip.driver_id} not found.")
            assert_assignable(driver, self._local(now))

        if vehicle is not None and not await self.vehicles.seize_for_trip(vehicle):
            raise InvalidStateTransition(
                f"Cannot Dispatch: Vehicle {vehicle.id} is no longer 'Idle'."
            )

    async def _release_vehicle(self, trip: TripModel) -> None:
        if trip.vehicle_id is None:
            return
        vehicle = await self.vehicles.get_for_update(trip.vehicle_id)
        if vehicle is not None:
            await self.vehicles.set_status(vehicle, VehicleStatus.IDLE)

    # ── Queries ───────────────────────────────────────────────────────

    async def list_trips(self) -> list[dict]:
        rows = await self.trips.list_with_assets()
        return [
            {
                "trip": trip,
                "vehicle_name": vehicle_name,
                "license_plate": plate,
                "max_load_capacity": capacity,
                "driver_name": driver_name,
            }
            for trip, vehicle_name, plate, capacity, driver_name in rows
        ]
