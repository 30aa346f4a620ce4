"""
Availability guards.

Pure predicates over already-loaded vehicle / driver rows.  They never
touch the database; callers are responsible for reading the rows under
the transaction's lock before asking.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from .enums import DriverStatus, VehicleStatus
from .errors import (
    InvalidCargo,
    InvalidDriverState,
    InvalidStateTransition,
    LicenseExpired,
)


def start_of_day(as_of: datetime | date) -> date:
    """Licence expiry is compared against the calendar day, not the instant."""
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


def _label(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


# ── Vehicle ───────────────────────────────────────────────────────────


def assert_dispatchable(vehicle) -> None:
    """Only an Idle vehicle may be put on a trip."""
    if vehicle.status != VehicleStatus.IDLE:
        raise InvalidStateTransition(
            f"Cannot Dispatch: Vehicle {vehicle.id} is currently "
            f"'{_label(vehicle.status)}', not 'Idle'."
        )


def assert_within_capacity(cargo_weight: Decimal, vehicle) -> None:
    if cargo_weight > vehicle.max_load_capacity:
        raise InvalidCargo(
            f"Cargo weight ({cargo_weight} kg) exceeds vehicle max capacity "
            f"({vehicle.max_load_capacity} kg)."
        )


def assert_admin_vehicle_status(vehicle, new_status: VehicleStatus) -> None:
    """Administrative status edits may not seize or release a vehicle on a trip."""
    if new_status == vehicle.status:
        return
    if new_status == VehicleStatus.ON_TRIP:
        raise InvalidStateTransition(
            f"Vehicle {vehicle.id} can only be put 'On Trip' by dispatching a trip."
        )
    if vehicle.status == VehicleStatus.ON_TRIP:
        raise InvalidStateTransition(
            f"Vehicle {vehicle.id} is currently 'On Trip'; complete or cancel "
            "its trip first."
        )


# ── Driver ────────────────────────────────────────────────────────────


def license_valid(driver, as_of: datetime | date) -> bool:
    return driver.license_expiry >= start_of_day(as_of)


def assert_assignable(driver, as_of: datetime | date) -> None:
    """A driver may be dispatched only when On Duty with an unexpired licence."""
    if driver.status != DriverStatus.ON_DUTY:
        raise InvalidStateTransition(
            f"Cannot Dispatch: Driver {driver.id} is currently "
            f"'{_label(driver.status)}', not 'On Duty'."
        )
    if not license_valid(driver, as_of):
        raise InvalidStateTransition(
            f"Cannot Dispatch: Driver {driver.id} license expired on "
            f"{driver.license_expiry.isoformat()}."
        )


def assert_eligible_for_trip(driver, as_of: datetime | date) -> None:
    """Creation-time driver checks; reported with their own error codes."""
    if driver.status != DriverStatus.ON_DUTY:
        raise InvalidDriverState(
            f"Driver {driver.id} is not 'On Duty' (currently '{_label(driver.status)}')."
        )
    if not license_valid(driver, as_of):
        raise LicenseExpired(f"Driver {driver.id} license is expired.")
