"""Domain enumerations and state-transition rules.

Every status vocabulary lives here once; the API boundary and the
lifecycle engines both parse incoming values through ``parse_status``.
"""

from __future__ import annotations

import enum
from typing import TypeVar

from .errors import InvalidStatus


class VehicleStatus(str, enum.Enum):
    IDLE = "Idle"
    ON_TRIP = "On Trip"
    IN_SHOP = "In Shop"
    OUT_OF_SERVICE = "Out of Service"


class VehicleType(str, enum.Enum):
    TRUCK = "Truck"
    VAN = "Van"
    BIKE = "Bike"


class DriverStatus(str, enum.Enum):
    ON_DUTY = "On Duty"
    OFF_DUTY = "Off Duty"
    SUSPENDED = "Suspended"


class TripStatus(str, enum.Enum):
    DRAFT = "Draft"
    DISPATCHED = "Dispatched"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class MaintenanceStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


# State machine: maps current status -> set of valid next statuses.
# Completed and Cancelled are terminal.
TRIP_TRANSITIONS: dict[TripStatus, set[TripStatus]] = {
    TripStatus.DRAFT: {TripStatus.DISPATCHED, TripStatus.CANCELLED},
    TripStatus.DISPATCHED: {TripStatus.COMPLETED, TripStatus.CANCELLED},
    TripStatus.COMPLETED: set(),
    TripStatus.CANCELLED: set(),
}

# Vehicle status each maintenance status forces on the serviced vehicle.
MAINTENANCE_VEHICLE_EFFECTS: dict[MaintenanceStatus, VehicleStatus] = {
    MaintenanceStatus.SCHEDULED: VehicleStatus.IDLE,
    MaintenanceStatus.IN_PROGRESS: VehicleStatus.IN_SHOP,
    MaintenanceStatus.COMPLETED: VehicleStatus.IDLE,
}


E = TypeVar("E", bound=enum.Enum)


def parse_status(enum_cls: type[E], value: object) -> E:
    """Coerce *value* into a member of *enum_cls* or raise ``InvalidStatus``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidStatus(f"Invalid status. Must be one of: {choices}") from None
