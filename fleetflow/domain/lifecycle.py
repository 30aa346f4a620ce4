"""
Pure lifecycle rules for trips and maintenance tickets.

Patterns used
-------------
- **State Pattern** on trips: ``plan_trip_transition`` is the only place
  that decides whether a trip may move between two statuses and which
  side effects that move carries
  (Draft -> Dispatched -> Completed | Cancelled, Draft -> Cancelled).
- Maintenance tickets have no transition restrictions; only the vehicle
  status they force is decided here.

Nothing in this module performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import (
    MAINTENANCE_VEHICLE_EFFECTS,
    TRIP_TRANSITIONS,
    MaintenanceStatus,
    TripStatus,
    VehicleStatus,
)
from .errors import InvalidStateTransition


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status update; ``changed`` is False for idempotent no-ops."""

    id: int
    status: str
    changed: bool = True


@dataclass(frozen=True)
class TripTransition:
    current: TripStatus
    target: TripStatus

    @property
    def is_noop(self) -> bool:
        return self.current == self.target

    @property
    def seizes_vehicle(self) -> bool:
        return not self.is_noop and self.target == TripStatus.DISPATCHED

    @property
    def releases_vehicle(self) -> bool:
        return (
            not self.is_noop
            and self.current == TripStatus.DISPATCHED
            and self.target in (TripStatus.COMPLETED, TripStatus.CANCELLED)
        )

    @property
    def stamps_start(self) -> bool:
        return self.seizes_vehicle

    @property
    def stamps_end(self) -> bool:
        return not self.is_noop and self.target == TripStatus.COMPLETED


def plan_trip_transition(current: TripStatus, target: TripStatus) -> TripTransition:
    """Return the transition from *current* to *target*, or raise if illegal."""
    current = TripStatus(current)
    target = TripStatus(target)
    if current == target:
        return TripTransition(current, target)
    if target not in TRIP_TRANSITIONS.get(current, set()):
        raise InvalidStateTransition(
            f"Cannot transition trip from '{current.value}' to '{target.value}'."
        )
    return TripTransition(current, target)


def maintenance_vehicle_effect(
    target: MaintenanceStatus, vehicle_status: VehicleStatus
) -> Optional[VehicleStatus]:
    """Vehicle status to write for a ticket moving to *target*; None if unchanged."""
    new_status = MAINTENANCE_VEHICLE_EFFECTS[MaintenanceStatus(target)]
    if new_status == vehicle_status:
        return None
    return new_status
