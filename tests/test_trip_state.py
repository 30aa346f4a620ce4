"""Unit tests for the pure trip / maintenance transition rules."""

import pytest

from fleetflow.domain.enums import (
    MaintenanceStatus,
    TripStatus,
    VehicleStatus,
    parse_status,
)
from fleetflow.domain.errors import InvalidStateTransition, InvalidStatus
from fleetflow.domain.lifecycle import maintenance_vehicle_effect, plan_trip_transition


class TestTripStateMachine:
    # ── Valid transitions ─────────────────────────────────────────

    def test_draft_to_dispatched_seizes_vehicle(self):
        t = plan_trip_transition(TripStatus.DRAFT, TripStatus.DISPATCHED)
        assert t.seizes_vehicle
        assert t.stamps_start
        assert not t.releases_vehicle
        assert not t.stamps_end

    def test_draft_to_cancelled_has_no_asset_effects(self):
        t = plan_trip_transition(TripStatus.DRAFT, TripStatus.CANCELLED)
        assert not t.seizes_vehicle
        assert not t.releases_vehicle

    def test_dispatched_to_completed_releases_and_stamps_end(self):
        t = plan_trip_transition(TripStatus.DISPATCHED, TripStatus.COMPLETED)
        assert t.releases_vehicle
        assert t.stamps_end
        assert not t.stamps_start

    def test_dispatched_to_cancelled_releases_vehicle(self):
        t = plan_trip_transition(TripStatus.DISPATCHED, TripStatus.CANCELLED)
        assert t.releases_vehicle
        assert not t.stamps_end

    @pytest.mark.parametrize("status", list(TripStatus))
    def test_same_status_is_noop(self, status):
        t = plan_trip_transition(status, status)
        assert t.is_noop
        assert not (t.seizes_vehicle or t.releases_vehicle or t.stamps_end)

    def test_accepts_raw_values(self):
        t = plan_trip_transition("Draft", "Dispatched")
        assert t.target == TripStatus.DISPATCHED

    # ── Invalid transitions ───────────────────────────────────────

    def test_draft_to_completed_fails(self):
        with pytest.raises(InvalidStateTransition):
            plan_trip_transition(TripStatus.DRAFT, TripStatus.COMPLETED)

    def test_dispatched_back_to_draft_fails(self):
        with pytest.raises(InvalidStateTransition):
            plan_trip_transition(TripStatus.DISPATCHED, TripStatus.DRAFT)

    @pytest.mark.parametrize("terminal", [TripStatus.COMPLETED, TripStatus.CANCELLED])
    @pytest.mark.parametrize("target", [TripStatus.DRAFT, TripStatus.DISPATCHED])
    def test_terminal_states_are_final(self, terminal, target):
        with pytest.raises(InvalidStateTransition):
            plan_trip_transition(terminal, target)

    def test_completed_to_cancelled_fails(self):
        with pytest.raises(InvalidStateTransition, match="'Completed' to 'Cancelled'"):
            plan_trip_transition(TripStatus.COMPLETED, TripStatus.CANCELLED)


class TestParseStatus:
    def test_parses_value(self):
        assert parse_status(MaintenanceStatus, "In Progress") is MaintenanceStatus.IN_PROGRESS

    def test_member_passes_through(self):
        assert parse_status(TripStatus, TripStatus.DRAFT) is TripStatus.DRAFT

    def test_member_name_is_not_a_value(self):
        with pytest.raises(InvalidStatus):
            parse_status(TripStatus, "DISPATCHED")

    def test_unknown_value_lists_choices(self):
        with pytest.raises(InvalidStatus, match="Draft, Dispatched, Completed, Cancelled"):
            parse_status(TripStatus, "Teleported")

    def test_error_code(self):
        with pytest.raises(InvalidStatus) as exc:
            parse_status(VehicleStatus, None)
        assert exc.value.code == "INVALID_STATUS"
        assert exc.value.status_code == 400


class TestMaintenanceVehicleEffect:
    def test_in_progress_sends_vehicle_to_shop(self):
        assert (
            maintenance_vehicle_effect(MaintenanceStatus.IN_PROGRESS, VehicleStatus.IDLE)
            == VehicleStatus.IN_SHOP
        )

    def test_in_progress_on_vehicle_already_in_shop_writes_nothing(self):
        assert (
            maintenance_vehicle_effect(MaintenanceStatus.IN_PROGRESS, VehicleStatus.IN_SHOP)
            is None
        )

    @pytest.mark.parametrize(
        "vehicle_status",
        [VehicleStatus.IN_SHOP, VehicleStatus.ON_TRIP, VehicleStatus.OUT_OF_SERVICE],
    )
    def test_completed_returns_vehicle_to_idle(self, vehicle_status):
        assert (
            maintenance_vehicle_effect(MaintenanceStatus.COMPLETED, vehicle_status)
            == VehicleStatus.IDLE
        )

    def test_scheduled_returns_vehicle_to_idle(self):
        assert (
            maintenance_vehicle_effect(MaintenanceStatus.SCHEDULED, VehicleStatus.IN_SHOP)
            == VehicleStatus.IDLE
        )
