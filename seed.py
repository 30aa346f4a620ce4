"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 5 sample vehicles (Idle, On Trip, In Shop, Out of Service)
  - 4 sample drivers (one with an expired licence, one suspended)
  - 4 sample trips (Draft, Dispatched, Completed, Cancelled)
  - 2 sample maintenance records
"""

import asyncio
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import text

from fleetflow.domain.enums import (
    DriverStatus,
    MaintenanceStatus,
    TripStatus,
    VehicleStatus,
    VehicleType,
)
from fleetflow.infrastructure.database import async_session_factory, engine
from fleetflow.infrastructure.models import (
    DriverModel,
    MaintenanceRecordModel,
    TripModel,
    VehicleModel,
)


VEHICLES = [
    {"name": "Titan Prime", "model": "Freightliner Cascadia", "plate": "FL-001", "capacity": "25000.00", "odometer": 12500, "status": VehicleStatus.ON_TRIP, "type": VehicleType.TRUCK, "region": "North"},
    {"name": "Swift Box", "model": "Ford Transit", "plate": "FT-202", "capacity": "3500.00", "odometer": 4500, "status": VehicleStatus.IDLE, "type": VehicleType.VAN, "region": "South"},
    {"name": "Heavy Hauler", "model": "Kenworth T680", "plate": "KW-303", "capacity": "30000.00", "odometer": 89200, "status": VehicleStatus.IN_SHOP, "type": VehicleType.TRUCK, "region": "East"},
    {"name": "Metro Bike", "model": "Electric Cargo", "plate": "EB-404", "capacity": "150.00", "odometer": 1200, "status": VehicleStatus.IDLE, "type": VehicleType.BIKE, "region": "West"},
    {"name": "Long Haul", "model": "Volvo VNL", "plate": "VV-505", "capacity": "28000.00", "odometer": 156000, "status": VehicleStatus.OUT_OF_SERVICE, "type": VehicleType.TRUCK, "region": "North"},
]

TODAY = date.today()

DRIVERS = [
    {"name": "Ravi Verma", "license": "DL-0001", "expiry": TODAY + timedelta(days=700), "score": 92, "region": "North", "status": DriverStatus.ON_DUTY},
    {"name": "Asha Menon", "license": "DL-0002", "expiry": TODAY + timedelta(days=365), "score": 88, "region": "South", "status": DriverStatus.ON_DUTY},
    {"name": "Imran Shaikh", "license": "DL-0003", "expiry": TODAY - timedelta(days=10), "score": 75, "region": "East", "status": DriverStatus.ON_DUTY},
    {"name": "Neha Kulkarni", "license": "DL-0004", "expiry": TODAY + timedelta(days=90), "score": 61, "region": "West", "status": DriverStatus.SUSPENDED},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM vehicles"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Vehicles ──────────────────────────────────────────────────
        vehicles = []
        for v in VEHICLES:
            m = VehicleModel(
                name=v["name"],
                model=v["model"],
                license_plate=v["plate"],
                max_load_capacity=Decimal(v["capacity"]),
                odometer=v["odometer"],
                status=v["status"],
                vehicle_type=v["type"],
                region=v["region"],
            )
            session.add(m)
            vehicles.append(m)
        await session.flush()
        print(f"  Created {len(vehicles)} vehicles")

        # ── Drivers ───────────────────────────────────────────────────
        drivers = []
        for d in DRIVERS:
            m = DriverModel(
                name=d["name"],
                license_number=d["license"],
                license_expiry=d["expiry"],
                safety_score=d["score"],
                region=d["region"],
                status=d["status"],
            )
            session.add(m)
            drivers.append(m)
        await session.flush()
        print(f"  Created {len(drivers)} drivers")

        # ── Trips ─────────────────────────────────────────────────────
        now = datetime.now(timezone.utc)
        trips = [
            # Titan Prime is On Trip because of this one
            TripModel(
                origin="Delhi", destination="Jaipur", cargo_weight=Decimal("18000"),
                vehicle_id=vehicles[0].id, driver_id=drivers[0].id,
                status=TripStatus.DISPATCHED, revenue=Decimal("42000"),
                start_date=now - timedelta(hours=5),
            ),
            TripModel(
                origin="Chennai", destination="Bengaluru", cargo_weight=Decimal("2800"),
                vehicle_id=vehicles[1].id, driver_id=drivers[1].id,
                status=TripStatus.DRAFT, revenue=Decimal("9500"),
            ),
            TripModel(
                origin="Pune", destination="Mumbai", cargo_weight=Decimal("120"),
                vehicle_id=vehicles[3].id, driver_id=drivers[1].id,
                status=TripStatus.COMPLETED, revenue=Decimal("1800"),
                start_date=now - timedelta(days=2, hours=3),
                end_date=now - timedelta(days=2),
            ),
            TripModel(
                origin="Kolkata", destination="Patna", cargo_weight=Decimal("900"),
                status=TripStatus.CANCELLED,
            ),
        ]
        session.add_all(trips)
        await session.flush()
        print(f"  Created {len(trips)} trips")

        # ── Maintenance ───────────────────────────────────────────────
        records = [
            # Heavy Hauler is In Shop because of this one
            MaintenanceRecordModel(
                vehicle_id=vehicles[2].id, service_type="Engine Overhaul",
                description="Turbocharger replacement", cost=Decimal("54000"),
                service_date=TODAY - timedelta(days=1),
                status=MaintenanceStatus.IN_PROGRESS,
            ),
            MaintenanceRecordModel(
                vehicle_id=vehicles[1].id, service_type="Oil Change",
                cost=Decimal("2500"), service_date=TODAY + timedelta(days=7),
                status=MaintenanceStatus.SCHEDULED,
                next_service_due=TODAY + timedelta(days=97),
            ),
        ]
        session.add_all(records)
        await session.flush()
        print(f"  Created {len(records)} maintenance records")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
