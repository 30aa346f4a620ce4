"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``vehicles``          -- fleet assets with load capacity and availability
* ``drivers``           -- licensed drivers and their duty status
* ``shipments``         -- trips; optionally reference one vehicle and one driver
* ``maintenance_logs``  -- service tickets against a vehicle

Status columns store the human-readable enum *values* ("On Trip",
"In Progress", ...), not the Python member names.

Indexes
-------
* **Unique** on ``vehicles.license_plate``.
* **B-Tree** on every ``status`` column and on the foreign keys used by
  the lifecycle engines and the listing endpoints.
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)

from .database import Base
from fleetflow.domain.enums import (
    DriverStatus,
    MaintenanceStatus,
    TripStatus,
    VehicleStatus,
    VehicleType,
)


def _values_enum(enum_cls, name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    license_plate = Column(String(20), unique=True, nullable=False)
    max_load_capacity = Column(Numeric(12, 2), default=0, nullable=False)
    odometer = Column(Integer, default=0, nullable=False)
    status = Column(
        _values_enum(VehicleStatus, "vehicle_status"),
        default=VehicleStatus.IDLE,
        nullable=False,
    )
    vehicle_type = Column(_values_enum(VehicleType, "vehicle_type"), nullable=False)
    region = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_vehicles_status", "status"),)
    __mapper_args__ = {"eager_defaults": True}


class DriverModel(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    license_number = Column(String(50), unique=True, nullable=False)
    license_expiry = Column(Date, nullable=False)
    safety_score = Column(Integer, default=100, nullable=False)
    region = Column(String(50), nullable=True)
    status = Column(
        _values_enum(DriverStatus, "driver_status"),
        default=DriverStatus.ON_DUTY,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_drivers_status", "status"),)
    __mapper_args__ = {"eager_defaults": True}


class TripModel(Base):
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    cargo_weight = Column(Numeric(12, 2), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True)
    status = Column(
        _values_enum(TripStatus, "trip_status"),
        default=TripStatus.DRAFT,
        nullable=False,
    )
    revenue = Column(Numeric(12, 2), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_shipments_status", "status"),
        Index("idx_shipments_vehicle", "vehicle_id"),
        Index("idx_shipments_driver", "driver_id"),
    )
    __mapper_args__ = {"eager_defaults": True}


class MaintenanceRecordModel(Base):
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    service_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    cost = Column(Numeric(12, 2), default=0, nullable=False)
    service_date = Column(Date, nullable=False)
    status = Column(
        _values_enum(MaintenanceStatus, "maintenance_status"),
        default=MaintenanceStatus.SCHEDULED,
        nullable=False,
    )
    next_service_due = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_maintenance_vehicle", "vehicle_id"),
        Index("idx_maintenance_status", "status"),
    )
    __mapper_args__ = {"eager_defaults": True}
