"""Initial schema: vehicles, drivers, shipments, maintenance_logs.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


VEHICLE_STATUS = ("Idle", "On Trip", "In Shop", "Out of Service")
VEHICLE_TYPE = ("Truck", "Van", "Bike")
DRIVER_STATUS = ("On Duty", "Off Duty", "Suspended")
TRIP_STATUS = ("Draft", "Dispatched", "Completed", "Cancelled")
MAINTENANCE_STATUS = ("Scheduled", "In Progress", "Completed")


def upgrade() -> None:
    # ── vehicles ──────────────────────────────────────────────────────
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("license_plate", sa.String(20), unique=True, nullable=False),
        sa.Column("max_load_capacity", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("odometer", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "status",
            sa.Enum(*VEHICLE_STATUS, name="vehicle_status"),
            nullable=False,
            server_default="Idle",
        ),
        sa.Column(
            "vehicle_type",
            sa.Enum(*VEHICLE_TYPE, name="vehicle_type"),
            nullable=False,
        ),
        sa.Column("region", sa.String(50), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("max_load_capacity >= 0", name="ck_vehicles_capacity"),
        sa.CheckConstraint("odometer >= 0", name="ck_vehicles_odometer"),
    )
    op.create_index("idx_vehicles_status", "vehicles", ["status"])

    # ── drivers ───────────────────────────────────────────────────────
    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("license_number", sa.String(50), unique=True, nullable=False),
        sa.Column("license_expiry", sa.Date, nullable=False),
        sa.Column("safety_score", sa.Integer, nullable=False, server_default="100"),
        sa.Column("region", sa.String(50), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*DRIVER_STATUS, name="driver_status"),
            nullable=False,
            server_default="On Duty",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "safety_score BETWEEN 0 AND 100", name="ck_drivers_safety_score"
        ),
    )
    op.create_index("idx_drivers_status", "drivers", ["status"])

    # ── shipments ─────────────────────────────────────────────────────
    op.create_table(
        "shipments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("cargo_weight", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=True
        ),
        sa.Column(
            "driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=True
        ),
        sa.Column(
            "status",
            sa.Enum(*TRIP_STATUS, name="trip_status"),
            nullable=False,
            server_default="Draft",
        ),
        sa.Column("revenue", sa.Numeric(12, 2), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("cargo_weight >= 0", name="ck_shipments_cargo"),
    )
    op.create_index("idx_shipments_status", "shipments", ["status"])
    op.create_index("idx_shipments_vehicle", "shipments", ["vehicle_id"])
    op.create_index("idx_shipments_driver", "shipments", ["driver_id"])

    # ── maintenance_logs ──────────────────────────────────────────────
    op.create_table(
        "maintenance_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "vehicle_id", sa.Integer, sa.ForeignKey("vehicles.id"), nullable=False
        ),
        sa.Column("service_type", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("service_date", sa.Date, nullable=False),
        sa.Column(
            "status",
            sa.Enum(*MAINTENANCE_STATUS, name="maintenance_status"),
            nullable=False,
            server_default="Scheduled",
        ),
        sa.Column("next_service_due", sa.Date, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("cost >= 0", name="ck_maintenance_cost"),
    )
    op.create_index("idx_maintenance_vehicle", "maintenance_logs", ["vehicle_id"])
    op.create_index("idx_maintenance_status", "maintenance_logs", ["status"])


def downgrade() -> None:
    op.drop_table("maintenance_logs")
    op.drop_table("shipments")
    op.drop_table("drivers")
    op.drop_table("vehicles")
    op.execute("DROP TYPE IF EXISTS maintenance_status")
    op.execute("DROP TYPE IF EXISTS trip_status")
    op.execute("DROP TYPE IF EXISTS driver_status")
    op.execute("DROP TYPE IF EXISTS vehicle_type")
    op.execute("DROP TYPE IF EXISTS vehicle_status")
