"""
Shared test fixtures.

Uses a file-backed SQLite database (via aiosqlite) per test so tests run
without Docker / PostgreSQL, while still allowing several connections at
once.  SQLite has no ``SELECT ... FOR UPDATE``; instead every transaction
opens with ``BEGIN IMMEDIATE``, which takes the database write lock up
front and serializes concurrent transactions the way row locks do on
PostgreSQL.
"""

from __future__ import annotations

import itertools
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fleetflow.domain.enums import DriverStatus, VehicleStatus, VehicleType
from fleetflow.infrastructure.database import Base
from fleetflow.infrastructure.models import DriverModel, VehicleModel

_plates = itertools.count(1)


# ── Database ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'fleetflow.db'}", echo=False
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ── Data helpers ──────────────────────────────────────────────────────


@pytest.fixture
def add(session_factory):
    """Persist ORM objects in their own committed transaction."""

    async def _add(*objects):
        async with session_factory() as session:
            session.add_all(objects)
            await session.commit()
        return objects[0] if len(objects) == 1 else objects

    return _add


@pytest.fixture
def reload(session_factory):
    """Read a row back through a fresh session (never the identity map)."""

    async def _reload(model, pk):
        async with session_factory() as session:
            return await session.get(model, pk)

    return _reload


def _vehicle(**overrides) -> VehicleModel:
    values = dict(
        name="Swift Box",
        model="Ford Transit",
        license_plate=f"FT-{next(_plates):04d}",
        max_load_capacity=Decimal("1000.00"),
        odometer=0,
        status=VehicleStatus.IDLE,
        vehicle_type=VehicleType.VAN,
        region="South",
    )
    values.update(overrides)
    return VehicleModel(**values)


def _driver(**overrides) -> DriverModel:
    values = dict(
        name="Asha Menon",
        license_number=f"DL-{next(_plates):04d}",
        license_expiry=date(2099, 1, 1),
        safety_score=90,
        region="South",
        status=DriverStatus.ON_DUTY,
    )
    values.update(overrides)
    return DriverModel(**values)


@pytest.fixture
def create_vehicle(add):
    async def _create(**overrides) -> VehicleModel:
        return await add(_vehicle(**overrides))

    return _create


@pytest.fixture
def create_driver(add):
    async def _create(**overrides) -> DriverModel:
        return await add(_driver(**overrides))

    return _create
