"""
FastAPI application factory.

* Registers routes for trips, maintenance, vehicles, drivers and health.
* Renders every error in the ``{success, error: {message, code}}`` envelope.
* Logs one line per request.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from fleetflow.api.errors import register_exception_handlers
from fleetflow.api.middleware import log_requests
from fleetflow.api.routes import drivers, health, maintenance, trips, vehicles
from fleetflow.config import settings
from fleetflow.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release pooled connections on shutdown."""
    logger.info("%s starting (%s)", settings.app_name, settings.environment)
    yield
    await engine.dispose()
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Fleet logistics backend: vehicles, drivers, trips and "
            "maintenance, with transactional status engines that keep "
            "vehicle availability consistent under concurrent dispatch."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.middleware("http")(log_requests)

    # Routers
    app.include_router(trips.router, prefix="/api")
    app.include_router(maintenance.router, prefix="/api")
    app.include_router(vehicles.router, prefix="/api")
    app.include_router(drivers.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    return app
