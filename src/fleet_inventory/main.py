"""FastAPI application - Fleet Inventory Resolution Service.

Serves locations with their inherited metadata, the telemetry profiles that
apply to a resource, and maintenance state derived from schedules.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .config import Config
from .errors import (
    ConflictError,
    DataIntegrityError,
    InvalidArgumentError,
    InventoryError,
    NotFoundError,
)
from .hierarchy import routes as hierarchy_routes
from .schedules import routes as schedule_routes
from .service import InventoryService
from .telemetry import routes as telemetry_routes


logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    records: dict[str, Any]


# Global service instance (initialized in lifespan)
_service: InventoryService | None = None


async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": "Not found", "detail": str(exc)},
    )


async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=409,
        content={"error": "Conflict", "detail": str(exc)},
    )


async def invalid_argument_error_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid argument", "detail": str(exc)},
    )


async def data_integrity_error_handler(request: Request, exc: DataIntegrityError):
    logger.error(f"Data integrity error on {request.url.path}: {exc} (chain: {exc.chain})")
    return JSONResponse(
        status_code=500,
        content={"error": "Data integrity error", "detail": str(exc)},
    )


async def inventory_error_handler(request: Request, exc: InventoryError):
    return JSONResponse(
        status_code=500,
        content={"error": "Inventory error", "detail": str(exc)},
    )


def create_app(config: Config | None = None, service: InventoryService | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Service configuration; read from ``FLEET_INVENTORY_CONFIG`` when omitted
        service: Pre-built service (tests); built from ``config`` when omitted

    Returns:
        The application, with routers configured on startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown."""
        global _service

        logger.info("Starting fleet inventory service...")

        app_config = config or (service.config if service else Config.from_env())
        _service = service or InventoryService.from_config(app_config)

        hierarchy_routes.configure(_service, app_config.pagination)
        telemetry_routes.configure(_service, app_config.pagination)
        schedule_routes.configure(_service, app_config.pagination)

        logger.info(
            f"Fleet inventory service started "
            f"(max_nesting={_service.walker.max_nesting}, records={_service.store.count()})"
        )

        yield

        logger.info("Fleet inventory service stopped")

    app = FastAPI(
        title="Fleet Inventory Service",
        description="Resolves inherited metadata, telemetry profiles and maintenance state over an edge fleet hierarchy.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_error_handler)
    app.add_exception_handler(DataIntegrityError, data_integrity_error_handler)
    app.add_exception_handler(InventoryError, inventory_error_handler)

    app.include_router(hierarchy_routes.router)
    app.include_router(telemetry_routes.router)
    app.include_router(schedule_routes.router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            records={"total": _service.store.count()} if _service else {},
        )

    return app


app = create_app()


def run():
    """Run the service with uvicorn."""
    import uvicorn

    config = Config.from_env()

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format,
    )

    uvicorn.run(
        "fleet_inventory.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
    )


if __name__ == "__main__":
    run()
