"""Health, connection test and database status endpoints."""

import logging
import time
from datetime import datetime

from beartype import beartype
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ... import __version__
from ...core.config import Settings, get_settings
from ...core.database import PoolManager
from ...schemas.health import HealthResponse, HealthStatus
from ...schemas.status import ConnectionTestResponse, DatabaseStatusReport, ErrorInfo
from ...services.database_status import DatabaseStatusService
from ..dependencies import get_database_status_service, get_pool_manager

logger = logging.getLogger(__name__)

router = APIRouter()

# Track application start time
APP_START_TIME = datetime.utcnow()


@router.get("/health", response_model=HealthResponse)
@beartype
async def health_check(
    settings: Settings = Depends(get_settings),
    pool_manager: PoolManager = Depends(get_pool_manager),
) -> HealthResponse:
    """Report process health plus the last known database availability.

    Does not touch the database; use ``/test-connection`` for a live check.
    """
    uptime = (datetime.utcnow() - APP_START_TIME).total_seconds()

    if pool_manager.database_available:
        database = HealthStatus(status="healthy", message="Database reachable")
    else:
        database = HealthStatus(
            status="degraded", message="Database unavailable, serving sample data"
        )

    return HealthResponse(
        status=database.status,
        timestamp=datetime.utcnow(),
        version=__version__,
        environment=settings.api_env,
        database=database,
        uptime_seconds=uptime,
    )


@router.get("/health/live", response_model=HealthStatus)
@beartype
async def liveness_check() -> HealthStatus:
    """Liveness probe endpoint.

    Returns:
        HealthStatus: Simple liveness status
    """
    return HealthStatus(status="healthy", message="Application is running")


@router.get("/test-connection", response_model=ConnectionTestResponse)
async def test_database_connection(
    pool_manager: PoolManager = Depends(get_pool_manager),
) -> ConnectionTestResponse | JSONResponse:
    """Check the database; responds 500 when the check fails."""
    start_time = time.time()
    connected = await pool_manager.check_database_availability()
    elapsed_ms = (time.time() - start_time) * 1000

    if connected:
        logger.info(f"Connection test succeeded in {elapsed_ms:.2f}ms")
        return ConnectionTestResponse(
            success=True,
            message="Database connection successful",
            target=pool_manager.config.describe(),
        )

    logger.error(f"Connection test failed after {elapsed_ms:.2f}ms")
    error = pool_manager.last_error
    body = ConnectionTestResponse(
        success=False,
        message="Database connection failed",
        target=pool_manager.config.describe(),
        error=ErrorInfo.from_classified(error) if error else None,
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


@router.get("/db-status", response_model=DatabaseStatusReport)
async def database_status(
    service: DatabaseStatusService = Depends(get_database_status_service),
) -> DatabaseStatusReport:
    """Connection, table, column and permission diagnostics."""
    return await service.report()
