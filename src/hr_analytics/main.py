"""HR Analytics Backend - Main Application Module."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from beartype import beartype
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.v1 import router as v1_router
from .core.config import get_settings
from .core.database import close_db_pool, get_pool_manager
from .core.logging_utils import configure_logging, level_for_environment
from .schemas.common import APIInfo

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    configure_logging(level=level_for_environment(settings.api_env))
    logger.info(f"Starting {settings.app_name} in {settings.api_env} mode")

    # The pool is created lazily; a failed check only flips availability
    available = await get_pool_manager().check_database_availability()
    if available:
        logger.info("Database connection verified")
    else:
        logger.warning("Database unavailable at startup, serving sample data")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db_pool()
    logger.info("Database connections closed")


@beartype
def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Intern, housing and department analytics with graceful database fallback",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router)

    @app.get("/")
    async def root() -> APIInfo:
        """Root endpoint returning API information."""
        return APIInfo(
            name=settings.app_name,
            version=__version__,
            status="operational",
            environment=settings.api_env,
            endpoints=sorted(
                path for path in app.openapi()["paths"] if path.startswith("/api/v1")
            ),
        )

    return app


# Create the application instance
app = create_app()


@beartype
def main() -> None:
    """Run the main application entry point."""
    settings = get_settings()

    uvicorn.run(
        "hr_analytics.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level="info" if not settings.is_production else "error",
    )


if __name__ == "__main__":
    main()
