"""API v1 router aggregation.

This module combines all v1 API routers into a single router
that can be mounted on the main FastAPI application.
"""

from fastapi import APIRouter

from .analytics import router as analytics_router
from .fallback import router as fallback_router
from .health import router as health_router

# Create main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(health_router, tags=["health"])
router.include_router(analytics_router, tags=["analytics"])
router.include_router(fallback_router, tags=["fallback"])


__all__ = ["router"]
