"""Comprehensive fallback data endpoint."""

from fastapi import APIRouter, Depends

from ...schemas.analytics import FallbackDataResponse
from ...services.analytics_service import AnalyticsService
from ..dependencies import get_analytics_service

router = APIRouter()


@router.get("/fallback-data", response_model=FallbackDataResponse)
async def fallback_data(
    service: AnalyticsService = Depends(get_analytics_service),
) -> FallbackDataResponse:
    """Sample data for every dashboard widget, without touching the database."""
    return FallbackDataResponse(data=service.fallback_bundle())
