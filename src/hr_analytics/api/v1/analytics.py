"""Department, intern, housing and overview analytics endpoints.

These endpoints never fail because the database is down; the ``source``
field tells the client whether it is looking at live or sample rows.
"""

from fastapi import APIRouter, Depends

from ...schemas.analytics import (
    AnalyticsResponse,
    ComprehensiveData,
    DepartmentsData,
    HousingData,
    InternsData,
)
from ...services.analytics_service import AnalyticsService
from ..dependencies import get_analytics_service

router = APIRouter()


@router.get("/departments", response_model=AnalyticsResponse[DepartmentsData])
async def list_departments(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """Departments with intern counts by status."""
    return await service.departments()


@router.get("/interns", response_model=AnalyticsResponse[InternsData])
async def list_interns(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """Interns with department and internship details."""
    return await service.interns()


@router.get("/housing", response_model=AnalyticsResponse[HousingData])
async def housing_overview(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """Apartments, rooms and occupancy."""
    return await service.housing()


@router.get(
    "/comprehensive-analytics", response_model=AnalyticsResponse[ComprehensiveData]
)
async def comprehensive_analytics(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsResponse:
    """Overview counts plus nationality, gender and age distributions."""
    return await service.comprehensive()
