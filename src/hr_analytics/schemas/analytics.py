"""Analytics response schemas."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

_FROZEN = ConfigDict(
    frozen=True,
    extra="forbid",
    validate_assignment=True,
    str_strip_whitespace=True,
    validate_default=True,
)


class DepartmentsData(BaseModel):
    """Departments with intern counts."""

    model_config = _FROZEN

    departments: list[dict[str, Any]] = Field(..., description="Department rows")
    total_departments: int = Field(..., ge=0)
    active_departments: int = Field(..., ge=0, description="Departments with interns")
    chart_data: list[dict[str, Any]] = Field(
        default_factory=list, description="Top departments by intern count, with chart colors"
    )


class InternsData(BaseModel):
    """Intern listing with per-department counts."""

    model_config = _FROZEN

    interns: list[dict[str, Any]] = Field(..., description="Intern rows")
    department_stats: list[dict[str, Any]] = Field(default_factory=list)
    total_count: int = Field(..., ge=0)


class HousingRoom(BaseModel):
    """Single room within an apartment."""

    model_config = _FROZEN

    id: int | str
    room_number: str | int | None = None
    is_single: bool = False
    is_full: bool = False
    occupants: list[dict[str, Any]] = Field(default_factory=list)


class HousingApartment(BaseModel):
    """Apartment with its rooms."""

    model_config = _FROZEN

    id: int | str | None
    apartment_name: str | None = None
    rooms: list[HousingRoom] = Field(default_factory=list)
    total_rooms: int = Field(default=0, ge=0)
    occupied_rooms: int = Field(default=0, ge=0)


class OccupancyStats(BaseModel):
    """Aggregate occupancy over every room."""

    model_config = _FROZEN

    total_rooms: int = Field(..., ge=0)
    occupied_rooms: int = Field(..., ge=0)
    occupancy_rate: int = Field(..., ge=0, le=100, description="Percent of full rooms")


class HousingData(BaseModel):
    """Housing overview."""

    model_config = _FROZEN

    apartments: list[HousingApartment]
    occupancy_stats: OccupancyStats


class FallbackBundle(BaseModel):
    """Sample data for every dashboard widget."""

    model_config = _FROZEN

    interns: dict[str, Any]
    departments: dict[str, Any]
    housing: dict[str, Any]
    nationalities: dict[str, Any]
    trends: dict[str, Any]
    demographics: dict[str, Any]


class OverviewStats(BaseModel):
    """Headline counts across interns, departments and rooms."""

    model_config = _FROZEN

    total_interns: int = Field(..., ge=0)
    active_interns: int = Field(..., ge=0)
    completed_interns: int = Field(..., ge=0)
    total_departments: int = Field(..., ge=0)
    active_departments: int = Field(..., ge=0)
    total_rooms: int = Field(..., ge=0)
    occupied_rooms: int = Field(..., ge=0)
    overall_occupancy_rate: int = Field(..., ge=0, le=100)


class InternDemographics(BaseModel):
    model_config = _FROZEN

    nationality_distribution: list[dict[str, Any]] = Field(
        ..., description="Top ten nationalities by count"
    )
    gender_distribution: list[dict[str, Any]]
    age_distribution: list[dict[str, Any]]


class PerformanceMetrics(BaseModel):
    model_config = _FROZEN

    department_performance: list[dict[str, Any]]
    monthly_trends: list[dict[str, Any]]


class HousingAnalytics(BaseModel):
    model_config = _FROZEN

    occupancy_rate: int = Field(..., ge=0, le=100)
    housing_types: list[dict[str, Any]]


class ComprehensiveData(BaseModel):
    """Dashboard overview computed from live or fallback rows."""

    model_config = _FROZEN

    overview: OverviewStats
    intern_demographics: InternDemographics
    performance_metrics: PerformanceMetrics
    housing_analytics: HousingAnalytics


class AnalyticsResponse(BaseModel, Generic[T]):
    """Analytics payload labelled with where its rows came from."""

    model_config = _FROZEN

    success: bool = Field(True, description="Indicates successful operation")
    source: Literal["database", "fallback", "sample"] = Field(
        ..., description="Origin of the rows"
    )
    data: T
    warning: str | None = Field(None, description="Set when fallback data is served")


class FallbackDataResponse(BaseModel):
    """Response of the comprehensive fallback endpoint."""

    model_config = _FROZEN

    success: bool = True
    source: Literal["fallback"] = "fallback"
    message: str = "Comprehensive fallback data for all dashboard components"
    data: FallbackBundle
