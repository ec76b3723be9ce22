"""Analytics queries for departments, interns, housing and the dashboard overview.

Every read goes through ``QueryExecutor.fetch_with_fallback`` so a dead
database degrades to sample data instead of an error page.
"""

import logging
from collections import Counter, defaultdict
from datetime import date
from typing import Any

from beartype import beartype

from ..core.query_executor import DataResult, QueryExecutor
from ..data import sample_data
from ..schemas.analytics import (
    AnalyticsResponse,
    ComprehensiveData,
    DepartmentsData,
    FallbackBundle,
    HousingAnalytics,
    HousingApartment,
    HousingData,
    HousingRoom,
    InternDemographics,
    InternsData,
    OccupancyStats,
    OverviewStats,
    PerformanceMetrics,
)

logger = logging.getLogger(__name__)

DEPARTMENTS_QUERY = """
    SELECT
        d.id,
        d.department_name,
        COUNT(ii.intern_id) AS intern_count,
        COUNT(CASE WHEN ii.status = 'Active' THEN 1 END) AS active_count,
        COUNT(CASE WHEN ii.status = 'Completed' THEN 1 END) AS completed_count,
        COUNT(CASE WHEN ii.status NOT IN ('Active', 'Completed') OR ii.status IS NULL THEN 1 END) AS pending_count
    FROM departments d
    LEFT JOIN internship_info ii ON d.id = ii.department_id
    GROUP BY d.id, d.department_name
    ORDER BY intern_count DESC, d.department_name ASC
"""

DEPARTMENT_CHART_QUERY = """
    SELECT
        d.department_name,
        COUNT(ii.intern_id) AS value,
        CASE
            WHEN COUNT(ii.intern_id) = 0 THEN '#e5e7eb'
            WHEN COUNT(ii.intern_id) <= 1 THEN '#fef3c7'
            WHEN COUNT(ii.intern_id) <= 3 THEN '#ddd6fe'
            WHEN COUNT(ii.intern_id) <= 5 THEN '#bfdbfe'
            ELSE '#bbf7d0'
        END AS color
    FROM departments d
    LEFT JOIN internship_info ii ON d.id = ii.department_id
    GROUP BY d.id, d.department_name
    HAVING COUNT(ii.intern_id) > 0
    ORDER BY COUNT(ii.intern_id) DESC
    LIMIT 10
"""

INTERNS_QUERY = """
    SELECT
        id.intern_id,
        id.name,
        id.nationality,
        id.gender,
        id.email,
        ii.start_date,
        ii.end_date,
        ii.status,
        d.department_name
    FROM intern_details id
    LEFT JOIN internship_info ii ON id.intern_id = ii.intern_id
    LEFT JOIN departments d ON ii.department_id = d.id
    ORDER BY id.intern_id
"""

HOUSING_QUERY = """
    SELECT
        a.id AS apartment_id,
        a.apartment_name,
        r.id AS room_id,
        r.room_number,
        r.is_single,
        r.is_full,
        0 AS occupants_count
    FROM apartments a
    LEFT JOIN rooms r ON a.id = r.apartment_id
    ORDER BY a.apartment_name, r.room_number
"""

OVERVIEW_INTERNS_QUERY = """
    SELECT
        id.intern_id,
        id.name,
        id.nationality,
        id.gender,
        id.birthdate,
        ii.start_date,
        ii.end_date,
        ii.status,
        d.department_name
    FROM intern_details id
    LEFT JOIN internship_info ii ON id.intern_id = ii.intern_id
    LEFT JOIN departments d ON ii.department_id = d.id
"""

ROOM_TOTALS_QUERY = """
    SELECT
        COUNT(r.id) AS total_rooms,
        SUM(CASE WHEN r.is_full THEN 1 ELSE 0 END) AS occupied_rooms
    FROM rooms r
"""

DEPARTMENT_COUNTS_QUERY = """
    SELECT
        d.id,
        d.department_name,
        COUNT(ii.intern_id) AS intern_count
    FROM departments d
    LEFT JOIN internship_info ii ON d.id = ii.department_id
    GROUP BY d.id, d.department_name
"""

# Upper age bound (inclusive) per bucket; anything older is "31+".
AGE_GROUPS = (("18-20", 20), ("21-23", 23), ("24-26", 26), ("27-30", 30))
HOUSING_TYPE_SHARES = (("Single Room", 0.3), ("Double Room", 0.5), ("Suite", 0.2))


def _sample_department_rows() -> list[dict[str, Any]]:
    """Sample departments in the row shape of ``DEPARTMENTS_QUERY``."""
    rows = []
    for stats, dept in zip(
        sample_data.sample_department_stats(), sample_data.sample_departments()
    ):
        rows.append(
            {
                "id": dept["id"],
                "department_name": stats["name"],
                "intern_count": stats["count"],
                "active_count": stats["active"],
                "completed_count": stats["completed"],
                "pending_count": max(0, stats["count"] - stats["active"] - stats["completed"]),
            }
        )
    return rows


@beartype
def summarize_departments(
    rows: list[dict[str, Any]], chart_data: list[dict[str, Any]] | None = None
) -> DepartmentsData:
    """Totals over department rows."""
    active = sum(1 for row in rows if int(row.get("intern_count") or 0) > 0)
    return DepartmentsData(
        departments=rows,
        total_departments=len(rows),
        active_departments=active,
        chart_data=chart_data or [],
    )


@beartype
def summarize_interns(rows: list[dict[str, Any]]) -> InternsData:
    """Per-department active/completed counts over intern rows."""
    stats: dict[str, dict[str, int]] = defaultdict(
        lambda: {"count": 0, "active": 0, "completed": 0}
    )
    for row in rows:
        department = row.get("department_name") or "Unassigned"
        status = str(row.get("status") or "").lower()
        entry = stats[department]
        entry["count"] += 1
        if status == "active":
            entry["active"] += 1
        elif status == "completed":
            entry["completed"] += 1

    department_stats = [
        {"name": name, **counts}
        for name, counts in sorted(stats.items(), key=lambda item: -item[1]["count"])
    ]
    return InternsData(
        interns=rows,
        department_stats=department_stats,
        total_count=len(rows),
    )


@beartype
def group_housing_rows(rows: list[dict[str, Any]]) -> HousingData:
    """Group apartment/room rows into apartments with occupancy statistics.

    Rows without a room id still register their apartment, with no rooms.
    """
    apartments: dict[Any, dict[str, Any]] = {}
    total_rooms = 0
    occupied_rooms = 0

    for row in rows:
        apartment_id = row.get("apartment_id")
        apartment = apartments.setdefault(
            apartment_id,
            {
                "id": apartment_id,
                "apartment_name": row.get("apartment_name"),
                "rooms": [],
                "total_rooms": 0,
                "occupied_rooms": 0,
            },
        )

        if row.get("room_id") is None:
            continue

        is_full = bool(row.get("is_full"))
        total_rooms += 1
        apartment["total_rooms"] += 1
        if is_full:
            occupied_rooms += 1
            apartment["occupied_rooms"] += 1

        apartment["rooms"].append(
            HousingRoom(
                id=row["room_id"],
                room_number=row.get("room_number"),
                is_single=bool(row.get("is_single")),
                is_full=is_full,
            )
        )

    occupancy_rate = round(occupied_rooms / total_rooms * 100) if total_rooms > 0 else 0
    return HousingData(
        apartments=[HousingApartment(**apartment) for apartment in apartments.values()],
        occupancy_stats=OccupancyStats(
            total_rooms=total_rooms,
            occupied_rooms=occupied_rooms,
            occupancy_rate=occupancy_rate,
        ),
    )


def chart_color(count: int) -> str:
    """Chart color for a department's intern count."""
    if count == 0:
        return "#e5e7eb"
    if count <= 1:
        return "#fef3c7"
    if count <= 3:
        return "#ddd6fe"
    if count <= 5:
        return "#bfdbfe"
    return "#bbf7d0"


@beartype
def department_chart_rows(
    rows: list[dict[str, Any]], limit: int = 10
) -> list[dict[str, Any]]:
    """Chart rows for departments with interns, largest first."""
    counted = [
        (row.get("department_name"), int(row.get("intern_count") or 0)) for row in rows
    ]
    ranked = sorted((item for item in counted if item[1] > 0), key=lambda item: -item[1])
    return [
        {"department_name": name, "value": value, "color": chart_color(value)}
        for name, value in ranked[:limit]
    ]


def _birth_year(value: Any) -> int | None:
    if isinstance(value, date):
        return value.year
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10]).year
        except ValueError:
            return None
    return None


@beartype
def age_distribution(rows: list[dict[str, Any]], today: date) -> list[dict[str, Any]]:
    """Bucket interns by age in whole calendar years; rows without a birthdate are skipped."""
    counts = {label: 0 for label, _ in AGE_GROUPS}
    counts["31+"] = 0
    for row in rows:
        year = _birth_year(row.get("birthdate"))
        if year is None:
            continue
        age = today.year - year
        label = next((label for label, upper in AGE_GROUPS if age <= upper), "31+")
        counts[label] += 1
    return [{"age_group": label, "count": count} for label, count in counts.items()]


@beartype
def build_comprehensive(
    interns: list[dict[str, Any]],
    room_totals: list[dict[str, Any]],
    departments: list[dict[str, Any]],
    today: date,
) -> ComprehensiveData:
    """Overview, demographics and housing analytics from raw rows."""
    statuses = [str(row.get("status") or "").lower() for row in interns]
    totals = room_totals[0] if room_totals else {}
    total_rooms = int(totals.get("total_rooms") or 0)
    occupied_rooms = int(totals.get("occupied_rooms") or 0)
    occupancy_rate = round(occupied_rooms / total_rooms * 100) if total_rooms > 0 else 0

    department_counts = [
        (row.get("department_name"), int(row.get("intern_count") or 0)) for row in departments
    ]
    nationalities = Counter(row.get("nationality") or "Unknown" for row in interns)
    genders = Counter(row.get("gender") or "Unknown" for row in interns)

    return ComprehensiveData(
        overview=OverviewStats(
            total_interns=len(interns),
            active_interns=statuses.count("active"),
            completed_interns=statuses.count("completed"),
            total_departments=len(departments),
            active_departments=sum(1 for _, count in department_counts if count > 0),
            total_rooms=total_rooms,
            occupied_rooms=occupied_rooms,
            overall_occupancy_rate=occupancy_rate,
        ),
        intern_demographics=InternDemographics(
            nationality_distribution=[
                {"nationality": name, "count": count}
                for name, count in nationalities.most_common(10)
            ],
            gender_distribution=[
                {"gender": name, "count": count} for name, count in genders.items()
            ],
            age_distribution=age_distribution(interns, today),
        ),
        performance_metrics=PerformanceMetrics(
            department_performance=[
                {"department": name, "interns": count} for name, count in department_counts
            ],
            monthly_trends=[
                {"month": trend["month"], "interns": trend["interns"]}
                for trend in sample_data.sample_monthly_trends()[:6]
            ],
        ),
        housing_analytics=HousingAnalytics(
            occupancy_rate=occupancy_rate,
            housing_types=[
                {"type": kind, "count": int(total_rooms * share)}
                for kind, share in HOUSING_TYPE_SHARES
            ],
        ),
    )


def _respond(data: Any, *results: DataResult) -> AnalyticsResponse:
    degraded = [result for result in results if not result.is_live]
    for result in degraded:
        logger.info(f"Serving {result.source} data in place of live rows")
    warnings = [result.warning for result in degraded if result.warning]
    return AnalyticsResponse(
        success=True,
        source=degraded[0].source if degraded else "database",
        data=data,
        warning="; ".join(warnings) or None,
    )


class AnalyticsService:
    """Service for dashboard analytics."""

    def __init__(self, executor: QueryExecutor) -> None:
        """Initialize analytics service with dependency validation."""
        if not executor or not hasattr(executor, "fetch_with_fallback"):
            raise ValueError("Query executor required")
        self._executor = executor

    async def departments(self) -> AnalyticsResponse:
        """Departments with intern counts by status."""
        sample_rows = _sample_department_rows()
        result = await self._executor.fetch_with_fallback(
            DEPARTMENTS_QUERY, fallback_data=sample_rows
        )
        chart = await self._executor.fetch_with_fallback(
            DEPARTMENT_CHART_QUERY, fallback_data=department_chart_rows(sample_rows)
        )
        return _respond(summarize_departments(result.rows, chart.rows), result, chart)

    async def comprehensive(self, today: date | None = None) -> AnalyticsResponse:
        """Dashboard overview and demographics, degrading per query to sample rows."""
        interns = await self._executor.fetch_with_fallback(
            OVERVIEW_INTERNS_QUERY, fallback_data=sample_data.sample_interns()
        )
        room_totals = await self._executor.fetch_with_fallback(
            ROOM_TOTALS_QUERY, fallback_data=sample_data.sample_room_totals()
        )
        departments = await self._executor.fetch_with_fallback(
            DEPARTMENT_COUNTS_QUERY, fallback_data=_sample_department_rows()
        )
        data = build_comprehensive(
            interns.rows, room_totals.rows, departments.rows, today or date.today()
        )
        return _respond(data, interns, room_totals, departments)

    async def interns(self) -> AnalyticsResponse:
        """Intern listing with per-department counts."""
        result = await self._executor.fetch_with_fallback(
            INTERNS_QUERY, fallback_data=sample_data.sample_interns()
        )
        return _respond(summarize_interns(result.rows), result)

    async def housing(self) -> AnalyticsResponse:
        """Apartments, rooms and occupancy statistics."""
        result = await self._executor.fetch_with_fallback(
            HOUSING_QUERY,
            fallback_data=sample_data.sample_housing_rows(),
            fallback_source="sample",
        )
        return _respond(group_housing_rows(result.rows), result)

    @beartype
    def fallback_bundle(self) -> FallbackBundle:
        """Complete fallback payload for every dashboard widget."""
        return build_fallback_bundle()


@beartype
def build_fallback_bundle() -> FallbackBundle:
    """Assemble the comprehensive fallback data set."""
    interns = sample_data.sample_interns()
    departments = sample_data.sample_departments()
    apartments = sample_data.sample_apartments()

    total_capacity = sum(apt["max_capacity"] for apt in apartments)
    total_occupied = sum(apt["current_occupants"] for apt in apartments)
    total_available = sum(apt["available_capacity"] for apt in apartments)

    return FallbackBundle(
        interns={
            "list": interns,
            "department_stats": sample_data.sample_department_stats(),
            "total_count": len(interns),
        },
        departments={
            "departments": departments,
            "total_departments": len(departments),
            "total_interns": sum(dept["count"] for dept in departments),
        },
        housing={
            "apartments": apartments,
            "statistics": {
                "total_apartments": len(apartments),
                "total_capacity": total_capacity,
                "total_occupied": total_occupied,
                "total_available": total_available,
                "occupancy_rate": round(total_occupied / total_capacity * 100, 1)
                if total_capacity
                else 0.0,
            },
        },
        nationalities={
            "data": sample_data.sample_nationalities(),
            "total_nationalities": len(sample_data.sample_nationalities()),
        },
        trends={"monthly": sample_data.sample_monthly_trends()},
        demographics={
            "gender": sample_data.sample_gender_distribution(),
            "performance": sample_data.sample_performance_metrics(),
            "durations": sample_data.sample_internship_durations(),
            "status": sample_data.sample_status_counts(),
        },
    )
