"""Deterministic sample data served when the database is unavailable.

Every accessor returns a fresh list of fresh dicts, so a caller mutating its
rows never changes what the next request sees.
"""

import copy
from typing import Any

Row = dict[str, Any]

_INTERNS: tuple[Row, ...] = (
    {
        "intern_id": 1,
        "name": "Emma Rodriguez",
        "email": "emma.rodriguez@university.edu",
        "department_name": "Engineering",
        "nationality": "USA",
        "gender": "female",
        "birthdate": "2002-03-14",
        "start_date": "2024-06-01",
        "end_date": "2024-08-31",
        "status": "completed",
        "normalized_status": "completed",
        "duration_days": 91,
    },
    {
        "intern_id": 2,
        "name": "Raj Patel",
        "email": "raj.patel@university.edu",
        "department_name": "Data Science",
        "nationality": "India",
        "gender": "male",
        "birthdate": "1999-11-02",
        "start_date": "2024-06-01",
        "end_date": "2024-08-31",
        "status": "completed",
        "normalized_status": "completed",
        "duration_days": 91,
    },
    {
        "intern_id": 3,
        "name": "Sophie Miller",
        "email": "sophie.miller@university.edu",
        "department_name": "Marketing",
        "nationality": "Germany",
        "gender": "female",
        "birthdate": "2003-07-21",
        "start_date": "2024-12-01",
        "end_date": "2025-02-28",
        "status": "active",
        "normalized_status": "active",
        "duration_days": 89,
    },
    {
        "intern_id": 4,
        "name": "Kevin Wu",
        "email": "kevin.wu@university.edu",
        "department_name": "Engineering",
        "nationality": "Canada",
        "gender": "male",
        "birthdate": "2001-01-30",
        "start_date": "2024-12-01",
        "end_date": "2025-02-28",
        "status": "active",
        "normalized_status": "active",
        "duration_days": 89,
    },
    {
        "intern_id": 5,
        "name": "Maria Santos",
        "email": "maria.santos@university.edu",
        "department_name": "Finance",
        "nationality": "Brazil",
        "gender": "female",
        "birthdate": "1994-05-09",
        "start_date": "2023-06-01",
        "end_date": "2023-08-31",
        "status": "completed",
        "normalized_status": "completed",
        "duration_days": 91,
    },
)

_DEPARTMENTS: tuple[Row, ...] = (
    {"id": 1, "name": "Engineering", "count": 15, "percentage": 30, "color": "#4285F4"},
    {"id": 2, "name": "Data Science", "count": 12, "percentage": 24, "color": "#EA4335"},
    {"id": 3, "name": "Marketing", "count": 8, "percentage": 16, "color": "#FBBC05"},
    {"id": 4, "name": "Finance", "count": 7, "percentage": 14, "color": "#34A853"},
    {"id": 5, "name": "Human Resources", "count": 5, "percentage": 10, "color": "#00A0B0"},
    {"id": 6, "name": "Research", "count": 3, "percentage": 6, "color": "#6A4A3C"},
)

_APARTMENTS: tuple[Row, ...] = (
    {
        "apartment_id": 1,
        "address": "123 University Ave",
        "max_capacity": 4,
        "total_rooms": 2,
        "current_occupants": 3,
        "available_capacity": 1,
    },
    {
        "apartment_id": 2,
        "address": "456 College St",
        "max_capacity": 6,
        "total_rooms": 3,
        "current_occupants": 6,
        "available_capacity": 0,
    },
    {
        "apartment_id": 3,
        "address": "789 Campus Way",
        "max_capacity": 4,
        "total_rooms": 2,
        "current_occupants": 2,
        "available_capacity": 2,
    },
    {
        "apartment_id": 4,
        "address": "101 Research Park",
        "max_capacity": 3,
        "total_rooms": 2,
        "current_occupants": 0,
        "available_capacity": 3,
    },
)

_HOUSING_UNITS: tuple[Row, ...] = (
    {
        "id": 1,
        "name": "Downtown Apartments A",
        "type": "apartment",
        "capacity": 4,
        "current_occupancy": 2,
        "address": "123 Main St, Downtown",
        "status": "occupied",
    },
    {
        "id": 2,
        "name": "University Dorm B",
        "type": "dormitory",
        "capacity": 2,
        "current_occupancy": 1,
        "address": "456 College Ave, University District",
        "status": "occupied",
    },
    {
        "id": 3,
        "name": "Shared House C",
        "type": "shared_house",
        "capacity": 6,
        "current_occupancy": 3,
        "address": "789 Residential St, Suburbs",
        "status": "occupied",
    },
    {
        "id": 4,
        "name": "Downtown Apartments D",
        "type": "apartment",
        "capacity": 2,
        "current_occupancy": 0,
        "address": "321 Business District",
        "status": "available",
    },
)

_NATIONALITIES: tuple[Row, ...] = (
    {"nationality": "USA", "count": 15, "percentage": 30},
    {"nationality": "India", "count": 12, "percentage": 24},
    {"nationality": "China", "count": 8, "percentage": 16},
    {"nationality": "Germany", "count": 6, "percentage": 12},
    {"nationality": "Brazil", "count": 5, "percentage": 10},
    {"nationality": "Others", "count": 4, "percentage": 8},
)

_MONTHLY_INTERNS = (12, 15, 18, 20, 25, 30, 28, 25, 20, 18, 15, 12)
_MONTHLY_HOUSING = (10, 12, 15, 18, 22, 28, 26, 22, 18, 15, 12, 10)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_GENDER: tuple[Row, ...] = (
    {"gender": "male", "count": 28, "percentage": 56},
    {"gender": "female", "count": 20, "percentage": 40},
    {"gender": "other", "count": 2, "percentage": 4},
)

_PERFORMANCE: tuple[Row, ...] = (
    {"metric": "Work Quality", "average": 4.2, "max": 5},
    {"metric": "Communication", "average": 3.8, "max": 5},
    {"metric": "Technical Skills", "average": 4.5, "max": 5},
    {"metric": "Problem Solving", "average": 4.0, "max": 5},
    {"metric": "Team Collaboration", "average": 4.3, "max": 5},
)

_DURATIONS: tuple[Row, ...] = (
    {"duration": "1-3 months", "count": 15},
    {"duration": "3-6 months", "count": 25},
    {"duration": "6-9 months", "count": 8},
    {"duration": "9-12 months", "count": 2},
)

_STATUS_COUNTS: Row = {
    "active": 25,
    "completed": 20,
    "pending": 5,
    "terminated": 2,
    "extended": 3,
}


def _fresh(rows: tuple[Row, ...]) -> list[Row]:
    return [copy.deepcopy(row) for row in rows]


def sample_interns() -> list[Row]:
    return _fresh(_INTERNS)


def sample_departments() -> list[Row]:
    return _fresh(_DEPARTMENTS)


def sample_department_stats() -> list[Row]:
    """Per-department split, assuming 40% active and 60% completed."""
    return [
        {
            "name": dept["name"],
            "count": dept["count"],
            "active": round(dept["count"] * 0.4),
            "completed": round(dept["count"] * 0.6),
        }
        for dept in _DEPARTMENTS
    ]


def sample_apartments() -> list[Row]:
    return _fresh(_APARTMENTS)


def sample_housing_units() -> list[Row]:
    return _fresh(_HOUSING_UNITS)


def sample_housing_rows() -> list[Row]:
    """Housing units in the row shape of the apartments/rooms query."""
    return [
        {
            "apartment_id": unit["id"],
            "apartment_name": unit["name"],
            "room_id": None,
            "room_number": None,
            "is_single": unit["type"] == "dormitory",
            "is_full": unit["current_occupancy"] >= unit["capacity"],
            "occupants_count": unit["current_occupancy"],
        }
        for unit in _HOUSING_UNITS
    ]


def sample_nationalities() -> list[Row]:
    return _fresh(_NATIONALITIES)


def sample_monthly_trends() -> list[Row]:
    return [
        {"month": month, "interns": interns, "housing": housing}
        for month, interns, housing in zip(_MONTHS, _MONTHLY_INTERNS, _MONTHLY_HOUSING)
    ]


def sample_gender_distribution() -> list[Row]:
    return _fresh(_GENDER)


def sample_performance_metrics() -> list[Row]:
    return _fresh(_PERFORMANCE)


def sample_internship_durations() -> list[Row]:
    return _fresh(_DURATIONS)


def sample_status_counts() -> Row:
    return dict(_STATUS_COUNTS)


def sample_room_totals() -> list[Row]:
    """Room totals in the row shape of the housing totals query.

    Apartments with no spare capacity count all their rooms as full.
    """
    return [
        {
            "total_rooms": sum(apt["total_rooms"] for apt in _APARTMENTS),
            "occupied_rooms": sum(
                apt["total_rooms"] for apt in _APARTMENTS if apt["available_capacity"] == 0
            ),
        }
    ]
