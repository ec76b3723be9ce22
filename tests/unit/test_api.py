"""Unit tests for the HTTP API."""

from collections.abc import Generator
from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from hr_analytics.api import dependencies
from hr_analytics.core import database
from hr_analytics.core.database import PoolManager
from hr_analytics.core.query_executor import QueryExecutor
from hr_analytics.main import create_app
from hr_analytics.services.analytics_service import AnalyticsService
from hr_analytics.services.database_status import DatabaseStatusService

from ..conftest import FakeConnection, FakePostgresError


@pytest.fixture
def app(pool_manager: PoolManager, executor: QueryExecutor) -> Generator[FastAPI, None, None]:
    """Application wired to the fake pool."""
    application = create_app()
    application.dependency_overrides[dependencies.get_pool_manager] = lambda: pool_manager
    application.dependency_overrides[dependencies.get_query_executor] = lambda: executor
    application.dependency_overrides[dependencies.get_analytics_service] = (
        lambda: AnalyticsService(executor)
    )
    application.dependency_overrides[dependencies.get_database_status_service] = (
        lambda: DatabaseStatusService(executor)
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def query_failure() -> FakePostgresError:
    return FakePostgresError('relation "departments" does not exist', sqlstate="42P01")


class TestHealthEndpoints:
    """Test health and connection endpoints."""

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_reports_database_state(
        self, client: TestClient, pool_manager: PoolManager
    ) -> None:
        """Test health degrades when the database was last seen down."""
        assert client.get("/api/v1/health").json()["status"] == "healthy"

        pool_manager.mark_available(False)
        body = client.get("/api/v1/health").json()

        assert body["status"] == "degraded"
        assert body["database"]["status"] == "degraded"
        assert body["environment"] == "development"

    def test_connection_success(self, client: TestClient) -> None:
        response = client.get("/api/v1/test-connection")

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert "timestamp" in body
        assert "s3cret" not in response.text

    def test_connection_failure_returns_500(
        self, client: TestClient, pool_factory: AsyncMock, pool_manager: PoolManager
    ) -> None:
        """Test a failed connection test answers 500 with success false."""
        pool_factory.side_effect = ConnectionRefusedError(111, "Connection refused")

        response = client.get("/api/v1/test-connection")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["type"] == "connection"
        assert body["error"]["code"] == "ECONNREFUSED"
        assert body["error"]["suggested_fix"]
        assert pool_manager.database_available is False

    def test_db_status_unreachable(self, client: TestClient, pool_factory: AsyncMock) -> None:
        pool_factory.side_effect = ConnectionRefusedError(111, "Connection refused")

        response = client.get("/api/v1/db-status")

        assert response.status_code == 200
        assert response.json()["db_connection"] is False


class TestAnalyticsEndpoints:
    """Test analytics endpoints never fail on database errors."""

    def test_departments_fallback(
        self, client: TestClient, fake_connection: FakeConnection
    ) -> None:
        fake_connection.fetch.side_effect = query_failure()

        response = client.get("/api/v1/departments")

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["source"] == "fallback"
        assert body["warning"]
        assert body["data"]["total_departments"] == 6
        assert len(body["data"]["chart_data"]) == 6

    def test_interns_live_serializes_dates(
        self, client: TestClient, fake_connection: FakeConnection
    ) -> None:
        fake_connection.fetch.return_value = [
            {"intern_id": 7, "name": "Ana Lima", "start_date": date(2025, 1, 6),
             "end_date": None, "status": "Active", "department_name": "Research"},
        ]

        body = client.get("/api/v1/interns").json()

        assert body["source"] == "database"
        assert "warning" not in body or body["warning"] is None
        assert body["data"]["interns"][0]["start_date"] == "2025-01-06"
        assert body["data"]["department_stats"][0]["name"] == "Research"

    def test_housing_fallback_is_sample(
        self, client: TestClient, fake_connection: FakeConnection
    ) -> None:
        fake_connection.fetch.side_effect = query_failure()

        body = client.get("/api/v1/housing").json()

        assert body["success"] is True
        assert body["source"] == "sample"
        assert body["data"]["occupancy_stats"]["occupancy_rate"] == 0

    def test_comprehensive_analytics_fallback(
        self, client: TestClient, fake_connection: FakeConnection
    ) -> None:
        fake_connection.fetch.side_effect = query_failure()

        response = client.get("/api/v1/comprehensive-analytics")

        body = response.json()
        assert response.status_code == 200
        assert body["source"] == "fallback"
        assert set(body["data"]) == {
            "overview", "intern_demographics", "performance_metrics", "housing_analytics",
        }
        assert body["data"]["overview"]["total_interns"] == 5
        assert len(body["data"]["intern_demographics"]["age_distribution"]) == 5

    def test_fallback_data(self, client: TestClient, fake_connection: FakeConnection) -> None:
        """Test the fallback bundle never touches the database."""
        body = client.get("/api/v1/fallback-data").json()

        assert body["success"] is True
        assert body["source"] == "fallback"
        assert set(body["data"]) == {
            "interns", "departments", "housing", "nationalities", "trends", "demographics",
        }
        fake_connection.fetch.assert_not_awaited()


class TestRoot:
    def test_api_info(self, client: TestClient) -> None:
        body = client.get("/").json()

        assert body["status"] == "operational"
        assert "/api/v1/departments" in body["endpoints"]
        assert "/api/v1/test-connection" in body["endpoints"]
        assert "/api/v1/health" in body["endpoints"]
        assert "/api/v1/comprehensive-analytics" in body["endpoints"]
        assert body["endpoints"] == sorted(body["endpoints"])
        assert all(path.startswith("/api/v1") for path in body["endpoints"])


class TestLifespan:
    """Test startup checks and shutdown cleanup."""

    def test_pool_closed_on_shutdown(self, pool_manager: PoolManager) -> None:
        database.set_pool_manager(pool_manager)

        with TestClient(create_app()) as client:
            assert client.get("/api/v1/health/live").status_code == 200
            pool = pool_manager._pool
            assert pool is not None

        pool.close.assert_awaited_once()
        assert not pool_manager.is_initialized

    def test_startup_survives_unreachable_database(
        self, pool_manager: PoolManager, pool_factory: AsyncMock
    ) -> None:
        """Test the app starts and serves sample data without a database."""
        database.set_pool_manager(pool_manager)
        pool_factory.side_effect = OSError("Network is unreachable")

        with TestClient(create_app()) as client:
            assert client.get("/api/v1/health").json()["status"] == "degraded"
