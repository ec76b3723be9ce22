"""Unit tests for the database status report."""

import errno
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hr_analytics.core.query_executor import QueryExecutor
from hr_analytics.services.database_status import REQUIRED_TABLES, DatabaseStatusService

from ..conftest import FakeConnection, FakePostgresError

PRESENT_TABLES = [table for table in REQUIRED_TABLES if table != "occupants"]


def scripted_database(text: str, *params: Any) -> list[dict[str, Any]]:
    """Answer status queries like a database missing one table and one grant."""
    if "connection_test" in text:
        return [{"connection_test": 1}]
    if "current_database()" in text:
        return [{"database": "hr", "user": "hr_user", "server_version": "PostgreSQL 16.2"}]
    if "information_schema.tables" in text:
        return [{"table_name": table} for table in PRESENT_TABLES]
    if "information_schema.columns" in text:
        return [{"column_name": "id", "data_type": "integer", "is_nullable": "NO", "table": params[0]}]
    if 'FROM "departments"' in text:
        raise FakePostgresError(
            "permission denied for table departments",
            sqlstate="42501",
            table_name="departments",
        )
    return [{"?column?": 1}]


class TestDatabaseStatusService:
    """Test status report assembly."""

    def test_requires_executor(self) -> None:
        with pytest.raises(ValueError):
            DatabaseStatusService(None)  # type: ignore[arg-type]

    async def test_unreachable_database(
        self, executor: QueryExecutor, pool_factory: AsyncMock
    ) -> None:
        """Test an unreachable server yields connection recommendations only."""
        pool_factory.side_effect = ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")

        report = await DatabaseStatusService(executor).report()

        assert report.db_connection is False
        assert report.table_status == {}
        assert report.errors[0].type == "connection"
        assert report.errors[0].code == "ECONNREFUSED"
        assert len(report.recommendations) == 3

    async def test_schema_and_permissions(
        self, executor: QueryExecutor, fake_connection: FakeConnection
    ) -> None:
        fake_connection.fetch.side_effect = scripted_database

        report = await DatabaseStatusService(executor).report()

        assert report.db_connection is True
        assert report.current_settings["database"] == "hr"
        assert report.table_status["occupants"] is False
        assert all(report.table_status[table] for table in PRESENT_TABLES)
        assert set(report.schema_info) == set(PRESENT_TABLES)
        assert report.schema_info["rooms"][0]["table"] == "rooms"
        assert "Create missing table: occupants" in report.recommendations

    async def test_permission_failure_is_classified(
        self, executor: QueryExecutor, fake_connection: FakeConnection
    ) -> None:
        """Test a denied read is reported once with a GRANT suggestion."""
        fake_connection.fetch.side_effect = scripted_database

        report = await DatabaseStatusService(executor).report()

        denied = report.permissions["departments"]
        assert denied.read is False
        assert denied.error == "Permission denied for table departments"
        assert report.permissions["rooms"].read is True
        assert (
            "Grant appropriate permissions with: GRANT SELECT ON departments TO your_user;"
            in report.recommendations
        )
        denied_reads = [
            call for call in fake_connection.fetch.await_args_list
            if 'FROM "departments"' in call.args[0]
        ]
        assert len(denied_reads) == 1

    async def test_healthy_schema(
        self, executor: QueryExecutor, fake_connection: FakeConnection
    ) -> None:
        def healthy(text: str, *params: Any) -> list[dict[str, Any]]:
            if "information_schema.tables" in text:
                return [{"table_name": table} for table in REQUIRED_TABLES]
            return [{"value": 1}]

        fake_connection.fetch.side_effect = healthy

        report = await DatabaseStatusService(executor).report()

        assert report.errors == []
        assert report.recommendations == ["Database schema and permissions look correct"]

    async def test_unreadable_table_listing_is_an_error(
        self, executor: QueryExecutor, fake_connection: FakeConnection
    ) -> None:
        """Test a failed information_schema read is not reported as missing tables."""

        def no_catalog_access(text: str, *params: Any) -> list[dict[str, Any]]:
            if "information_schema.tables" in text:
                raise FakePostgresError(
                    "permission denied for schema information_schema", sqlstate="42501"
                )
            return [{"value": 1}]

        fake_connection.fetch.side_effect = no_catalog_access

        report = await DatabaseStatusService(executor).report()

        assert report.db_connection is True
        assert report.table_status == {}
        assert report.schema_info == {}
        assert not any(rec.startswith("Create missing table") for rec in report.recommendations)
        assert len(report.errors) == 1
        assert report.errors[0].code == "42501"
        assert report.errors[0].type == "query"
        listing_calls = [
            call for call in fake_connection.fetch.await_args_list
            if "information_schema.tables" in call.args[0]
        ]
        assert len(listing_calls) == 1
