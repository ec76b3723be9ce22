# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Database connection, schema and permission diagnostics."""

import logging
from typing import Any

from attrs import asdict, evolve
from beartype import beartype

from ..core.query_executor import DatabaseQueryError, QueryExecutor
from ..schemas.status import DatabaseStatusReport, ErrorInfo, TablePermission

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "intern_details",
    "internship_info",
    "departments",
    "apartments",
    "rooms",
    "occupants",
)

CONNECTION_QUERY = "SELECT 1 AS connection_test"
SETTINGS_QUERY = """
    SELECT
        current_database() AS database,
        current_user AS user,
        version() AS server_version
"""
TABLES_QUERY = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = 'public'
"""
COLUMNS_QUERY = """
    SELECT column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = 'public' AND table_name = $1
    ORDER BY ordinal_position
"""

_CONNECTION_RECOMMENDATIONS = (
    "Check that the database server is running and reachable from this host",
    "Verify DB_HOST, DB_PORT, DB_NAME, DB_USER and DB_PASSWORD",
    "Confirm DB_SSL_MODE matches the server's TLS configuration",
)


class DatabaseStatusService:
    """Builds a ``DatabaseStatusReport`` for the configured database."""

    def __init__(self, executor: QueryExecutor) -> None:
        if not executor or not hasattr(executor, "execute_with_retry"):
            raise ValueError("Query executor required")
        self._executor = executor
        # Schema checks fail fast on query errors; only connection errors retry.
        self._schema_executor = QueryExecutor(
            executor.pool_manager,
            evolve(executor.recovery, connection_errors_only=True),
        )

    @beartype
    async def report(self) -> DatabaseStatusReport:
        """Check connection, settings, tables, columns and read permissions."""
        pool_stats = asdict(self._executor.pool_manager.pool_stats())

        connection = await self._executor.fetch_with_fallback(CONNECTION_QUERY)
        if not connection.is_live or not connection.rows:
            errors = [ErrorInfo.from_classified(connection.error)] if connection.error else []
            logger.warning("Database status: no connection")
            return DatabaseStatusReport(
                db_connection=False,
                errors=errors,
                recommendations=list(_CONNECTION_RECOMMENDATIONS),
                pool=pool_stats,
            )

        settings_rows = await self._schema_executor.safe_execute_query(SETTINGS_QUERY)
        current_settings = settings_rows[0] if settings_rows else {}

        schema_info: dict[str, list[dict[str, Any]]] = {}
        permissions: dict[str, TablePermission] = {}
        errors: list[ErrorInfo] = []
        recommendations: list[str] = []

        tables = await self._schema_executor.execute_with_retry(TABLES_QUERY)
        if tables.is_err():
            # Unknown table presence is not reported as missing tables.
            error = tables.err_value
            logger.warning(f"Database status: table listing failed: {error.human_readable}")
            errors.append(ErrorInfo.from_classified(error))
            recommendations.append(
                error.suggested_fix
                or "Grant SELECT on information_schema.tables to the database user"
            )
            table_status: dict[str, bool] = {}
        else:
            existing = {row.get("table_name") for row in tables.ok_value}
            table_status = {table: table in existing for table in REQUIRED_TABLES}

        for table, present in table_status.items():
            if not present:
                recommendations.append(f"Create missing table: {table}")
                continue

            schema_info[table] = await self._schema_executor.safe_execute_query(
                COLUMNS_QUERY, [table]
            )

            try:
                await self._schema_executor.execute_query(f'SELECT 1 FROM "{table}" LIMIT 1')
                permissions[table] = TablePermission(read=True)
            except DatabaseQueryError as e:
                classified = e.classified
                permissions[table] = TablePermission(
                    read=False, error=classified.human_readable
                )
                errors.append(ErrorInfo.from_classified(classified))
                recommendations.append(
                    classified.suggested_fix or f"Grant SELECT on {table} to the database user"
                )

        if not recommendations:
            recommendations.append("Database schema and permissions look correct")

        return DatabaseStatusReport(
            db_connection=True,
            current_settings=current_settings,
            table_status=table_status,
            schema_info=schema_info,
            permissions=permissions,
            errors=errors,
            recommendations=recommendations,
            pool=asdict(self._executor.pool_manager.pool_stats()),
        )
