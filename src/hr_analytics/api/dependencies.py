# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI dependencies for database access and services.

Endpoints receive collaborators through these functions so tests can swap
them with ``app.dependency_overrides``.
"""

from beartype import beartype

from ..core import database, query_executor
from ..core.database import PoolManager
from ..core.query_executor import QueryExecutor
from ..services.analytics_service import AnalyticsService
from ..services.database_status import DatabaseStatusService


@beartype
def get_pool_manager() -> PoolManager:
    """Provide the process-wide pool manager."""
    return database.get_pool_manager()


@beartype
def get_query_executor() -> QueryExecutor:
    """Provide the process-wide query executor."""
    return query_executor.get_query_executor()


def get_analytics_service() -> AnalyticsService:
    """Provide an analytics service bound to the shared executor."""
    return AnalyticsService(get_query_executor())


def get_database_status_service() -> DatabaseStatusService:
    """Provide a status service bound to the shared executor."""
    return DatabaseStatusService(get_query_executor())
