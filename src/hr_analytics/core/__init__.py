# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Core infrastructure: configuration, connection pool, query execution."""

from .config import get_settings
from .database import PoolConfig, PoolManager, get_pool_manager
from .db_errors import ClassifiedError, ErrorSource, process_db_error
from .query_executor import (
    DatabaseQueryError,
    DataResult,
    QueryExecutor,
    RecoveryConfig,
    get_query_executor,
)

__all__ = [
    "get_settings",
    "PoolConfig",
    "PoolManager",
    "get_pool_manager",
    "ClassifiedError",
    "ErrorSource",
    "process_db_error",
    "DatabaseQueryError",
    "DataResult",
    "QueryExecutor",
    "RecoveryConfig",
    "get_query_executor",
]
