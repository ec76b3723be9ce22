"""Test configuration and fixtures.

Fake pools stand in for asyncpg: a ``FakePool`` hands out one scripted
``FakeConnection`` and records how often it was acquired, released and
terminated. ``pool_factory`` builds a fresh ``FakePool`` on every call, so
the number of factory calls is the number of pools the manager created.
"""

import contextlib
from collections.abc import AsyncIterator, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from hr_analytics.core import database, query_executor
from hr_analytics.core.config import Settings, clear_settings_cache
from hr_analytics.core.database import PoolConfig, PoolManager
from hr_analytics.core.query_executor import QueryExecutor, RecoveryConfig


class FakePostgresError(Exception):
    """Exception shaped like ``asyncpg.PostgresError``."""

    def __init__(
        self,
        message: str,
        *,
        sqlstate: str,
        table_name: str | None = None,
        column_name: str | None = None,
        detail: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate
        self.table_name = table_name
        self.column_name = column_name
        self.detail = detail
        self.hint = hint
        self.severity = "ERROR"


class FakeConnection:
    """Connection whose ``fetch``/``fetchrow`` are scriptable AsyncMocks."""

    def __init__(self) -> None:
        self.fetch = AsyncMock(return_value=[])
        self.fetchrow = AsyncMock(return_value={"current_time": "2025-01-01T00:00:00"})
        self.add_termination_listener = MagicMock()


class FakePool:
    """Pool handing out a single shared connection."""

    def __init__(self, connection: FakeConnection, **options: Any) -> None:
        self.connection = connection
        self.options = options
        self.acquired = 0
        self.released = 0
        self.terminate = MagicMock()
        self.close = AsyncMock()

    @contextlib.asynccontextmanager
    async def acquire(self, *, timeout: float | None = None) -> AsyncIterator[FakeConnection]:
        self.acquired += 1
        try:
            yield self.connection
        finally:
            self.released += 1

    def get_size(self) -> int:
        return 1

    def get_idle_size(self) -> int:
        return 1 - (self.acquired - self.released)

    def get_min_size(self) -> int:
        return self.options.get("min_size", 1)

    def get_max_size(self) -> int:
        return self.options.get("max_size", 5)


@pytest.fixture
def pool_config() -> PoolConfig:
    """Pool configuration pointing at a test host."""
    return PoolConfig(
        host="db.test",
        port=5432,
        database="hr",
        user="hr_user",
        password="s3cret",
    )


@pytest.fixture
def fake_connection() -> FakeConnection:
    """Scripted connection shared by every pool the factory builds."""
    return FakeConnection()


@pytest.fixture
def pool_factory(fake_connection: FakeConnection) -> AsyncMock:
    """Stand-in for ``asyncpg.create_pool``."""
    return AsyncMock(side_effect=lambda **options: FakePool(fake_connection, **options))


@pytest.fixture
def pool_manager(pool_config: PoolConfig, pool_factory: AsyncMock) -> PoolManager:
    """Pool manager wired to the fake pool factory."""
    return PoolManager(pool_config, pool_factory=pool_factory)


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Replacement for ``asyncio.sleep`` between retries."""
    return AsyncMock()


@pytest.fixture
def executor(pool_manager: PoolManager, no_sleep: AsyncMock) -> QueryExecutor:
    """Query executor with the default retry policy and no real delays."""
    return QueryExecutor(pool_manager, RecoveryConfig(), sleep=no_sleep)


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset process-wide singletons between tests."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    clear_settings_cache()
    database.set_pool_manager(None)
    query_executor._executor = None
    yield
    clear_settings_cache()
    database.set_pool_manager(None)
    query_executor._executor = None
