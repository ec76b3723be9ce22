"""Query execution with retry and fallback substitution.

``QueryExecutor.execute_with_retry`` is the only place queries are run. It
returns ``Ok(rows)`` or ``Err(ClassifiedError)``; the other entry points are
thin adapters over it:

* ``execute_query`` raises ``DatabaseQueryError`` on ``Err``.
* ``fetch_with_fallback`` maps ``Err`` to caller supplied fallback rows and
  labels where the rows came from.
* ``safe_execute_query`` returns only the rows and never raises.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import date
from typing import TYPE_CHECKING, Any, Literal

from attrs import field, frozen
from beartype import beartype

from .config import Settings, get_settings
from .database import PoolManager, get_pool_manager
from .db_errors import (
    CONNECTION_RESET,
    HOST_NOT_FOUND,
    ClassifiedError,
    process_db_error,
)
from .result_types import Err, Ok

if TYPE_CHECKING:
    from .result_types import Result

logger = logging.getLogger(__name__)

QueryParam = str | int | float | bool | date | None
Row = dict[str, Any]
DataSource = Literal["database", "fallback", "sample"]

_POOL_RESET_CODES = frozenset(
    {
        CONNECTION_RESET,
        HOST_NOT_FOUND,
        # SQLSTATE connection exceptions and server-side session termination
        "08000",
        "08003",
        "08006",
        "57P01",
        "57P02",
    }
)
_POOL_RESET_ERROR_NAMES = frozenset({"ConnectionDoesNotExistError"})
_POOL_RESET_PHRASES = (
    "timeout",
    "connection is closed",
    "connection was closed",
    "pool is closed",
)


class DatabaseQueryError(RuntimeError):
    """Raised by ``execute_query`` once every attempt has failed."""

    def __init__(self, classified: ClassifiedError) -> None:
        super().__init__(f"Database query failed: {classified.message}")
        self.classified = classified


@frozen
class RecoveryConfig:
    """Retry policy for query execution."""

    max_retry_attempts: int = field(default=3)
    retry_delay_seconds: float = field(default=1.0)
    connection_errors_only: bool = field(default=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecoveryConfig":
        return cls(
            max_retry_attempts=settings.db_retry_attempts,
            retry_delay_seconds=settings.db_retry_delay,
            connection_errors_only=settings.db_retry_connection_errors_only,
        )


@frozen
class DataResult:
    """Rows plus where they came from."""

    rows: list[Row] = field()
    source: DataSource = field(default="database")
    error: ClassifiedError | None = field(default=None)

    @property
    def is_live(self) -> bool:
        return self.source == "database"

    @property
    def warning(self) -> str | None:
        if self.error is None:
            return None
        return f"Using {self.source} data: {self.error.human_readable}"


@beartype
def should_reset_pool(error: ClassifiedError) -> bool:
    """Decide whether a failure means the pool itself is broken."""
    if error.code in _POOL_RESET_CODES or error.name in _POOL_RESET_ERROR_NAMES:
        return True
    message = error.message.lower()
    return any(phrase in message for phrase in _POOL_RESET_PHRASES)


class QueryExecutor:
    """Runs parameterized queries against a ``PoolManager``."""

    def __init__(
        self,
        pool_manager: PoolManager,
        recovery: RecoveryConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._pool_manager = pool_manager
        self._recovery = recovery or RecoveryConfig()
        self._sleep = sleep

    @property
    def pool_manager(self) -> PoolManager:
        return self._pool_manager

    @property
    def recovery(self) -> RecoveryConfig:
        return self._recovery

    async def _run_once(self, text: str, params: Sequence[QueryParam]) -> list[Row]:
        # Re-fetch the pool on every attempt; a previous attempt may have reset it
        async with self._pool_manager.acquire() as conn:
            records = await conn.fetch(text, *params)
        return [dict(record) for record in records]

    async def execute_with_retry(
        self,
        text: str,
        params: Sequence[QueryParam] | None = None,
    ) -> "Result[list[Row], ClassifiedError]":
        """Execute a query, retrying failed attempts after a fixed delay.

        Args:
            text: SQL with positional ``$n`` placeholders
            params: Values bound to the placeholders, in order

        Returns:
            Ok(list of row dicts) or Err(ClassifiedError) for the last failure
        """
        bound = tuple(params or ())
        attempts = self._recovery.max_retry_attempts
        last_error: ClassifiedError | None = None

        for attempt in range(1, attempts + 1):
            try:
                rows = await self._run_once(text, bound)
                self._pool_manager.mark_available(True)
                return Ok(rows)
            except Exception as e:
                last_error = process_db_error(e)

            remaining = attempts - attempt
            logger.error(
                f"Query execution failed ({remaining} retries left): "
                f"{last_error.as_log_line()}"
            )

            reset = should_reset_pool(last_error)
            if reset:
                self._pool_manager.invalidate()

            if remaining == 0:
                break
            transient = reset or last_error.is_connection_error
            if self._recovery.connection_errors_only and not transient:
                logger.warning(
                    f"Not retrying {last_error.source.value} error: {last_error.message}"
                )
                break

            await self._sleep(self._recovery.retry_delay_seconds)

        self._pool_manager.mark_available(False)
        return Err(last_error)

    @beartype
    async def execute_query(
        self,
        text: str,
        params: Sequence[QueryParam] | None = None,
    ) -> list[Row]:
        """Execute a query and return its rows.

        Raises:
            DatabaseQueryError: If every attempt failed
        """
        result = await self.execute_with_retry(text, params)
        if result.is_err():
            raise DatabaseQueryError(result.err_value)
        return result.ok_value

    async def fetch_with_fallback(
        self,
        text: str,
        params: Sequence[QueryParam] | None = None,
        fallback_data: list[Row] | None = None,
        *,
        fallback_source: DataSource = "fallback",
        fallback_on_empty: bool = False,
    ) -> DataResult:
        """Execute a query, substituting fallback rows when it fails.

        Never raises; the returned ``DataResult.source`` says whether the rows
        are live.
        """
        result = await self.execute_with_retry(text, params)

        if result.is_ok():
            rows = result.ok_value
            if rows or not fallback_on_empty or fallback_data is None:
                return DataResult(rows=rows, source="database")
            logger.info("Query returned no rows, using fallback data")
            return DataResult(rows=fallback_data, source=fallback_source)

        error = result.err_value
        logger.warning(
            f"Database query failed, using fallback data: {error.human_readable}"
        )
        return DataResult(
            rows=fallback_data if fallback_data is not None else [],
            source=fallback_source,
            error=error,
        )

    async def safe_execute_query(
        self,
        text: str,
        params: Sequence[QueryParam] | None = None,
        fallback_data: list[Row] | None = None,
        *,
        fallback_on_empty: bool = False,
    ) -> list[Row]:
        """Execute a query; on failure return ``fallback_data`` or ``[]``."""
        outcome = await self.fetch_with_fallback(
            text,
            params,
            fallback_data,
            fallback_on_empty=fallback_on_empty,
        )
        return outcome.rows


# Global executor bound to the process-wide pool manager
_executor: QueryExecutor | None = None


@beartype
def get_query_executor() -> QueryExecutor:
    """Get the process-wide query executor."""
    global _executor
    if _executor is None or _executor.pool_manager is not get_pool_manager():
        _executor = QueryExecutor(
            get_pool_manager(),
            RecoveryConfig.from_settings(get_settings()),
        )
    return _executor


@beartype
async def execute_query(
    text: str, params: Sequence[QueryParam] | None = None
) -> list[Row]:
    """Execute a query with the process-wide executor."""
    return await get_query_executor().execute_query(text, params)


async def safe_execute_query(
    text: str,
    params: Sequence[QueryParam] | None = None,
    fallback_data: list[Row] | None = None,
) -> list[Row]:
    """Execute a query with the process-wide executor, never raising."""
    return await get_query_executor().safe_execute_query(text, params, fallback_data)
