"""Connection pool management with asyncpg.

A single ``PoolManager`` owns the process-wide pool. The pool is created on
first use and dropped whenever a connection-level failure is detected, so
the next caller rebuilds it from scratch instead of reusing a broken handle.
Replacement is a plain reference swap; no locking is involved.
"""

import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import asyncpg
from attrs import field, frozen
from beartype import beartype

from .config import Settings, get_settings
from .db_errors import ClassifiedError, process_db_error

logger = logging.getLogger(__name__)

LIVENESS_QUERY = "SELECT NOW() AS current_time"

PoolFactory = Callable[..., Awaitable[Any]]


@frozen
class PoolConfig:
    """Immutable pool configuration derived from settings."""

    host: str = field()
    port: int = field()
    database: str = field()
    user: str = field()
    password: str = field(repr=False)
    ssl_mode: str = field(default="require")
    min_size: int = field(default=1)
    max_size: int = field(default=5)
    idle_timeout: float = field(default=15.0)
    connect_timeout: float = field(default=8.0)
    statement_timeout: float = field(default=15.0)
    keepalive: bool = field(default=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PoolConfig":
        return cls(
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_password,
            ssl_mode=settings.db_ssl_mode,
            min_size=settings.db_pool_min,
            max_size=settings.db_pool_max,
            idle_timeout=settings.db_idle_timeout,
            connect_timeout=settings.db_connect_timeout,
            statement_timeout=settings.db_statement_timeout,
            keepalive=settings.db_keepalive,
        )

    @property
    def ssl(self) -> bool | str:
        """Value for asyncpg's ``ssl`` argument."""
        if self.ssl_mode == "disable":
            return False
        return self.ssl_mode

    @property
    def server_settings(self) -> dict[str, str]:
        settings = {
            "application_name": "hr_analytics",
            "statement_timeout": str(int(self.statement_timeout * 1000)),
        }
        if self.keepalive:
            settings["tcp_keepalives_idle"] = str(int(self.idle_timeout))
        return settings

    def describe(self) -> str:
        """Connection target for logs; never includes the password."""
        return (
            f"host={self.host} port={self.port} database={self.database} "
            f"user={self.user} ssl_mode={self.ssl_mode}"
        )


@frozen
class PoolMetrics:
    """Immutable pool metrics snapshot."""

    initialized: bool = field()
    size: int = field()
    free_size: int = field()
    min_size: int = field()
    max_size: int = field()
    pools_created: int = field()


class TrackedConnection(asyncpg.Connection):
    """Connection that remembers whether the client asked it to close.

    Lets the termination observer tell a pool recycling an idle connection
    apart from the server or network dropping it.
    """

    async def close(self, *, timeout: float | None = None) -> None:
        self._closed_by_client = True
        await super().close(timeout=timeout)

    def terminate(self) -> None:
        self._closed_by_client = True
        super().terminate()


class PoolManager:
    """Owner of the shared connection pool."""

    def __init__(
        self,
        config: PoolConfig,
        *,
        pool_factory: PoolFactory | None = None,
    ) -> None:
        self._config = config
        self._pool_factory = pool_factory or asyncpg.create_pool
        self._pool: asyncpg.Pool | None = None
        self._generation = 0
        self._pools_created = 0
        self._available = True
        self._last_error: ClassifiedError | None = None

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        """Check if a pool handle is currently held."""
        return self._pool is not None

    @property
    def pools_created(self) -> int:
        """Number of pools created over the manager's lifetime."""
        return self._pools_created

    @property
    def database_available(self) -> bool:
        """Outcome of the most recent availability check or query."""
        return self._available

    @property
    def last_error(self) -> ClassifiedError | None:
        """Classified failure of the most recent connection test, if it failed."""
        return self._last_error

    def mark_available(self, available: bool) -> None:
        self._available = available

    async def _build_pool(self) -> Any:
        self._generation += 1
        generation = self._generation
        cfg = self._config

        async def _init_connection(conn: asyncpg.Connection) -> None:
            conn.add_termination_listener(
                lambda terminated: self._on_connection_terminated(terminated, generation)
            )

        logger.info(
            f"Creating database connection pool ({cfg.describe()}, "
            f"min={cfg.min_size}, max={cfg.max_size})"
        )
        pool = await self._pool_factory(
            host=cfg.host,
            port=cfg.port,
            database=cfg.database,
            user=cfg.user,
            password=cfg.password,
            ssl=cfg.ssl,
            min_size=cfg.min_size,
            max_size=cfg.max_size,
            max_inactive_connection_lifetime=cfg.idle_timeout,
            timeout=cfg.connect_timeout,
            command_timeout=cfg.statement_timeout,
            server_settings=cfg.server_settings,
            connection_class=TrackedConnection,
            init=_init_connection,
        )
        self._pools_created += 1
        return pool

    def _on_connection_terminated(self, conn: Any, generation: int) -> None:
        if getattr(conn, "_closed_by_client", False):
            return
        if generation != self._generation or self._pool is None:
            return
        logger.error(
            "Pooled database connection terminated unexpectedly; "
            "pool will be rebuilt on next use"
        )
        self._pool = None

    async def get_pool(self) -> Any:
        """Return the shared pool, creating it when absent."""
        if self._pool is None:
            # Concurrent callers may both build a pool; the last one stored wins.
            self._pool = await self._build_pool()
        return self._pool

    def invalidate(self) -> None:
        """Tear down the current pool and drop the reference."""
        pool, self._pool = self._pool, None
        if pool is None:
            return

        logger.warning("Resetting database connection pool")
        try:
            pool.terminate()
        except Exception as e:
            logger.warning(f"Error terminating database pool: {str(e)}")

    @contextlib.asynccontextmanager
    async def acquire(self) -> AsyncIterator[Any]:
        """Acquire a connection from the current pool.

        The connection goes back to the pool on every exit path.
        """
        pool = await self.get_pool()
        async with pool.acquire(timeout=self._config.connect_timeout) as conn:
            yield conn

    @beartype
    async def test_connection(self) -> bool:
        """Check that one connection can be acquired and answers a query.

        Any failure resets the pool so the next attempt starts clean.
        """
        try:
            async with self.acquire() as conn:
                result = await conn.fetchrow(LIVENESS_QUERY)
            logger.debug(f"Database connected successfully: {dict(result or {})}")
            self._last_error = None
            return True
        except Exception as e:
            self._last_error = process_db_error(e)
            logger.error(f"Database connection failed: {type(e).__name__}: {str(e)}")
            logger.error(f"Connection target: {self._config.describe()}")
            self.invalidate()
            return False

    @beartype
    async def check_database_availability(self) -> bool:
        """Run the connection test and record the outcome."""
        available = await self.test_connection()
        self._available = available
        return available

    @beartype
    async def close(self) -> None:
        """Close the pool gracefully (application shutdown)."""
        pool, self._pool = self._pool, None
        if pool is not None:
            logger.info("Closing database connection pool")
            await pool.close()

    def pool_stats(self) -> PoolMetrics:
        """Get a snapshot of pool statistics."""
        pool = self._pool
        if pool is None:
            return PoolMetrics(
                initialized=False,
                size=0,
                free_size=0,
                min_size=self._config.min_size,
                max_size=self._config.max_size,
                pools_created=self._pools_created,
            )
        return PoolMetrics(
            initialized=True,
            size=pool.get_size(),
            free_size=pool.get_idle_size(),
            min_size=pool.get_min_size(),
            max_size=pool.get_max_size(),
            pools_created=self._pools_created,
        )


# Global pool manager instance
_pool_manager: PoolManager | None = None


@beartype
def get_pool_manager() -> PoolManager:
    """Get the process-wide pool manager."""
    global _pool_manager
    if _pool_manager is None:
        _pool_manager = PoolManager(PoolConfig.from_settings(get_settings()))
    return _pool_manager


@beartype
def set_pool_manager(manager: PoolManager | None) -> None:
    """Replace the process-wide pool manager (for testing)."""
    global _pool_manager
    _pool_manager = manager


async def get_pool() -> Any:
    """Return the shared pool of the process-wide manager."""
    return await get_pool_manager().get_pool()


@beartype
async def test_connection() -> bool:
    """Availability check against the process-wide pool."""
    return await get_pool_manager().test_connection()


@beartype
async def close_db_pool() -> None:
    """Close the process-wide connection pool."""
    await get_pool_manager().close()
