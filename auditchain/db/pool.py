"""asyncpg connection pool for the PostgreSQL audit medium."""

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from auditchain.audit.errors import StorageUnavailable
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

# Driver and network failures that mean the database cannot be reached
POOL_ERRORS = (OSError, asyncpg.PostgresError, asyncpg.InterfaceError)


def dsn_from_env() -> str:
    """Build a DSN from AUDITCHAIN_DATABASE_URL, DATABASE_URL or POSTGRES_* vars."""
    url = os.environ.get("AUDITCHAIN_DATABASE_URL") or os.environ.get("DATABASE_URL")
    if url:
        return url

    env = os.environ.get
    return (
        f"postgresql://{env('POSTGRES_USER', 'auditchain')}:"
        f"{env('POSTGRES_PASSWORD', 'auditchain')}@"
        f"{env('POSTGRES_HOST', 'localhost')}:{env('POSTGRES_PORT', '5432')}/"
        f"{env('POSTGRES_DB', 'auditchain')}"
    )


class PostgresPool:
    """Lazily created asyncpg pool.

    Usage:
        pool = PostgresPool("postgresql://...")
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        await pool.close()

    Connection and query failures surface as StorageUnavailable.
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30.0,
    ) -> None:
        self._dsn = dsn or dsn_from_env()
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Whether the pool has been created."""
        return self._pool is not None

    async def connect(self) -> None:
        """Create the pool if it does not exist yet.

        Concurrent first callers share one create_pool call.
        """
        if self._pool is not None:
            return

        async with self._connect_lock:
            if self._pool is not None:
                return
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                )
            except POOL_ERRORS as e:
                logger.error("postgres_pool_connection_failed", error=str(e))
                raise StorageUnavailable(
                    f"Failed to connect to PostgreSQL: {e}", cause=e
                ) from e

        logger.info("postgres_pool_connected", min_size=self._min_size, max_size=self._max_size)

    async def close(self) -> None:
        """Close all connections."""
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting on first use."""
        await self.connect()
        try:
            async with self._pool.acquire() as connection:
                yield connection
        except POOL_ERRORS as e:
            logger.error("postgres_connection_error", error=str(e))
            raise StorageUnavailable(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """Run `SELECT 1`; False if the pool is missing or the query fails."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except POOL_ERRORS as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
