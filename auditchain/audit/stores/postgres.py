"""PostgreSQL implementation of AuditLogStore.

Uses asyncpg for async database access. Storage order is the BIGSERIAL
`seq` column; rows are only ever inserted, never updated or deleted.
"""

from collections.abc import AsyncIterator

from auditchain.audit.store import AuditLogStore
from auditchain.db.pool import PostgresPool
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

READ_BATCH_SIZE = 500


class PostgresAuditLogStore(AuditLogStore):
    """PostgreSQL implementation of AuditLogStore.

    Each record is one row holding the encoded line as text, so rows are
    always complete and there is never a partial tail.
    """

    def __init__(self, pool: PostgresPool, table: str = "audit_log") -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            table: Table name (validated by configuration)
        """
        self._pool = pool
        self._table = table

    async def ensure_schema(self) -> None:
        """Create the log table if it does not exist."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    seq BIGSERIAL PRIMARY KEY,
                    line TEXT NOT NULL,
                    written_at TIMESTAMPTZ NOT NULL DEFAULT now()
                )
                """
            )
        logger.info("audit_log_schema_ready", table=self._table)

    async def append(self, line: bytes) -> None:
        """Insert one record."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                f"INSERT INTO {self._table} (line) VALUES ($1)",
                line.rstrip(b"\n").decode("utf-8"),
            )
        logger.debug("audit_log_row_inserted", table=self._table)

    async def iter_lines(self) -> AsyncIterator[bytes]:
        """Yield records in seq order, fetched in keyset-paginated batches."""
        last_seq = 0
        while True:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT seq, line FROM {self._table} "
                    "WHERE seq > $1 ORDER BY seq LIMIT $2",
                    last_seq,
                    READ_BATCH_SIZE,
                )
            if not rows:
                return
            for row in rows:
                yield row["line"].encode("utf-8")
            last_seq = rows[-1]["seq"]

    async def read_last(self) -> bytes | None:
        """Return the record with the highest seq."""
        async with self._pool.acquire() as conn:
            line = await conn.fetchval(
                f"SELECT line FROM {self._table} ORDER BY seq DESC LIMIT 1"
            )
        return line.encode("utf-8") if line is not None else None

    async def has_partial_tail(self) -> bool:
        """Rows are inserted atomically."""
        return False

    async def close(self) -> None:
        """Close the underlying pool."""
        await self._pool.close()
