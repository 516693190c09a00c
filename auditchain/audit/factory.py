"""Build an AuditLog from configuration."""

import os

import redis.asyncio as redis

from auditchain.audit.engine import AuditLog
from auditchain.audit.mutex import LocalWriterMutex, RedisWriterMutex, WriterMutex
from auditchain.audit.store import AuditLogStore
from auditchain.audit.stores import (
    InMemoryAuditLogStore,
    JsonlAuditLogStore,
    PostgresAuditLogStore,
)
from auditchain.config.models.audit import AuditLogConfig, WriterLockConfig
from auditchain.db.pool import PostgresPool
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)


def create_store(config: AuditLogConfig) -> AuditLogStore:
    """Create the durable medium named by `config.backend`.

    Raises:
        ValueError: If backend type is unknown
    """
    if config.backend == "inmemory":
        logger.warning("audit_store_inmemory", msg="Audit records will not survive a restart")
        return InMemoryAuditLogStore()

    if config.backend == "jsonl":
        logger.info("audit_store_jsonl", path=config.path, fsync=config.fsync)
        return JsonlAuditLogStore(config.path, fsync=config.fsync)

    if config.backend == "postgres":
        pg = config.postgres
        pool = PostgresPool(
            dsn=pg.connection_url,
            min_size=pg.min_pool_size,
            max_size=pg.max_pool_size,
            command_timeout=pg.command_timeout,
        )
        logger.info("audit_store_postgres", table=pg.table)
        return PostgresAuditLogStore(pool, table=pg.table)

    raise ValueError(f"Unknown audit backend: {config.backend}")


def create_mutex(config: WriterLockConfig) -> WriterMutex:
    """Create the writer lock named by `config.backend`.

    Raises:
        ValueError: If backend type is unknown
    """
    if config.backend == "local":
        return LocalWriterMutex()

    if config.backend == "redis":
        redis_url = config.redis_url or os.environ.get("REDIS_URL", "redis://localhost:6379")
        client = redis.from_url(redis_url)
        logger.info(
            "writer_lock_redis",
            url=redis_url.split("@")[-1],  # Log without credentials
            key=config.key,
        )
        return RedisWriterMutex(
            client,
            key=config.key,
            lock_timeout=config.lock_timeout,
            blocking_timeout=config.blocking_timeout,
        )

    raise ValueError(f"Unknown writer lock backend: {config.backend}")


async def create_audit_log(config: AuditLogConfig) -> AuditLog:
    """Create a ready-to-use AuditLog from configuration.

    For the postgres backend the log table is created if missing.
    """
    store = create_store(config)
    if isinstance(store, PostgresAuditLogStore):
        await store.ensure_schema()

    return AuditLog(store, create_mutex(config.writer_lock), algo=config.chain_algo)
