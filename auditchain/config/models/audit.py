"""Audit log storage and chain configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

AuditBackendType = Literal["inmemory", "jsonl", "postgres"]
WriterLockBackendType = Literal["local", "redis"]


class WriterLockConfig(BaseModel):
    """Mutual exclusion around the append critical section.

    "local" serializes appends within one process. "redis" shares the
    lock between processes writing to the same medium.
    """

    backend: WriterLockBackendType = Field(
        default="local",
        description="Lock backend",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis URL (falls back to REDIS_URL env var)",
    )
    key: str = Field(
        default="auditchain:writer",
        description="Redis key used for the writer lock",
    )
    lock_timeout: int = Field(
        default=30,
        gt=0,
        description="Seconds before a held lock auto-expires",
    )
    blocking_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for the lock before failing the append",
    )


class PostgresConfig(BaseModel):
    """PostgreSQL medium configuration."""

    connection_url: str | None = Field(
        default=None,
        description="Connection URL (falls back to DATABASE_URL env var)",
    )
    table: str = Field(
        default="audit_log",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Table holding the chain",
    )
    min_pool_size: int = Field(default=1, gt=0, description="Minimum connections")
    max_pool_size: int = Field(default=5, gt=0, description="Maximum connections")
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class AuditLogConfig(BaseModel):
    """Configuration for the audit log."""

    backend: AuditBackendType = Field(
        default="jsonl",
        description="Durable medium backend",
    )
    path: str = Field(
        default="var/audit_log.jsonl",
        description="File path for the jsonl backend",
    )
    fsync: bool = Field(
        default=True,
        description="fsync the file after every append",
    )
    chain_algo: str = Field(
        default="sha256",
        description="Hash algorithm for new records",
    )
    writer_lock: WriterLockConfig = Field(
        default_factory=WriterLockConfig,
        description="Writer lock configuration",
    )
    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="PostgreSQL backend configuration",
    )
