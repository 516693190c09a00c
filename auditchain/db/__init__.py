"""Database connection management."""

from auditchain.db.pool import PostgresPool

__all__ = ["PostgresPool"]
