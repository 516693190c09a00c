"""Durable media for audit logs."""

from auditchain.audit.store import AuditLogStore
from auditchain.audit.stores.inmemory import InMemoryAuditLogStore
from auditchain.audit.stores.jsonl import JsonlAuditLogStore
from auditchain.audit.stores.postgres import PostgresAuditLogStore

__all__ = [
    "AuditLogStore",
    "InMemoryAuditLogStore",
    "JsonlAuditLogStore",
    "PostgresAuditLogStore",
]
