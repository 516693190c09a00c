"""Tamper-evident audit log.

Components, leaf first:
- encoding: canonical, order-independent record encoding
- hashing: chain link hash over predecessor hash + encoding
- models: event kinds and payload variants, LogRecord, VerificationResult
- engine: AuditLog, the single-writer append engine
- verifier: ChainVerifier, full-chain recomputation
- stores: durable media (in-memory, JSON Lines file, PostgreSQL)
"""

from auditchain.audit.engine import AuditLog
from auditchain.audit.errors import (
    AuditLogError,
    CorruptTailError,
    EncodingError,
    StorageUnavailable,
    UnsupportedAlgorithmError,
)
from auditchain.audit.models import (
    EscalationEvent,
    EventKind,
    LogRecord,
    QueryEvent,
    ResponseOutcomeEvent,
    VerificationIssue,
    VerificationResult,
)
from auditchain.audit.verifier import ChainVerifier

__all__ = [
    "AuditLog",
    "AuditLogError",
    "ChainVerifier",
    "CorruptTailError",
    "EncodingError",
    "EscalationEvent",
    "EventKind",
    "LogRecord",
    "QueryEvent",
    "ResponseOutcomeEvent",
    "StorageUnavailable",
    "UnsupportedAlgorithmError",
    "VerificationIssue",
    "VerificationResult",
]
