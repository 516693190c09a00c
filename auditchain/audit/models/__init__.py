"""Audit domain models.

- EventKind and the payload variants (the event schema layer)
- LogRecord, the stored chain-linked record
- VerificationResult / VerificationIssue
"""

from auditchain.audit.models.enums import EscalationType, EventKind, Outcome, Severity
from auditchain.audit.models.events import (
    EVENT_MODELS,
    EscalationEvent,
    EventPayload,
    QueryEvent,
    ResponseOutcomeEvent,
    event_kind_for,
)
from auditchain.audit.models.record import TIMESTAMP_FORMAT, LogRecord, format_timestamp
from auditchain.audit.models.verification import VerificationIssue, VerificationResult

__all__ = [
    "EVENT_MODELS",
    "TIMESTAMP_FORMAT",
    "EscalationEvent",
    "EscalationType",
    "EventKind",
    "EventPayload",
    "LogRecord",
    "Outcome",
    "QueryEvent",
    "ResponseOutcomeEvent",
    "Severity",
    "VerificationIssue",
    "VerificationResult",
    "event_kind_for",
    "format_timestamp",
]
