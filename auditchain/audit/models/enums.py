"""Enums for the audit domain."""

from enum import Enum


class EventKind(str, Enum):
    """Closed set of record kinds stored in the chain."""

    QUERY = "query"
    RESPONSE_OUTCOME = "response_outcome"
    ESCALATION = "escalation"


class Outcome(str, Enum):
    """Result of answering a query."""

    SUCCESS = "success"
    ERROR = "error"


class EscalationType(str, Enum):
    """Where an escalation is routed."""

    HUMAN_REVIEW = "human_review"
    SUPPORT = "support"
    MODERATION = "moderation"
    OTHER = "other"


class Severity(str, Enum):
    """Escalation severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
