"""Request and response bodies for event submission and verification.

Request bodies accept both snake_case and the camelCase keys sent by the
browser client (queryId, responseTimeMs, escalationType, correlationId).
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auditchain.audit.models import (
    EscalationEvent,
    LogRecord,
    QueryEvent,
    ResponseOutcomeEvent,
    VerificationResult,
)

_REQUEST_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


class LogQueryRequest(BaseModel):
    """Body of POST /api/log-query."""

    model_config = _REQUEST_CONFIG

    query: str = Field(..., min_length=1, description="Query text")
    category: str = Field(..., min_length=1, description="Topic category")
    correlation_id: str | None = Field(default=None, description="Links related records")

    def to_event(self) -> QueryEvent:
        """Build the query payload variant."""
        return QueryEvent(text=self.query, category=self.category)


class LogResponseRequest(ResponseOutcomeEvent):
    """Body of POST /api/log-response."""

    model_config = ConfigDict(**_REQUEST_CONFIG, frozen=True)

    correlation_id: str | None = Field(default=None, description="Links related records")

    def to_event(self) -> ResponseOutcomeEvent:
        """Strip request-only fields, leaving the payload variant."""
        return ResponseOutcomeEvent.model_validate(
            self.model_dump(exclude={"correlation_id"})
        )


class LogEscalationRequest(EscalationEvent):
    """Body of POST /api/log-escalation."""

    model_config = ConfigDict(**_REQUEST_CONFIG, frozen=True)

    correlation_id: str | None = Field(default=None, description="Links related records")

    def to_event(self) -> EscalationEvent:
        """Strip request-only fields, leaving the payload variant."""
        return EscalationEvent.model_validate(
            self.model_dump(exclude={"correlation_id"})
        )


class LogEventResponse(BaseModel):
    """Successful event submission."""

    success: Literal[True] = True
    record: LogRecord


class VerifyIssueBody(BaseModel):
    """One verification issue as returned over HTTP."""

    position: int
    description: str
    message: str


class VerifyResponse(BaseModel):
    """Body of GET /api/audit/verify."""

    ok: bool
    records_checked: int
    head_hash: str | None = None
    pending_tail: bool = False
    issues: list[VerifyIssueBody] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: VerificationResult) -> "VerifyResponse":
        """Render a VerificationResult for the API."""
        return cls(
            ok=result.ok,
            records_checked=result.records_checked,
            head_hash=result.head_hash,
            pending_tail=result.pending_tail,
            issues=[
                VerifyIssueBody(
                    position=issue.position,
                    description=issue.description,
                    message=str(issue),
                )
                for issue in result.issues
            ],
        )
