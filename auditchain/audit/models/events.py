"""Event payload variants.

One model per EventKind. Callers build and validate these before handing
them to the append engine, which then treats the dumped payload as an
opaque, encodable blob.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auditchain.audit.models.enums import EscalationType, EventKind, Outcome, Severity


class EventPayload(BaseModel):
    """Base class for event payload variants."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[EventKind]

    def to_payload(self) -> dict[str, Any]:
        """Dump the variant's fields in JSON mode."""
        return self.model_dump(mode="json")


class QueryEvent(EventPayload):
    """A learner question was submitted."""

    kind: ClassVar[EventKind] = EventKind.QUERY
    text: str = Field(..., min_length=1, description="Query text")
    category: str = Field(..., min_length=1, description="Topic category")

    @field_validator("text", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ResponseOutcomeEvent(EventPayload):
    """The assistant answered (or failed to answer) a query."""

    kind: ClassVar[EventKind] = EventKind.RESPONSE_OUTCOME
    category: str = Field(..., min_length=1, description="Topic category")
    outcome: Outcome = Field(..., description="success or error")
    response_preview: str | None = Field(default=None, description="Leading part of the answer")
    error_message: str | None = Field(default=None, description="Failure detail")
    model: str | None = Field(default=None, description="Model identifier")
    ai_error: bool = Field(default=False, description="Failure originated in the model provider")
    response_time_ms: float | None = Field(default=None, ge=0, description="Answer latency")
    query_id: str | None = Field(default=None, description="Identifier of the answered query")

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("outcome", mode="before")
    @classmethod
    def _accept_failure_alias(cls, value: Any) -> Any:
        # Older clients report "failure"
        if value == "failure":
            return Outcome.ERROR
        return value


class EscalationEvent(EventPayload):
    """A conversation was escalated beyond the assistant."""

    kind: ClassVar[EventKind] = EventKind.ESCALATION
    reason: str = Field(..., min_length=1, description="Why the escalation happened")
    escalation_type: EscalationType = Field(..., description="Routing target class")
    target: str | None = Field(default=None, description="Who receives the escalation")
    severity: Severity | None = Field(default=None, description="Escalation severity")
    query: str | None = Field(default=None, description="Query that triggered it")
    category: str | None = Field(default=None, description="Topic category")


EVENT_MODELS: dict[EventKind, type[EventPayload]] = {
    EventKind.QUERY: QueryEvent,
    EventKind.RESPONSE_OUTCOME: ResponseOutcomeEvent,
    EventKind.ESCALATION: EscalationEvent,
}


def event_kind_for(event: EventPayload) -> EventKind:
    """Return the kind a payload variant is recorded under."""
    for kind, model in EVENT_MODELS.items():
        if type(event) is model:
            return kind
    raise TypeError(f"Unknown event payload type: {type(event).__name__}")
