"""Tests for event payload variants."""

import pytest
from pydantic import ValidationError

from auditchain.audit.models import (
    EscalationEvent,
    EscalationType,
    EventKind,
    Outcome,
    QueryEvent,
    ResponseOutcomeEvent,
    Severity,
    event_kind_for,
)


class TestQueryEvent:
    """Tests for QueryEvent."""

    def test_valid(self) -> None:
        event = QueryEvent(text="what is a closure", category="javascript")

        assert event.to_payload() == {"text": "what is a closure", "category": "javascript"}
        assert event_kind_for(event) == EventKind.QUERY

    @pytest.mark.parametrize("field", ["text", "category"])
    def test_blank_fields_rejected(self, field: str) -> None:
        data = {"text": "q", "category": "c", field: "   "}

        with pytest.raises(ValidationError):
            QueryEvent(**data)

    def test_extra_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            QueryEvent(text="q", category="c", kind="escalation")

    def test_is_frozen(self) -> None:
        event = QueryEvent(text="q", category="c")

        with pytest.raises(ValidationError):
            event.text = "changed"


class TestResponseOutcomeEvent:
    """Tests for ResponseOutcomeEvent."""

    def test_success_payload(self) -> None:
        event = ResponseOutcomeEvent(
            category="python",
            outcome="success",
            response_preview="A closure is...",
            model="tutor-1",
            response_time_ms=412.5,
            query_id="q-7",
        )

        payload = event.to_payload()
        assert payload["outcome"] == "success"
        assert payload["ai_error"] is False
        assert payload["error_message"] is None
        assert event_kind_for(event) == EventKind.RESPONSE_OUTCOME

    def test_failure_is_normalised_to_error(self) -> None:
        event = ResponseOutcomeEvent(category="python", outcome="failure")

        assert event.outcome == Outcome.ERROR

    def test_unknown_outcome_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResponseOutcomeEvent(category="python", outcome="maybe")

    def test_negative_latency_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResponseOutcomeEvent(category="python", outcome="error", response_time_ms=-1)


class TestEscalationEvent:
    """Tests for EscalationEvent."""

    def test_valid(self) -> None:
        event = EscalationEvent(
            reason="learner asked for a human",
            escalation_type="human_review",
            severity="high",
            target="mentors",
        )

        assert event.escalation_type == EscalationType.HUMAN_REVIEW
        assert event.severity == Severity.HIGH
        assert event_kind_for(event) == EventKind.ESCALATION

    def test_reason_required(self) -> None:
        with pytest.raises(ValidationError):
            EscalationEvent(reason="", escalation_type="support")

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EscalationEvent(reason="r", escalation_type="carrier_pigeon")
