"""Event submission endpoints.

Request bodies are validated here; the audit log then records the
already-validated payload. A failed append is reported to the client
rather than swallowed.
"""

from fastapi import APIRouter

from auditchain.api.dependencies import AuditLogDep
from auditchain.api.exceptions import InvalidRequestError, StorageUnavailableError
from auditchain.api.models.events import (
    LogEscalationRequest,
    LogEventResponse,
    LogQueryRequest,
    LogResponseRequest,
)
from auditchain.audit.engine import AuditLog
from auditchain.audit.errors import EncodingError, StorageUnavailable
from auditchain.audit.models import EventPayload
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _record(
    audit_log: AuditLog,
    event: EventPayload,
    correlation_id: str | None,
) -> LogEventResponse:
    try:
        record = await audit_log.append_event(event, correlation_id=correlation_id)
    except EncodingError as e:
        raise InvalidRequestError(e.message) from e
    except StorageUnavailable as e:
        raise StorageUnavailableError(e.message) from e

    logger.info(
        "event_logged",
        kind=record.kind.value,
        correlation_id=record.correlation_id,
        chain_hash=record.chain_hash,
    )
    return LogEventResponse(record=record)


@router.post("/log-query", response_model=LogEventResponse)
async def log_query(body: LogQueryRequest, audit_log: AuditLogDep) -> LogEventResponse:
    """Record that a query was submitted."""
    return await _record(audit_log, body.to_event(), body.correlation_id)


@router.post("/log-response", response_model=LogEventResponse)
async def log_response(body: LogResponseRequest, audit_log: AuditLogDep) -> LogEventResponse:
    """Record the outcome of answering a query."""
    return await _record(audit_log, body.to_event(), body.correlation_id)


@router.post("/log-escalation", response_model=LogEventResponse)
async def log_escalation(
    body: LogEscalationRequest, audit_log: AuditLogDep
) -> LogEventResponse:
    """Record an escalation."""
    return await _record(audit_log, body.to_event(), body.correlation_id)
