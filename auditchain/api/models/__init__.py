"""API request and response models."""

from auditchain.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from auditchain.api.models.events import (
    LogEscalationRequest,
    LogEventResponse,
    LogQueryRequest,
    LogResponseRequest,
    VerifyIssueBody,
    VerifyResponse,
)
from auditchain.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    "ComponentHealth",
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "LogEscalationRequest",
    "LogEventResponse",
    "LogQueryRequest",
    "LogResponseRequest",
    "VerifyIssueBody",
    "VerifyResponse",
]
