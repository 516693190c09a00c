"""API exception hierarchy for consistent error handling.

All API exceptions inherit from AuditAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from auditchain.api.models.errors import ErrorCode


class AuditAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(AuditAPIError):
    """Raised when a submitted event cannot be recorded as given."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class StorageUnavailableError(AuditAPIError):
    """Raised when the audit medium cannot be read or written."""

    status_code = 503
    error_code = ErrorCode.STORAGE_UNAVAILABLE
