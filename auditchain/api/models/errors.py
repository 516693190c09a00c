"""Error envelope returned by every failing API call.

Example:
    {
        "error": {
            "code": "STORAGE_UNAVAILABLE",
            "message": "Failed to append to var/audit_log.jsonl",
            "details": null
        }
    }
"""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """One field-level validation problem."""

    field: str | None = Field(default=None, description="Dotted location of the bad field")
    message: str


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody

    @classmethod
    def build(
        cls,
        code: ErrorCode,
        message: str,
        details: list[ErrorDetail] | None = None,
    ) -> "ErrorResponse":
        return cls(error=ErrorBody(code=code, message=message, details=details))
