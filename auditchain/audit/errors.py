"""Audit log error hierarchy.

Appends surface failures as exceptions so callers can choose their own
fallback. Tampering found by verification is never raised; it is
returned as data in a VerificationResult.
"""


class AuditLogError(Exception):
    """Base exception for all audit log errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class StorageUnavailable(AuditLogError):
    """Raised when the durable medium cannot be read or written.

    Examples:
        - File system errors (permissions, disk full)
        - Database connection failures
        - Writer lock could not be acquired in time
    """


class CorruptTailError(StorageUnavailable):
    """Raised when the chain tail cannot be determined.

    The append engine fails closed instead of guessing a predecessor
    hash when the last stored record is undecodable or torn.
    """


class EncodingError(AuditLogError):
    """Raised when a record cannot be canonically encoded.

    Indicates a caller bug: the payload holds values with no canonical
    representation (objects, NaN, non-string keys, ...).
    """


class UnsupportedAlgorithmError(EncodingError):
    """Raised when a chain hash algorithm name is not registered."""
