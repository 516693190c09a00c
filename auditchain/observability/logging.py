"""Structured logging for auditchain.

structlog renders JSON in production and colored console output in
development. Audit payloads carry learner queries and model output, so a
redaction processor strips those keys (and credentials, emails, phone
numbers) before anything reaches the log stream.
"""

import re
import sys
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[REDACTED]"

SENSITIVE_KEYS: frozenset[str] = frozenset({
    # credentials
    "password",
    "secret",
    "token",
    "access_token",
    "refresh_token",
    "api_key",
    "private_key",
    "authorization",
    "credential",
    "credentials",
    # contact details
    "email",
    "phone",
    # learner and model content
    "query",
    "text",
    "response_preview",
    "error_message",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"\+?[\d\s\-\(\)]{10,}")

# Hex digests are long digit runs; never treat them as phone numbers
DIGEST_KEY_SUFFIX = "_hash"

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class PIIRedactor:
    """structlog processor removing personal data from an event.

    Values under a sensitive key are replaced outright. Other strings,
    at any nesting depth, have email addresses and phone numbers masked.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict))

    def _scrub_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        scrubbed: dict[str, Any] = {}
        for key, value in data.items():
            name = key.lower()
            if name in SENSITIVE_KEYS:
                scrubbed[key] = REDACTED
            elif name.endswith(DIGEST_KEY_SUFFIX) and not isinstance(value, Mapping):
                scrubbed[key] = value
            else:
                scrubbed[key] = self._scrub(value)
        return scrubbed

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            return PHONE_PATTERN.sub("[PHONE]", EMAIL_PATTERN.sub("[EMAIL]", value))
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list):
            return [self._scrub(item) for item in value]
        return value


def _build_processors(format: str, redact_pii: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    # Before the timestamp: an ISO date matches PHONE_PATTERN
    if redact_pii:
        processors.append(PIIRedactor())
    processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        format: "json" for production, "console" for development
        redact_pii: Install the PIIRedactor processor
    """
    structlog.configure(
        processors=_build_processors(format, redact_pii),
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger for a module (pass `__name__`)."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
