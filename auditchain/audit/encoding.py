"""Canonical encoding of audit records.

The chain hash is only meaningful if the same logical record always
encodes to the same bytes. Records are normalised to plain JSON values
and dumped with sorted keys at every nesting level, compact separators
and UTF-8 text, so the encoding is independent of the order in which
fields or payload keys were built.
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from auditchain.audit.errors import EncodingError
from auditchain.audit.models import EventKind, LogRecord, format_timestamp

LOGICAL_FIELDS = ("timestamp", "kind", "payload", "correlation_id")
CHAIN_FIELDS = ("chain_prev_hash", "chain_hash", "chain_algo")


def _normalize(value: Any, path: str) -> Any:
    """Reduce a value to JSON primitives, rejecting anything ambiguous."""
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"Non-finite number at {path}")
        return value
    if isinstance(value, Enum):
        return _normalize(value.value, path)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, BaseModel):
        return _normalize(value.model_dump(mode="json"), path)
    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(f"Non-string key {key!r} at {path}")
            result[key] = _normalize(item, f"{path}.{key}")
        return result
    if isinstance(value, (list, tuple)):
        return [_normalize(item, f"{path}[{i}]") for i, item in enumerate(value)]
    raise EncodingError(f"Unencodable value of type {type(value).__name__} at {path}")


def _dumps(value: Any) -> bytes:
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates survive json.dumps but have no UTF-8 form
        raise EncodingError(f"Text is not valid Unicode: {e.reason}", cause=e) from e


def _encode(fields: dict[str, Any]) -> bytes:
    try:
        return _dumps(_normalize(fields, "record"))
    except RecursionError:
        raise EncodingError("Record nests too deeply to encode") from None


def normalize_payload(payload: Any) -> dict[str, Any]:
    """Turn a caller payload into the plain mapping stored on a record."""
    if payload is None:
        raise EncodingError("Payload is required")
    try:
        normalized = _normalize(payload, "payload")
    except RecursionError:
        raise EncodingError("Payload nests too deeply to encode") from None
    if not isinstance(normalized, dict):
        raise EncodingError(
            f"Payload must be a mapping, got {type(payload).__name__}"
        )
    if not normalized:
        raise EncodingError("Payload must not be empty")
    return normalized


def canonical_encode(
    timestamp: datetime | str,
    kind: EventKind | str,
    payload: Any,
    correlation_id: str | None,
) -> bytes:
    """Encode a record's logical fields, excluding chain metadata.

    Args:
        timestamp: Write time, or its already-rendered stored form
        kind: Event kind
        payload: Kind-specific fields
        correlation_id: Optional caller correlation id

    Returns:
        Canonical UTF-8 JSON bytes

    Raises:
        EncodingError: If any value has no canonical representation
    """
    fields = {
        "timestamp": timestamp,
        "kind": kind,
        "payload": payload,
        "correlation_id": correlation_id,
    }
    return _encode(fields)


def encode_line(record: LogRecord) -> bytes:
    """Encode a full record, chain fields included, as one stored line."""
    return _encode(record.model_dump(mode="json")) + b"\n"


def decode_fields(line: bytes) -> dict[str, Any]:
    """Parse one stored line into its raw field mapping.

    Raises:
        ValueError: If the line is not a JSON object holding every field
    """
    try:
        data = json.loads(line.decode("utf-8"))
    except RecursionError:
        raise ValueError("record nests too deeply to decode") from None
    if not isinstance(data, dict):
        raise ValueError("record is not a JSON object")
    missing = [name for name in LOGICAL_FIELDS + CHAIN_FIELDS if name not in data]
    if missing:
        raise ValueError(f"record is missing fields: {', '.join(missing)}")
    return data


def decode_line(line: bytes) -> LogRecord:
    """Parse one stored line into a LogRecord.

    Raises:
        ValueError: If the line is not a well-formed record
    """
    data = decode_fields(line)
    try:
        return LogRecord.model_validate(data)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    except RecursionError:
        raise ValueError("record nests too deeply to decode") from None
