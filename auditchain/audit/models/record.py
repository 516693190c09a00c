"""LogRecord model: one finalized, chain-linked audit record."""

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from auditchain.audit.models.enums import EventKind

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(value: datetime) -> str:
    """Render an instant in the fixed-width UTC form that gets hashed.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.strftime(TIMESTAMP_FORMAT)


def freeze(value: Any) -> Any:
    """Read-only copy of a JSON value: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of freeze, back to plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


class LogRecord(BaseModel):
    """Immutable audit record.

    Created and finalized in one step by the append engine, written once
    and never modified. The three chain_* fields bind it to its
    predecessor; everything else is the record's logical content. The
    payload is frozen all the way down, so a returned record cannot be
    edited into disagreeing with its chain_hash.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="Write time, assigned by the append engine")
    kind: EventKind = Field(..., description="Event variant")
    payload: Mapping[str, Any] = Field(..., description="Kind-specific fields, read-only")
    correlation_id: str | None = Field(
        default=None, description="Caller-supplied link between related records"
    )
    chain_prev_hash: str | None = Field(
        default=None, description="chain_hash of the preceding record, None for genesis"
    )
    chain_hash: str = Field(..., description="Link hash of this record")
    chain_algo: str = Field(..., description="Hash algorithm used for chain_hash")

    @field_validator("payload")
    @classmethod
    def _freeze_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @field_serializer("payload")
    def _serialize_payload(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw(value)

    @property
    def is_genesis(self) -> bool:
        """True for the first record of a chain."""
        return self.chain_prev_hash is None
