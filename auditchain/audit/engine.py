"""Append engine: the single writer of an audit log chain.

Every append runs inside the writer mutex: read the tail hash, stamp the
time, encode, hash, write, and only then release. The tail hash is
cached in memory after the first append and refreshed from the medium
whenever the cache cannot be trusted (first use, after a failed write,
or on every append when the lock is shared between processes).
"""

import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from auditchain.audit.encoding import (
    canonical_encode,
    decode_line,
    encode_line,
    normalize_payload,
)
from auditchain.audit.errors import (
    AuditLogError,
    CorruptTailError,
    EncodingError,
    UnsupportedAlgorithmError,
)
from auditchain.audit.hashing import DEFAULT_CHAIN_ALGO, compute_chain_hash, is_supported
from auditchain.audit.models import (
    EventKind,
    EventPayload,
    LogRecord,
    VerificationResult,
    event_kind_for,
)
from auditchain.audit.mutex import LocalWriterMutex, WriterMutex
from auditchain.audit.store import AuditLogStore
from auditchain.audit.verifier import ChainVerifier
from auditchain.observability.logging import get_logger
from auditchain.observability.metrics import APPEND_LATENCY, APPENDS

logger = get_logger(__name__)


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditLog:
    """Tamper-evident, append-only audit log.

    Usage:
        log = AuditLog(JsonlAuditLogStore("var/audit.jsonl"))
        record = await log.append(EventKind.QUERY, {"text": "...", "category": "js"})
        result = await log.verify()

    Appends are serialized through the writer mutex, so concurrent
    callers always produce one linear chain. Failures are raised to the
    caller (StorageUnavailable, EncodingError); nothing is retried here.
    """

    def __init__(
        self,
        store: AuditLogStore,
        mutex: WriterMutex | None = None,
        *,
        algo: str = DEFAULT_CHAIN_ALGO,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the append engine.

        Args:
            store: Durable medium holding the chain
            mutex: Writer lock (defaults to an in-process lock)
            algo: Hash algorithm for new records
            clock: Source of write timestamps (defaults to UTC wall clock)
        """
        if not is_supported(algo):
            raise UnsupportedAlgorithmError(f"Unsupported chain algorithm: {algo}")

        self._store = store
        self._mutex = mutex or LocalWriterMutex()
        self._algo = algo
        self._clock = clock or utc_now

        self._tail_loaded = False
        self._tail_hash: str | None = None
        self._tail_timestamp: datetime | None = None

    @property
    def store(self) -> AuditLogStore:
        """The durable medium."""
        return self._store

    @property
    def head_hash(self) -> str | None:
        """chain_hash of the last record written or loaded by this engine."""
        return self._tail_hash

    async def append(
        self,
        kind: EventKind | str,
        payload: EventPayload | Mapping[str, Any],
        correlation_id: str | None = None,
    ) -> LogRecord:
        """Append one event to the chain.

        Args:
            kind: Event kind
            payload: A payload variant matching `kind`, or an already
                validated mapping of kind-specific fields
            correlation_id: Optional caller identifier linking related records

        Returns:
            The durably written record, now the chain tail

        Raises:
            EncodingError: If the record cannot be canonically encoded
            StorageUnavailable: If the medium cannot be read or written
        """
        event_kind = self._coerce_kind(kind)
        started = time.perf_counter()
        status = "error"

        try:
            body = self._coerce_payload(event_kind, payload)
            if correlation_id is not None and not isinstance(correlation_id, str):
                raise EncodingError("correlation_id must be a string")

            async with self._mutex.hold():
                record = await self._append_locked(event_kind, body, correlation_id)
            status = "success"
        except AuditLogError as e:
            logger.error(
                "audit_append_failed",
                kind=event_kind.value,
                error=e.message,
                error_type=type(e).__name__,
            )
            raise
        finally:
            APPENDS.labels(kind=event_kind.value, status=status).inc()
            APPEND_LATENCY.labels(kind=event_kind.value).observe(time.perf_counter() - started)

        logger.debug(
            "audit_record_appended",
            kind=record.kind.value,
            correlation_id=record.correlation_id,
            chain_prev_hash=record.chain_prev_hash,
            chain_hash=record.chain_hash,
        )
        return record

    async def append_event(
        self,
        event: EventPayload,
        correlation_id: str | None = None,
    ) -> LogRecord:
        """Append a payload variant, deriving its kind from its type."""
        return await self.append(event_kind_for(event), event, correlation_id)

    async def verify(self) -> VerificationResult:
        """Verify the full chain held by this log's store."""
        return await ChainVerifier(self._store).verify()

    async def count(self) -> int:
        """Number of complete records in the medium."""
        total = 0
        async for _ in self._store.iter_lines():
            total += 1
        return total

    async def close(self) -> None:
        """Release the underlying store."""
        await self._store.close()

    async def _append_locked(
        self,
        kind: EventKind,
        body: dict[str, Any],
        correlation_id: str | None,
    ) -> LogRecord:
        prev_hash = await self._load_tail()

        timestamp = self._clock()
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        if self._tail_timestamp is not None and timestamp < self._tail_timestamp:
            # Wall clock stepped back; keep the sequence non-decreasing
            timestamp = self._tail_timestamp

        encoded = canonical_encode(timestamp, kind, body, correlation_id)
        record = LogRecord(
            timestamp=timestamp,
            kind=kind,
            payload=body,
            correlation_id=correlation_id,
            chain_prev_hash=prev_hash,
            chain_hash=compute_chain_hash(prev_hash, encoded, self._algo),
            chain_algo=self._algo,
        )
        line = encode_line(record)

        try:
            await self._store.append(line)
        except Exception:
            # The write may be torn; make the next append re-read the medium
            self._tail_loaded = False
            raise

        self._tail_hash = record.chain_hash
        self._tail_timestamp = record.timestamp
        self._tail_loaded = True
        return record

    async def _load_tail(self) -> str | None:
        """Return the hash new records must link to, reading the medium if needed."""
        if self._tail_loaded and not self._mutex.is_distributed:
            return self._tail_hash

        if await self._store.has_partial_tail():
            raise CorruptTailError(
                "Log ends in an incomplete record; refusing to append after it"
            )

        last = await self._store.read_last()
        if last is None:
            tail_hash, tail_timestamp = None, None
        else:
            try:
                record = decode_line(last)
            except ValueError as e:
                raise CorruptTailError(
                    f"Last record cannot be decoded; refusing to guess its hash: {e}",
                    cause=e,
                ) from e
            tail_hash, tail_timestamp = record.chain_hash, record.timestamp

        if not self._tail_loaded:
            logger.info("audit_tail_loaded", chain_hash=tail_hash)

        self._tail_hash = tail_hash
        self._tail_timestamp = tail_timestamp
        self._tail_loaded = True
        return tail_hash

    @staticmethod
    def _coerce_kind(kind: EventKind | str) -> EventKind:
        try:
            return EventKind(kind)
        except ValueError:
            raise EncodingError(f"Unknown event kind: {kind!r}") from None

    @staticmethod
    def _coerce_payload(
        kind: EventKind,
        payload: EventPayload | Mapping[str, Any],
    ) -> dict[str, Any]:
        if isinstance(payload, EventPayload):
            payload_kind = event_kind_for(payload)
            if payload_kind is not kind:
                raise EncodingError(
                    f"Payload of kind {payload_kind.value!r} appended as {kind.value!r}"
                )
            return normalize_payload(payload.to_payload())
        return normalize_payload(payload)
