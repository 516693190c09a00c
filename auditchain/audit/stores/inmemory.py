"""In-memory implementation of AuditLogStore."""

from collections.abc import AsyncIterator

from auditchain.audit.store import AuditLogStore


class InMemoryAuditLogStore(AuditLogStore):
    """In-memory implementation of AuditLogStore for testing and development.

    Keeps every record as a separate bytes line, so records are always
    complete. Not durable; not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._lines: list[bytes] = []

    async def append(self, line: bytes) -> None:
        """Append a record."""
        self._lines.append(line.rstrip(b"\n"))

    async def iter_lines(self) -> AsyncIterator[bytes]:
        """Yield records from a snapshot taken when iteration starts."""
        for line in list(self._lines):
            yield line

    async def read_last(self) -> bytes | None:
        """Return the most recent record."""
        return self._lines[-1] if self._lines else None

    async def has_partial_tail(self) -> bool:
        """Records are stored whole, so there is never a partial tail."""
        return False

    def __len__(self) -> int:
        return len(self._lines)
