"""AuditLogStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class AuditLogStore(ABC):
    """Abstract interface for the durable medium behind an audit log.

    A store holds an ordered sequence of self-delimited encoded records.
    It knows nothing about hashing; it only guarantees that a record is
    either fully written or reported as a trailing partial record, and
    that records come back in the order they were appended.

    Implementations raise StorageUnavailable for any medium failure.
    """

    @abstractmethod
    async def append(self, line: bytes) -> None:
        """Durably write one complete newline-terminated record at the tail."""
        pass

    @abstractmethod
    def iter_lines(self) -> AsyncIterator[bytes]:
        """Yield complete records in storage order.

        A trailing record that is not yet complete is skipped.
        """
        pass

    @abstractmethod
    async def read_last(self) -> bytes | None:
        """Return the last complete record, or None for an empty log."""
        pass

    @abstractmethod
    async def has_partial_tail(self) -> bool:
        """Check whether the medium ends in an incomplete record."""
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        return None
