"""Writer mutex for the append critical section.

Reading the tail hash and writing the next record is a read-modify-write
on shared state. Every append runs under one of these locks so that two
records never claim the same predecessor.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from auditchain.audit.errors import StorageUnavailable
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)


class WriterMutex(ABC):
    """Single-writer lock guarding the chain tail."""

    #: True when the lock is shared with other processes. The append
    #: engine must then re-read the tail inside the lock instead of
    #: trusting its in-memory cache.
    is_distributed: bool = False

    @abstractmethod
    def hold(self) -> AsyncIterator[None]:
        """Async context manager holding the lock for its body."""
        pass


class LocalWriterMutex(WriterMutex):
    """In-process lock for a single writer process."""

    is_distributed = False

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        async with self._lock:
            yield

    @property
    def locked(self) -> bool:
        """Whether an append currently holds the lock."""
        return self._lock.locked()


class RedisWriterMutex(WriterMutex):
    """Redis-backed lock for several processes appending to one medium.

    Lock acquisition blocks up to `blocking_timeout` seconds; failing to
    get the lock fails the append with StorageUnavailable. Appends from
    the same process are additionally serialized locally so they queue
    in order rather than all polling Redis.
    """

    is_distributed = True

    def __init__(
        self,
        redis: Redis,
        key: str = "auditchain:writer",
        lock_timeout: int = 30,
        blocking_timeout: float = 10.0,
    ) -> None:
        """Initialize the mutex.

        Args:
            redis: Redis client instance
            key: Lock key shared by all writers of one log
            lock_timeout: How long the lock is held before auto-release (seconds)
            blocking_timeout: How long to wait when trying to acquire (seconds)
        """
        self._redis = redis
        self._key = key
        self._lock_timeout = lock_timeout
        self._blocking_timeout = blocking_timeout
        self._local = asyncio.Lock()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        async with self._local:
            lock = self._redis.lock(
                self._key,
                timeout=self._lock_timeout,
                blocking_timeout=self._blocking_timeout,
            )
            try:
                acquired = await lock.acquire()
            except RedisError as e:
                logger.error("writer_lock_error", key=self._key, error=str(e))
                raise StorageUnavailable(f"Writer lock unavailable: {e}", cause=e) from e
            if not acquired:
                logger.warning(
                    "writer_lock_timeout",
                    key=self._key,
                    blocking_timeout=self._blocking_timeout,
                )
                raise StorageUnavailable(
                    f"Timed out after {self._blocking_timeout}s waiting for writer lock"
                )

            try:
                yield
            finally:
                try:
                    await lock.release()
                except LockError:
                    # Expired while held; the append itself already completed or failed
                    logger.warning("writer_lock_expired", key=self._key)

    async def is_locked(self) -> bool:
        """Check whether any writer holds the lock."""
        return await self._redis.exists(self._key) > 0
