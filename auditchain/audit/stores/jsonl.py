"""JSON Lines file implementation of AuditLogStore.

One record per line. Each append is a single write to a file opened in
append mode, followed by flush and (optionally) fsync. A final line
without its newline is a write still in progress, or one torn by a
crash; readers skip it instead of reporting it as corrupt.
"""

import asyncio
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from auditchain.audit.errors import StorageUnavailable
from auditchain.audit.store import AuditLogStore
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

READ_BATCH_SIZE = 256
TAIL_CHUNK_SIZE = 8192


class JsonlAuditLogStore(AuditLogStore):
    """Flat-file audit log medium.

    File I/O runs in worker threads so the event loop is never blocked
    on disk. A missing file is an empty log; the file and its parent
    directories are created by the first append.
    """

    def __init__(self, path: str | Path, *, fsync: bool = True) -> None:
        """Initialize the store.

        Args:
            path: Location of the .jsonl file
            fsync: Force each record to stable storage before returning
        """
        self._path = Path(path)
        self._fsync = fsync

    @property
    def path(self) -> Path:
        """Location of the log file."""
        return self._path

    async def append(self, line: bytes) -> None:
        """Append one record and make it durable."""
        try:
            await asyncio.to_thread(self._append_sync, line)
        except OSError as e:
            logger.error("jsonl_append_failed", path=str(self._path), error=str(e))
            raise StorageUnavailable(f"Failed to append to {self._path}: {e}", cause=e) from e

    def _append_sync(self, line: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("ab") as f:
            f.write(line)
            f.flush()
            if self._fsync:
                os.fsync(f.fileno())

    async def iter_lines(self) -> AsyncIterator[bytes]:
        """Yield complete records in file order."""
        try:
            handle = await asyncio.to_thread(self._open_for_read)
        except OSError as e:
            logger.error("jsonl_read_failed", path=str(self._path), error=str(e))
            raise StorageUnavailable(f"Failed to read {self._path}: {e}", cause=e) from e
        if handle is None:
            return

        try:
            at_end = False
            while not at_end:
                try:
                    batch, at_end = await asyncio.to_thread(_read_batch, handle)
                except OSError as e:
                    logger.error("jsonl_read_failed", path=str(self._path), error=str(e))
                    raise StorageUnavailable(
                        f"Failed to read {self._path}: {e}", cause=e
                    ) from e
                for line in batch:
                    yield line
        finally:
            handle.close()

    def _open_for_read(self) -> BinaryIO | None:
        try:
            return self._path.open("rb")
        except FileNotFoundError:
            return None

    async def read_last(self) -> bytes | None:
        """Return the last complete record by scanning back from the end."""
        try:
            return await asyncio.to_thread(self._read_last_sync)
        except OSError as e:
            logger.error("jsonl_read_failed", path=str(self._path), error=str(e))
            raise StorageUnavailable(f"Failed to read {self._path}: {e}", cause=e) from e

    def _read_last_sync(self) -> bytes | None:
        handle = self._open_for_read()
        if handle is None:
            return None

        with handle:
            handle.seek(0, os.SEEK_END)
            pos = handle.tell()
            data = b""
            while pos > 0:
                step = min(TAIL_CHUNK_SIZE, pos)
                pos -= step
                handle.seek(pos)
                data = handle.read(step) + data

                last_newline = data.rfind(b"\n")
                if last_newline == -1:
                    continue
                prev_newline = data.rfind(b"\n", 0, last_newline)
                if prev_newline != -1 or pos == 0:
                    return data[prev_newline + 1:last_newline]
        return None

    async def has_partial_tail(self) -> bool:
        """Check whether the file ends in the middle of a record."""
        try:
            return await asyncio.to_thread(self._has_partial_tail_sync)
        except OSError as e:
            logger.error("jsonl_read_failed", path=str(self._path), error=str(e))
            raise StorageUnavailable(f"Failed to read {self._path}: {e}", cause=e) from e

    def _has_partial_tail_sync(self) -> bool:
        handle = self._open_for_read()
        if handle is None:
            return False

        with handle:
            handle.seek(0, os.SEEK_END)
            if handle.tell() == 0:
                return False
            handle.seek(-1, os.SEEK_END)
            return handle.read(1) != b"\n"


def _read_batch(handle: BinaryIO) -> tuple[list[bytes], bool]:
    """Read up to READ_BATCH_SIZE complete lines, stripped of their newline.

    The flag is True once the scan reached the end of the complete
    records. A trailing line without its newline is left unread (the
    handle is rewound over it), so a record finished by a concurrent
    writer is never yielded as a fragment by a later batch.
    """
    batch: list[bytes] = []
    for _ in range(READ_BATCH_SIZE):
        line = handle.readline()
        if not line.endswith(b"\n"):
            if line:
                handle.seek(-len(line), os.SEEK_CUR)
            return batch, True
        batch.append(line[:-1])
    return batch, False
