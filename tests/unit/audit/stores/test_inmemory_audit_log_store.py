"""Tests for InMemoryAuditLogStore."""

import pytest

from auditchain.audit.stores.inmemory import InMemoryAuditLogStore


@pytest.fixture
def store() -> InMemoryAuditLogStore:
    """Create a fresh store for each test."""
    return InMemoryAuditLogStore()


async def _collect(store: InMemoryAuditLogStore) -> list[bytes]:
    return [line async for line in store.iter_lines()]


class TestAppend:
    """Tests for append."""

    @pytest.mark.asyncio
    async def test_strips_trailing_newline(self, store: InMemoryAuditLogStore) -> None:
        await store.append(b'{"a":1}\n')

        assert await _collect(store) == [b'{"a":1}']
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_preserves_order(self, store: InMemoryAuditLogStore) -> None:
        for i in range(5):
            await store.append(f'{{"n":{i}}}\n'.encode())

        assert await _collect(store) == [f'{{"n":{i}}}'.encode() for i in range(5)]


class TestReadLast:
    """Tests for read_last."""

    @pytest.mark.asyncio
    async def test_empty(self, store: InMemoryAuditLogStore) -> None:
        assert await store.read_last() is None

    @pytest.mark.asyncio
    async def test_returns_latest(self, store: InMemoryAuditLogStore) -> None:
        await store.append(b"first\n")
        await store.append(b"second\n")

        assert await store.read_last() == b"second"


class TestIteration:
    """Tests for iter_lines."""

    @pytest.mark.asyncio
    async def test_snapshot_ignores_concurrent_appends(
        self, store: InMemoryAuditLogStore
    ) -> None:
        await store.append(b"one\n")
        seen = []

        async for line in store.iter_lines():
            seen.append(line)
            await store.append(b"later\n")

        assert seen == [b"one"]
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_never_has_partial_tail(self, store: InMemoryAuditLogStore) -> None:
        await store.append(b"one\n")

        assert await store.has_partial_tail() is False
