"""Integration tests for PostgresAuditLogStore.

Runs the append engine and verifier against a real PostgreSQL table.
"""

import pytest
import pytest_asyncio

from auditchain.audit.engine import AuditLog
from auditchain.audit.models import EventKind, QueryEvent
from auditchain.audit.stores import postgres as postgres_module
from auditchain.audit.stores.postgres import PostgresAuditLogStore


@pytest_asyncio.fixture
async def store(postgres_pool, table_name):
    """Create PostgresAuditLogStore on a fresh table, dropped afterwards."""
    store = PostgresAuditLogStore(postgres_pool, table=table_name)
    await store.ensure_schema()
    yield store
    async with postgres_pool.acquire() as conn:
        await conn.execute(f"DROP TABLE IF EXISTS {table_name}")


@pytest.mark.integration
@pytest.mark.postgres
class TestPostgresAuditLogStore:
    """Store operations against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_empty_table(self, store: PostgresAuditLogStore) -> None:
        assert await store.read_last() is None
        assert [line async for line in store.iter_lines()] == []
        assert await store.has_partial_tail() is False

    @pytest.mark.asyncio
    async def test_append_and_read_back(self, store: PostgresAuditLogStore) -> None:
        await store.append(b'{"n":1}\n')
        await store.append('{"text":"café"}\n'.encode("utf-8"))

        lines = [line async for line in store.iter_lines()]

        assert lines == [b'{"n":1}', '{"text":"café"}'.encode("utf-8")]
        assert await store.read_last() == '{"text":"café"}'.encode("utf-8")

    @pytest.mark.asyncio
    async def test_iteration_pages_in_order(
        self, store: PostgresAuditLogStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(postgres_module, "READ_BATCH_SIZE", 4)
        for i in range(11):
            await store.append(f'{{"n":{i}}}\n'.encode())

        lines = [line async for line in store.iter_lines()]

        assert lines == [f'{{"n":{i}}}'.encode() for i in range(11)]

    @pytest.mark.asyncio
    async def test_ensure_schema_is_idempotent(self, store: PostgresAuditLogStore) -> None:
        await store.append(b'{"n":1}\n')
        await store.ensure_schema()

        assert await store.read_last() == b'{"n":1}'


@pytest.mark.integration
@pytest.mark.postgres
class TestPostgresChain:
    """Append engine and verifier on a PostgreSQL medium."""

    @pytest.mark.asyncio
    async def test_chain_verifies(self, store: PostgresAuditLogStore) -> None:
        audit_log = AuditLog(store)
        for i in range(5):
            await audit_log.append_event(QueryEvent(text=f"q{i}", category="sql"))

        result = await audit_log.verify()

        assert result.ok
        assert result.records_checked == 5
        assert result.head_hash == audit_log.head_hash

    @pytest.mark.asyncio
    async def test_resumes_after_restart(self, store: PostgresAuditLogStore) -> None:
        first = await AuditLog(store).append(EventKind.QUERY, {"text": "a"})
        second = await AuditLog(store).append(EventKind.QUERY, {"text": "b"})

        assert second.chain_prev_hash == first.chain_hash

    @pytest.mark.asyncio
    async def test_updated_row_detected(
        self, store: PostgresAuditLogStore, postgres_pool, table_name
    ) -> None:
        audit_log = AuditLog(store)
        await audit_log.append(EventKind.QUERY, {"text": "original", "category": "sql"})
        await audit_log.append(EventKind.QUERY, {"text": "next", "category": "sql"})

        async with postgres_pool.acquire() as conn:
            await conn.execute(
                f"UPDATE {table_name} SET line = replace(line, 'original', 'forged') "
                f"WHERE seq = (SELECT min(seq) FROM {table_name})"
            )

        result = await audit_log.verify()

        assert result.messages() == ["record 1: hash mismatch", "record 2: prevHash mismatch"]
