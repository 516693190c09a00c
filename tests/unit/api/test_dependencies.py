"""Tests for the shared AuditLog dependency."""

import asyncio
from collections.abc import AsyncIterator

import pytest

from auditchain.api import dependencies
from auditchain.api.dependencies import get_audit_log, reset_dependencies
from auditchain.audit.engine import AuditLog
from auditchain.audit.stores.inmemory import InMemoryAuditLogStore
from auditchain.config.models.audit import AuditLogConfig
from auditchain.config.settings import Settings


@pytest.fixture
async def fresh_dependencies() -> AsyncIterator[None]:
    await reset_dependencies()
    yield
    await reset_dependencies()


@pytest.mark.asyncio
async def test_concurrent_first_requests_share_one_log(
    fresh_dependencies: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    created: list[AuditLog] = []

    async def slow_create(config: AuditLogConfig) -> AuditLog:
        # Stands in for schema setup suspending the first request
        await asyncio.sleep(0.01)
        audit_log = AuditLog(InMemoryAuditLogStore())
        created.append(audit_log)
        return audit_log

    monkeypatch.setattr(dependencies, "create_audit_log", slow_create)
    settings = Settings(audit={"backend": "inmemory"})

    first, second, third = await asyncio.gather(
        get_audit_log(settings), get_audit_log(settings), get_audit_log(settings)
    )

    assert len(created) == 1
    assert first is second is third


@pytest.mark.asyncio
async def test_reset_allows_a_new_log(
    fresh_dependencies: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def create(config: AuditLogConfig) -> AuditLog:
        return AuditLog(InMemoryAuditLogStore())

    monkeypatch.setattr(dependencies, "create_audit_log", create)
    settings = Settings(audit={"backend": "inmemory"})

    before = await get_audit_log(settings)
    await reset_dependencies()
    after = await get_audit_log(settings)

    assert before is not after
