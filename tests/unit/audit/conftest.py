"""Fixtures for audit log tests."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from auditchain.audit.engine import AuditLog
from auditchain.audit.stores.inmemory import InMemoryAuditLogStore


class SteppingClock:
    """Deterministic clock advancing one millisecond per call."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(milliseconds=1)
        return value


@pytest.fixture
def base_time() -> datetime:
    return datetime(2025, 3, 14, 9, 26, 53, 589793, tzinfo=UTC)


@pytest.fixture
def clock(base_time: datetime) -> SteppingClock:
    return SteppingClock(base_time)


@pytest.fixture
def store() -> InMemoryAuditLogStore:
    """Create a fresh store for each test."""
    return InMemoryAuditLogStore()


@pytest.fixture
def audit_log(store: InMemoryAuditLogStore, clock: Callable[[], datetime]) -> AuditLog:
    return AuditLog(store, clock=clock)
