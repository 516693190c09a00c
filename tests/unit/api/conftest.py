"""Fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from auditchain.api.app import create_app
from auditchain.api.dependencies import get_audit_log
from auditchain.audit.engine import AuditLog
from auditchain.audit.stores.inmemory import InMemoryAuditLogStore


@pytest.fixture
def store() -> InMemoryAuditLogStore:
    """In-memory medium shared by the app and the test."""
    return InMemoryAuditLogStore()


@pytest.fixture
def audit_log(store: InMemoryAuditLogStore) -> AuditLog:
    return AuditLog(store)


@pytest.fixture
def app(audit_log: AuditLog) -> Generator[FastAPI, None, None]:
    """Create test FastAPI app backed by the in-memory audit log."""
    app = create_app()

    async def _audit_log() -> AuditLog:
        return audit_log

    app.dependency_overrides[get_audit_log] = _audit_log
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app, raise_server_exceptions=False)
