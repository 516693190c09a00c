"""Unit tests for the application factory."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from auditchain.api.app import create_app
from auditchain.api.dependencies import get_audit_log
from auditchain.audit.engine import AuditLog
from auditchain.audit.stores.inmemory import InMemoryAuditLogStore


class TestCreateApp:
    """Tests for create_app."""

    def test_registers_routes(self) -> None:
        app = create_app()
        paths = {route.path for route in app.routes}

        assert {
            "/api/log-query",
            "/api/log-response",
            "/api/log-escalation",
            "/api/audit/verify",
            "/health",
            "/metrics",
        } <= paths

    def test_unexpected_error_returns_500(self, app: FastAPI) -> None:
        class ExplodingStore(InMemoryAuditLogStore):
            async def read_last(self) -> bytes | None:
                raise RuntimeError("bug")

        exploding = AuditLog(ExplodingStore())

        async def _exploding_log() -> AuditLog:
            return exploding

        app.dependency_overrides[get_audit_log] = _exploding_log
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/api/log-query", json={"query": "q", "category": "c"})

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/log-query",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestMetricsRegistration:
    """Tests for the configurable metrics endpoint."""

    def test_custom_metrics_path(self, env_override) -> None:
        with env_override({"AUDITCHAIN_OBSERVABILITY__METRICS__PATH": "/internal/metrics"}):
            app = create_app()

        paths = {route.path for route in app.routes}
        assert "/internal/metrics" in paths
        assert "/metrics" not in paths

    def test_metrics_disabled(self, env_override) -> None:
        with env_override({"AUDITCHAIN_OBSERVABILITY__METRICS__ENABLED": "false"}):
            app = create_app()

        assert "/metrics" not in {route.path for route in app.routes}
