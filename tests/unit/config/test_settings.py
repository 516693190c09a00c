"""Unit tests for Settings and get_settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from auditchain.config import get_settings, reload_settings
from auditchain.config.models.audit import AuditLogConfig, PostgresConfig, WriterLockConfig
from auditchain.config.settings import Settings, set_toml_config


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        settings = Settings()

        assert settings.app_name == "auditchain"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.api.port == 8000

    def test_audit_defaults(self) -> None:
        audit = Settings().audit

        assert audit.backend == "jsonl"
        assert audit.fsync is True
        assert audit.chain_algo == "sha256"
        assert audit.writer_lock.backend == "local"
        assert audit.postgres.table == "audit_log"

    def test_observability_defaults(self) -> None:
        observability = Settings().observability

        assert observability.logging.format == "json"
        assert observability.logging.redact_pii is True
        assert observability.metrics.enabled is True

    def test_toml_values_applied(self) -> None:
        set_toml_config({"audit": {"backend": "inmemory"}, "debug": True})

        settings = Settings()

        assert settings.audit.backend == "inmemory"
        assert settings.debug is True

    def test_env_overrides_toml(self, env_override) -> None:
        set_toml_config({"audit": {"path": "from-toml.jsonl"}})

        with env_override({
            "AUDITCHAIN_AUDIT__PATH": "from-env.jsonl",
            "AUDITCHAIN_AUDIT__WRITER_LOCK__BACKEND": "redis",
        }):
            settings = Settings()

        assert settings.audit.path == "from-env.jsonl"
        assert settings.audit.writer_lock.backend == "redis"

    def test_invalid_backend_rejected(self) -> None:
        set_toml_config({"audit": {"backend": "floppy"}})

        with pytest.raises(ValidationError):
            Settings()


class TestAuditConfigModels:
    """Tests for audit configuration models."""

    @pytest.mark.parametrize("table", ["audit log", "log;drop", "1table", ""])
    def test_table_name_must_be_identifier(self, table: str) -> None:
        with pytest.raises(ValidationError):
            PostgresConfig(table=table)

    def test_lock_timeouts_positive(self) -> None:
        with pytest.raises(ValidationError):
            WriterLockConfig(blocking_timeout=0)

    def test_nested_from_dict(self) -> None:
        config = AuditLogConfig.model_validate(
            {"backend": "postgres", "postgres": {"table": "chain", "max_pool_size": 10}}
        )

        assert config.postgres.table == "chain"
        assert config.postgres.max_pool_size == 10


class TestGetSettings:
    """Tests for get_settings function."""

    def test_loads_from_config_dir(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "app_name = 'audit-test'\n[audit]\nfsync = false"})
        monkeypatch.setenv("AUDITCHAIN_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("AUDITCHAIN_ENV", "nonexistent")

        settings = get_settings()

        assert settings.app_name == "audit-test"
        assert settings.audit.fsync is False

    def test_settings_cached(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mock_toml_files({"default.toml": "app_name = 'first'"})
        monkeypatch.setenv("AUDITCHAIN_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("AUDITCHAIN_ENV", "nonexistent")

        first = get_settings()
        mock_toml_files({"default.toml": "app_name = 'second'"})

        assert get_settings() is first
        assert reload_settings().app_name == "second"
