"""Root settings model.

Values resolve from, highest priority first: constructor arguments,
AUDITCHAIN_* environment variables (nested with "__"), the loaded TOML
configuration, then model defaults.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from auditchain.config.models.api import APIConfig
from auditchain.config.models.audit import AuditLogConfig
from auditchain.config.models.observability import ObservabilityConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Merged TOML tables, installed by get_settings() before Settings() is built
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Install the merged TOML configuration read by Settings."""
    global _toml_config
    _toml_config = dict(config)


class LoadedTomlSource(PydanticBaseSettingsSource):
    """Settings source over the installed TOML configuration."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {
            name: _toml_config[name]
            for name in self.settings_cls.model_fields
            if name in _toml_config
        }


class Settings(BaseSettings):
    """auditchain configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUDITCHAIN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="auditchain", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Server log level")

    api: APIConfig = Field(default_factory=APIConfig, description="HTTP server")
    audit: AuditLogConfig = Field(
        default_factory=AuditLogConfig,
        description="Audit log medium, writer lock and chain settings",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging and metrics",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, LoadedTomlSource(settings_cls))
