"""Configuration model exports.

    from auditchain.config.models import AuditLogConfig, ObservabilityConfig
"""

from auditchain.config.models.api import APIConfig
from auditchain.config.models.audit import (
    AuditLogConfig,
    PostgresConfig,
    WriterLockConfig,
)
from auditchain.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)

__all__ = [
    "APIConfig",
    "AuditLogConfig",
    "PostgresConfig",
    "WriterLockConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
]
