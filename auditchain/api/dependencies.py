"""Dependency injection for API routes.

The audit log is created once from settings and reused. Dependencies
can be overridden for testing via `app.dependency_overrides`.
"""

import asyncio
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from auditchain.audit.engine import AuditLog
from auditchain.audit.factory import create_audit_log
from auditchain.config.loader import load_config
from auditchain.config.settings import Settings, set_toml_config
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

_audit_log: AuditLog | None = None
_audit_log_lock: asyncio.Lock | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables.
    Cached to avoid reloading on every request.
    """
    try:
        toml_config = load_config()
        set_toml_config(toml_config)
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


async def get_audit_log(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuditLog:
    """Get the process-wide AuditLog, creating it on first use.

    Creation awaits the store (schema setup for PostgreSQL), so concurrent
    first requests wait on one lock and share a single instance and with
    it a single writer mutex.
    """
    global _audit_log, _audit_log_lock
    if _audit_log is not None:
        return _audit_log

    if _audit_log_lock is None:
        _audit_log_lock = asyncio.Lock()
    async with _audit_log_lock:
        if _audit_log is None:
            _audit_log = await create_audit_log(settings.audit)
            logger.info("audit_log_created", backend=settings.audit.backend)
    return _audit_log


async def reset_dependencies() -> None:
    """Close and forget shared instances (for tests and shutdown)."""
    global _audit_log, _audit_log_lock
    if _audit_log is not None:
        await _audit_log.close()
        _audit_log = None
    _audit_log_lock = None
    get_settings.cache_clear()


SettingsDep = Annotated[Settings, Depends(get_settings)]
AuditLogDep = Annotated[AuditLog, Depends(get_audit_log)]
