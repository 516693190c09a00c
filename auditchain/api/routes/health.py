"""Health check and metrics endpoints."""

import time

from fastapi import APIRouter, Query, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from auditchain import __version__
from auditchain.api.dependencies import AuditLogDep
from auditchain.api.models.health import ComponentHealth, HealthResponse
from auditchain.audit.engine import AuditLog
from auditchain.audit.errors import StorageUnavailable
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _check_audit_log(audit_log: AuditLog, verify: bool) -> ComponentHealth:
    """Check the audit log medium.

    The shallow check reads the chain tail. With `verify`, the whole
    chain is recomputed and any integrity issue marks it unhealthy.
    """
    start = time.perf_counter()
    try:
        if verify:
            result = await audit_log.verify()
            latency_ms = (time.perf_counter() - start) * 1000
            if not result.ok:
                return ComponentHealth(
                    name="audit_log",
                    status="unhealthy",
                    latency_ms=latency_ms,
                    message="; ".join(result.messages()),
                )
            if result.pending_tail:
                return ComponentHealth(
                    name="audit_log",
                    status="degraded",
                    latency_ms=latency_ms,
                    message="log ends in an incomplete record",
                )
        else:
            await audit_log.store.read_last()
            latency_ms = (time.perf_counter() - start) * 1000

        return ComponentHealth(name="audit_log", status="healthy", latency_ms=latency_ms)
    except StorageUnavailable as e:
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            name="audit_log",
            status="unhealthy",
            latency_ms=latency_ms,
            message=e.message,
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    audit_log: AuditLogDep,
    verify: bool = Query(default=False, description="Run full chain verification"),
) -> HealthResponse:
    """Check service health status."""
    logger.debug("health_check_request", verify=verify)

    components = [await _check_audit_log(audit_log, verify)]
    response = HealthResponse.from_components(components, version=__version__)

    logger.debug("health_check_completed", status=response.status)

    return response


async def get_metrics() -> Response:
    """Get Prometheus metrics in text format for scraping.

    Mounted by register_routes at the configured metrics path.
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
