"""API route registration."""

from fastapi import APIRouter, FastAPI

from auditchain.config.models.observability import MetricsConfig
from auditchain.observability.logging import get_logger

logger = get_logger(__name__)


def create_api_router() -> APIRouter:
    """Create the /api router with event and audit routes."""
    router = APIRouter(prefix="/api")

    from auditchain.api.routes.audit import router as audit_router
    from auditchain.api.routes.events import router as events_router

    router.include_router(events_router, tags=["Events"])
    router.include_router(audit_router, tags=["Audit"])

    logger.debug("api_router_created", routes=["events", "audit"])

    return router


def register_routes(app: FastAPI, metrics: MetricsConfig | None = None) -> None:
    """Register all routes with the FastAPI application."""
    metrics = metrics or MetricsConfig()

    app.include_router(create_api_router())

    # Health and metrics at root level
    from auditchain.api.routes.health import get_metrics
    from auditchain.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])
    if metrics.enabled:
        app.add_api_route(metrics.path, get_metrics, methods=["GET"], tags=["Health"])

    logger.info("routes_registered", metrics_path=metrics.path if metrics.enabled else None)
