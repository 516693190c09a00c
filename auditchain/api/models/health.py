"""Health check response models."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

HealthStatus = Literal["healthy", "degraded", "unhealthy"]


class ComponentHealth(BaseModel):
    """Result of probing one dependency."""

    name: str = Field(..., description="Component probed, e.g. audit_log")
    status: HealthStatus
    latency_ms: float | None = Field(default=None, description="Probe duration")
    message: str | None = Field(default=None, description="Why the component is not healthy")


class HealthResponse(BaseModel):
    """Body of GET /health.

    The overall status is the worst component status.
    """

    status: HealthStatus
    version: str
    components: list[ComponentHealth] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_components(
        cls, components: list[ComponentHealth], version: str
    ) -> "HealthResponse":
        """Aggregate component results into one response."""
        statuses = {component.status for component in components}
        status: HealthStatus = "healthy"
        if "unhealthy" in statuses:
            status = "unhealthy"
        elif "degraded" in statuses:
            status = "degraded"
        return cls(status=status, version=version, components=components)
