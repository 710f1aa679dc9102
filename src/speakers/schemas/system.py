"""System endpoint response schemas."""

from typing import Any, Literal

from pydantic import BaseModel

HealthStatus = Literal["UP", "DOWN"]


class HealthCheck(BaseModel):
    """Outcome of one named health check."""

    name: str
    status: HealthStatus


class HealthResponse(BaseModel):
    """Aggregate health document; ``DOWN`` if any check is down."""

    status: HealthStatus
    checks: list[HealthCheck]


class FaultToleranceStatusResponse(BaseModel):
    """Snapshot of every fault-tolerance policy keyed by policy name."""

    policies: dict[str, dict[str, Any]]
