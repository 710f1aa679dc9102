"""System router providing health check and operational endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text

from speakers.api.deps import get_health_state, get_policies
from speakers.resilience import FaultTolerancePolicy
from speakers.schemas.system import (
    FaultToleranceStatusResponse,
    HealthCheck,
    HealthResponse,
)
from speakers.services.health_state import HealthState

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    response: Response,
    health_state: HealthState = Depends(get_health_state),
) -> HealthResponse:
    """Return application health including database connectivity.

    The ``speaker`` check reflects the flag set through
    ``POST /updateHealthStatus``. Responds 503 when any check is DOWN.
    """
    speaker_status = "DOWN" if health_state.is_app_down else "UP"

    # Check database connectivity
    db_status = "DOWN"
    try:
        session_factory = request.app.state.session_factory
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        db_status = "UP"
    except Exception:
        logger.warning("Database health check failed", exc_info=True)

    checks = [
        HealthCheck(name="speaker", status=speaker_status),
        HealthCheck(name="database", status=db_status),
    ]
    status = "UP" if all(c.status == "UP" for c in checks) else "DOWN"
    if status == "DOWN":
        response.status_code = 503

    return HealthResponse(status=status, checks=checks)


@router.get("/system/fault-tolerance", response_model=FaultToleranceStatusResponse)
async def fault_tolerance_status(
    policies: dict[str, FaultTolerancePolicy] = Depends(get_policies),
) -> FaultToleranceStatusResponse:
    """Return breaker and bulkhead state for every guarded operation."""
    return FaultToleranceStatusResponse(
        policies={name: policy.status() for name, policy in policies.items()}
    )
