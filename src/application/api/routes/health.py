"""
Health check API routes.

This module provides endpoints for liveness, readiness and an overall health
summary derived from the SDK start-up status.
"""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from src.application.api.dependency import get_config, get_initializer
from src.application.models import HealthResponse, HealthStatus, InitializationStatusResponse
from src.core.domain.entities import InitializationState, InitializationStatus
from src.core.use_cases.initialization import SequentialInitializer
from src.infrastructure.config import BootstrapConfig

logger = structlog.get_logger(__name__)
router = APIRouter()

API_VERSION = "1.0.0"


def determine_health(init_status: InitializationStatus) -> HealthStatus:
    """
    Map start-up status to a health level.

    A failed sequence is unhealthy. A completed sequence with every step
    succeeded is healthy; anything else (still running, not started, or a
    best-effort step that came back empty) is degraded.
    """
    if init_status.state == InitializationState.FAILED:
        return HealthStatus.UNHEALTHY
    if init_status.is_completed and all(init_status.steps.values()):
        return HealthStatus.HEALTHY
    return HealthStatus.DEGRADED


@router.get("/", response_model=HealthResponse)
async def health_check(
    initializer: SequentialInitializer = Depends(get_initializer),
    config: BootstrapConfig = Depends(get_config)
) -> HealthResponse:
    """Overall service health with the start-up status."""
    init_status = initializer.status
    overall = determine_health(init_status)

    if overall != HealthStatus.HEALTHY:
        logger.info("Service not fully healthy", health=overall.value, state=init_status.state.value)

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        initialization=InitializationStatusResponse.from_status(init_status),
        config=config.to_dict()
    )


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness_check() -> Dict[str, str]:
    """
    Simple liveness check for container orchestration.

    Returns:
        200 OK if the service is alive
    """
    return {"status": "alive"}


@router.get("/readiness")
async def readiness_check(
    initializer: SequentialInitializer = Depends(get_initializer)
) -> Dict[str, str]:
    """
    Readiness check for container orchestration.

    Returns:
        200 OK once the start-up sequence completed
        503 Service Unavailable otherwise
    """
    init_status = initializer.status
    if not init_status.is_completed:
        logger.warning("Service not ready", state=init_status.state.value, error=init_status.error)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not ready", "state": init_status.state.value, "error": init_status.error}
        )

    return {"status": "ready"}
