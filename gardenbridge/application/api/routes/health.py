"""
Health check API routes.

This module reports the platform lifecycle state and remote connectivity.
"""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from gardenbridge.application.api.dependencies import get_platform
from gardenbridge.application.models import HealthResponse, HealthStatus
from gardenbridge.core.platform import GardenPlatform, LifecycleState

logger = structlog.get_logger(__name__)
router = APIRouter()


def evaluate_health(platform: GardenPlatform) -> HealthStatus:
    """Derive an overall status from the platform state."""
    if platform.state != LifecycleState.READY:
        return HealthStatus.UNHEALTHY
    if platform.client is None or len(platform.registry) == 0:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


@router.get("/", response_model=HealthResponse)
async def health_check(platform: GardenPlatform = Depends(get_platform)) -> HealthResponse:
    """
    Platform health endpoint.

    Returns:
        Overall status plus the platform's lifecycle summary
    """
    return HealthResponse(
        status=evaluate_health(platform),
        timestamp=datetime.now(timezone.utc),
        version=platform.config.version,
        platform=platform.get_status(),
    )


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness_check() -> Dict[str, str]:
    """Simple liveness check for container orchestration."""
    return {"status": "alive"}


@router.get("/readiness")
async def readiness_check(platform: GardenPlatform = Depends(get_platform)) -> Dict[str, str]:
    """
    Readiness check.

    Returns:
        200 OK once the platform reached READY, 503 otherwise
    """
    if platform.state != LifecycleState.READY:
        logger.warning("Platform not ready", state=platform.state.value)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not ready", "state": platform.state.value}
        )
    return {"status": "ready"}
