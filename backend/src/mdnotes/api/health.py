"""Health check API endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


def get_health_service(session: AsyncSession = Depends(get_db_session)) -> HealthService:
    return HealthService(session)


@router.get("/", response_model=HealthCheckResponse)
async def health_check(response: Response, health_service: HealthService = Depends(get_health_service)):
    """Overall status; 503 when the database is unreachable."""
    health = await health_service.get_health_status()
    if health.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return health


@router.get("/database", response_model=Dict[str, Any])
async def database_health(health_service: HealthService = Depends(get_health_service)):
    return await health_service.check_database_health()


@router.get("/redis", response_model=Dict[str, Any])
async def redis_health(health_service: HealthService = Depends(get_health_service)):
    """Check Redis connectivity (token revocation lookups)."""
    return await health_service.check_redis_health()
