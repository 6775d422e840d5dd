"""Health service implementation."""

import asyncio
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..models.group import SpecialGroup
from ..redis_client import get_redis_client
from ..repositories.group_repository import GroupRepository
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


async def _run_check(check: Callable[[], Awaitable[None]]) -> Dict[str, Any]:
    """Run a check and report its outcome and latency."""
    loop = asyncio.get_running_loop()
    start_time = loop.time()
    try:
        await check()
    except Exception as e:
        return {"connected": False, "status": "unhealthy", "error": str(e), "response_time_ms": None}
    return {
        "connected": True,
        "status": "healthy",
        "response_time_ms": round((loop.time() - start_time) * 1000, 2),
    }


class HealthService(IHealthService):
    """Reports on the database, Redis and the seeded special groups."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status.

        Redis only backs token revocation, so losing it degrades the service
        instead of taking it down. So do missing special groups: notes shared
        with them become owner-only.
        """
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()
        checks = {"database": db_health, "redis": redis_health}

        overall_status = "healthy"
        if not db_health["connected"]:
            overall_status = "unhealthy"
        else:
            groups_health = await self.check_special_groups()
            checks["special_groups"] = groups_health
            if not redis_health["connected"] or groups_health["missing"]:
                overall_status = "degraded"

        return HealthCheckResponse(
            status=overall_status,
            version=self.settings.app_version,
            checks=checks,
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

        async def select_one() -> None:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()

        return await _run_check(select_one)

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""

        async def ping() -> None:
            if not await get_redis_client().ping():
                raise ConnectionError("Redis is not connected")

        return await _run_check(ping)

    async def check_special_groups(self) -> Dict[str, Any]:
        names = [special.value for special in SpecialGroup]
        found = {group.name for group in await GroupRepository(self.session).get_by_names(names)}
        missing = [name for name in names if name not in found]
        return {"status": "unhealthy" if missing else "healthy", "missing": missing}
