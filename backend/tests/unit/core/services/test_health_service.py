from types import SimpleNamespace

import pytest
from sqlalchemy.sql.elements import TextClause

from src.mdnotes.core.services.health_service import HealthService


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def scalar(self):
        return self._rows[0] if self._rows else None

    def scalars(self):
        return iter(self._rows)


class FakeSession:
    def __init__(self, ok=True, group_names=("everyone", "loggedIn")):
        self.ok = ok
        self.groups = [SimpleNamespace(name=name) for name in group_names]
        self.executed = []

    async def execute(self, stmt):
        self.executed.append(stmt)
        if not self.ok:
            raise RuntimeError("db down")
        if isinstance(stmt, TextClause):
            return FakeResult([1])
        return FakeResult(self.groups)


class DummyRedisClient:
    def __init__(self, ok=True):
        self.ok = ok
        self.pings = 0

    async def ping(self):
        self.pings += 1
        if not self.ok:
            raise RuntimeError("redis down")
        return True


@pytest.fixture
def use_redis(monkeypatch):
    import src.mdnotes.core.services.health_service as hs

    def _use(client):
        monkeypatch.setattr(hs, "get_redis_client", lambda: client, raising=True)
        return client

    return _use


async def test_get_health_status_all_ok(use_redis):
    redis_client = use_redis(DummyRedisClient(ok=True))

    resp = await HealthService(FakeSession(ok=True)).get_health_status()

    assert resp.status == "healthy"
    assert resp.checks["database"]["connected"] is True
    assert resp.checks["redis"]["connected"] is True
    assert resp.checks["special_groups"]["missing"] == []
    assert redis_client.pings == 1


async def test_get_health_status_db_down(use_redis):
    use_redis(DummyRedisClient(ok=True))

    resp = await HealthService(FakeSession(ok=False)).get_health_status()

    assert resp.status == "unhealthy"
    assert resp.checks["database"]["error"] == "db down"
    assert "special_groups" not in resp.checks


async def test_redis_down_only_degrades(use_redis):
    use_redis(DummyRedisClient(ok=False))

    resp = await HealthService(FakeSession(ok=True)).get_health_status()

    assert resp.status == "degraded"
    assert resp.checks["redis"]["connected"] is False
    assert resp.checks["redis"]["response_time_ms"] is None


async def test_check_redis_health_when_not_connected():
    # the shared client is never connected in tests
    result = await HealthService(FakeSession()).check_redis_health()

    assert result["connected"] is False
    assert result["status"] == "unhealthy"


async def test_missing_special_groups_degrade(use_redis):
    use_redis(DummyRedisClient(ok=True))

    resp = await HealthService(FakeSession(group_names=("everyone",))).get_health_status()

    assert resp.status == "degraded"
    assert resp.checks["special_groups"]["missing"] == ["loggedIn"]
