# tests/unit/adapters/routers/test_health_and_metrics.py
from __future__ import annotations

import pytest


class _Probe:
    def __init__(self, db_ok: bool = True, redis_ok: bool = True) -> None:
        self._db_ok = db_ok
        self._redis_ok = redis_ok

    async def db(self) -> tuple[bool, str | None]:
        return self._db_ok, None if self._db_ok else "db down"

    async def redis(self) -> tuple[bool, str | None]:
        return self._redis_ok, None if self._redis_ok else "redis down"


@pytest.mark.asyncio
async def test_liveness_is_always_ok(client) -> None:
    resp = await client.get("/health/liveness")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_readiness_ok_when_all_probes_pass(app, client) -> None:
    app.state.health_probe = _Probe()

    resp = await client.get("/health/readiness")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert [c["name"] for c in body["checks"]] == ["db", "redis"]


@pytest.mark.asyncio
async def test_readiness_degraded_when_a_probe_fails(app, client) -> None:
    app.state.health_probe = _Probe(redis_ok=False)

    resp = await client.get("/health/readiness")

    assert resp.status_code == 503
    body = resp.json()
    assert body["status"] == "degraded"
    redis_check = next(c for c in body["checks"] if c["name"] == "redis")
    assert redis_check["status"] == "down"
    assert redis_check["detail"] == "redis down"


@pytest.mark.asyncio
async def test_readiness_without_probe_is_degraded(client) -> None:
    resp = await client.get("/health/readiness")

    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_metrics_exposes_prometheus_text(client) -> None:
    await client.get("/test/cache-aside", params={"id": "42"})

    resp = await client.get("/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "readyz_db_latency_seconds_bucket" in resp.text
    assert "readyz_redis_latency_seconds_bucket" in resp.text
