# tests/unit/infrastructure/health/test_db_redis_probe.py
from __future__ import annotations

import asyncio

import fakeredis.aioredis
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from cachebench_api.infrastructure.health.probe import DbRedisProbe


class _SlowRedis:
    async def ping(self):
        await asyncio.sleep(5)
        return True


@pytest.mark.asyncio
async def test_probe_reports_ok_for_live_backends(tmp_path) -> None:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'probe.db'}")
    probe = DbRedisProbe(async_sessionmaker(bind=engine), fakeredis.aioredis.FakeRedis())

    assert await probe.db() == (True, None)
    assert await probe.redis() == (True, None)
    await engine.dispose()


@pytest.mark.asyncio
async def test_probe_reports_timeout_instead_of_hanging(tmp_path) -> None:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'probe.db'}")
    probe = DbRedisProbe(async_sessionmaker(bind=engine), _SlowRedis(), timeout_s=0.05)

    ok, detail = await probe.redis()

    assert ok is False
    assert detail
    await engine.dispose()
