# tests/unit/infrastructure/caching/test_record_cache_redis.py
from __future__ import annotations

import fakeredis.aioredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cachebench_api.application.use_cases.records.cache_keys import (
    RECORD_CACHE_TTL_S,
    record_cache_key,
)
from cachebench_api.domain.exceptions.records import CacheUnavailable
from cachebench_api.infrastructure.caching.record_cache import RedisRecordCache


class _BrokenRedis:
    """Redis stand-in whose commands always fail at the socket level."""

    async def ping(self):
        raise RedisConnectionError("connection refused")

    async def aclose(self) -> None:
        return None

    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value, *, ex=None):
        raise TimeoutError("timed out")


@pytest.mark.asyncio
async def test_set_applies_key_and_ttl() -> None:
    fake = fakeredis.aioredis.FakeRedis()
    cache = RedisRecordCache(fake)
    key = record_cache_key("42")

    await cache.set(key, b'{"id":"42","name":"Widget","price":9.99}', ttl=RECORD_CACHE_TTL_S)

    assert key == "record:42"
    assert await fake.get(key) == b'{"id":"42","name":"Widget","price":9.99}'
    ttl = await fake.ttl(key)
    assert 0 < ttl <= RECORD_CACHE_TTL_S


@pytest.mark.asyncio
async def test_get_returns_bytes_or_none() -> None:
    fake = fakeredis.aioredis.FakeRedis()
    cache = RedisRecordCache(fake)

    assert await cache.get("record:missing") is None

    await fake.set("record:1", b"payload")
    assert await cache.get("record:1") == b"payload"


@pytest.mark.asyncio
async def test_get_encodes_decoded_client_responses() -> None:
    fake = fakeredis.aioredis.FakeRedis(decode_responses=True)
    cache = RedisRecordCache(fake)
    await fake.set("record:1", "café")

    assert await cache.get("record:1") == "café".encode()


@pytest.mark.asyncio
async def test_set_overwrites_and_refreshes_ttl() -> None:
    fake = fakeredis.aioredis.FakeRedis()
    cache = RedisRecordCache(fake)
    await fake.set("record:1", b"old", ex=5)

    await cache.set("record:1", b"new", ttl=RECORD_CACHE_TTL_S)

    assert await fake.get("record:1") == b"new"
    assert await fake.ttl("record:1") > 5


@pytest.mark.asyncio
async def test_non_positive_ttl_is_rejected() -> None:
    cache = RedisRecordCache(fakeredis.aioredis.FakeRedis())
    with pytest.raises(ValueError):
        await cache.set("record:1", b"x", ttl=0)


@pytest.mark.asyncio
async def test_driver_errors_become_cache_unavailable() -> None:
    cache = RedisRecordCache(_BrokenRedis())

    with pytest.raises(CacheUnavailable) as get_err:
        await cache.get("record:1")
    assert get_err.value.details == {"key": "record:1", "operation": "get"}

    with pytest.raises(CacheUnavailable) as set_err:
        await cache.set("record:1", b"x", ttl=10)
    assert set_err.value.details["operation"] == "set"


class _MisbehavingRedis:
    """Redis stand-in whose client raises a non-driver exception."""

    async def get(self, key):
        raise RuntimeError("event loop is closed")

    async def set(self, key, value, *, ex=None):
        raise AttributeError("connection pool torn down")


@pytest.mark.asyncio
async def test_unexpected_client_errors_become_cache_unavailable() -> None:
    cache = RedisRecordCache(_MisbehavingRedis())

    with pytest.raises(CacheUnavailable) as get_err:
        await cache.get("record:1")
    assert isinstance(get_err.value.__cause__, RuntimeError)

    with pytest.raises(CacheUnavailable):
        await cache.set("record:1", b"x", ttl=10)
