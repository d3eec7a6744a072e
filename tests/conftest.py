# tests/conftest.py
from __future__ import annotations

import os

# Settings are required at import of the app factory; keep tests hermetic.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://127.0.0.1:6379/15")

from collections.abc import AsyncIterator  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402

from cachebench_api.config.settings import Settings  # noqa: E402
from cachebench_api.domain.entities.record import Record  # noqa: E402
from cachebench_api.domain.exceptions.records import (  # noqa: E402
    CacheUnavailable,
    StoreUnavailable,
)
from cachebench_api.infrastructure.scheduling.write_behind import (  # noqa: E402
    InProcessWriteBehindScheduler,
)
from cachebench_api.main import create_app  # noqa: E402


class InMemoryCache:
    """CachePort fake that records keys, values and TTLs."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []
        self.fail_get = False
        self.fail_set = False

    async def get(self, key: str) -> bytes | None:
        self.get_calls.append(key)
        if self.fail_get:
            raise CacheUnavailable("cache down", details={"key": key})
        return self.data.get(key)

    async def set(self, key: str, value: bytes, *, ttl: int) -> None:
        self.set_calls.append(key)
        if self.fail_set:
            raise CacheUnavailable("cache down", details={"key": key})
        self.data[key] = value
        self.ttls[key] = ttl


class InMemoryStore:
    """RecordStore fake backed by a dict of rows."""

    def __init__(self, rows: list[Record] | None = None) -> None:
        self.rows: dict[str, Record] = {r.id: r for r in rows or []}
        self.get_calls: list[str] = []
        self.update_calls: list[tuple[str, str, float]] = []
        self.fail_reads = False
        self.fail_updates = False

    async def get_by_id(self, record_id: str) -> Record | None:
        self.get_calls.append(record_id)
        if self.fail_reads:
            raise StoreUnavailable("store down")
        return self.rows.get(record_id)

    async def update_by_id(self, record_id: str, *, name: str, price: float) -> bool:
        self.update_calls.append((record_id, name, price))
        if self.fail_updates:
            raise StoreUnavailable("store down")
        if record_id not in self.rows:
            return False
        self.rows[record_id] = Record(id=record_id, name=name, price=price)
        return True


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(
        [
            Record(id="42", name="Widget", price=9.99),
            Record(id="7", name="Gadget", price=1.5),
        ]
    )


@pytest.fixture
async def scheduler() -> AsyncIterator[InProcessWriteBehindScheduler]:
    sched = InProcessWriteBehindScheduler(max_jobs=100)
    yield sched
    await sched.aclose()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        REDIS_URL="redis://127.0.0.1:6379/15",
        WRITE_BEHIND_DELAY_S=0.2,
    )


@pytest.fixture
def app(
    settings: Settings,
    cache: InMemoryCache,
    store: InMemoryStore,
    scheduler: InProcessWriteBehindScheduler,
) -> FastAPI:
    """App with fake ports published on app.state (lifespan not run)."""
    application = create_app(settings)
    application.state.settings = settings
    application.state.record_cache = cache
    application.state.record_store = store
    application.state.write_behind = scheduler
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
