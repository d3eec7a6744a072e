# tests/unit/adapters/repositories/test_sql_record_store.py
from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cachebench_api.adapters.repositories.record_repository import (
    RecordRepository,
    SqlRecordStore,
)
from cachebench_api.domain.entities.record import Record
from cachebench_api.domain.exceptions.records import StoreUnavailable
from cachebench_api.infrastructure.database.models.base import Base
from cachebench_api.infrastructure.database.models.records import RecordRow


@pytest.fixture
async def sessionmaker(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'records.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with factory() as session, session.begin():
        session.add(RecordRow(id="42", name="Widget", price=9.99))
    yield factory
    await engine.dispose()


@pytest.mark.asyncio
async def test_get_by_id_returns_domain_record(sessionmaker) -> None:
    store = SqlRecordStore(sessionmaker, timeout_s=5.0)

    assert await store.get_by_id("42") == Record(id="42", name="Widget", price=9.99)
    assert await store.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_update_by_id_commits_name_and_price(sessionmaker) -> None:
    store = SqlRecordStore(sessionmaker, timeout_s=5.0)

    assert await store.update_by_id("42", name="Widget", price=12.5) is True

    async with sessionmaker() as session:
        row = (await session.execute(select(RecordRow).where(RecordRow.id == "42"))).scalar_one()
    assert (row.name, row.price) == ("Widget", 12.5)


@pytest.mark.asyncio
async def test_update_of_absent_row_matches_nothing_and_creates_nothing(sessionmaker) -> None:
    store = SqlRecordStore(sessionmaker, timeout_s=5.0)

    assert await store.update_by_id("999", name="Ghost", price=1.0) is False
    assert await store.get_by_id("999") is None


@pytest.mark.asyncio
async def test_repository_update_fields_reports_rowcount(sessionmaker) -> None:
    async with sessionmaker() as session, session.begin():
        repo = RecordRepository(session)
        assert await repo.update_fields("42", name="Renamed", price=-1.0) == 1
        assert await repo.update_fields("nope", name="x", price=0.0) == 0


@pytest.mark.asyncio
async def test_driver_failure_becomes_store_unavailable(tmp_path) -> None:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    store = SqlRecordStore(async_sessionmaker(bind=engine), timeout_s=5.0)

    # No schema: the driver raises OperationalError (no such table).
    with pytest.raises(StoreUnavailable) as err:
        await store.get_by_id("42")
    assert isinstance(err.value.__cause__, OperationalError)

    with pytest.raises(StoreUnavailable):
        await store.update_by_id("42", name="x", price=1.0)
    await engine.dispose()
