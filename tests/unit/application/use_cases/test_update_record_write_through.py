# tests/unit/application/use_cases/test_update_record_write_through.py
from __future__ import annotations

import json

import pytest

from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.cache_keys import RECORD_CACHE_TTL_S
from cachebench_api.application.use_cases.records.get_record_cache_aside import (
    GetRecordCacheAside,
)
from cachebench_api.application.use_cases.records.update_record_write_through import (
    UpdateRecordWriteThrough,
)
from cachebench_api.domain.entities.record import Record
from cachebench_api.domain.exceptions.records import CacheUnavailable, StoreUnavailable


def _dto(**overrides) -> RecordDTO:
    fields = {"id": "42", "name": "Widget", "price": 12.5}
    fields.update(overrides)
    return RecordDTO(**fields)


async def test_updates_store_then_cache(cache, store):
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    await uc.execute(_dto())

    assert store.rows["42"] == Record(id="42", name="Widget", price=12.5)
    assert json.loads(cache.data["record:42"]) == {"id": "42", "name": "Widget", "price": 12.5}
    assert cache.ttls["record:42"] == RECORD_CACHE_TTL_S


async def test_subsequent_cache_aside_read_is_a_hit_matching_payload(cache, store):
    await UpdateRecordWriteThrough(cache=cache, store=store).execute(_dto())
    store.get_calls.clear()

    payload = await GetRecordCacheAside(cache=cache, store=store).execute("42")

    assert json.loads(payload) == {"id": "42", "name": "Widget", "price": 12.5}
    assert store.get_calls == []


async def test_store_failure_leaves_cache_untouched(cache, store):
    cache.data["record:42"] = b"previous"
    store.fail_updates = True
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    with pytest.raises(StoreUnavailable):
        await uc.execute(_dto())

    assert cache.set_calls == []
    assert cache.data["record:42"] == b"previous"


async def test_cache_failure_after_commit_is_reported_without_rollback(cache, store):
    cache.fail_set = True
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    with pytest.raises(CacheUnavailable):
        await uc.execute(_dto())

    assert store.rows["42"].price == 12.5


async def test_cache_failure_is_logged_critical(cache, store, caplog):
    cache.fail_set = True
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    with pytest.raises(CacheUnavailable):
        await uc.execute(_dto())

    assert any(
        r.levelname == "CRITICAL" and r.getMessage() == "write_through.store_updated_cache_failed"
        for r in caplog.records
    )


async def test_no_matching_row_still_writes_cache(cache, store):
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    await uc.execute(_dto(id="999"))

    assert "999" not in store.rows
    assert json.loads(cache.data["record:999"])["id"] == "999"


async def test_same_payload_twice_is_idempotent(cache, store):
    uc = UpdateRecordWriteThrough(cache=cache, store=store)

    await uc.execute(_dto())
    store_once = dict(store.rows)
    cache_once = dict(cache.data)

    await uc.execute(_dto())

    assert store.rows == store_once
    assert cache.data == cache_once
