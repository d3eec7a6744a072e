# tests/unit/application/use_cases/test_update_record_write_behind.py
from __future__ import annotations

import asyncio
import json
import time

import pytest

from cachebench_api.application.interfaces.write_behind import JobState
from cachebench_api.application.schemas.dto.records import RecordDTO
from cachebench_api.application.use_cases.records.cache_keys import RECORD_CACHE_TTL_S
from cachebench_api.application.use_cases.records.update_record_write_behind import (
    UpdateRecordWriteBehind,
)
from cachebench_api.domain.entities.record import Record
from cachebench_api.domain.exceptions.records import CacheUnavailable


def _gadget() -> RecordDTO:
    return RecordDTO(id="7", name="Gadget", price=3.0)


async def test_cache_updated_immediately_store_after_delay(cache, store, scheduler):
    uc = UpdateRecordWriteBehind(cache=cache, store=store, scheduler=scheduler, delay_s=0.1)

    job = await uc.execute(_gadget())

    assert json.loads(cache.data["record:7"]) == {"id": "7", "name": "Gadget", "price": 3.0}
    assert cache.ttls["record:7"] == RECORD_CACHE_TTL_S
    assert store.update_calls == []
    assert store.rows["7"] == Record(id="7", name="Gadget", price=1.5)
    assert job.state is JobState.SCHEDULED

    await scheduler.join()

    assert store.rows["7"] == Record(id="7", name="Gadget", price=3.0)
    assert job.state is JobState.SUCCEEDED


async def test_acknowledgement_does_not_wait_for_delay(cache, store, scheduler):
    uc = UpdateRecordWriteBehind(cache=cache, store=store, scheduler=scheduler, delay_s=5.0)

    started = time.perf_counter()
    await uc.execute(_gadget())
    elapsed = time.perf_counter() - started

    assert elapsed < 1.0
    assert store.update_calls == []


async def test_cache_failure_schedules_nothing(cache, store, scheduler):
    cache.fail_set = True
    uc = UpdateRecordWriteBehind(cache=cache, store=store, scheduler=scheduler, delay_s=0.0)

    with pytest.raises(CacheUnavailable):
        await uc.execute(_gadget())

    assert scheduler.pending_count == 0
    await asyncio.sleep(0.01)
    assert store.update_calls == []


async def test_deferred_store_failure_is_recorded_on_job(cache, store, scheduler):
    store.fail_updates = True
    uc = UpdateRecordWriteBehind(cache=cache, store=store, scheduler=scheduler, delay_s=0.0)

    job = await uc.execute(_gadget())
    await scheduler.join()

    assert job.state is JobState.FAILED
    assert job.error
    assert len(store.update_calls) == 1
    assert json.loads(cache.data["record:7"])["price"] == 3.0


async def test_deferred_update_for_unknown_row_still_succeeds(cache, store, scheduler):
    uc = UpdateRecordWriteBehind(cache=cache, store=store, scheduler=scheduler, delay_s=0.0)

    job = await uc.execute(RecordDTO(id="nope", name="X", price=1.0))
    await scheduler.join()

    assert job.state is JobState.SUCCEEDED
    assert "nope" not in store.rows
