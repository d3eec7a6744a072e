# tests/unit/dependencies/test_record_providers.py
from __future__ import annotations

import pytest

from cachebench_api.application.use_cases.records.update_record_write_behind import (
    UpdateRecordWriteBehind,
)
from cachebench_api.dependencies.records import get_write_behind_uc


def test_write_behind_uc_uses_configured_delay(cache, store, settings) -> None:
    class _Scheduler:
        def schedule(self, **kwargs):
            raise AssertionError("not called")

        def get_job(self, job_id):
            return None

    uc = get_write_behind_uc(cache=cache, store=store, scheduler=_Scheduler(), settings=settings)

    assert isinstance(uc, UpdateRecordWriteBehind)
    assert uc._delay_s == settings.write_behind_delay_s


@pytest.mark.asyncio
async def test_missing_ports_surface_as_internal_error(app, client) -> None:
    del app.state.record_store

    resp = await client.get("/test/cache-aside", params={"id": "42"})

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"
