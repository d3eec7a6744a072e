# tests/unit/domain/test_record_entity.py
from __future__ import annotations

import dataclasses
import math

import pytest

from cachebench_api.domain.entities.record import Record


def test_record_is_immutable() -> None:
    rec = Record(id="42", name="Widget", price=9.99)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.price = 1.0  # type: ignore[misc]


def test_negative_price_is_accepted() -> None:
    assert Record(id="1", name="Refund", price=-3.5).price == -3.5


@pytest.mark.parametrize("price", [math.nan, math.inf, -math.inf])
def test_non_finite_price_is_rejected(price: float) -> None:
    with pytest.raises(ValueError):
        Record(id="1", name="x", price=price)


def test_empty_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        Record(id="", name="x", price=1.0)
