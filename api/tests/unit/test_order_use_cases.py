from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.application.use_cases.order_use_cases import OrderUseCases
from app.shared.exceptions.domain import EntityNotFoundException, ValidationException


@pytest.mark.asyncio
async def test_detail_converts_firestore_timestamp(fake_source) -> None:
    fake_source.add(
        "o-1",
        createdAt=datetime(2023, 11, 14, 22, 13, 20, 500000, tzinfo=timezone.utc),
        total=42.5,
        items=[{"sku": "A", "qty": 2}],
    )

    order = await OrderUseCases(fake_source, "orders").get_order_detail("o-1")

    assert order == {
        "id": "o-1",
        "createdAt": "2023-11-14T22:13:20.500Z",
        "total": 42.5,
        "items": [{"sku": "A", "qty": 2}],
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-03-01T10:00:00Z", "2024-03-01T10:00:00.000Z"),
        (1700000000500, "2023-11-14T22:13:20.500Z"),
        ({"_seconds": 1700000000, "_nanoseconds": 0}, "2023-11-14T22:13:20.000Z"),
    ],
)
async def test_detail_parses_epoch_and_iso_created_at(fake_source, raw, expected) -> None:
    fake_source.add("o-2", createdAt=raw)

    order = await OrderUseCases(fake_source, "orders").get_order_detail("o-2")

    assert order["createdAt"] == expected


@pytest.mark.asyncio
async def test_detail_keeps_unparseable_created_at(fake_source) -> None:
    fake_source.add("o-3", createdAt="ayer")

    order = await OrderUseCases(fake_source, "orders").get_order_detail("o-3")

    assert order["createdAt"] == "ayer"


@pytest.mark.asyncio
async def test_detail_missing_order_raises_not_found(fake_source) -> None:
    with pytest.raises(EntityNotFoundException) as exc_info:
        await OrderUseCases(fake_source, "orders").get_order_detail("nope")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_detail_blank_id_is_rejected(fake_source) -> None:
    with pytest.raises(ValidationException):
        await OrderUseCases(fake_source, "orders").get_order_detail("  ")
