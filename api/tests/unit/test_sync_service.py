"""
Tests unitarios para el orquestador Firestore -> BigQuery.

Usa fakes en memoria para la fuente de documentos y el warehouse.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from app.infrastructure.external.firestore_sync.sync_config import SyncOptions
from app.infrastructure.external.firestore_sync.sync_service import FirestoreToBigQuerySync
from app.infrastructure.external.firestore_sync.types import InsertFailure
from app.shared.exceptions.sync import (
    ConfigurationException,
    InvalidSinceException,
    SourceReadException,
)


@pytest.fixture
def service(fake_source, fake_warehouse, target) -> FirestoreToBigQuerySync:
    return FirestoreToBigQuerySync(source=fake_source, warehouse=fake_warehouse, target=target)


@pytest.mark.asyncio
async def test_run_batches_documents_in_order(service, fake_source, fake_warehouse) -> None:
    for doc_id in ("a", "b", "c"):
        fake_source.add(doc_id, customer=f"cliente-{doc_id}")

    result = await service.run(SyncOptions(batch_size=2))

    assert result.ok is True
    assert result.fetched == 3
    assert fake_warehouse.inserted_ids == [["a", "b"], ["c"]]
    summary = result.insert_summary
    assert summary.total_fetched == 3
    assert summary.total_inserted == 3
    assert summary.total_errors == 0
    first_row = fake_warehouse.calls[0]["rows"][0]
    assert first_row.json["_firestorePath"] == "orders/a"
    assert first_row.json["customer"] == "cliente-a"


@pytest.mark.asyncio
async def test_run_queries_with_defaults(service, fake_source) -> None:
    await service.run()

    assert fake_source.queries == [
        {
            "collection": "orders",
            "order_by_field": "createdAt",
            "direction": "asc",
            "since": None,
            "limit": 1000,
        }
    ]


@pytest.mark.asyncio
async def test_run_passes_since_and_limit(service, fake_source) -> None:
    await service.run(SyncOptions(limit=5, since="2024-06-01T00:00:00Z"))

    query = fake_source.queries[0]
    assert query["limit"] == 5
    assert query["since"] == datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_empty_source_short_circuits(service, fake_warehouse) -> None:
    result = await service.run()

    assert result.ok is True
    assert result.fetched == 0
    assert result.insert_summary is None
    assert fake_warehouse.calls == []


@pytest.mark.asyncio
async def test_invalid_since_fails_before_read(service, fake_source, fake_warehouse) -> None:
    with pytest.raises(InvalidSinceException):
        await service.run(SyncOptions(since="not-a-date"))

    assert fake_source.queries == []
    assert fake_warehouse.calls == []


@pytest.mark.asyncio
async def test_missing_target_config_fails_fast(fake_source, fake_warehouse, target) -> None:
    service = FirestoreToBigQuerySync(
        source=fake_source,
        warehouse=fake_warehouse,
        target=replace(target, dataset_id="  "),
    )
    fake_source.add("a")

    with pytest.raises(ConfigurationException) as exc_info:
        await service.run()

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == {"missing": ["BQ_DATASET_ID"]}
    assert fake_source.queries == []
    assert fake_warehouse.calls == []


@pytest.mark.asyncio
async def test_source_read_error_is_fatal(service, fake_source, fake_warehouse) -> None:
    fake_source.error = RuntimeError("permiso denegado")

    with pytest.raises(SourceReadException) as exc_info:
        await service.run()

    assert "permiso denegado" in exc_info.value.message
    assert fake_warehouse.calls == []


@pytest.mark.asyncio
async def test_partial_failure_is_isolated(service, fake_source, fake_warehouse) -> None:
    for doc_id in ("a", "b", "c", "d", "e", "f"):
        fake_source.add(doc_id)
    fake_warehouse.outcomes[1] = InsertFailure(message="x", row_errors=[{"row": 0, "reason": "x"}])

    result = await service.run(SyncOptions(batch_size=2))

    summary = result.insert_summary
    assert len(fake_warehouse.calls) == 3
    assert summary.total_inserted == 4
    assert summary.total_errors >= 1
    assert [b.successful for b in summary.batch_summaries] == [2, 0, 2]
    assert summary.batch_summaries[1].errors == [{"row": 0, "reason": "x"}]


@pytest.mark.asyncio
async def test_synced_at_is_stamped_at_projection(service, fake_source, fake_warehouse) -> None:
    fake_source.add("a")
    fake_source.add("b")
    before = datetime.now(timezone.utc).replace(microsecond=0)

    await service.run(SyncOptions(batch_size=1))

    after = datetime.now(timezone.utc)
    for call in fake_warehouse.calls:
        stamp = datetime.fromisoformat(call["rows"][0].json["_synced_at"].replace("Z", "+00:00"))
        assert before <= stamp <= after
