"""
Configuración de fixtures para pytest.

Los clientes de Google se reemplazan por fakes en memoria: los tests no
usan red ni credenciales.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence, Union

import pytest

from app.infrastructure.external.firestore_sync.sync_config import SyncTargetConfig
from app.infrastructure.external.firestore_sync.types import (
    InsertFailure,
    SourceDocument,
    WarehouseRow,
)


class FakeDocumentSource:
    """Fuente de documentos en memoria que registra las consultas."""

    def __init__(self) -> None:
        self.documents: list[SourceDocument] = []
        self.error: Optional[Exception] = None
        self.queries: list[dict[str, Any]] = []

    def add(self, doc_id: str, collection: str = "orders", **fields: Any) -> SourceDocument:
        doc = SourceDocument(id=doc_id, reference_path=f"{collection}/{doc_id}", data=fields)
        self.documents.append(doc)
        return doc

    def query(
        self,
        *,
        collection: str,
        order_by_field: str,
        direction: str = "asc",
        since: Optional[datetime] = None,
        limit: int,
    ) -> list[SourceDocument]:
        self.queries.append(
            {
                "collection": collection,
                "order_by_field": order_by_field,
                "direction": direction,
                "since": since,
                "limit": limit,
            }
        )
        if self.error is not None:
            raise self.error
        return list(self.documents[:limit])

    def get(self, *, collection: str, document_id: str) -> Optional[SourceDocument]:
        for doc in self.documents:
            if doc.id == document_id:
                return doc
        return None


class FakeWarehouse:
    """
    Warehouse en memoria.

    `outcomes` mapea índice de llamada -> InsertFailure o excepción a levantar.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.outcomes: dict[int, Union[InsertFailure, Exception]] = {}

    def bulk_insert(
        self,
        *,
        project_id: str,
        dataset_id: str,
        table_id: str,
        rows: Sequence[WarehouseRow],
        ignore_unknown_values: bool = True,
    ) -> Optional[InsertFailure]:
        index = len(self.calls)
        self.calls.append(
            {
                "table": f"{project_id}.{dataset_id}.{table_id}",
                "rows": list(rows),
                "ignore_unknown_values": ignore_unknown_values,
            }
        )
        outcome = self.outcomes.get(index)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def inserted_ids(self) -> list[list[str]]:
        return [[row.insert_id for row in call["rows"]] for call in self.calls]


@pytest.fixture
def fake_source() -> FakeDocumentSource:
    return FakeDocumentSource()


@pytest.fixture
def fake_warehouse() -> FakeWarehouse:
    return FakeWarehouse()


@pytest.fixture
def target() -> SyncTargetConfig:
    return SyncTargetConfig(
        collection="orders",
        project_id="my-bq-project",
        dataset_id="frono_2025",
        table_id="orders",
    )
