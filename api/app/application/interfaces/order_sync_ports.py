"""
Interfaces del pipeline de sincronización de órdenes (Firestore -> BigQuery).

Este contrato existe para:
- Que el orquestador no dependa de los SDKs de Google directamente.
- Facilitar tests unitarios con fakes, sin red ni credenciales.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from app.infrastructure.external.firestore_sync.types import (
    InsertFailure,
    SourceDocument,
    WarehouseRow,
)


class DocumentSource(Protocol):
    """
    Fuente de documentos (Firestore).

    Implementaciones:
    - FirestoreDocumentSource (google-cloud-firestore).
    - Fake en memoria para tests.
    """

    def query(
        self,
        *,
        collection: str,
        order_by_field: str,
        direction: str = "asc",
        since: Optional[datetime] = None,
        limit: int,
    ) -> list[SourceDocument]:
        """
        Lee documentos ordenados por `order_by_field`.

        Si `since` está definido, solo documentos con order_by_field >= since.
        Cualquier error de lectura se propaga al caller.
        """

    def get(self, *, collection: str, document_id: str) -> Optional[SourceDocument]:
        """Lee un documento por id. Retorna None si no existe."""


class WarehouseClient(Protocol):
    """
    Cliente del warehouse (BigQuery).

    Las fallas de insert NO se levantan: se retornan como InsertFailure.
    """

    def bulk_insert(
        self,
        *,
        project_id: str,
        dataset_id: str,
        table_id: str,
        rows: Sequence[WarehouseRow],
        ignore_unknown_values: bool = True,
    ) -> Optional[InsertFailure]:
        """Inserta filas deduplicando por insert_id. None si todo salió bien."""
