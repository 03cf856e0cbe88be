"""
Servicio de sincronización Firestore -> BigQuery.

Diseño (resumen):
- Valida la configuración fija de destino (colección, proyecto, dataset, tabla)
- Valida `since` antes de cualquier lectura
- Lee la colección ordenada por createdAt asc (>= since si existe), con límite
- Proyecta cada documento a una fila JSON plana con metadatos de sync
- Inserta por lotes secuenciales; un lote fallido no aborta los demás

Estrategia de idempotencia:
- insert_id = id del documento, BigQuery deduplica reintentos.
- No se persiste cursor: re-ejecutar con `since` es el mecanismo de reintento.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from app.application.interfaces.order_sync_ports import DocumentSource, WarehouseClient
from app.shared.exceptions.sync import SourceReadException

from .batching import chunk
from .bulk_inserter import BulkInserter, SyncSummary
from .row_projector import project_document
from .sync_config import SyncOptions, SyncTargetConfig
from .types import SourceDocument


@dataclass(frozen=True)
class SyncRunResult:
    ok: bool
    fetched: int
    insert_summary: Optional[SyncSummary] = None
    message: Optional[str] = None


class FirestoreToBigQuerySync:
    """
    Orquestador del pipeline para una colección.
    """

    def __init__(
        self,
        *,
        source: DocumentSource,
        warehouse: WarehouseClient,
        target: SyncTargetConfig,
    ) -> None:
        self._source = source
        self._inserter = BulkInserter(warehouse)
        self._target = target

    async def run(self, options: Optional[SyncOptions] = None) -> SyncRunResult:
        """
        Ejecuta una corrida completa.

        Raises:
            ConfigurationException: si falta algún identificador de destino
            InvalidSinceException: si `since` no es una fecha válida
            SourceReadException: si falla la lectura de Firestore
        """
        options = options or SyncOptions()
        self._target.validate()
        since = options.since_datetime()

        logger.info(
            f"Sync: Firestore '{self._target.collection}' -> BigQuery {self._target.table_path} "
            f"(limit={options.limit}, since={since.isoformat() if since else None}, "
            f"batch_size={options.batch_size})"
        )

        documents = await self._read_documents(limit=options.limit, since=since)
        if not documents:
            logger.info("Sin documentos para sincronizar")
            return SyncRunResult(ok=True, fetched=0, message="Sin documentos para sincronizar")

        rows = [project_document(doc) for doc in documents]
        batches = chunk(rows, options.batch_size)

        summary = await self._inserter.insert_all(batches, self._target)
        logger.info(
            f"Sync completado. leidos={len(documents)}, insertados={summary.total_inserted}, "
            f"errores={summary.total_errors}, lotes={len(batches)}"
        )
        return SyncRunResult(ok=True, fetched=len(documents), insert_summary=summary)

    async def _read_documents(
        self, *, limit: int, since: Optional[datetime]
    ) -> list[SourceDocument]:
        try:
            return await asyncio.to_thread(
                self._source.query,
                collection=self._target.collection,
                order_by_field=self._target.order_by_field,
                direction="asc",
                since=since,
                limit=limit,
            )
        except Exception as e:
            logger.error(f"Error leyendo Firestore '{self._target.collection}': {e}")
            raise SourceReadException(self._target.collection, e) from e
