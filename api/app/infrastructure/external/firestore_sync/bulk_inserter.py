"""
Inserción en bloque de lotes hacia BigQuery con tolerancia a fallas parciales.

Protocolo por lote:
- Se envía el lote como insert idempotente (insert_id = id del documento)
  ignorando columnas desconocidas.
- Éxito: successful = requested, sin errores.
- Falla: successful = 0, errores por fila si el warehouse los reporta o un
  único descriptor con el mensaje.
- Siempre se continúa con el siguiente lote.

Los lotes se envían en forma estrictamente secuencial: un solo insert en
curso a la vez.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from loguru import logger

from app.application.interfaces.order_sync_ports import WarehouseClient

from .sync_config import SyncTargetConfig
from .types import InsertFailure, WarehouseRow


@dataclass
class BatchSummary:
    batch_index: int
    requested: int
    successful: int
    errors: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class SyncSummary:
    """Resultado agregado de todos los lotes de una corrida."""

    total_fetched: int = 0
    total_inserted: int = 0
    total_errors: int = 0
    batch_summaries: list[BatchSummary] = field(default_factory=list)

    def record(self, batch: BatchSummary) -> None:
        self.batch_summaries.append(batch)
        self.total_fetched += batch.requested
        self.total_inserted += batch.successful
        if batch.successful < batch.requested:
            self.total_errors += max(1, len(batch.errors))


class BulkInserter:
    """
    Envía lotes al warehouse de a uno y acumula un SyncSummary.
    """

    def __init__(self, warehouse: WarehouseClient) -> None:
        self._warehouse = warehouse

    async def insert_all(
        self,
        batches: Sequence[Sequence[WarehouseRow]],
        target: SyncTargetConfig,
    ) -> SyncSummary:
        summary = SyncSummary()

        for index, batch in enumerate(batches):
            failure = await self._insert_batch(batch, target)
            if failure is None:
                summary.record(
                    BatchSummary(batch_index=index, requested=len(batch), successful=len(batch))
                )
                logger.debug(f"Lote {index}: {len(batch)} fila(s) insertadas en {target.table_path}")
                continue

            errors = failure.descriptors()
            summary.record(
                BatchSummary(batch_index=index, requested=len(batch), successful=0, errors=errors)
            )
            logger.warning(
                f"Lote {index} falló ({len(batch)} fila(s), {len(errors)} error(es)): "
                f"{failure.message}. Continuando con el siguiente lote."
            )

        return summary

    async def _insert_batch(
        self,
        batch: Sequence[WarehouseRow],
        target: SyncTargetConfig,
    ) -> Optional[InsertFailure]:
        """
        Ejecuta el insert en un thread para no bloquear el event loop.

        Una excepción que escape del adaptador también se registra como falla
        del lote, para no abortar los lotes restantes.
        """
        try:
            return await asyncio.to_thread(
                self._warehouse.bulk_insert,
                project_id=target.project_id,
                dataset_id=target.dataset_id,
                table_id=target.table_id,
                rows=list(batch),
                ignore_unknown_values=True,
            )
        except Exception as e:
            return failure_from_exception(e)


def failure_from_exception(exc: BaseException) -> InsertFailure:
    """
    Construye un InsertFailure desde una excepción arbitraria.

    Si la excepción trae `insert_errors` o `errors` (lista de errores por
    fila), se usan; si no, solo el mensaje.
    """
    row_errors: list[dict[str, Any]] = []
    for attr in ("insert_errors", "errors"):
        value = getattr(exc, attr, None)
        if isinstance(value, (list, tuple)) and value:
            row_errors = [e if isinstance(e, dict) else {"message": str(e)} for e in value]
            break

    message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    return InsertFailure(message=str(message), row_errors=row_errors)
