"""
DTOs del endpoint de sincronizacion de ordenes (Firestore -> BigQuery).

Los campos se exponen en camelCase (totalFetched, batchSummaries, ...)
para mantener el contrato JSON que consume el frontend.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.infrastructure.external.firestore_sync.bulk_inserter import BatchSummary, SyncSummary
from app.infrastructure.external.firestore_sync.sync_service import SyncRunResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BatchSummaryDTO(_CamelModel):
    """Resultado de un lote."""

    batch_index: int
    requested: int
    successful: int
    errors: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, batch: BatchSummary) -> "BatchSummaryDTO":
        return cls(
            batch_index=batch.batch_index,
            requested=batch.requested,
            successful=batch.successful,
            errors=batch.errors,
        )


class InsertSummaryDTO(_CamelModel):
    """Resultado agregado de todos los lotes."""

    total_fetched: int
    total_inserted: int
    total_errors: int
    batch_summaries: list[BatchSummaryDTO] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: SyncSummary) -> "InsertSummaryDTO":
        return cls(
            total_fetched=summary.total_fetched,
            total_inserted=summary.total_inserted,
            total_errors=summary.total_errors,
            batch_summaries=[BatchSummaryDTO.from_summary(b) for b in summary.batch_summaries],
        )


class SyncOrdersResponseDTO(_CamelModel):
    """Respuesta del sync. insertSummary se omite cuando no hubo documentos."""

    ok: bool
    fetched: int
    insert_summary: Optional[InsertSummaryDTO] = None
    message: Optional[str] = None

    @classmethod
    def from_result(cls, result: SyncRunResult) -> "SyncOrdersResponseDTO":
        return cls(
            ok=result.ok,
            fetched=result.fetched,
            insert_summary=(
                InsertSummaryDTO.from_summary(result.insert_summary)
                if result.insert_summary is not None
                else None
            ),
            message=result.message,
        )


class SyncEndpointInfoDTO(BaseModel):
    """Acuse estatico del GET."""

    ok: bool = True
    message: str
