"""
Casos de uso de lectura de ordenes.
"""
import asyncio
from typing import Any, Dict

from loguru import logger

from app.application.interfaces.order_sync_ports import DocumentSource
from app.infrastructure.external.firestore_sync.value_normalizer import (
    normalize_value,
    timestamp_to_iso,
)
from app.shared.exceptions.domain import EntityNotFoundException, ValidationException

CREATED_AT_FIELD = "createdAt"


class OrderUseCases:
    """Lecturas de ordenes desde Firestore."""

    def __init__(self, source: DocumentSource, collection: str):
        self.source = source
        self.collection = collection

    async def get_order_detail(self, order_id: str) -> Dict[str, Any]:
        """
        Obtiene una orden por id con sus campos normalizados a JSON.

        createdAt se convierte a ISO8601 si es interpretable (Timestamp,
        seconds/nanoseconds, string ISO o epoch en ms); si no, se deja el
        valor original normalizado.

        Raises:
            ValidationException: si order_id viene vacio
            EntityNotFoundException: si la orden no existe
        """
        if not order_id or not order_id.strip():
            raise ValidationException("Falta orderId", field="orderId")

        document = await asyncio.to_thread(
            self.source.get, collection=self.collection, document_id=order_id
        )
        if document is None:
            logger.info(f"Orden {order_id} no encontrada en '{self.collection}'")
            raise EntityNotFoundException("Orden", order_id)

        raw = document.data
        order: Dict[str, Any] = {"id": document.id}
        for name, value in raw.items():
            order[str(name)] = normalize_value(value)

        raw_created_at = raw.get(CREATED_AT_FIELD)
        created_at_iso = timestamp_to_iso(raw_created_at)
        order[CREATED_AT_FIELD] = created_at_iso if created_at_iso is not None else normalize_value(raw_created_at)
        return order
