"""
Configuración del sync (Firestore -> BigQuery).

Los identificadores de origen/destino son configuración de despliegue,
nunca input del request. Las opciones por corrida (limit, since,
batchSize) viven en SyncOptions.

Este módulo no realiza I/O: solo define y valida configuración.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.config import Settings
from app.shared.exceptions.sync import ConfigurationException, InvalidSinceException

from .types import ensure_utc

DEFAULT_ORDER_BY_FIELD = "createdAt"


@dataclass(frozen=True)
class SyncTargetConfig:
    """
    Config de una colección Firestore -> una tabla BigQuery.
    """

    collection: str
    project_id: str
    dataset_id: str
    table_id: str
    order_by_field: str = DEFAULT_ORDER_BY_FIELD

    @classmethod
    def from_settings(cls, settings: Settings) -> "SyncTargetConfig":
        return cls(
            collection=settings.FIRESTORE_COLLECTION,
            project_id=settings.BQ_PROJECT_ID,
            dataset_id=settings.BQ_DATASET_ID,
            table_id=settings.BQ_TABLE_ID,
            order_by_field=settings.FIRESTORE_ORDER_BY_FIELD,
        )

    def missing_fields(self) -> list[str]:
        """Nombres de los identificadores vacíos."""
        values = {
            "FIRESTORE_COLLECTION": self.collection,
            "BQ_PROJECT_ID": self.project_id,
            "BQ_DATASET_ID": self.dataset_id,
            "BQ_TABLE_ID": self.table_id,
            "FIRESTORE_ORDER_BY_FIELD": self.order_by_field,
        }
        return [name for name, value in values.items() if not (value or "").strip()]

    def validate(self) -> None:
        """
        Falla rápido si falta cualquier identificador.

        Raises:
            ConfigurationException: si algún identificador está vacío
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationException(
                f"Servidor mal configurado: define {', '.join(missing)}",
                missing=missing,
            )

    @property
    def table_path(self) -> str:
        return f"{self.project_id}.{self.dataset_id}.{self.table_id}"


class SyncOptions(BaseModel):
    """
    Opciones de una corrida de sync.

    - limit: máximo de documentos a leer
    - since: fecha ISO8601; solo documentos con order_by_field >= since
    - batch_size: filas por insert (alias JSON: batchSize)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    limit: int = Field(1000, ge=1)
    since: Optional[str] = None
    batch_size: int = Field(500, ge=1)

    def since_datetime(self) -> Optional[datetime]:
        """
        Parsea `since` a datetime UTC.

        Raises:
            InvalidSinceException: si `since` no es una fecha ISO8601 válida
        """
        if self.since is None or not self.since.strip():
            return None
        raw = self.since.strip()
        try:
            return ensure_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        except (ValueError, OverflowError) as e:
            raise InvalidSinceException(raw) from e
