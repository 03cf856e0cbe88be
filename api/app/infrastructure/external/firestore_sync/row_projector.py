"""
Proyección de documentos Firestore a filas BigQuery.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .types import SourceDocument, WarehouseRow, isoformat_z, utc_now
from .value_normalizer import normalize_value

DOC_ID_FIELD = "_id"
DOC_PATH_FIELD = "_firestorePath"
SYNCED_AT_FIELD = "_synced_at"


def project_document(
    document: SourceDocument,
    *,
    synced_at: Optional[datetime] = None,
) -> WarehouseRow:
    """
    Mapea un SourceDocument a una WarehouseRow lista para insertar.

    Reglas:
    - Cada field se normaliza con normalize_value, conservando su nombre
    - Se agregan columnas técnicas: _id, _firestorePath, _synced_at
    - insert_id es el id del documento (estable entre reintentos)
    """
    row: dict[str, Any] = {
        str(name): normalize_value(value) for name, value in document.data.items()
    }
    row[DOC_ID_FIELD] = document.id
    row[DOC_PATH_FIELD] = document.reference_path
    row[SYNCED_AT_FIELD] = isoformat_z(synced_at or utc_now())

    return WarehouseRow(insert_id=str(document.id), json=row)
