"""
Adaptador de BigQuery (google-cloud-bigquery) para inserts en bloque.

Convierte el resultado de `insert_rows_json` y las excepciones del SDK en
un InsertFailure estructurado. El resto del pipeline nunca inspecciona
errores crudos del SDK.
"""

from __future__ import annotations

import threading
from typing import Any, Optional, Sequence

from google.api_core import exceptions as google_exceptions
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import bigquery
from loguru import logger

from app.core.config import Settings
from app.shared.exceptions.sync import ConfigurationException

from .credentials import credentials_from_info, parse_service_account_json
from .types import InsertFailure, WarehouseRow


def _row_errors_from_exception(exc: google_exceptions.GoogleAPIError) -> list[dict[str, Any]]:
    errors = getattr(exc, "errors", None) or []
    return [e if isinstance(e, dict) else {"message": str(e)} for e in errors]


class BigQueryWarehouseClient:
    """
    Cliente de warehouse sobre `bigquery.Client`.

    Importante:
    - No levanta excepciones en bulk_insert: las fallas se retornan.
    - La deduplicación la hace BigQuery vía row_ids (insert_id).
    """

    def __init__(self, client: bigquery.Client) -> None:
        self._client = client

    def bulk_insert(
        self,
        *,
        project_id: str,
        dataset_id: str,
        table_id: str,
        rows: Sequence[WarehouseRow],
        ignore_unknown_values: bool = True,
    ) -> Optional[InsertFailure]:
        table = f"{project_id}.{dataset_id}.{table_id}"
        try:
            row_errors = self._client.insert_rows_json(
                table,
                [row.json for row in rows],
                row_ids=[row.insert_id for row in rows],
                ignore_unknown_values=ignore_unknown_values,
            )
        except google_exceptions.GoogleAPIError as e:
            return InsertFailure(
                message=getattr(e, "message", None) or str(e),
                row_errors=_row_errors_from_exception(e),
            )

        if row_errors:
            return InsertFailure(
                message=f"BigQuery rechazó {len(row_errors)} fila(s) en {table}",
                row_errors=[dict(e) for e in row_errors],
            )
        return None

    def close(self) -> None:
        self._client.close()


class BigQueryClientProvider:
    """
    Handle de BigQuery compartido por el proceso.

    Se construye en el primer uso, protegido por un lock para que dos
    requests concurrentes no creen dos clientes.
    """

    _instance: Optional[BigQueryWarehouseClient] = None
    _lock = threading.Lock()

    @classmethod
    def get(cls, settings: Settings) -> BigQueryWarehouseClient:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = BigQueryWarehouseClient(build_bigquery_client(settings))
                    logger.info("Cliente BigQuery inicializado")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Cierra y descarta el handle actual (shutdown / tests)."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None


def build_bigquery_client(settings: Settings) -> bigquery.Client:
    """
    Construye `bigquery.Client` desde la configuración.

    - GCLOUD_SERVICE_KEY: JSON completo de service account
    - si no, ADC con BQ_PROJECT_ID como proyecto

    Raises:
        ConfigurationException: credenciales ausentes o malformadas
    """
    try:
        return _build_bigquery_client(settings)
    except (DefaultCredentialsError, ValueError) as e:
        raise ConfigurationException(f"Credenciales de BigQuery no disponibles: {e}") from e


def _build_bigquery_client(settings: Settings) -> bigquery.Client:
    if settings.GCLOUD_SERVICE_KEY:
        info = parse_service_account_json(settings.GCLOUD_SERVICE_KEY, env_name="GCLOUD_SERVICE_KEY")
        project = settings.BQ_PROJECT_ID or info.get("project_id")
        return bigquery.Client(project=project, credentials=credentials_from_info(info))

    if not settings.BQ_PROJECT_ID:
        raise ConfigurationException(
            "Faltan BQ_PROJECT_ID y GCLOUD_SERVICE_KEY; no se puede crear el cliente BigQuery",
            missing=["BQ_PROJECT_ID"],
        )
    return bigquery.Client(project=settings.BQ_PROJECT_ID)
