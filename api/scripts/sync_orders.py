"""
CLI: Firestore -> BigQuery (sync de ordenes).

Uso recomendado:
  - Ejecutar como job (cron/Cloud Scheduler) cuando la corrida es grande.
  - Usa la misma configuración (.env) y el mismo orquestador que el endpoint.

Variables de entorno requeridas:
  - BQ_PROJECT_ID
  - BQ_DATASET_ID
  - BQ_TABLE_ID (default: orders)
  - FIRESTORE_COLLECTION (default: orders)

Ejecución:
  python scripts/sync_orders.py
  python scripts/sync_orders.py --since 2024-01-01T00:00:00Z --batch-size 200
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

from app.application.dto.sync_dto import SyncOrdersResponseDTO
from app.core.config import settings
from app.infrastructure.external.firestore_sync.bigquery_client import BigQueryClientProvider
from app.infrastructure.external.firestore_sync.firestore_source import FirestoreClientProvider
from app.infrastructure.external.firestore_sync.sync_config import SyncOptions, SyncTargetConfig
from app.infrastructure.external.firestore_sync.sync_service import FirestoreToBigQuerySync
from app.shared.exceptions.base import AppException
from app.shared.exceptions.domain import ValidationException


def _build_options(args: argparse.Namespace) -> SyncOptions:
    try:
        return SyncOptions(limit=args.limit, since=args.since, batch_size=args.batch_size)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationException(f"Parametro invalido: {first.get('msg')}", field=field) from e


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sincroniza ordenes de Firestore a BigQuery.")
    parser.add_argument("--limit", type=int, default=settings.SYNC_LIMIT)
    parser.add_argument("--since", default=None, help="Fecha ISO8601 (createdAt >= since).")
    parser.add_argument("--batch-size", type=int, default=settings.BQ_BATCH_SIZE)
    args = parser.parse_args(argv)

    try:
        options = _build_options(args)
        service = FirestoreToBigQuerySync(
            source=FirestoreClientProvider.get(settings),
            warehouse=BigQueryClientProvider.get(settings),
            target=SyncTargetConfig.from_settings(settings),
        )
        result = asyncio.run(service.run(options))
    except AppException as e:
        logger.error(f"Sync abortado [{e.error_code}]: {e.message}")
        print(json.dumps(e.to_payload(), ensure_ascii=False, indent=2))
        return 1
    finally:
        BigQueryClientProvider.reset()
        FirestoreClientProvider.reset()

    response = SyncOrdersResponseDTO.from_result(result)
    print(json.dumps(response.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False, indent=2))
    summary = result.insert_summary
    return 0 if summary is None or summary.total_errors == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
