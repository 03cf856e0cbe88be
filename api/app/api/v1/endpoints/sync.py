"""
Endpoints para sincronizacion de ordenes.
Copia documentos de Firestore a BigQuery bajo demanda.
"""
import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from loguru import logger
from pydantic import ValidationError

from app.core.config import Settings
from app.api.v1.dependencies.repository_deps import get_settings
from app.api.v1.dependencies.use_case_deps import get_order_sync_service
from app.application.dto.sync_dto import SyncEndpointInfoDTO, SyncOrdersResponseDTO
from app.infrastructure.external.firestore_sync.sync_config import SyncOptions
from app.infrastructure.external.firestore_sync.sync_service import FirestoreToBigQuerySync
from app.shared.exceptions.base import AppException
from app.shared.exceptions.domain import ValidationException


router = APIRouter(prefix="/sync-orders", tags=["Sync"])

OPTION_KEYS = ("limit", "since", "batchSize")


async def _read_body(request: Request) -> Dict[str, Any]:
    """Lee el body JSON. Body vacio, invalido o no-objeto cuenta como {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def build_sync_options(
    query: Dict[str, Any],
    body: Dict[str, Any],
    app_settings: Settings,
) -> SyncOptions:
    """
    Combina query string y body (el body tiene prioridad) sobre los defaults.

    Valores null o vacios se consideran ausentes.

    Raises:
        ValidationException: si limit/batchSize no son enteros positivos
    """
    merged: Dict[str, Any] = {
        "limit": app_settings.SYNC_LIMIT,
        "batchSize": app_settings.BQ_BATCH_SIZE,
    }
    for source in (query, body):
        for key in OPTION_KEYS:
            value = source.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            merged[key] = str(value).strip() if key == "since" else value

    try:
        return SyncOptions.model_validate(merged)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationException(f"Parametro invalido: {first.get('msg')}", field=field) from e


@router.post(
    "",
    response_model=SyncOrdersResponseDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar ordenes de Firestore con BigQuery"
)
async def sync_orders(
    request: Request,
    service: FirestoreToBigQuerySync = Depends(get_order_sync_service),
    app_settings: Settings = Depends(get_settings),
) -> SyncOrdersResponseDTO:
    """
    Ejecuta la sincronizacion Firestore -> BigQuery.
    
    Parametros opcionales (body JSON o query string, el body tiene prioridad):
    - limit: maximo de documentos a leer
    - since: fecha ISO8601, solo documentos con createdAt >= since
    - batchSize: filas por insert en BigQuery
    
    Un lote fallido no aborta la corrida: el resumen informa que lotes
    se insertaron y cuales no.
    
    Returns:
        SyncOrdersResponseDTO con el resumen de la corrida
    """
    options = build_sync_options(dict(request.query_params), await _read_body(request), app_settings)
    
    try:
        logger.info("Iniciando sincronizacion Firestore -> BigQuery desde API")
        result = await service.run(options)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error en sincronizacion de ordenes: {e}")
        raise AppException(
            message=f"Error al sincronizar: {str(e)}",
            error_code="SYNC_ERROR",
        ) from e
    
    return SyncOrdersResponseDTO.from_result(result)


@router.get(
    "",
    response_model=SyncEndpointInfoDTO,
    summary="Informacion del endpoint de sincronizacion"
)
async def sync_orders_info() -> SyncEndpointInfoDTO:
    """Acuse estatico: la coleccion y tabla son fijas, usar POST para sincronizar."""
    return SyncEndpointInfoDTO(
        message="sync-orders (coleccion/tabla fijas). Usa POST para sincronizar."
    )
