"""
Dependencias para inyeccion de casos de uso y servicios.
"""
from fastapi import Depends

from app.core.config import Settings
from app.application.interfaces.order_sync_ports import DocumentSource, WarehouseClient
from app.application.use_cases.order_use_cases import OrderUseCases
from app.api.v1.dependencies.repository_deps import (
    get_document_source,
    get_settings,
    get_warehouse_client,
)
from app.infrastructure.external.firestore_sync.sync_config import SyncTargetConfig
from app.infrastructure.external.firestore_sync.sync_service import FirestoreToBigQuerySync


def get_sync_target(
    app_settings: Settings = Depends(get_settings)
) -> SyncTargetConfig:
    """
    Dependencia para obtener la configuracion fija de origen/destino del sync.
    
    La validacion ocurre al ejecutar el sync, no aqui, para que un destino
    incompleto responda con CONFIGURATION_ERROR y no con un error de DI.
    """
    return SyncTargetConfig.from_settings(app_settings)


def get_order_sync_service(
    target: SyncTargetConfig = Depends(get_sync_target),
    source: DocumentSource = Depends(get_document_source),
    warehouse: WarehouseClient = Depends(get_warehouse_client),
) -> FirestoreToBigQuerySync:
    """
    Dependencia para obtener el orquestador Firestore -> BigQuery.
    
    Returns:
        FirestoreToBigQuerySync: Orquestador listo para ejecutar
    """
    return FirestoreToBigQuerySync(source=source, warehouse=warehouse, target=target)


def get_order_use_cases(
    app_settings: Settings = Depends(get_settings),
    source: DocumentSource = Depends(get_document_source),
) -> OrderUseCases:
    """
    Dependencia para obtener los casos de uso de ordenes.
    
    Returns:
        OrderUseCases: Instancia de casos de uso de ordenes
    """
    return OrderUseCases(source, app_settings.FIRESTORE_COLLECTION)
