"""
Dependencias para inyección de clientes externos (Firestore, BigQuery).

Los handles se construyen una sola vez por proceso en el primer request.
En tests se reemplazan via `app.dependency_overrides`.
"""
from fastapi import Depends

from app.core.config import Settings, settings
from app.application.interfaces.order_sync_ports import DocumentSource, WarehouseClient
from app.infrastructure.external.firestore_sync.bigquery_client import BigQueryClientProvider
from app.infrastructure.external.firestore_sync.firestore_source import FirestoreClientProvider


def get_settings() -> Settings:
    """
    Dependencia para obtener la configuración de la aplicación.
    
    Returns:
        Settings: Instancia global de configuración
    """
    return settings


def get_document_source(
    app_settings: Settings = Depends(get_settings)
) -> DocumentSource:
    """
    Dependencia para obtener la fuente de documentos (Firestore).
    
    Args:
        app_settings: Configuración de la aplicación
        
    Returns:
        DocumentSource: Handle de Firestore compartido por el proceso
    """
    return FirestoreClientProvider.get(app_settings)


def get_warehouse_client(
    app_settings: Settings = Depends(get_settings)
) -> WarehouseClient:
    """
    Dependencia para obtener el cliente del warehouse (BigQuery).
    
    Args:
        app_settings: Configuración de la aplicación
        
    Returns:
        WarehouseClient: Handle de BigQuery compartido por el proceso
    """
    return BigQueryClientProvider.get(app_settings)
