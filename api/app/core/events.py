"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable
from fastapi import FastAPI
from loguru import logger

from app.core.config import settings
from app.infrastructure.external.firestore_sync.bigquery_client import BigQueryClientProvider
from app.infrastructure.external.firestore_sync.firestore_source import FirestoreClientProvider
from app.infrastructure.external.firestore_sync.sync_config import SyncTargetConfig


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Configura logging y valida configuracion al inicio."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")
            
            # Validar configuracion critica (solo advertencias: el sync falla por request)
            _validate_config()
            
            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )
            
            logger.success("Aplicacion iniciada correctamente")
            
        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise
    
    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []
    
    missing = SyncTargetConfig.from_settings(settings).missing_fields()
    if missing:
        warnings.append(f"Faltan {', '.join(missing)} - el sync de ordenes respondera 500")
    
    if not settings.GCLOUD_SERVICE_KEY:
        warnings.append("GCLOUD_SERVICE_KEY no configurada - BigQuery usara ADC")
    
    # Mostrar advertencias
    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.
    
    Args:
        app: Instancia de FastAPI
        
    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera los clientes de Google al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")
        
        BigQueryClientProvider.reset()
        FirestoreClientProvider.reset()
        logger.info("Clientes de Google cerrados")
        
        logger.success("Aplicacion cerrada correctamente")
    
    return shutdown
