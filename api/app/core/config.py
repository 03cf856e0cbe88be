"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Los identificadores de origen (Firestore) y destino (BigQuery) del sync son
configuracion de despliegue: nunca vienen del request.
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.
    
    Credenciales de Google:
    - BigQuery: GCLOUD_SERVICE_KEY (JSON) o ADC con BQ_PROJECT_ID
    - Firestore: FIREBASE_SERVICE_ACCOUNT (JSON), o FIREBASE_PROJECT_ID +
      FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY, o ADC
    """
    
    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Order Sync API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")
    
    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    
    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")
    
    # Firestore (origen)
    FIRESTORE_COLLECTION: str = Field(default="orders")
    FIRESTORE_ORDER_BY_FIELD: str = Field(default="createdAt")
    FIREBASE_SERVICE_ACCOUNT: str = Field(default="")
    FIREBASE_PROJECT_ID: str = Field(default="")
    FIREBASE_CLIENT_EMAIL: str = Field(default="")
    FIREBASE_PRIVATE_KEY: str = Field(default="")
    
    # BigQuery (destino)
    BQ_PROJECT_ID: str = Field(default="")
    BQ_DATASET_ID: str = Field(default="")
    BQ_TABLE_ID: str = Field(default="orders")
    GCLOUD_SERVICE_KEY: str = Field(default="")
    
    # Defaults por corrida (overridable por request)
    BQ_BATCH_SIZE: int = Field(default=500, ge=1)
    SYNC_LIMIT: int = Field(default=1000, ge=1)
    
    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")
    
    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
