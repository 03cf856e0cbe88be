"""
Excepciones del pipeline de sincronización Firestore -> BigQuery.

Taxonomía:
- ConfigurationException: faltan identificadores de destino (500, sin trabajo)
- InvalidSinceException: `since` no es fecha válida (400, antes de leer)
- SourceReadException: falla leyendo Firestore (500, sin inserts)

Los errores de insert por lote NO son excepciones: quedan registrados en
el resumen del lote y la corrida continúa.
"""
from app.shared.exceptions.base import AppException
from app.shared.exceptions.domain import ValidationException


class ConfigurationException(AppException):
    """Excepción cuando la configuración de despliegue está incompleta o malformada."""
    
    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"missing": missing} if missing else None
        )


class InvalidSinceException(ValidationException):
    """Excepción cuando `since` no es una fecha ISO8601 válida."""
    
    def __init__(self, value: str):
        super().__init__(
            message='Fecha "since" ISO inválida',
            field="since",
            details={"value": value}
        )


class SourceReadException(AppException):
    """Excepción cuando falla la lectura de la colección origen."""
    
    def __init__(self, collection: str, cause: Exception):
        super().__init__(
            message=f"Error leyendo la colección '{collection}': {cause}",
            status_code=500,
            error_code="SOURCE_READ_ERROR",
            details={"collection": collection}
        )
