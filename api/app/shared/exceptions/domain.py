"""
Excepciones relacionadas con la lógica de dominio.
"""
from typing import Any, Optional

from app.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""
    
    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class EntityNotFoundException(DomainException):
    """Excepción cuando no se encuentra una entidad."""
    
    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(
            message=f"{entity_name} con ID {entity_id} no encontrado",
            error_code="ENTITY_NOT_FOUND",
            details={"entity": entity_name, "id": str(entity_id)}
        )
        self.status_code = 404


class ValidationException(DomainException):
    """Excepción para errores de validación de input."""
    
    def __init__(self, message: str, field: Optional[str] = None, details=None):
        merged = dict(details or {})
        if field:
            merged["field"] = field
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=merged or None
        )
