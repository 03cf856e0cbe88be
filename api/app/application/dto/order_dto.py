"""
DTOs para lectura de ordenes.
"""

from typing import Any, Dict

from pydantic import BaseModel


class OrderDetailResponseDTO(BaseModel):
    """Detalle de una orden: id + campos normalizados (createdAt en ISO si es posible)."""

    ok: bool = True
    order: Dict[str, Any]
