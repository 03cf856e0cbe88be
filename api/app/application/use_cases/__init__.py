"""
Casos de uso de la aplicacion.
"""
from .order_use_cases import OrderUseCases

__all__ = ["OrderUseCases"]
