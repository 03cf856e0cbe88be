"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .order_dto import OrderDetailResponseDTO
from .sync_dto import (
    BatchSummaryDTO,
    InsertSummaryDTO,
    SyncOrdersResponseDTO,
    SyncEndpointInfoDTO,
)

__all__ = [
    "OrderDetailResponseDTO",
    "BatchSummaryDTO",
    "InsertSummaryDTO",
    "SyncOrdersResponseDTO",
    "SyncEndpointInfoDTO",
]
