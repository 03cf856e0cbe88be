"""
Endpoints de lectura de ordenes.
"""
from fastapi import APIRouter, Depends

from app.api.v1.dependencies.use_case_deps import get_order_use_cases
from app.application.dto.order_dto import OrderDetailResponseDTO
from app.application.use_cases.order_use_cases import OrderUseCases


router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponseDTO,
    summary="Detalle de una orden"
)
async def get_order(
    order_id: str,
    use_cases: OrderUseCases = Depends(get_order_use_cases)
) -> OrderDetailResponseDTO:
    """
    Obtiene una orden por id.
    
    createdAt se devuelve en ISO8601 cuando es interpretable.
    Responde 404 si la orden no existe.
    """
    order = await use_cases.get_order_detail(order_id)
    return OrderDetailResponseDTO(order=order)
