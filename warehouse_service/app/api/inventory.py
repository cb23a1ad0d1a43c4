"""Administrative inventory endpoints"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, HTTPException, Path, status

from product_sync.events import INT64_MAX

from ..schemas.inventory import InventoryRead, QuantityUpdate
from ..services.inventory_service import InventoryService
from .dependencies import CorrelationIdDep, InventoryServiceDep

router = APIRouter(prefix="/inventory")

ProductId = Annotated[int, Path(ge=1, le=INT64_MAX)]


def _not_found(product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Inventory entry not found", "product_id": product_id},
    )


@router.get("", response_model=List[InventoryRead])
async def list_inventory(service: InventoryService = InventoryServiceDep):
    return [InventoryRead.model_validate(e) for e in await service.list_entries()]


@router.get("/{product_id}", response_model=InventoryRead)
async def get_inventory(
    product_id: ProductId, service: InventoryService = InventoryServiceDep
):
    entry = await service.get_entry(product_id)
    if entry is None:
        raise _not_found(product_id)
    return InventoryRead.model_validate(entry)


@router.put("/{product_id}", response_model=InventoryRead)
async def set_inventory_quantity(
    product_id: ProductId,
    update: QuantityUpdate,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: InventoryService = InventoryServiceDep,
):
    """Set the stock of a known product and push it to the shop"""
    entry = await service.set_quantity(
        product_id, update.quantity, correlation_id=correlation_id
    )
    if entry is None:
        raise _not_found(product_id)
    return InventoryRead.model_validate(entry)
