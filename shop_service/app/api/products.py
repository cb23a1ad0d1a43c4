"""Product API endpoints"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, HTTPException, Path, Response, status
from fastapi.responses import JSONResponse

from product_sync.events import INT64_MAX

from ..schemas.product import ProductRead, ProductWrite
from ..services.product_service import ProductService
from ..services.results import (
    BadRequest,
    Created,
    Deleted,
    Found,
    NotFound,
    ProductResult,
)
from .dependencies import CorrelationIdDep, ProductServiceDep

router = APIRouter(prefix="/products")

# Store ids are positive signed 64-bit integers
ProductId = Annotated[int, Path(ge=1, le=INT64_MAX)]


def to_response(result: ProductResult) -> Response:
    """Map a service result onto status code and body"""
    if isinstance(result, Created):
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=result.product.to_json(),
            headers={"Location": f"/{result.product.id}"},
        )
    if isinstance(result, Found):
        if isinstance(result.value, list):
            content = [product.to_json() for product in result.value]
        else:
            content = result.value.to_json()
        return JSONResponse(status_code=status.HTTP_200_OK, content=content)
    if isinstance(result, Deleted):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if isinstance(result, NotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Product not found", "product_id": result.product_id},
        )
    if isinstance(result, BadRequest):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Product rejected", "reasons": result.reasons},
        )
    raise TypeError(f"Unexpected service result {result!r}")


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductWrite,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Create a product and probe the warehouse for its quantity"""
    result = await service.create_product(product_data, correlation_id=correlation_id)
    return to_response(result)


@router.get("", response_model=List[ProductRead])
async def list_products(service: ProductService = ProductServiceDep):
    """All products, in insertion order"""
    return to_response(await service.list_products())


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: ProductId,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    return to_response(
        await service.get_product(product_id, correlation_id=correlation_id)
    )


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: ProductId,
    product_data: ProductWrite,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Replace a product. Does not notify the warehouse."""
    result = await service.update_product(
        product_id, product_data, correlation_id=correlation_id
    )
    return to_response(result)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: ProductId,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    return to_response(
        await service.delete_product(product_id, correlation_id=correlation_id)
    )
