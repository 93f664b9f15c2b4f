"""
Product API endpoints
Thin HTTP layer over ProductService with dependency injection
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.errors import ErrorResponseModel
from app.dependencies.product import get_product_service
from app.schemas.product import (
    AvailabilityResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockUpdateRequest,
)
from app.services.product import ProductService

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponseModel, "description": "Product not found"}}


@router.post(
    "",
    response_model=ProductResponse,
    summary="Create a new product",
    responses={503: {"model": ErrorResponseModel}},
)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    """Creates a new product in the catalog with the provided details"""
    return await service.create_product(product)


@router.get("", response_model=List[ProductResponse], summary="Retrieve all products")
async def get_all_products(service: ProductService = Depends(get_product_service)):
    """Returns a list of all products in the catalog"""
    return await service.get_all_products()


@router.get(
    "/category/{category}",
    response_model=List[ProductResponse],
    summary="Get products by category",
)
async def get_products_by_category(
    category: str,
    service: ProductService = Depends(get_product_service),
):
    """Retrieves all products that belong to a specific category"""
    return await service.get_products_by_category(category)


@router.get("/{product_id}", response_model=ProductResponse, responses=NOT_FOUND, summary="Get product by ID")
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Retrieves a specific product using its unique identifier"""
    return await service.get_product(product_id)


@router.get(
    "/{product_id}/availability",
    response_model=AvailabilityResponse,
    responses=NOT_FOUND,
    summary="Check product availability",
)
async def check_availability(
    product_id: str,
    quantity: int = Query(1, ge=1, description="Quantity requested"),
    service: ProductService = Depends(get_product_service),
):
    """Checks whether the requested quantity is in stock"""
    return await service.is_product_available(product_id, quantity)


@router.put("/{product_id}", response_model=ProductResponse, responses=NOT_FOUND, summary="Update product")
async def update_product(
    product_id: str,
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    """Updates an existing product with new information"""
    return await service.update_product(product_id, product)


@router.put(
    "/{product_id}/stock",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Update product stock",
)
async def update_stock(
    product_id: str,
    request: StockUpdateRequest,
    service: ProductService = Depends(get_product_service),
):
    """Updates the inventory quantity for a specific product"""
    return await service.update_stock(product_id, request.quantity)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Removes a product from the catalog permanently"""
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
