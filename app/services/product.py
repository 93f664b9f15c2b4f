"""
Product service containing business logic layer
"""

from typing import List, Optional

from app.core.errors import ErrorResponse
from app.core.logger import logger
from app.repositories.product import ProductRepository
from app.schemas.product import AvailabilityResponse, ProductCreate, ProductResponse, ProductUpdate
from app.telemetry import get_telemetry_client
from app.telemetry.client import TelemetryClient


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, repository: ProductRepository, telemetry: Optional[TelemetryClient] = None):
        self.repository = repository
        self.telemetry = telemetry or get_telemetry_client()

    async def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """Create a new product"""
        product = await self.repository.create(product_data)

        logger.info(
            f"Created product {product.id}",
            metadata={"event": "create_product", "product_id": product.id}
        )
        self.telemetry.log_event(f"Created product {product.id} ({product.name})", "INFO")

        return product

    async def get_all_products(self) -> List[ProductResponse]:
        """List the whole catalog"""
        return await self.repository.get_all()

    async def get_product(self, product_id: str) -> ProductResponse:
        """Get product by ID"""
        product = await self.repository.get_by_id(product_id)
        if not product:
            self.telemetry.log_event(f"Product {product_id} not found", "WARN")
            raise ErrorResponse("Product not found", status_code=404)

        logger.debug(
            f"Fetched product {product_id}",
            metadata={"event": "get_product", "product_id": product_id}
        )
        return product

    async def get_products_by_category(self, category: str) -> List[ProductResponse]:
        """List products of one category"""
        return await self.repository.get_by_category(category)

    async def update_product(self, product_id: str, product_data: ProductUpdate) -> ProductResponse:
        """Update product fields"""
        product = await self.repository.update(product_id, product_data)
        if not product:
            raise ErrorResponse("Product not found", status_code=404)

        logger.info(
            f"Updated product {product_id}",
            metadata={"event": "update_product", "product_id": product_id}
        )
        self.telemetry.log_event(f"Updated product {product_id}", "INFO")

        return product

    async def update_stock(self, product_id: str, quantity: int) -> ProductResponse:
        """Replace the stock quantity of a product"""
        product = await self.repository.update_stock(product_id, quantity)
        if not product:
            raise ErrorResponse("Product not found", status_code=404)

        logger.info(
            f"Updated stock of product {product_id} to {quantity}",
            metadata={"event": "update_stock", "product_id": product_id, "quantity": quantity}
        )
        self.telemetry.log_event(f"Stock of product {product_id} set to {quantity}", "INFO")

        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product"""
        if not await self.repository.delete(product_id):
            raise ErrorResponse("Product not found", status_code=404)

        logger.info(
            f"Deleted product {product_id}",
            metadata={"event": "delete_product", "product_id": product_id}
        )
        self.telemetry.log_event(f"Deleted product {product_id}", "INFO")

    async def is_product_available(self, product_id: str, quantity: int) -> AvailabilityResponse:
        """Check that at least ``quantity`` units are in stock"""
        if quantity < 1:
            raise ErrorResponse("Quantity must be at least 1", status_code=400)

        product = await self.get_product(product_id)
        return AvailabilityResponse(
            product_id=product_id,
            requested_quantity=quantity,
            stock_quantity=product.stock_quantity,
            available=product.stock_quantity >= quantity,
        )
