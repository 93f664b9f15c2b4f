"""
Product repository for data access layer following Repository pattern
"""

from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.core.errors import ErrorResponse
from app.core.logger import logger
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate

# Fields every stored product must carry a value for
REQUIRED_FIELDS = ("name", "price", "stock_quantity")


class ProductRepository:
    """Repository for product data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_response(self, doc: dict) -> Optional[ProductResponse]:
        """Convert MongoDB document to ProductResponse schema"""
        if not doc:
            return None

        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return ProductResponse(**doc)

    @staticmethod
    def _object_id(product_id: str) -> Optional[ObjectId]:
        if not ObjectId.is_valid(product_id):
            return None
        return ObjectId(product_id)

    async def create(self, product_data: ProductCreate) -> ProductResponse:
        """Create a new product"""
        try:
            now = datetime.now(timezone.utc)
            doc = product_data.model_dump()
            doc.update({"created_at": now, "updated_at": now})

            result = await self.collection.insert_one(doc)
            doc["_id"] = result.inserted_id
            return self._doc_to_response(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error creating product: {e}")
            raise ErrorResponse("Database error during product creation", status_code=503)

    async def get_all(self) -> List[ProductResponse]:
        """List every product"""
        try:
            cursor = self.collection.find({})
            return [self._doc_to_response(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"MongoDB error listing products: {e}")
            raise ErrorResponse("Database error while listing products", status_code=503)

    async def get_by_id(self, product_id: str) -> Optional[ProductResponse]:
        """Get product by ID"""
        object_id = self._object_id(product_id)
        if object_id is None:
            return None

        try:
            doc = await self.collection.find_one({"_id": object_id})
            return self._doc_to_response(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error fetching product {product_id}: {e}")
            raise ErrorResponse("Database error while fetching product", status_code=503)

    async def get_by_category(self, category: str) -> List[ProductResponse]:
        """List products of one category"""
        try:
            cursor = self.collection.find({"category": category})
            return [self._doc_to_response(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"MongoDB error listing category {category}: {e}")
            raise ErrorResponse("Database error while listing products", status_code=503)

    async def update(self, product_id: str, product_data: ProductUpdate) -> Optional[ProductResponse]:
        """Apply the fields set on ``product_data``; None when the product does not exist"""
        changes = product_data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        return await self._update_fields(product_id, changes)

    async def update_stock(self, product_id: str, quantity: int) -> Optional[ProductResponse]:
        """Replace the stock quantity of a product"""
        return await self._update_fields(product_id, {"stock_quantity": quantity})

    async def _update_fields(self, product_id: str, changes: dict) -> Optional[ProductResponse]:
        object_id = self._object_id(product_id)
        if object_id is None:
            return None

        try:
            changes["updated_at"] = datetime.now(timezone.utc)
            doc = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
            return self._doc_to_response(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error updating product {product_id}: {e}")
            raise ErrorResponse("Database error during product update", status_code=503)

    async def delete(self, product_id: str) -> bool:
        """Delete a product; False when it does not exist"""
        object_id = self._object_id(product_id)
        if object_id is None:
            return False

        try:
            result = await self.collection.delete_one({"_id": object_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error deleting product {product_id}: {e}")
            raise ErrorResponse("Database error during product deletion", status_code=503)

    async def count(self) -> int:
        """Number of stored products"""
        try:
            return await self.collection.count_documents({})
        except PyMongoError as e:
            logger.error(f"MongoDB error counting products: {e}")
            raise ErrorResponse("Database error while counting products", status_code=503)
