"""
Product request/response schemas for the catalog API
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class ProductBase(BaseModel):
    """Base Product model with all common fields"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: float = Field(..., ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    category: Optional[str] = None
    image_url: Optional[str] = None
    sku: Optional[str] = None


class ProductCreate(ProductBase):
    """Schema for creating a new product"""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating a product; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[float] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    image_url: Optional[str] = None
    sku: Optional[str] = None

    @field_validator("name", "price", "stock_quantity")
    @classmethod
    def required_fields_not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class StockUpdateRequest(BaseModel):
    """Schema for replacing the stock quantity of a product"""
    quantity: int = Field(..., ge=0)


class ProductResponse(ProductBase):
    """Product as returned by the API"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class AvailabilityResponse(BaseModel):
    """Result of a stock availability check"""
    product_id: str
    requested_quantity: int
    stock_quantity: int
    available: bool
