# inventory_tracker/schemas/product.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventory_tracker.utils.dates import to_naive_utc


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ExpiryDateMixin(BaseModel):
    @field_validator("expiry_date", check_fields=False)
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


# Schema for creating a new product
class ProductCreate(ExpiryDateMixin):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category_id: int
    supplier: Optional[str] = None
    cost_price: float = Field(0.0, ge=0)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    has_expiry: bool = False
    expiry_date: Optional[datetime] = None
    discontinued: bool = False


# Schema for partial product updates - all fields optional
class ProductUpdate(ExpiryDateMixin):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    supplier: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    has_expiry: Optional[bool] = None
    expiry_date: Optional[datetime] = None
    discontinued: Optional[bool] = None


# Full product representation including derived figures
class ProductOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    supplier: Optional[str] = None
    cost_price: float
    price: float
    quantity: int
    low_stock_threshold: int
    location: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    has_expiry: bool
    expiry_date: Optional[datetime] = None
    discontinued: bool
    created_at: datetime
    updated_at: datetime
    version: int

    stock_value: float
    profit_per_unit: float
    total_profit: float
    is_low_stock: bool
    expiry_status: str


# Paginated response for product listings
class ProductListPage(BaseModel):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
