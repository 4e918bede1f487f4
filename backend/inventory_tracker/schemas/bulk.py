# inventory_tracker/schemas/bulk.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from inventory_tracker.schemas.product import ExpiryDateMixin


class ProductIds(BaseModel):
    product_ids: List[int] = Field(default_factory=list)


class BulkFields(ExpiryDateMixin):
    """Fields that may be applied to many products at once."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    supplier: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    has_expiry: Optional[bool] = None
    expiry_date: Optional[datetime] = None
    discontinued: Optional[bool] = None


class BulkUpdateRequest(ProductIds):
    updates: BulkFields = Field(default_factory=BulkFields)


class PriceAdjustRequest(ProductIds):
    adjustment_type: str
    value: float


class CategoryChangeRequest(ProductIds):
    category_id: Optional[int] = None


class BulkActionResult(BaseModel):
    message: str
    affected: int
