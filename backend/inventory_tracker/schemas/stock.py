# inventory_tracker/schemas/stock.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# Schema for recording a stock movement; type is validated by the ledger
class StockMovementCreate(BaseModel):
    product_id: int
    type: str
    quantity: int
    notes: Optional[str] = None
    reference: Optional[str] = None
    # Destination product, transfers only
    target_product_id: Optional[int] = None


# Schema for returning stock movement details
class StockMovementOut(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    type: str
    quantity: int
    previous_quantity: int
    new_quantity: int
    unit_price: Optional[float] = None
    total_value: Optional[float] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    counterpart_product_id: Optional[int] = None
    performed_by: int
    performed_by_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MovedProduct(BaseModel):
    id: int
    name: str
    new_quantity: int


# Result of an accepted movement
class StockMovementResult(BaseModel):
    movement: StockMovementOut
    product: MovedProduct
    counterpart: Optional[StockMovementOut] = None
    counterpart_product: Optional[MovedProduct] = None


class MovementTypeSummary(BaseModel):
    count: int
    total_quantity: int
    total_value: float


class MovementSummary(BaseModel):
    total_movements: int
    total_value: float
    by_type: Dict[str, MovementTypeSummary]
