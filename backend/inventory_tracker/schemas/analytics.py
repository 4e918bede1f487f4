# inventory_tracker/schemas/analytics.py
from typing import Dict, List, Optional

from pydantic import BaseModel

from inventory_tracker.schemas.product import ProductOut
from inventory_tracker.schemas.stock import MovementTypeSummary

# === Dashboard ===

class InventoryTotals(BaseModel):
    total_products: int
    total_quantity: int
    total_value: float
    total_cost: float
    total_profit: float
    profit_margin: float

class AlertCounts(BaseModel):
    low_stock: int
    out_of_stock: int
    expiring_soon: int
    expired: int

class CategoryBreakdownItem(BaseModel):
    name: str
    product_count: int
    quantity: int
    value: float

class TopProduct(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    quantity: int
    value: float

class RecentActivity(BaseModel):
    total_movements: int
    by_type: Dict[str, MovementTypeSummary]

class DashboardResponse(BaseModel):
    inventory: InventoryTotals
    alerts: AlertCounts
    category_breakdown: List[CategoryBreakdownItem]
    top_products: List[TopProduct]
    recent_activity: RecentActivity

# === Valuation ===

class CategoryValuation(BaseModel):
    category: str
    product_count: int
    quantity: int
    stock_value: float
    cost_value: float
    profit: float

class ValuationResponse(BaseModel):
    total_products: int
    total_quantity: int
    total_stock_value: float
    total_cost_value: float
    total_profit: float
    profit_margin: float
    by_category: List[CategoryValuation]

# === Alerts ===

class ExpiryAlert(BaseModel):
    product: ProductOut
    days_until_expiry: int
    status: str

# === Restock suggestions ===

class SuggestedProduct(BaseModel):
    id: int
    name: str
    current_quantity: int
    category: Optional[str] = None

class SalesVelocity(BaseModel):
    average_daily_sales: float
    total_sold_last_90_days: int
    days_of_stock_remaining: int

class Suggestion(BaseModel):
    recommended_order_quantity: int
    urgency: str
    estimated_cost: float

class RestockSuggestion(BaseModel):
    product: SuggestedProduct
    analytics: SalesVelocity
    suggestion: Suggestion
