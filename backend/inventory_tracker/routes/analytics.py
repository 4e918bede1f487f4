# inventory_tracker/routes/analytics.py
from typing import List

from fastapi import APIRouter, Depends

from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
from inventory_tracker.schemas import analytics as analytics_schemas
from inventory_tracker.schemas.product import ProductOut
from inventory_tracker.services import AnalyticsAggregator
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


def get_aggregator(store: InventoryStore = Depends(get_store)) -> AnalyticsAggregator:
    return AnalyticsAggregator(store)


# === Dashboard summary ===
@router.get("/dashboard", response_model=analytics_schemas.DashboardResponse)
def dashboard(
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_user),
):
    return aggregator.dashboard()


# === Inventory valuation ===
@router.get("/valuation", response_model=analytics_schemas.ValuationResponse)
def valuation(
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_user),
):
    return aggregator.valuation()


# === Alerts ===
@router.get("/alerts/low-stock", response_model=List[ProductOut])
def low_stock_alerts(
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_user),
):
    return aggregator.low_stock()


@router.get("/alerts/expiry", response_model=List[analytics_schemas.ExpiryAlert])
def expiry_alerts(
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_user),
):
    return aggregator.expiry_alerts()


# === Restock suggestions from sales velocity ===
@router.get("/ai/restock-suggestions", response_model=List[analytics_schemas.RestockSuggestion])
def restock_suggestions(
    aggregator: AnalyticsAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_user),
):
    return aggregator.restock_suggestions()
