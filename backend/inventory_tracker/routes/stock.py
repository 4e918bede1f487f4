# inventory_tracker/routes/stock.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
import inventory_tracker.schemas.stock as stock_schemas
from inventory_tracker.services import AnalyticsAggregator, InventoryLedger
from inventory_tracker.utils.dates import to_naive_utc
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/stock-movements", tags=["Stock"])


def _moved(product) -> dict:
    return {"id": product.id, "name": product.name, "new_quantity": product.quantity}


# Movement history, newest first
@router.get("", response_model=List[stock_schemas.StockMovementOut])
def list_movements(
    product_id: Optional[int] = Query(None),
    type: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=1000),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.movements.search(
        product_id=product_id, type=type,
        start=to_naive_utc(start_date), end=to_naive_utc(end_date), limit=limit,
    )


@router.get("/product/{product_id}", response_model=List[stock_schemas.StockMovementOut])
def list_product_movements(
    product_id: int,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.movements.search(product_id=product_id)


# Record a stock movement (sale, purchase, return, adjustment, damage, transfer)
@router.post("", response_model=stock_schemas.StockMovementResult, status_code=status.HTTP_201_CREATED)
def record_movement(
    payload: stock_schemas.StockMovementCreate,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    result = InventoryLedger(store).apply_movement(
        payload.product_id,
        payload.type,
        payload.quantity,
        performed_by=current_user.id,
        notes=payload.notes,
        reference=payload.reference,
        target_product_id=payload.target_product_id,
    )
    return {
        "movement": result.movement,
        "product": _moved(result.product),
        "counterpart": result.counterpart,
        "counterpart_product": _moved(result.counterpart_product) if result.counterpart_product else None,
    }


@router.get("/analytics/summary", response_model=stock_schemas.MovementSummary)
def movement_summary(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return AnalyticsAggregator(store).movement_summary(
        start=to_naive_utc(start_date), end=to_naive_utc(end_date)
    )
