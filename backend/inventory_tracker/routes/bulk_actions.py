# inventory_tracker/routes/bulk_actions.py
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
from inventory_tracker.schemas import bulk as bulk_schemas
from inventory_tracker.services import InventoryLedger
from inventory_tracker.services.export import products_to_csv
from inventory_tracker.utils.audit import request_origin
from inventory_tracker.utils.dates import utcnow
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/bulk-actions", tags=["Bulk actions"])


def get_ledger(store: InventoryStore = Depends(get_store)) -> InventoryLedger:
    return InventoryLedger(store)


@router.post("/products/update", response_model=bulk_schemas.BulkActionResult)
def bulk_update_products(
    payload: bulk_schemas.BulkUpdateRequest,
    ledger: InventoryLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    updates = payload.updates.model_dump(exclude_unset=True)
    count = ledger.bulk_update(payload.product_ids, updates, performed_by=current_user.id)
    return {"message": f"Successfully updated {count} products", "affected": count}


@router.post("/products/delete", response_model=bulk_schemas.BulkActionResult)
def bulk_delete_products(
    payload: bulk_schemas.ProductIds,
    ledger: InventoryLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    count = ledger.bulk_delete(payload.product_ids, performed_by=current_user.id)
    return {"message": f"Successfully deleted {count} products", "affected": count}


@router.post("/products/adjust-price", response_model=bulk_schemas.BulkActionResult)
def bulk_adjust_price(
    payload: bulk_schemas.PriceAdjustRequest,
    ledger: InventoryLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    count = ledger.bulk_price_adjust(
        payload.product_ids, payload.adjustment_type, payload.value, performed_by=current_user.id
    )
    return {"message": f"Successfully adjusted prices for {count} products", "affected": count}


@router.post("/products/change-category", response_model=bulk_schemas.BulkActionResult)
def bulk_change_category(
    payload: bulk_schemas.CategoryChangeRequest,
    ledger: InventoryLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    count = ledger.bulk_category_change(payload.product_ids, payload.category_id, performed_by=current_user.id)
    return {"message": f"Successfully moved {count} products", "affected": count}


# Export the selected products (or all of them) as CSV
@router.post("/products/export-csv")
def export_products_csv(
    request: Request,
    payload: Optional[bulk_schemas.ProductIds] = None,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    product_ids = payload.product_ids if payload else []
    if product_ids:
        products = store.products.by_ids(product_ids)
    else:
        products = store.products.all()

    content = products_to_csv(products)

    store.activity.record(
        user_id=current_user.id, action="export", entity="product",
        description=f"Exported {len(products)} products to CSV",
        meta={"product_ids": product_ids},
        **request_origin(request),
    )
    store.commit()

    filename = f"products-export-{int(utcnow().timestamp() * 1000)}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
