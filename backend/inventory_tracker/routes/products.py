# inventory_tracker/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from inventory_tracker.config import settings
from inventory_tracker.database import get_db
from inventory_tracker.exceptions import ConflictError, NotFoundError
from inventory_tracker.models.product import Product
from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
import inventory_tracker.schemas.product as product_schemas
from inventory_tracker.utils.audit import write_log
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/products", tags=["Products"])

# Columns a partial update may not clear
REQUIRED_FIELDS = {
    "name", "category_id", "cost_price", "price", "quantity",
    "low_stock_threshold", "has_expiry", "discontinued",
}


# ---- HELPERS ----
def _get_product(store: InventoryStore, product_id: int) -> Product:
    product = store.products.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product

def _require_category(store: InventoryStore, category_id: int) -> None:
    if store.categories.get(category_id) is None:
        raise NotFoundError("Category not found")

def _commit(store: InventoryStore) -> None:
    try:
        store.commit()
    except IntegrityError:
        store.rollback()
        raise ConflictError("SKU or barcode already in use")
    except StaleDataError:
        store.rollback()
        raise ConflictError("Product was modified by another request, please retry")


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=product_schemas.ProductListPage)
def list_products(
    q: Optional[str] = Query(None, description="Search by name, SKU or barcode"),
    category_id: Optional[int] = Query(None),
    supplier: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=1000),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    total, items = store.products.search(
        q=q, category_id=category_id, supplier=supplier, page=page, page_size=page_size
    )
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/low-stock", response_model=List[product_schemas.ProductOut])
def list_low_stock_products(
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.products.below_threshold()


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return _get_product(store, product_id)


@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    _require_category(store, payload.category_id)

    data = payload.model_dump()
    if data["low_stock_threshold"] is None:
        data["low_stock_threshold"] = settings.LOW_STOCK_DEFAULT
    if data["location"] is None:
        data.pop("location")

    product = store.products.add(Product(**data, created_by=current_user.id))
    _commit(store)
    store.refresh(product)

    write_log(
        db, user_id=current_user.id, action="create", entity="product", entity_id=product.id,
        description=f'Created product "{product.name}"', request=request,
    )
    return product


@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    product = _get_product(store, product_id)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("category_id") is not None:
        _require_category(store, changes["category_id"])
    for key, value in changes.items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(product, key, value)
    _commit(store)
    store.refresh(product)

    write_log(
        db, user_id=current_user.id, action="update", entity="product", entity_id=product.id,
        description=f'Updated product "{product.name}"', meta={"fields": sorted(changes)}, request=request,
    )
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    product = _get_product(store, product_id)
    pid, pname = product.id, product.name
    store.products.delete(product)
    _commit(store)

    write_log(
        db, user_id=current_user.id, action="delete", entity="product", entity_id=pid,
        description=f'Deleted product "{pname}"', request=request,
    )
    return {"detail": f"Product '{pname}' deleted"}
