# inventory_tracker/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from inventory_tracker.database import get_db
from inventory_tracker.exceptions import ConflictError, NotFoundError
from inventory_tracker.models.product import Category
from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
from inventory_tracker.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from inventory_tracker.utils.audit import write_log
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/categories", tags=["Categories"])


def _get_category(store: InventoryStore, category_id: int) -> Category:
    category = store.categories.get(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique_name(store: InventoryStore, name: str, exclude_id: int = None) -> None:
    existing = store.categories.get_by_name(name)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("Category name already exists")


@router.get("", response_model=List[CategoryOut])
def list_categories(
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.categories.all()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: int,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return _get_category(store, category_id)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    name = payload.name.strip()
    _ensure_unique_name(store, name)

    category = store.categories.add(Category(name=name, description=payload.description))
    store.commit()
    store.refresh(category)

    write_log(
        db, user_id=current_user.id, action="create", entity="category", entity_id=category.id,
        description=f'Created category "{category.name}"', request=request,
    )
    return category


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    category = _get_category(store, category_id)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name"):
        changes["name"] = changes["name"].strip()
        _ensure_unique_name(store, changes["name"], exclude_id=category.id)
    for key, value in changes.items():
        setattr(category, key, value)
    store.commit()
    store.refresh(category)

    write_log(
        db, user_id=current_user.id, action="update", entity="category", entity_id=category.id,
        description=f'Updated category "{category.name}"', meta={"fields": sorted(changes)}, request=request,
    )
    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    category = _get_category(store, category_id)

    in_use = store.products.count_in_category(category.id)
    if in_use:
        raise ConflictError(f"Cannot delete category: {in_use} products still reference it")

    cid, cname = category.id, category.name
    store.categories.delete(category)
    store.commit()

    write_log(
        db, user_id=current_user.id, action="delete", entity="category", entity_id=cid,
        description=f'Deleted category "{cname}"', request=request,
    )
    return {"detail": f"Category '{cname}' deleted"}
