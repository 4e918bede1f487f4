# backend/inventory_tracker/repositories/sql.py
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from inventory_tracker.database import get_db
from inventory_tracker.models import ActivityLog, Category, Product, StockMovement
from inventory_tracker.utils.dates import utcnow


class SqlProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Product).options(joinedload(Product.category))

    def get(self, product_id: int) -> Optional[Product]:
        return self._query().filter(Product.id == product_id).first()

    def all(self) -> List[Product]:
        return self._query().order_by(Product.id.asc()).all()

    def by_ids(self, product_ids: Sequence[int]) -> List[Product]:
        if not product_ids:
            return []
        return self._query().filter(Product.id.in_(list(product_ids))).order_by(Product.id.asc()).all()

    def search(
        self,
        q: Optional[str] = None,
        category_id: Optional[int] = None,
        supplier: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[int, List[Product]]:
        query = self._query()

        # Filter by name, SKU or barcode
        if q:
            like = f"%{q}%"
            query = query.filter(or_(Product.name.ilike(like), Product.sku.ilike(like), Product.barcode.ilike(like)))
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        if supplier:
            query = query.filter(Product.supplier.ilike(f"%{supplier}%"))

        total = query.count()
        items = (query
                 .order_by(Product.created_at.desc(), Product.id.desc())
                 .offset((page - 1) * page_size)
                 .limit(page_size)
                 .all())
        return total, items

    def below_threshold(self) -> List[Product]:
        # Compares two columns of the same row
        return (self._query()
                .filter(Product.quantity < Product.low_stock_threshold)
                .order_by(Product.quantity.asc(), Product.id.asc())
                .all())

    def with_expiry(self) -> List[Product]:
        return (self._query()
                .filter(Product.has_expiry.is_(True), Product.expiry_date.isnot(None))
                .all())

    def count_in_category(self, category_id: int) -> int:
        return self.db.query(Product).filter(Product.category_id == category_id).count()

    def add(self, product: Product) -> Product:
        self.db.add(product)
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)

    def update_many(self, product_ids: Sequence[int], values: Dict[str, Any]) -> int:
        # Set-based update bypasses the ORM version check, so bump it by hand
        assignments = {getattr(Product, key): value for key, value in values.items()}
        assignments[Product.version] = Product.version + 1
        assignments[Product.updated_at] = utcnow()
        return (self.db.query(Product)
                .filter(Product.id.in_(list(product_ids)))
                .update(assignments, synchronize_session="fetch"))

    def delete_many(self, product_ids: Sequence[int]) -> int:
        return (self.db.query(Product)
                .filter(Product.id.in_(list(product_ids)))
                .delete(synchronize_session="fetch"))


class SqlCategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, category_id: int) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def all(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name.asc()).all()

    def add(self, category: Category) -> Category:
        self.db.add(category)
        return category

    def delete(self, category: Category) -> None:
        self.db.delete(category)


class SqlStockMovementRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, movement: StockMovement) -> StockMovement:
        self.db.add(movement)
        return movement

    def search(
        self,
        product_id: Optional[int] = None,
        type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[StockMovement]:
        query = self.db.query(StockMovement).options(
            joinedload(StockMovement.product), joinedload(StockMovement.user)
        )
        if product_id is not None:
            query = query.filter(StockMovement.product_id == product_id)
        if type:
            query = query.filter(StockMovement.type == type)
        if start is not None:
            query = query.filter(StockMovement.created_at >= start)
        if end is not None:
            query = query.filter(StockMovement.created_at <= end)

        query = query.order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class SqlActivityLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        *,
        user_id: int,
        action: str,
        entity: str,
        description: str,
        entity_id: Optional[int] = None,
        meta: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=user_id, action=action, entity=entity, entity_id=entity_id,
            description=description, meta=meta, ip_address=ip_address, user_agent=user_agent,
        )
        self.db.add(entry)
        return entry

    def search(
        self,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        entity: Optional[str] = None,
        entity_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityLog]:
        query = self.db.query(ActivityLog)
        if user_id is not None:
            query = query.filter(ActivityLog.user_id == user_id)
        if action:
            query = query.filter(ActivityLog.action == action)
        if entity:
            query = query.filter(ActivityLog.entity == entity)
        if entity_id is not None:
            query = query.filter(ActivityLog.entity_id == entity_id)
        if start is not None:
            query = query.filter(ActivityLog.created_at >= start)
        if end is not None:
            query = query.filter(ActivityLog.created_at <= end)

        query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()


class InventoryStore:
    """Repositories bound to one session; commit/rollback cover all of them."""

    def __init__(self, db: Session):
        self.db = db
        self.products = SqlProductRepository(db)
        self.categories = SqlCategoryRepository(db)
        self.movements = SqlStockMovementRepository(db)
        self.activity = SqlActivityLogRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, instance: Any) -> None:
        self.db.refresh(instance)


def get_store(db: Session = Depends(get_db)) -> InventoryStore:
    return InventoryStore(db)
