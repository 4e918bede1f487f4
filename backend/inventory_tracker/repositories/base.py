"""Storage-facing interfaces the ledger and analytics services depend on.

Services only talk to these protocols; ``repositories.sql`` provides the
SQLAlchemy-backed implementations used by the API.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from inventory_tracker.models import ActivityLog, Category, Product, StockMovement


class ProductRepository(Protocol):
    def get(self, product_id: int) -> Optional[Product]: ...

    def all(self) -> List[Product]: ...

    def by_ids(self, product_ids: Sequence[int]) -> List[Product]: ...

    def search(
        self,
        q: Optional[str] = None,
        category_id: Optional[int] = None,
        supplier: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[int, List[Product]]: ...

    def below_threshold(self) -> List[Product]: ...

    def with_expiry(self) -> List[Product]: ...

    def count_in_category(self, category_id: int) -> int: ...

    def add(self, product: Product) -> Product: ...

    def delete(self, product: Product) -> None: ...

    def update_many(self, product_ids: Sequence[int], values: Dict[str, Any]) -> int: ...

    def delete_many(self, product_ids: Sequence[int]) -> int: ...


class CategoryRepository(Protocol):
    def get(self, category_id: int) -> Optional[Category]: ...

    def get_by_name(self, name: str) -> Optional[Category]: ...

    def all(self) -> List[Category]: ...

    def add(self, category: Category) -> Category: ...

    def delete(self, category: Category) -> None: ...


class StockMovementRepository(Protocol):
    def add(self, movement: StockMovement) -> StockMovement: ...

    def search(
        self,
        product_id: Optional[int] = None,
        type: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[StockMovement]: ...


class ActivityLogRepository(Protocol):
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
    ) -> ActivityLog: ...

    def search(
        self,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        entity: Optional[str] = None,
        entity_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityLog]: ...


class Store(Protocol):
    """Unit of work grouping the repositories that share one transaction."""

    products: ProductRepository
    categories: CategoryRepository
    movements: StockMovementRepository
    activity: ActivityLogRepository

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def refresh(self, instance: Any) -> None: ...
