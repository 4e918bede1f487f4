from inventory_tracker.repositories.base import (
    ActivityLogRepository,
    CategoryRepository,
    ProductRepository,
    StockMovementRepository,
    Store,
)
from inventory_tracker.repositories.sql import InventoryStore, get_store

__all__ = [
    "ActivityLogRepository",
    "CategoryRepository",
    "ProductRepository",
    "StockMovementRepository",
    "Store",
    "InventoryStore",
    "get_store",
]
