from inventory_tracker.models.users import User
from inventory_tracker.models.product import Category, Product
from inventory_tracker.models.stock import MovementType, StockMovement
from inventory_tracker.models.log import ActivityLog

__all__ = ["User", "Category", "Product", "MovementType", "StockMovement", "ActivityLog"]
