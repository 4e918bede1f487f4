from inventory_tracker.services.analytics import AnalyticsAggregator
from inventory_tracker.services.ledger import InventoryLedger, MovementResult

__all__ = ["AnalyticsAggregator", "InventoryLedger", "MovementResult"]
