# backend/inventory_tracker/services/analytics.py
"""
Read-only analytics over the product catalogue and the movement history.

Nothing here writes to the store. ``now`` can be passed to every report so
the time windows are reproducible.
"""
import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from inventory_tracker.models import MovementType, Product
from inventory_tracker.repositories.base import Store
from inventory_tracker.utils.dates import utcnow

TOP_PRODUCTS_LIMIT = 10
RECENT_ACTIVITY_DAYS = 30

EXPIRY_ALERT_DAYS = 30
EXPIRY_CRITICAL_DAYS = 7

SALES_WINDOW_DAYS = 90
RESTOCK_HORIZON_DAYS = 30
RESTOCK_SUPPLY_DAYS = 60
NO_SALES_DAYS_REMAINING = 999
# Cost estimate when a product has no cost price
FALLBACK_COST_RATIO = 0.6

URGENCY_RANK = {"urgent": 0, "high": 1, "medium": 2, "low": 3}

UNCATEGORIZED = "Uncategorized"


def profit_margin(total_value: float, total_profit: float) -> float:
    if total_value <= 0:
        return 0
    return round(total_profit / total_value * 100, 2)


def inventory_totals(products: List[Product]) -> Dict:
    total_value = sum(p.price * p.quantity for p in products)
    total_cost = sum((p.cost_price or 0) * p.quantity for p in products)
    total_profit = total_value - total_cost
    return {
        "total_products": len(products),
        "total_quantity": sum(p.quantity for p in products),
        "total_value": total_value,
        "total_cost": total_cost,
        "total_profit": total_profit,
        "profit_margin": profit_margin(total_value, total_profit),
    }


def expiry_alert_status(days: int) -> str:
    if days < 0:
        return "expired"
    if days <= EXPIRY_CRITICAL_DAYS:
        return "critical"
    if days <= EXPIRY_ALERT_DAYS:
        return "warning"
    return "ok"


def restock_urgency(days_remaining: float) -> str:
    if days_remaining < 7:
        return "urgent"
    if days_remaining < 14:
        return "high"
    if days_remaining < RESTOCK_HORIZON_DAYS:
        return "medium"
    return "low"


def summarize_movements(movements) -> Dict:
    by_type: Dict[str, Dict] = {}
    total_value = 0.0
    for movement in movements:
        bucket = by_type.setdefault(movement.type, {"count": 0, "total_quantity": 0, "total_value": 0.0})
        bucket["count"] += 1
        bucket["total_quantity"] += movement.quantity
        bucket["total_value"] += movement.total_value or 0
        total_value += movement.total_value or 0
    return {"total_movements": len(movements), "total_value": total_value, "by_type": by_type}


class AnalyticsAggregator:
    def __init__(self, store: Store):
        self.store = store

    def dashboard(self, now: Optional[datetime] = None) -> Dict:
        now = now or utcnow()
        products = self.store.products.all()

        alerts = {"low_stock": 0, "out_of_stock": 0, "expiring_soon": 0, "expired": 0}
        for p in products:
            if p.is_low_stock:
                alerts["low_stock"] += 1
            if p.quantity == 0:
                alerts["out_of_stock"] += 1
            status = p.get_expiry_status(now)
            if status in ("expiring-soon", "expiring-month"):
                alerts["expiring_soon"] += 1
            elif status == "expired":
                alerts["expired"] += 1

        # Value by category, categories without products are left out
        category_breakdown = []
        for category in self.store.categories.all():
            members = [p for p in products if p.category_id == category.id]
            if not members:
                continue
            category_breakdown.append({
                "name": category.name,
                "product_count": len(members),
                "quantity": sum(p.quantity for p in members),
                "value": sum(p.stock_value for p in members),
            })

        top_products = [
            {
                "id": p.id,
                "name": p.name,
                "category": p.category_name,
                "quantity": p.quantity,
                "value": p.stock_value,
            }
            for p in sorted(products, key=lambda p: p.stock_value, reverse=True)[:TOP_PRODUCTS_LIMIT]
        ]

        recent = self.store.movements.search(start=now - timedelta(days=RECENT_ACTIVITY_DAYS))
        activity = summarize_movements(recent)

        return {
            "inventory": inventory_totals(products),
            "alerts": alerts,
            "category_breakdown": category_breakdown,
            "top_products": top_products,
            "recent_activity": {
                "total_movements": activity["total_movements"],
                "by_type": activity["by_type"],
            },
        }

    def valuation(self) -> Dict:
        products = self.store.products.all()
        totals = inventory_totals(products)

        groups: "OrderedDict[str, Dict]" = OrderedDict()
        for p in products:
            name = p.category_name or UNCATEGORIZED
            group = groups.setdefault(name, {
                "category": name,
                "product_count": 0,
                "quantity": 0,
                "stock_value": 0.0,
                "cost_value": 0.0,
                "profit": 0.0,
            })
            group["product_count"] += 1
            group["quantity"] += p.quantity
            group["stock_value"] += p.stock_value
            group["cost_value"] += (p.cost_price or 0) * p.quantity
            group["profit"] = group["stock_value"] - group["cost_value"]

        return {
            "total_products": totals["total_products"],
            "total_quantity": totals["total_quantity"],
            "total_stock_value": totals["total_value"],
            "total_cost_value": totals["total_cost"],
            "total_profit": totals["total_profit"],
            "profit_margin": totals["profit_margin"],
            "by_category": list(groups.values()),
        }

    def low_stock(self) -> List[Product]:
        return self.store.products.below_threshold()

    def expiry_alerts(self, now: Optional[datetime] = None) -> List[Dict]:
        now = now or utcnow()
        alerts = []
        for p in self.store.products.with_expiry():
            days = p.days_until_expiry(now)
            if days is None or days > EXPIRY_ALERT_DAYS:
                continue
            alerts.append({
                "product": p,
                "days_until_expiry": days,
                "status": expiry_alert_status(days),
            })
        alerts.sort(key=lambda a: a["days_until_expiry"])
        return alerts

    def restock_suggestions(self, now: Optional[datetime] = None) -> List[Dict]:
        now = now or utcnow()
        sales = self.store.movements.search(
            type=MovementType.SALE.value, start=now - timedelta(days=SALES_WINDOW_DAYS)
        )
        sold: Dict[int, int] = {}
        for movement in sales:
            sold[movement.product_id] = sold.get(movement.product_id, 0) + movement.quantity

        suggestions = []
        for p in self.store.products.all():
            total_sold = sold.get(p.id, 0)
            average_daily_sales = total_sold / SALES_WINDOW_DAYS
            if average_daily_sales > 0:
                days_remaining = p.quantity / average_daily_sales
            else:
                days_remaining = NO_SALES_DAYS_REMAINING

            if days_remaining >= RESTOCK_HORIZON_DAYS and not p.is_low_stock:
                continue

            recommended = math.ceil(average_daily_sales * RESTOCK_SUPPLY_DAYS)
            unit_cost = p.cost_price or p.price * FALLBACK_COST_RATIO
            suggestions.append({
                "product": {
                    "id": p.id,
                    "name": p.name,
                    "current_quantity": p.quantity,
                    "category": p.category_name,
                },
                "analytics": {
                    "average_daily_sales": round(average_daily_sales, 2),
                    "total_sold_last_90_days": total_sold,
                    "days_of_stock_remaining": math.floor(days_remaining),
                },
                "suggestion": {
                    "recommended_order_quantity": recommended,
                    "urgency": restock_urgency(days_remaining),
                    "estimated_cost": recommended * unit_cost,
                },
            })

        # sort() is stable, ties keep catalogue order
        suggestions.sort(key=lambda s: URGENCY_RANK[s["suggestion"]["urgency"]])
        return suggestions

    def movement_summary(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict:
        return summarize_movements(self.store.movements.search(start=start, end=end))
