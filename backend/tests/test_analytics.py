from datetime import datetime, timedelta

import pytest

from inventory_tracker.models import Category
from inventory_tracker.services import AnalyticsAggregator
from inventory_tracker.services.analytics import profit_margin, restock_urgency

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def analytics(store):
    return AnalyticsAggregator(store)


class TestDashboard:
    def test_inventory_totals(self, analytics, make_product):
        make_product(price=10.0, cost_price=6.0, quantity=5)
        make_product(price=4.0, cost_price=1.0, quantity=10)

        inventory = analytics.dashboard(now=NOW)["inventory"]

        assert inventory["total_products"] == 2
        assert inventory["total_quantity"] == 15
        assert inventory["total_value"] == 90.0
        assert inventory["total_cost"] == 40.0
        assert inventory["total_profit"] == 50.0
        assert inventory["profit_margin"] == 55.56

    def test_margin_is_zero_without_stock_value(self, analytics, make_product):
        make_product(quantity=0)
        assert analytics.dashboard(now=NOW)["inventory"]["profit_margin"] == 0
        assert profit_margin(0, -5) == 0

    def test_alert_counts(self, analytics, make_product):
        make_product(quantity=0)
        make_product(quantity=3, low_stock_threshold=5)
        make_product(quantity=50, has_expiry=True, expiry_date=NOW + timedelta(days=3))
        make_product(quantity=50, has_expiry=True, expiry_date=NOW + timedelta(days=20))
        make_product(quantity=50, has_expiry=True, expiry_date=NOW - timedelta(days=2))

        alerts = analytics.dashboard(now=NOW)["alerts"]

        assert alerts == {"low_stock": 2, "out_of_stock": 1, "expiring_soon": 2, "expired": 1}

    def test_category_breakdown_skips_empty_categories(self, analytics, db, category, make_product):
        db.add(Category(name="Empty shelf"))
        db.commit()
        make_product(price=2.0, quantity=10)
        make_product(price=3.0, quantity=10)

        breakdown = analytics.dashboard(now=NOW)["category_breakdown"]

        assert breakdown == [{"name": "Beverages", "product_count": 2, "quantity": 20, "value": 50.0}]

    def test_top_products_by_stock_value(self, analytics, make_product):
        for i in range(12):
            make_product(name=f"Item {i}", price=float(i + 1), quantity=1)

        top = analytics.dashboard(now=NOW)["top_products"]

        assert len(top) == 10
        assert [p["name"] for p in top[:3]] == ["Item 11", "Item 10", "Item 9"]
        assert top[0]["category"] == "Beverages"

    def test_recent_activity_covers_last_thirty_days(self, analytics, make_product, make_movement):
        product = make_product()
        make_movement(product, "sale", 2, days_ago=1, now=NOW)
        make_movement(product, "sale", 4, days_ago=10, now=NOW)
        make_movement(product, "purchase", 20, days_ago=29, now=NOW)
        make_movement(product, "purchase", 20, days_ago=31, now=NOW)

        activity = analytics.dashboard(now=NOW)["recent_activity"]

        assert activity["total_movements"] == 3
        assert activity["by_type"]["sale"]["count"] == 2
        assert activity["by_type"]["sale"]["total_quantity"] == 6
        assert activity["by_type"]["purchase"]["count"] == 1


class TestValuation:
    def test_groups_by_category(self, analytics, db, make_product):
        snacks = Category(name="Snacks")
        db.add(snacks)
        db.commit()
        make_product(price=10.0, cost_price=4.0, quantity=2)
        make_product(price=5.0, cost_price=0.0, quantity=4, category_id=snacks.id)

        valuation = analytics.valuation()

        assert valuation["total_stock_value"] == 40.0
        assert valuation["total_cost_value"] == 8.0
        assert valuation["total_profit"] == 32.0
        assert valuation["profit_margin"] == 80.0
        by_name = {group["category"]: group for group in valuation["by_category"]}
        assert by_name["Snacks"]["profit"] == 20.0
        assert by_name["Beverages"]["cost_value"] == 8.0


class TestExpiryAlerts:
    def test_only_products_within_thirty_days_sorted(self, analytics, make_product):
        make_product(name="Milk", has_expiry=True, expiry_date=NOW + timedelta(days=5))
        make_product(name="Cheese", has_expiry=True, expiry_date=NOW + timedelta(days=20))
        make_product(name="Yoghurt", has_expiry=True, expiry_date=NOW - timedelta(days=1))
        make_product(name="Honey", has_expiry=True, expiry_date=NOW + timedelta(days=200))
        make_product(name="Salt", has_expiry=False, expiry_date=NOW + timedelta(days=2))

        alerts = analytics.expiry_alerts(now=NOW)

        assert [(a["product"].name, a["days_until_expiry"], a["status"]) for a in alerts] == [
            ("Yoghurt", -1, "expired"),
            ("Milk", 5, "critical"),
            ("Cheese", 20, "warning"),
        ]


class TestRestockSuggestions:
    def test_sales_velocity_scenario(self, analytics, make_product, make_movement):
        product = make_product(quantity=40, cost_price=6.0, low_stock_threshold=5)
        make_movement(product, "sale", 100, days_ago=10, now=NOW)
        make_movement(product, "sale", 80, days_ago=60, now=NOW)
        # Outside the 90 day window
        make_movement(product, "sale", 500, days_ago=120, now=NOW)

        [suggestion] = analytics.restock_suggestions(now=NOW)

        assert suggestion["product"]["id"] == product.id
        assert suggestion["product"]["current_quantity"] == 40
        assert suggestion["analytics"] == {
            "average_daily_sales": 2.0,
            "total_sold_last_90_days": 180,
            "days_of_stock_remaining": 20,
        }
        assert suggestion["suggestion"] == {
            "recommended_order_quantity": 120,
            "urgency": "medium",
            "estimated_cost": 720.0,
        }

    def test_healthy_stock_without_sales_is_skipped(self, analytics, make_product):
        make_product(quantity=100, low_stock_threshold=10)
        assert analytics.restock_suggestions(now=NOW) == []

    def test_low_stock_without_sales_is_suggested(self, analytics, make_product):
        make_product(quantity=2, low_stock_threshold=10)

        [suggestion] = analytics.restock_suggestions(now=NOW)

        assert suggestion["analytics"]["days_of_stock_remaining"] == 999
        assert suggestion["suggestion"]["urgency"] == "low"
        assert suggestion["suggestion"]["recommended_order_quantity"] == 0
        assert suggestion["suggestion"]["estimated_cost"] == 0

    def test_estimated_cost_falls_back_to_share_of_price(self, analytics, make_product, make_movement):
        product = make_product(quantity=5, price=10.0, cost_price=0.0)
        make_movement(product, "sale", 90, days_ago=1, now=NOW)

        [suggestion] = analytics.restock_suggestions(now=NOW)

        assert suggestion["suggestion"]["urgency"] == "urgent"
        assert suggestion["suggestion"]["recommended_order_quantity"] == 60
        assert suggestion["suggestion"]["estimated_cost"] == pytest.approx(360.0)

    def test_ordered_by_urgency(self, analytics, make_product, make_movement):
        medium = make_product(name="Medium", quantity=40)
        urgent = make_product(name="Urgent", quantity=5)
        high = make_product(name="High", quantity=20)
        for product in (medium, urgent, high):
            make_movement(product, "sale", 180, days_ago=5, now=NOW)

        names = [s["product"]["name"] for s in analytics.restock_suggestions(now=NOW)]

        assert names == ["Urgent", "High", "Medium"]

    @pytest.mark.parametrize("days, urgency", [(0, "urgent"), (6.9, "urgent"), (7, "high"), (13.9, "high"), (14, "medium"), (29.9, "medium"), (30, "low")])
    def test_urgency_bands(self, days, urgency):
        assert restock_urgency(days) == urgency


class TestMovementSummary:
    def test_window_and_totals(self, analytics, make_product, make_movement):
        product = make_product(price=2.0)
        make_movement(product, "sale", 5, days_ago=2, now=NOW)
        make_movement(product, "damage", 1, days_ago=3, now=NOW)
        make_movement(product, "sale", 5, days_ago=40, now=NOW)

        summary = analytics.movement_summary(start=NOW - timedelta(days=7), end=NOW)

        assert summary["total_movements"] == 2
        assert summary["total_value"] == 12.0
        assert summary["by_type"]["damage"] == {"count": 1, "total_quantity": 1, "total_value": 2.0}
