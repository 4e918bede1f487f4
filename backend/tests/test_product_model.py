"""Derived product figures and expiry classification"""
from datetime import datetime, timedelta

from inventory_tracker.models import Product

NOW = datetime(2026, 3, 1, 12, 0, 0)


def _product(**overrides):
    data = dict(name="Yoghurt", category_id=1, price=10.0, cost_price=6.0, quantity=5, low_stock_threshold=10)
    data.update(overrides)
    return Product(**data)


class TestDerivedFigures:
    def test_value_and_profit(self):
        product = _product()

        assert product.stock_value == 50
        assert product.profit_per_unit == 4
        assert product.total_profit == 20
        assert product.is_low_stock is True

    def test_low_stock_is_strictly_below_threshold(self):
        assert _product(quantity=10).is_low_stock is False
        assert _product(quantity=9).is_low_stock is True

    def test_missing_cost_price_counts_as_zero(self):
        product = _product(cost_price=None)
        assert product.profit_per_unit == 10


class TestExpiryStatus:
    def test_no_expiry_tracking(self):
        assert _product().get_expiry_status(NOW) == "none"
        # A date without the flag is ignored
        assert _product(expiry_date=NOW).get_expiry_status(NOW) == "none"
        assert _product(has_expiry=True, expiry_date=None).get_expiry_status(NOW) == "none"

    def test_expiring_within_a_week(self):
        product = _product(has_expiry=True, expiry_date=NOW + timedelta(days=5))
        assert product.days_until_expiry(NOW) == 5
        assert product.get_expiry_status(NOW) == "expiring-soon"

    def test_expired_yesterday(self):
        product = _product(has_expiry=True, expiry_date=NOW - timedelta(days=1))
        assert product.days_until_expiry(NOW) == -1
        assert product.get_expiry_status(NOW) == "expired"

    def test_partial_days_round_up(self):
        product = _product(has_expiry=True, expiry_date=NOW + timedelta(days=7, hours=1))
        assert product.days_until_expiry(NOW) == 8
        assert product.get_expiry_status(NOW) == "expiring-month"

    def test_fresh_beyond_thirty_days(self):
        product = _product(has_expiry=True, expiry_date=NOW + timedelta(days=45))
        assert product.get_expiry_status(NOW) == "fresh"
