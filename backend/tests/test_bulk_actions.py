import pytest
from sqlalchemy.orm.exc import StaleDataError

from inventory_tracker.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from inventory_tracker.models import ActivityLog, Category, Product, StockMovement
from inventory_tracker.services import InventoryLedger


@pytest.fixture
def ledger(store):
    return InventoryLedger(store)


def _prices(db, ids):
    db.expire_all()
    return [db.get(Product, pid).price for pid in ids]


class TestPriceAdjustment:
    def test_percentage_increase(self, ledger, db, user, make_product):
        a = make_product(price=10.0)
        b = make_product(price=25.0)

        count = ledger.bulk_price_adjust([a.id, b.id], "percentage", 10, performed_by=user.id)

        assert count == 2
        assert _prices(db, [a.id, b.id]) == pytest.approx([11.0, 27.5])

    def test_fixed_decrease(self, ledger, db, user, make_product):
        product = make_product(price=10.0)
        ledger.bulk_price_adjust([product.id], "fixed", -2.5, performed_by=user.id)
        assert _prices(db, [product.id]) == [7.5]

    def test_price_never_goes_below_zero(self, ledger, db, user, make_product):
        a = make_product(price=10.0)
        b = make_product(price=3.0)

        ledger.bulk_price_adjust([a.id], "percentage", -150, performed_by=user.id)
        ledger.bulk_price_adjust([b.id], "fixed", -5, performed_by=user.id)

        assert _prices(db, [a.id, b.id]) == [0.0, 0.0]

    def test_unknown_ids_are_skipped(self, ledger, user, make_product):
        product = make_product()
        assert ledger.bulk_price_adjust([product.id, 404], "fixed", 1, performed_by=user.id) == 1

    @pytest.mark.parametrize("ids, mode, value", [
        ([], "fixed", 1),
        ([1], "discount", 5),
        ([1], "fixed", 0),
        ([1], "percentage", float("nan")),
        ([1], "fixed", None),
    ])
    def test_invalid_arguments(self, ledger, user, ids, mode, value):
        with pytest.raises(InvalidArgumentError):
            ledger.bulk_price_adjust(ids, mode, value, performed_by=user.id)

    def test_writes_one_bulk_record(self, ledger, db, user, make_product):
        a, b = make_product(), make_product()
        ledger.bulk_price_adjust([a.id, b.id], "percentage", 5, performed_by=user.id)

        logs = db.query(ActivityLog).filter(ActivityLog.action == "bulk-action").all()
        assert len(logs) == 1
        assert logs[0].meta["product_ids"] == [a.id, b.id]

    def test_failure_part_way_keeps_earlier_products(self, ledger, store, db, user, make_product, monkeypatch):
        """Products are committed one by one, so a conflict on the second
        leaves the first repriced and the second untouched."""
        a = make_product(price=10.0)
        b = make_product(price=25.0)

        commit = store.commit
        calls = []

        def commit_with_conflict_on_second_product():
            calls.append(1)
            if len(calls) == 2:
                raise StaleDataError("products row was updated concurrently")
            commit()

        monkeypatch.setattr(store, "commit", commit_with_conflict_on_second_product)

        with pytest.raises(ConflictError):
            ledger.bulk_price_adjust([a.id, b.id], "percentage", 10, performed_by=user.id)

        assert _prices(db, [a.id, b.id]) == pytest.approx([11.0, 25.0])
        [log] = db.query(ActivityLog).filter(ActivityLog.action == "bulk-action").all()
        assert log.meta["product_ids"] == [a.id, b.id]
        assert log.meta["updated_ids"] == [a.id]


class TestCategoryChange:
    def test_moves_products(self, ledger, db, user, make_product):
        frozen = Category(name="Frozen")
        db.add(frozen)
        db.commit()
        a, b = make_product(), make_product()

        count = ledger.bulk_category_change([a.id, b.id], frozen.id, performed_by=user.id)

        assert count == 2
        db.expire_all()
        assert {db.get(Product, pid).category_id for pid in (a.id, b.id)} == {frozen.id}

    def test_missing_category(self, ledger, user, make_product):
        product = make_product()
        with pytest.raises(NotFoundError):
            ledger.bulk_category_change([product.id], 999, performed_by=user.id)
        with pytest.raises(InvalidArgumentError):
            ledger.bulk_category_change([product.id], None, performed_by=user.id)


class TestBulkUpdate:
    def test_applies_fields_and_bumps_version(self, ledger, db, user, make_product):
        product = make_product(supplier="Old Co")
        version = product.version

        count = ledger.bulk_update([product.id], {"supplier": "New Co", "discontinued": True}, performed_by=user.id)

        assert count == 1
        db.expire_all()
        updated = db.get(Product, product.id)
        assert updated.supplier == "New Co"
        assert updated.discontinued is True
        assert updated.version == version + 1

    def test_rejects_fields_outside_whitelist(self, ledger, user, make_product):
        product = make_product()
        with pytest.raises(InvalidArgumentError):
            ledger.bulk_update([product.id], {"version": 7}, performed_by=user.id)

    def test_quantity_only_changes_through_movements(self, ledger, db, user, make_product):
        product = make_product(quantity=50)

        with pytest.raises(InvalidArgumentError):
            ledger.bulk_update([product.id], {"quantity": 0}, performed_by=user.id)

        db.expire_all()
        assert db.get(Product, product.id).quantity == 50

    @pytest.mark.parametrize("field", ["name", "price", "cost_price", "low_stock_threshold", "discontinued"])
    def test_rejects_clearing_required_fields(self, ledger, db, user, make_product, field):
        product = make_product(price=10.0)

        with pytest.raises(InvalidArgumentError):
            ledger.bulk_update([product.id], {field: None}, performed_by=user.id)

        db.expire_all()
        assert db.get(Product, product.id).price == 10.0
        assert db.query(ActivityLog).count() == 0

    def test_optional_fields_can_be_cleared(self, ledger, db, user, make_product):
        product = make_product(supplier="Old Co")

        ledger.bulk_update([product.id], {"supplier": None}, performed_by=user.id)

        db.expire_all()
        assert db.get(Product, product.id).supplier is None

    def test_rejects_empty_updates(self, ledger, user, make_product):
        product = make_product()
        with pytest.raises(InvalidArgumentError):
            ledger.bulk_update([product.id], {}, performed_by=user.id)


class TestBulkDelete:
    def test_movements_outlive_deleted_products(self, ledger, db, user, make_product, make_movement):
        product = make_product()
        make_movement(product, "sale", 3)
        product_id = product.id

        assert ledger.bulk_delete([product_id], performed_by=user.id) == 1

        db.expire_all()
        assert db.get(Product, product_id) is None
        movements = db.query(StockMovement).filter(StockMovement.product_id == product_id).all()
        assert len(movements) == 1
        assert movements[0].product_name is None
