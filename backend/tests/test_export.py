from datetime import datetime

from inventory_tracker.models import Category, Product
from inventory_tracker.services.export import EXPORT_COLUMNS, export_row, product_status, products_to_csv


def _product(**overrides):
    data = dict(
        id=7, name="Sparkling Water", price=1.5, cost_price=0.5, quantity=4, low_stock_threshold=10,
        supplier="Springs Ltd", discontinued=False,
        created_at=datetime(2026, 1, 5, 9, 30), updated_at=datetime(2026, 2, 14, 18, 0),
    )
    data.update(overrides)
    product = Product(**data)
    product.category = Category(name="Beverages")
    return product


class TestProductStatus:
    def test_out_of_stock_wins_over_discontinued(self):
        assert product_status(_product(quantity=0, discontinued=True)) == "Out of Stock"

    def test_discontinued(self):
        assert product_status(_product(discontinued=True)) == "Discontinued"

    def test_active(self):
        assert product_status(_product()) == "Active"


class TestExportRow:
    def test_formats_values(self):
        assert export_row(_product()) == [
            7, "Sparkling Water", "Beverages", "Springs Ltd", "1.50", 4, "6.00",
            "Yes", "Active", "05/01/2026", "14/02/2026",
        ]

    def test_missing_values_render_as_na(self):
        product = _product(supplier=None)
        product.category = None

        row = export_row(product)

        assert row[2] == "N/A"
        assert row[3] == "N/A"


class TestCsv:
    def test_every_cell_is_quoted(self):
        content = products_to_csv([_product(), _product(id=8, name='12" Pizza', quantity=20)])

        lines = content.splitlines()
        assert lines[0] == ",".join(f'"{column}"' for column in EXPORT_COLUMNS)
        assert lines[1].startswith('"7","Sparkling Water","Beverages"')
        assert lines[2].startswith('"8","12"" Pizza"')
        assert '"No","Active"' in lines[2]
        assert len(lines) == 3

    def test_empty_selection_still_has_header(self):
        assert products_to_csv([]).splitlines() == [",".join(f'"{column}"' for column in EXPORT_COLUMNS)]
