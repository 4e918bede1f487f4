# backend/inventory_tracker/services/export.py
import csv
from typing import Iterable, List

import pandas as pd

from inventory_tracker.models import Product
from inventory_tracker.utils.dates import format_day_month_year

EXPORT_COLUMNS = [
    "Product ID",
    "Name",
    "Category",
    "Supplier",
    "Price",
    "Quantity",
    "Total Value",
    "Low Stock Alert",
    "Status",
    "Date Added",
    "Last Updated",
]


def product_status(product: Product) -> str:
    # Being out of stock outranks the discontinued flag
    if product.quantity == 0:
        return "Out of Stock"
    if product.discontinued:
        return "Discontinued"
    return "Active"


def export_row(product: Product) -> List:
    return [
        product.id,
        product.name,
        product.category_name or "N/A",
        product.supplier or "N/A",
        f"{product.price:.2f}",
        product.quantity,
        f"{product.stock_value:.2f}",
        "Yes" if product.is_low_stock else "No",
        product_status(product),
        format_day_month_year(product.created_at),
        format_day_month_year(product.updated_at),
    ]


def products_to_csv(products: Iterable[Product]) -> str:
    """Render products as CSV with every cell quoted."""
    frame = pd.DataFrame([export_row(p) for p in products], columns=EXPORT_COLUMNS)
    return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
