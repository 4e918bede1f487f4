# backend/inventory_tracker/models/product.py
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column, Integer, String, Float, Boolean, DateTime, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship

from inventory_tracker.database import Base
from inventory_tracker.utils.dates import utcnow, days_until

EXPIRY_SOON_DAYS = 7
EXPIRY_MONTH_DAYS = 30


# Category
# A named product group. Every product references exactly one category.
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    products = relationship("Product", back_populates="category")

    @property
    def product_count(self) -> int:
        return len(self.products)


# Product
# A single stocked item: catalogue data, pricing, on-hand quantity and
# optional expiry tracking. The version column guards against lost updates
# when two requests read-modify-write the same row.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    supplier = Column(String, nullable=True)

    # Pricing
    cost_price = Column(Float, CheckConstraint("cost_price >= 0"), nullable=False, default=0.0)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)

    # Inventory
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False, default=0)
    low_stock_threshold = Column(Integer, CheckConstraint("low_stock_threshold >= 0"), nullable=False, default=10)
    location = Column(String, nullable=True, default="Main Storage")

    # Tracking codes (unique when present)
    barcode = Column(String, unique=True, nullable=True)
    sku = Column(String, unique=True, nullable=True)

    # Expiry tracking
    has_expiry = Column(Boolean, nullable=False, default=False)
    expiry_date = Column(DateTime, nullable=True)

    discontinued = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    version = Column(Integer, nullable=False)

    category = relationship("Category", back_populates="products")

    __mapper_args__ = {"version_id_col": version}

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None

    @property
    def stock_value(self) -> float:
        return self.price * self.quantity

    @property
    def profit_per_unit(self) -> float:
        return self.price - (self.cost_price or 0)

    @property
    def total_profit(self) -> float:
        return self.profit_per_unit * self.quantity

    @property
    def is_low_stock(self) -> bool:
        return self.quantity < self.low_stock_threshold

    def days_until_expiry(self, now: Optional[datetime] = None) -> Optional[int]:
        if not self.has_expiry or self.expiry_date is None:
            return None
        return days_until(self.expiry_date, now)

    def get_expiry_status(self, now: Optional[datetime] = None) -> str:
        days = self.days_until_expiry(now)
        if days is None:
            return "none"
        if days < 0:
            return "expired"
        if days <= EXPIRY_SOON_DAYS:
            return "expiring-soon"
        if days <= EXPIRY_MONTH_DAYS:
            return "expiring-month"
        return "fresh"

    @property
    def expiry_status(self) -> str:
        return self.get_expiry_status()

    def __repr__(self):
        return f"<Product {self.id}: {self.name} qty={self.quantity}>"
