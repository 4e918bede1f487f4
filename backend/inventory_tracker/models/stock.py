# backend/inventory_tracker/models/stock.py
import enum

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from inventory_tracker.database import Base
from inventory_tracker.utils.dates import utcnow


class MovementType(str, enum.Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    RETURN = "return"
    ADJUSTMENT = "adjustment"
    DAMAGE = "damage"
    TRANSFER = "transfer"


# Append-only ledger entry recording a single change to a product's quantity.
# product_id is not a foreign key: movements outlive the
# products they reference once those are deleted.
class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)

    type = Column(String(20), nullable=False, index=True)

    # Magnitude of the movement, never negative
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False)
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, CheckConstraint("new_quantity >= 0"), nullable=False)

    # Price snapshot taken when the movement was recorded
    unit_price = Column(Float, nullable=True)
    total_value = Column(Float, nullable=True)

    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    # Other side of a transfer
    counterpart_product_id = Column(Integer, nullable=True)

    performed_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    product = relationship(
        "Product",
        primaryjoin="foreign(StockMovement.product_id) == Product.id",
        viewonly=True,
    )
    user = relationship("User")

    __table_args__ = (
        Index("ix_stock_movements_product_created", product_id, created_at),
    )

    @property
    def product_name(self):
        return self.product.name if self.product else None

    @property
    def performed_by_name(self):
        return self.user.name if self.user else None

    def __repr__(self):
        return f"<StockMovement {self.id}: {self.type} {self.quantity} on product {self.product_id}>"
