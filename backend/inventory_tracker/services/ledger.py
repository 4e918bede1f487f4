# backend/inventory_tracker/services/ledger.py
"""
Inventory ledger.

Applies stock movements to products and runs the bulk product operations.
Every accepted movement writes an immutable snapshot (previous/new quantity,
price at the time) together with the product update in one transaction.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from sqlalchemy.orm.exc import StaleDataError

from inventory_tracker.exceptions import (
    ConflictError,
    InsufficientStockError,
    InvalidArgumentError,
    NotFoundError,
)
from inventory_tracker.models import MovementType, Product, StockMovement
from inventory_tracker.repositories.base import Store

logger = logging.getLogger(__name__)

DECREASING_TYPES = {MovementType.SALE, MovementType.DAMAGE}
INCREASING_TYPES = {MovementType.PURCHASE, MovementType.RETURN}

PRICE_ADJUSTMENT_MODES = ("percentage", "fixed")

# Fields a bulk update may touch. Quantity is absent: stock only changes
# through movements so every change leaves a snapshot.
BULK_UPDATE_FIELDS = {
    "name", "description", "category_id", "supplier", "cost_price", "price",
    "low_stock_threshold", "location", "has_expiry", "expiry_date",
    "discontinued",
}

# Bulk-updatable columns that cannot be cleared
BULK_REQUIRED_FIELDS = {
    "name", "category_id", "cost_price", "price", "low_stock_threshold",
    "has_expiry", "discontinued",
}


@dataclass
class MovementResult:
    movement: StockMovement
    product: Product
    # Incoming side of a transfer
    counterpart: Optional[StockMovement] = None
    counterpart_product: Optional[Product] = None


def parse_movement_type(value: Union[str, MovementType]) -> MovementType:
    try:
        return MovementType(value)
    except ValueError:
        raise InvalidArgumentError("Invalid movement type")


def movement_magnitude(quantity: Any) -> int:
    """Absolute integer size of a movement; signed input is accepted."""
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise InvalidArgumentError("Quantity must be a whole number")
    if isinstance(quantity, float) and not quantity.is_integer():
        raise InvalidArgumentError("Quantity must be a whole number")
    return abs(int(quantity))


def compute_new_quantity(movement_type: MovementType, previous: int, magnitude: int) -> int:
    if movement_type in DECREASING_TYPES:
        return previous - magnitude
    if movement_type in INCREASING_TYPES:
        return previous + magnitude
    if movement_type == MovementType.ADJUSTMENT:
        return magnitude
    # Transfers touch two products and go through InventoryLedger.transfer
    raise InvalidArgumentError(f"Movement type '{movement_type.value}' has no single-product rule")


def _require_ids(product_ids: Sequence[int]) -> list:
    if not product_ids:
        raise InvalidArgumentError("Product IDs are required")
    return list(product_ids)


class InventoryLedger:
    def __init__(self, store: Store):
        self.store = store

    # ---- movements ----

    def apply_movement(
        self,
        product_id: int,
        type: Union[str, MovementType],
        quantity: Any,
        performed_by: int,
        notes: Optional[str] = None,
        reference: Optional[str] = None,
        target_product_id: Optional[int] = None,
    ) -> MovementResult:
        movement_type = parse_movement_type(type)
        magnitude = movement_magnitude(quantity)

        if movement_type == MovementType.TRANSFER:
            return self.transfer(
                product_id, target_product_id, magnitude, performed_by,
                notes=notes, reference=reference,
            )

        product = self._get_product(product_id)
        previous = product.quantity
        new_quantity = compute_new_quantity(movement_type, previous, magnitude)
        if new_quantity < 0:
            logger.warning(
                "Rejected %s of %s on product %s: only %s in stock",
                movement_type.value, magnitude, product.id, previous,
            )
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}. Available: {previous}, requested: {magnitude}"
            )

        movement = self._record(product, movement_type, magnitude, new_quantity, performed_by, notes, reference)
        product.quantity = new_quantity

        self.store.activity.record(
            user_id=performed_by, action="create", entity="stock-movement",
            entity_id=product.id,
            description=f"Recorded {movement_type.value} of {magnitude} for {product.name}",
            meta={"product_id": product.id, "previous_quantity": previous, "new_quantity": new_quantity},
        )
        self._commit()
        self.store.refresh(movement)

        logger.info(
            "Stock movement %s: %s x%s on product %s (%s -> %s)",
            movement.id, movement_type.value, magnitude, product.id, previous, new_quantity,
        )
        return MovementResult(movement=movement, product=product)

    def transfer(
        self,
        source_id: int,
        target_id: Optional[int],
        quantity: Any,
        performed_by: int,
        notes: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> MovementResult:
        """Move stock from one product to another as a pair of transfer movements."""
        if target_id is None:
            raise InvalidArgumentError("Transfer requires a destination product")
        if target_id == source_id:
            raise InvalidArgumentError("Transfer source and destination must differ")

        magnitude = movement_magnitude(quantity)
        source = self._get_product(source_id)
        target = self._get_product(target_id)

        source_new = source.quantity - magnitude
        if source_new < 0:
            logger.warning(
                "Rejected transfer of %s from product %s: only %s in stock",
                magnitude, source.id, source.quantity,
            )
            raise InsufficientStockError(
                f"Insufficient stock for {source.name}. Available: {source.quantity}, requested: {magnitude}"
            )
        target_new = target.quantity + magnitude

        outgoing = self._record(source, MovementType.TRANSFER, magnitude, source_new, performed_by, notes, reference)
        outgoing.counterpart_product_id = target.id
        incoming = self._record(target, MovementType.TRANSFER, magnitude, target_new, performed_by, notes, reference)
        incoming.counterpart_product_id = source.id

        source.quantity = source_new
        target.quantity = target_new

        self.store.activity.record(
            user_id=performed_by, action="create", entity="stock-movement",
            entity_id=source.id,
            description=f"Transferred {magnitude} from {source.name} to {target.name}",
            meta={"source_id": source.id, "target_id": target.id, "quantity": magnitude},
        )
        self._commit()
        self.store.refresh(outgoing)
        self.store.refresh(incoming)

        logger.info("Transfer of %s from product %s to product %s", magnitude, source.id, target.id)
        return MovementResult(
            movement=outgoing, product=source, counterpart=incoming, counterpart_product=target,
        )

    # ---- bulk operations ----

    def bulk_price_adjust(self, product_ids: Sequence[int], mode: str, value: Any, performed_by: int) -> int:
        """Adjust prices one product at a time. Not atomic: a failure part way
        through leaves the products already processed updated, and the audit
        record lists only those."""
        ids = _require_ids(product_ids)
        if mode not in PRICE_ADJUSTMENT_MODES:
            raise InvalidArgumentError("Invalid adjustment type")
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value == 0:
            raise InvalidArgumentError("Valid adjustment value is required")

        updated_ids = []
        try:
            for product in self.store.products.by_ids(ids):
                product_id = product.id
                if mode == "percentage":
                    new_price = product.price * (1 + value / 100)
                else:
                    new_price = product.price + value
                product.price = max(new_price, 0.0)
                self._commit()
                updated_ids.append(product_id)
        except ConflictError:
            if updated_ids:
                self._record_price_adjustment(ids, updated_ids, mode, value, performed_by)
            logger.warning(
                "Bulk price adjustment stopped after %s of %s products", len(updated_ids), len(ids)
            )
            raise

        self._record_price_adjustment(ids, updated_ids, mode, value, performed_by)
        logger.info("Bulk price adjustment (%s %s) applied to %s products", mode, value, len(updated_ids))
        return len(updated_ids)

    def _record_price_adjustment(self, ids, updated_ids, mode, value, performed_by) -> None:
        suffix = "%" if mode == "percentage" else ""
        self.store.activity.record(
            user_id=performed_by, action="bulk-action", entity="product",
            description=f"Bulk price adjustment: {mode} {value}{suffix} on {len(updated_ids)} products",
            meta={"product_ids": ids, "updated_ids": updated_ids, "adjustment_type": mode, "value": value},
        )
        self.store.commit()

    def bulk_category_change(self, product_ids: Sequence[int], category_id: Optional[int], performed_by: int) -> int:
        ids = _require_ids(product_ids)
        if category_id is None:
            raise InvalidArgumentError("Category ID is required")
        category = self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category not found")

        count = self.store.products.update_many(ids, {"category_id": category.id})
        self.store.activity.record(
            user_id=performed_by, action="bulk-action", entity="product",
            description=f'Moved {count} products to category "{category.name}"',
            meta={"product_ids": ids, "category_id": category.id, "category_name": category.name},
        )
        self.store.commit()
        logger.info("Moved %s products to category %s", count, category.id)
        return count

    def bulk_update(self, product_ids: Sequence[int], updates: Dict[str, Any], performed_by: int) -> int:
        ids = _require_ids(product_ids)
        if not updates:
            raise InvalidArgumentError("Updates are required")
        unknown = set(updates) - BULK_UPDATE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"Fields cannot be bulk updated: {', '.join(sorted(unknown))}")
        cleared = sorted(key for key, value in updates.items() if value is None and key in BULK_REQUIRED_FIELDS)
        if cleared:
            raise InvalidArgumentError(f"Fields cannot be empty: {', '.join(cleared)}")
        if "category_id" in updates and self.store.categories.get(updates["category_id"]) is None:
            raise NotFoundError("Category not found")

        count = self.store.products.update_many(ids, updates)
        self.store.activity.record(
            user_id=performed_by, action="bulk-action", entity="product",
            description=f"Bulk updated {count} products",
            meta={"product_ids": ids, "fields": sorted(updates)},
        )
        self.store.commit()
        logger.info("Bulk updated %s products (fields: %s)", count, ", ".join(sorted(updates)))
        return count

    def bulk_delete(self, product_ids: Sequence[int], performed_by: int) -> int:
        ids = _require_ids(product_ids)
        count = self.store.products.delete_many(ids)
        self.store.activity.record(
            user_id=performed_by, action="bulk-action", entity="product",
            description=f"Bulk deleted {count} products",
            meta={"product_ids": ids},
        )
        self.store.commit()
        logger.info("Bulk deleted %s products", count)
        return count

    # ---- helpers ----

    def _get_product(self, product_id: int) -> Product:
        product = self.store.products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _record(self, product, movement_type, magnitude, new_quantity, performed_by, notes, reference) -> StockMovement:
        unit_price = product.price
        movement = StockMovement(
            product_id=product.id,
            type=movement_type.value,
            quantity=magnitude,
            previous_quantity=product.quantity,
            new_quantity=new_quantity,
            unit_price=unit_price,
            total_value=unit_price * magnitude,
            notes=notes,
            reference=reference,
            performed_by=performed_by,
        )
        return self.store.movements.add(movement)

    def _commit(self) -> None:
        try:
            self.store.commit()
        except StaleDataError:
            self.store.rollback()
            logger.warning("Concurrent product update detected, changes rolled back")
            raise ConflictError("Product was modified by another request, please retry")
