"""InventoryRecord aggregate: the per-product stock summary.

Each stock-tracked product has exactly one InventoryRecord holding the
denormalized on-hand quantity and the moving weighted-average unit cost.
The record is a cache of batch state: sales are allowed to drive its
quantity negative (oversell), while batches themselves never go below zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.value_objects import COST_PLACES, Money

DEFAULT_MIN_QUANTITY = 5
DEFAULT_UNIT = "piece"


class StockStatus:
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    OK = "ok"


@dataclass(frozen=True)
class AdjustmentResult:
    """Before/after capture of a manual quantity change."""

    product_id: int
    old_quantity: int
    new_quantity: int
    reason: str | None = None

    @property
    def difference(self) -> int:
        return self.new_quantity - self.old_quantity


@dataclass
class InventoryRecord:
    """Aggregate root for the stock summary of one product.

    Invariant (intended, allowed to drift): ``quantity`` equals the sum of
    the product's active batch quantities.
    """

    product_id: int
    quantity: int
    avg_cost: Money
    min_quantity: int = DEFAULT_MIN_QUANTITY
    unit: str = DEFAULT_UNIT
    category_id: int | None = None
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def open(
        product_id: int,
        quantity: int,
        unit_cost: Money,
        min_quantity: int = DEFAULT_MIN_QUANTITY,
        category_id: int | None = None,
    ) -> InventoryRecord:
        """Create the record on the first receipt of a product."""
        return InventoryRecord(
            product_id=product_id,
            quantity=quantity,
            avg_cost=unit_cost,
            min_quantity=min_quantity,
            category_id=category_id,
        )

    @property
    def stock_status(self) -> str:
        if self.quantity <= 0:
            return StockStatus.OUT_OF_STOCK
        if self.quantity <= self.min_quantity:
            return StockStatus.LOW_STOCK
        return StockStatus.OK

    @property
    def stock_value(self) -> Money:
        return self.avg_cost * max(self.quantity, 0)

    def apply_receive(self, quantity: int, unit_cost: Money) -> None:
        """Add received stock and recompute the moving weighted average.

        ``new_avg = (old_qty * old_avg + qty * cost) / (old_qty + qty)``
        when the new total is positive, otherwise the received unit cost.
        A negative (oversold) quantity takes part in the average as-is.
        """
        if quantity <= 0:
            raise ValidationError("Receive quantity must be positive", quantity=quantity)
        new_total = self.quantity + quantity
        if new_total > 0:
            blended = (
                self.quantity * self.avg_cost.amount + quantity * unit_cost.amount
            ) / new_total
            if blended < 0:
                self.avg_cost = unit_cost
            else:
                self.avg_cost = Money(
                    blended.quantize(COST_PLACES, rounding=ROUND_HALF_UP),
                    unit_cost.currency,
                )
        else:
            self.avg_cost = unit_cost
        self.quantity = new_total
        self._touch()

    def apply_consume(self, quantity: int) -> None:
        """Deduct sold or written-off stock.  May drive quantity negative."""
        if quantity <= 0:
            raise ValidationError("Consume quantity must be positive", quantity=quantity)
        self.quantity -= quantity
        self._touch()

    def apply_restore(self, quantity: int) -> None:
        """Inverse of ``apply_consume`` (used by order cancellation)."""
        if quantity <= 0:
            raise ValidationError("Restore quantity must be positive", quantity=quantity)
        self.quantity += quantity
        self._touch()

    def set_quantity(self, new_quantity: int, reason: str | None = None) -> AdjustmentResult:
        """Absolute override for manual correction."""
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise ValidationError("Quantity must be an integer")
        if new_quantity < 0:
            raise ValidationError(
                "Inventory quantity cannot be set below zero", quantity=new_quantity
            )
        result = AdjustmentResult(
            product_id=self.product_id,
            old_quantity=self.quantity,
            new_quantity=new_quantity,
            reason=reason,
        )
        self.quantity = new_quantity
        self._touch()
        return result

    def set_category(self, category_id: int | None) -> None:
        self.category_id = category_id
        self._touch()

    def _touch(self) -> None:
        self.last_updated = datetime.now(timezone.utc)
