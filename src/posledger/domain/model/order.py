"""Order aggregate.

The Order owns its line items.  Inventory effects are not triggered from
status changes ad hoc: ``Order.transition_to`` consults an explicit
``(from, to) -> effect`` table and returns the effect the caller must
apply before the new status is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderType(Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"


class InventoryEffect(Enum):
    NONE = "none"
    REVERSE_INVENTORY = "reverse_inventory"


# Transitions out of CANCELLED are absent on purpose: cancellation is
# terminal, which is what makes the inventory reversal happen exactly once.
TRANSITIONS: dict[tuple[OrderStatus, OrderStatus], InventoryEffect] = {
    (OrderStatus.PENDING, OrderStatus.PENDING): InventoryEffect.NONE,
    (OrderStatus.PENDING, OrderStatus.COMPLETED): InventoryEffect.NONE,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): InventoryEffect.REVERSE_INVENTORY,
    (OrderStatus.COMPLETED, OrderStatus.PENDING): InventoryEffect.NONE,
    (OrderStatus.COMPLETED, OrderStatus.COMPLETED): InventoryEffect.NONE,
    (OrderStatus.COMPLETED, OrderStatus.CANCELLED): InventoryEffect.REVERSE_INVENTORY,
}

MAX_LINE_ITEMS = 100
DEFAULT_BRANCH_ID = 1


@dataclass
class OrderLineItem:
    """A sold product or combo.

    ``unit_price`` and ``unit_cost_price`` are snapshots taken at sale
    time; later catalog or cost changes never reach an existing order.
    """

    quantity: Quantity
    unit_price: Money
    product_id: int | None = None
    combo_id: int | None = None
    unit_cost_price: Money | None = None
    notes: str | None = None
    variation_id: int | None = None
    is_spicy: bool = False

    def __post_init__(self) -> None:
        if (self.product_id is None) == (self.combo_id is None):
            raise ValidationError(
                "Line item must reference exactly one of product or combo",
                product_id=self.product_id,
                combo_id=self.combo_id,
            )

    @property
    def is_combo(self) -> bool:
        return self.combo_id is not None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def line_cost(self) -> Money:
        if self.unit_cost_price is None:
            return Money.zero()
        return self.unit_cost_price * self.quantity.value

    def freeze_cost(self, unit_cost_price: Money) -> None:
        if self.unit_cost_price is not None:
            raise ValidationError("Line item cost has already been captured")
        self.unit_cost_price = unit_cost_price


def next_order_number(today: date, last_number: str | None) -> str:
    """Daily sequence: ``YYYYMMDD`` followed by a 4-digit counter."""
    prefix = today.strftime("%Y%m%d")
    if last_number and last_number.startswith(prefix):
        sequence = int(last_number[len(prefix):]) + 1
    else:
        sequence = 1
    return f"{prefix}{sequence:04d}"


@dataclass
class Order:
    """Aggregate root for a POS sale.

    Use ``Order.create()`` for new orders; ``__init__`` stays simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    order_type: OrderType = OrderType.DINE_IN
    table_number: str | None = None
    payment_method: str | None = None
    cashier_id: int | None = None
    shift_id: int | None = None
    branch_id: int = DEFAULT_BRANCH_ID
    discount_percentage: Decimal = Decimal("0")
    discount_amount: Money = field(default_factory=Money.zero)
    delivery_fee: Money = field(default_factory=Money.zero)
    notes: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        items: list[OrderLineItem],
        status: OrderStatus = OrderStatus.PENDING,
        discount_percentage: Decimal | int | str = 0,
        discount_amount: Money | None = None,
        delivery_fee: Money | None = None,
        **details,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not items:
            raise ValidationError("Order must contain at least one item")
        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
        if status == OrderStatus.CANCELLED:
            raise ValidationError("An order cannot be created as cancelled")

        percentage = Decimal(str(discount_percentage or 0))
        if percentage < 0:
            raise ValidationError("Discount percentage cannot be negative")

        order = Order(
            id=None,
            order_number=order_number,
            items=list(items),
            status=status,
            discount_percentage=percentage,
            discount_amount=discount_amount or Money.zero(),
            delivery_fee=delivery_fee or Money.zero(),
            **details,
        )
        if status == OrderStatus.COMPLETED:
            order.completed_at = order.created_at
        return order

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus) -> InventoryEffect:
        """Move to *new_status* and return the inventory effect to apply."""
        effect = TRANSITIONS.get((self.status, new_status))
        if effect is None:
            raise ValidationError(
                f"Cannot change order from {self.status.value} to {new_status.value}",
                order_id=self.id,
                from_status=self.status.value,
                to_status=new_status.value,
            )
        self.status = new_status
        if new_status == OrderStatus.COMPLETED:
            self.completed_at = self.completed_at or datetime.now(timezone.utc)
        else:
            self.completed_at = None
        return effect

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def effective_discount(self) -> Money:
        if not self.discount_amount.is_zero:
            return self.discount_amount
        return Money(self.subtotal.amount * self.discount_percentage / 100)

    @property
    def total(self) -> Money:
        amount = (
            self.subtotal.amount
            - self.effective_discount.amount
            + self.delivery_fee.amount
        )
        return Money(max(amount, Decimal("0")))

    @property
    def total_cost(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_cost
        return result

    @property
    def product_items(self) -> list[OrderLineItem]:
        return [item for item in self.items if item.product_id is not None]
