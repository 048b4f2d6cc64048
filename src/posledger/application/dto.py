"""Data Transfer Objects: plain containers that cross layer boundaries.

Specs carry caller input into the handlers; DTOs carry results back out
without exposing domain internals.  Prices and totals are formatted for
display (``"$15.00"``); unit costs keep full cost precision
(``"8.8571"``) because they feed reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from posledger.domain.model.batch import ConsumedLine, StockBatch
from posledger.domain.model.order import Order


# --- Input specs --------------------------------------------------------------


@dataclass(frozen=True)
class ReceiveBatchSpec:
    """Input: one received lot.

    Either ``product_id`` or ``product_name`` must be given; an unknown
    name creates a new inventory-only product.
    """

    quantity: int
    unit_cost: str | Decimal
    product_id: int | None = None
    product_name: str | None = None
    expiry_date: date | None = None
    supplier: str | None = None
    notes: str | None = None
    category_id: int | None = None


@dataclass(frozen=True)
class LineItemSpec:
    """Input: one sold product or combo (exactly one id set)."""

    quantity: int
    product_id: int | None = None
    combo_id: int | None = None
    unit_price: str | Decimal | None = None  # defaults to the catalog price
    notes: str | None = None
    variation_id: int | None = None
    is_spicy: bool = False


@dataclass(frozen=True)
class OrderSpec:
    items: list[LineItemSpec]
    status: str = "pending"
    order_type: str = "dine_in"
    table_number: str | None = None
    payment_method: str | None = None
    cashier_id: int | None = None
    shift_id: int | None = None
    discount_percentage: str | Decimal = "0"
    discount_amount: str | Decimal = "0"
    delivery_fee: str | Decimal = "0"
    notes: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None


# --- Output DTOs --------------------------------------------------------------


@dataclass(frozen=True)
class BatchDTO:
    id: int
    product_id: int
    quantity: int
    original_quantity: int
    cost_price: str
    expiry_date: str | None
    received_date: str
    supplier: str | None
    notes: str | None


@dataclass(frozen=True)
class ReceiptDTO:
    batch_id: int
    product_id: int
    inventory_quantity: int
    avg_cost: str


@dataclass(frozen=True)
class ConsumedLineDTO:
    batch_id: int
    quantity_taken: int
    unit_cost: str


@dataclass(frozen=True)
class DeductionDTO:
    product_id: int
    quantity: int
    total_cost: str
    old_quantity: int
    new_quantity: int
    reason: str | None
    lines: list[ConsumedLineDTO] = field(default_factory=list)


@dataclass(frozen=True)
class AdjustmentDTO:
    product_id: int
    old_quantity: int
    new_quantity: int
    difference: int
    reason: str


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: int | None
    combo_id: int | None
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    unit_cost_price: str
    line_total: str
    notes: str | None
    variation_id: int | None
    is_spicy: bool


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    status: str
    order_type: str
    table_number: str | None
    items: list[OrderLineItemDTO]
    subtotal: str
    discount: str
    delivery_fee: str
    total: str
    total_cost: str
    customer_name: str | None
    created_at: str
    completed_at: str | None


# --- Mapping ------------------------------------------------------------------


def batch_to_dto(batch: StockBatch) -> BatchDTO:
    return BatchDTO(
        id=batch.id,  # type: ignore[arg-type]
        product_id=batch.product_id,
        quantity=batch.quantity,
        original_quantity=batch.original_quantity,
        cost_price=str(batch.cost_price.amount),
        expiry_date=batch.expiry_date.isoformat() if batch.expiry_date else None,
        received_date=batch.received_date.strftime("%Y-%m-%d %H:%M UTC"),
        supplier=batch.supplier,
        notes=batch.notes,
    )


def consumed_line_to_dto(line: ConsumedLine) -> ConsumedLineDTO:
    return ConsumedLineDTO(
        batch_id=line.batch_id,
        quantity_taken=line.quantity_taken,
        unit_cost=str(line.unit_cost.amount),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        status=order.status.value,
        order_type=order.order_type.value,
        table_number=order.table_number,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                combo_id=item.combo_id,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                unit_cost_price=str(item.unit_cost_price.amount) if item.unit_cost_price else "0",
                line_total=str(item.line_total),
                notes=item.notes,
                variation_id=item.variation_id,
                is_spicy=item.is_spicy,
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        discount=str(order.effective_discount),
        delivery_fee=str(order.delivery_fee),
        total=str(order.total),
        total_cost=str(order.total_cost.amount),
        customer_name=order.customer_name,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        completed_at=(
            order.completed_at.strftime("%Y-%m-%d %H:%M UTC") if order.completed_at else None
        ),
    )
