"""Application service: Create Order use case.

The POS hot path.  Builds the order with price snapshots, runs every line
through the FulfillmentLedger (batch consumption, summary deduction,
frozen unit cost) and persists the order, all in one unit of work: either
the order and all of its inventory effects become visible, or none do.

Creation never fails for lack of stock.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable

from posledger.application.dto import LineItemSpec, OrderDTO, OrderSpec, order_to_dto
from posledger.domain.exceptions import EntityNotFoundError, UnknownProductError, ValidationError
from posledger.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    OrderType,
    next_order_number,
)
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        branch_id: int = 1,
    ) -> None:
        self._uow = uow
        self._today = today
        self._branch_id = branch_id

    def handle(self, spec: OrderSpec) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Validate header values (status, type, discounts).
        2. Build line items with caller or catalog prices (snapshot).
        3. Let the ledger consume stock and freeze each line's cost.
        4. Persist and return a DTO.
        """
        status = _parse_enum(OrderStatus, spec.status, "status")
        order_type = _parse_enum(OrderType, spec.order_type, "order type")
        discount_percentage = _non_negative(spec.discount_percentage, "Discount percentage").amount
        discount_amount = _non_negative(spec.discount_amount, "Discount amount")
        delivery_fee = _non_negative(spec.delivery_fee, "Delivery fee")

        with self._uow as uow:
            line_items = [self._build_line_item(uow, item) for item in spec.items]

            today = self._today()
            order = Order.create(
                order_number=next_order_number(
                    today, uow.orders.last_order_number(today.strftime("%Y%m%d"))
                ),
                items=line_items,
                status=status,
                discount_percentage=discount_percentage,
                discount_amount=discount_amount,
                delivery_fee=delivery_fee,
                order_type=order_type,
                table_number=spec.table_number,
                payment_method=spec.payment_method,
                cashier_id=spec.cashier_id,
                shift_id=spec.shift_id,
                branch_id=self._branch_id,
                notes=spec.notes,
                customer_name=spec.customer_name,
                customer_phone=spec.customer_phone,
                customer_address=spec.customer_address,
            )

            ledger = FulfillmentLedger.for_unit_of_work(uow, today=self._today)
            ledger.fulfill_order(order.items)

            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order %s created: %d items, total=%s cost=%s",
            order.order_number, len(order.items), order.total.amount, order.total_cost.amount,
        )
        return order_to_dto(order)

    @staticmethod
    def _build_line_item(uow: UnitOfWork, spec: LineItemSpec) -> OrderLineItem:
        if spec.unit_price is not None:
            unit_price = Money.of(spec.unit_price)
        elif spec.combo_id is not None:
            combo = uow.combos.get_by_id(spec.combo_id)
            if combo is None:
                raise EntityNotFoundError(f"Combo #{spec.combo_id} not found", combo_id=spec.combo_id)
            unit_price = combo.price
        elif spec.product_id is not None:
            product = uow.products.get_by_id(spec.product_id)
            if product is None:
                raise UnknownProductError(
                    f"Product #{spec.product_id} not found", product_id=spec.product_id
                )
            unit_price = product.price
        else:
            raise ValidationError("Line item must reference a product or a combo")

        return OrderLineItem(
            quantity=Quantity(spec.quantity),
            unit_price=unit_price,  # <-- price snapshot
            product_id=spec.product_id,
            combo_id=spec.combo_id,
            notes=spec.notes,
            variation_id=spec.variation_id,
            is_spicy=spec.is_spicy,
        )


def _parse_enum(enum_cls, value: str, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}' (expected one of: {allowed})")


def _non_negative(value: str | Decimal, label: str) -> Money:
    try:
        amount = Decimal(str(value or 0))
    except ArithmeticError:
        raise ValidationError(f"{label} is not a number: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{label} is not a number: {value!r}")
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative")
    return Money(amount)
