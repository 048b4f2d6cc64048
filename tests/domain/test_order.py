"""Unit tests for the Order aggregate."""

from datetime import date
from decimal import Decimal

import pytest

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.order import (
    MAX_LINE_ITEMS,
    InventoryEffect,
    Order,
    OrderLineItem,
    OrderStatus,
    next_order_number,
)
from posledger.domain.model.value_objects import Money, Quantity


def _item(qty: int = 1, price: str = "10.00", **kwargs) -> OrderLineItem:
    kwargs.setdefault("product_id", 1)
    return OrderLineItem(quantity=Quantity(qty), unit_price=Money.of(price), **kwargs)


def _order(status: OrderStatus = OrderStatus.PENDING, **kwargs) -> Order:
    return Order.create("202406010001", [_item(2, "15.00"), _item(1, "5.00", product_id=2)],
                        status=status, **kwargs)


class TestOrderLineItem:

    def test_requires_exactly_one_target(self):
        with pytest.raises(ValidationError, match="exactly one"):
            OrderLineItem(quantity=Quantity(1), unit_price=Money.of("1"))
        with pytest.raises(ValidationError, match="exactly one"):
            OrderLineItem(
                quantity=Quantity(1), unit_price=Money.of("1"), product_id=1, combo_id=1
            )

    def test_cost_frozen_once(self):
        item = _item(3)
        item.freeze_cost(Money.of("2.5"))
        assert item.line_cost == Money.of("7.5")
        with pytest.raises(ValidationError, match="already been captured"):
            item.freeze_cost(Money.of("9"))


class TestOrderCreate:

    def test_totals(self):
        order = _order()
        assert order.subtotal == Money.of("35.00")
        assert order.total == Money.of("35.00")

    def test_percentage_discount_and_fee(self):
        order = _order(discount_percentage="10", delivery_fee=Money.of("4"))
        assert order.effective_discount.amount == Decimal("3.5")
        assert order.total.amount == Decimal("35.5")

    def test_fixed_discount_wins_over_percentage(self):
        order = _order(discount_percentage="50", discount_amount=Money.of("5"))
        assert order.total == Money.of("30")

    def test_total_never_negative(self):
        order = _order(discount_amount=Money.of("100"))
        assert order.total.is_zero

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("x", [])

    def test_too_many_items_rejected(self):
        with pytest.raises(ValidationError, match="Maximum"):
            Order.create("x", [_item() for _ in range(MAX_LINE_ITEMS + 1)])

    def test_cannot_be_created_cancelled(self):
        with pytest.raises(ValidationError, match="created as cancelled"):
            _order(status=OrderStatus.CANCELLED)

    def test_completed_on_creation_stamps_completed_at(self):
        assert _order(status=OrderStatus.COMPLETED).completed_at is not None
        assert _order().completed_at is None


class TestOrderTransitions:

    def test_pending_to_completed_has_no_effect(self):
        order = _order()
        assert order.transition_to(OrderStatus.COMPLETED) == InventoryEffect.NONE
        assert order.completed_at is not None

    def test_completed_back_to_pending_clears_completed_at(self):
        order = _order(status=OrderStatus.COMPLETED)
        assert order.transition_to(OrderStatus.PENDING) == InventoryEffect.NONE
        assert order.completed_at is None

    @pytest.mark.parametrize("start", [OrderStatus.PENDING, OrderStatus.COMPLETED])
    def test_cancel_reverses_inventory(self, start):
        order = _order(status=start)
        assert order.transition_to(OrderStatus.CANCELLED) == InventoryEffect.REVERSE_INVENTORY
        assert order.status == OrderStatus.CANCELLED

    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_cancelled_is_terminal(self, target):
        order = _order()
        order.transition_to(OrderStatus.CANCELLED)
        with pytest.raises(ValidationError, match="Cannot change order"):
            order.transition_to(target)


class TestNextOrderNumber:

    def test_first_of_the_day(self):
        assert next_order_number(date(2024, 6, 1), None) == "202406010001"

    def test_increments_same_day(self):
        assert next_order_number(date(2024, 6, 1), "202406010041") == "202406010042"

    def test_restarts_on_new_day(self):
        assert next_order_number(date(2024, 6, 2), "202406010041") == "202406020001"
