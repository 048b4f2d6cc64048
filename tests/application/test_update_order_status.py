"""Integration tests for order status changes and their inventory effects."""

from datetime import date

import pytest

from posledger.application.create_order import CreateOrderHandler
from posledger.application.dto import LineItemSpec, OrderSpec
from posledger.application.update_order_status import UpdateOrderStatusHandler
from posledger.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import FakeUnitOfWork, batch, fixed_today, product, record


def _setup(status: str = "pending") -> tuple[UpdateOrderStatusHandler, FakeUnitOfWork, int]:
    uow = FakeUnitOfWork(
        products=[product(1, "Burger", "15.00", cost_price="9")],
        batches=[batch(1, 10, "10", expiry_date=date(2025, 1, 1))],
        inventory=[record(1, 10, "10")],
    )
    dto = CreateOrderHandler(uow, today=fixed_today).handle(
        OrderSpec(items=[LineItemSpec(quantity=4, product_id=1)], status=status)
    )
    return UpdateOrderStatusHandler(uow), uow, dto.id


class TestCancelOrder:

    @pytest.mark.parametrize("status", ["pending", "completed"])
    def test_cancel_restores_summary_quantity(self, status):
        handler, uow, order_id = _setup(status)
        assert uow.inventory.get_by_product_id(1).quantity == 6

        dto = handler.handle(order_id, "cancelled")

        assert dto.status == "cancelled"
        assert dto.completed_at is None
        assert uow.inventory.get_by_product_id(1).quantity == 10

    def test_cancel_leaves_batches_drawn(self):
        handler, uow, order_id = _setup()
        handler.handle(order_id, "cancelled")
        assert uow.batches.get_by_id(1).quantity == 6

    def test_cancel_twice_rejected_and_restores_once(self):
        handler, uow, order_id = _setup()
        handler.handle(order_id, "cancelled")
        with pytest.raises(ValidationError, match="Cannot change order from cancelled"):
            handler.handle(order_id, "cancelled")
        assert uow.inventory.get_by_product_id(1).quantity == 10

    def test_cancelled_order_cannot_be_reopened(self):
        handler, _, order_id = _setup()
        handler.handle(order_id, "cancelled")
        with pytest.raises(ValidationError):
            handler.handle(order_id, "completed")


class TestCompleteOrder:

    def test_complete_has_no_inventory_effect(self):
        handler, uow, order_id = _setup()
        dto = handler.handle(order_id, "completed")
        assert dto.status == "completed"
        assert dto.completed_at is not None
        assert uow.inventory.get_by_product_id(1).quantity == 6

    def test_back_to_pending(self):
        handler, uow, order_id = _setup("completed")
        dto = handler.handle(order_id, "pending")
        assert dto.status == "pending"
        assert uow.inventory.get_by_product_id(1).quantity == 6


class TestStatusValidation:

    def test_unknown_status(self):
        handler, _, order_id = _setup()
        with pytest.raises(ValidationError, match="Unknown order status"):
            handler.handle(order_id, "refunded")

    def test_missing_order(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(999, "completed")
