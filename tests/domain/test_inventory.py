"""Unit tests for the InventoryRecord aggregate."""

from decimal import Decimal

import pytest

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.inventory import StockStatus
from posledger.domain.model.value_objects import Money
from tests.fakes import record


class TestInventoryRecordReceive:

    def test_weighted_average(self):
        inv = record(1, 10, "10")
        inv.apply_receive(10, Money.of("12"))
        assert inv.quantity == 20
        assert inv.avg_cost.amount == Decimal("11")

    def test_average_rounded_to_four_places(self):
        inv = record(1, 2, "1")
        inv.apply_receive(1, Money.of("2"))
        assert inv.avg_cost.amount == Decimal("1.3333")

    def test_negative_stock_takes_part_in_average(self):
        inv = record(1, -2, "10")
        inv.apply_receive(4, Money.of("8"))
        # (-2*10 + 4*8) / 2
        assert inv.quantity == 2
        assert inv.avg_cost.amount == Decimal("6")

    def test_non_positive_total_uses_received_cost(self):
        inv = record(1, -5, "10")
        inv.apply_receive(3, Money.of("7"))
        assert inv.quantity == -2
        assert inv.avg_cost == Money.of("7")

    def test_negative_blend_falls_back_to_received_cost(self):
        inv = record(1, -9, "10")
        inv.apply_receive(10, Money.of("1"))
        assert inv.quantity == 1
        assert inv.avg_cost == Money.of("1")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            record(1, 0).apply_receive(0, Money.of("1"))


class TestInventoryRecordConsume:

    def test_consume_may_go_negative(self):
        inv = record(1, 2, "5")
        inv.apply_consume(5)
        assert inv.quantity == -3
        assert inv.stock_status == StockStatus.OUT_OF_STOCK

    def test_consume_then_restore_is_identity(self):
        inv = record(1, 7, "5")
        inv.apply_consume(4)
        inv.apply_restore(4)
        assert inv.quantity == 7
        assert inv.avg_cost.amount == Decimal("5")


class TestInventoryRecordSetQuantity:

    def test_set_quantity_reports_before_and_after(self):
        inv = record(1, 7)
        result = inv.set_quantity(3, "stock take")
        assert (result.old_quantity, result.new_quantity, result.difference) == (7, 3, -4)
        assert result.reason == "stock take"
        assert inv.quantity == 3

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="below zero"):
            record(1, 7).set_quantity(-1)


class TestStockStatus:

    @pytest.mark.parametrize("quantity,status", [
        (0, StockStatus.OUT_OF_STOCK),
        (5, StockStatus.LOW_STOCK),
        (6, StockStatus.OK),
    ])
    def test_thresholds(self, quantity, status):
        assert record(1, quantity, min_quantity=5).stock_status == status

    def test_stock_value_ignores_negative_quantity(self):
        assert record(1, -3, "4").stock_value.is_zero
        assert record(1, 3, "4").stock_value == Money.of("12")
