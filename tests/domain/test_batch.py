"""Unit tests for StockBatch and the FIFO/FEFO allocation function."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.batch import ConsumptionResult, allocate_fifo
from tests.fakes import batch


def _pair():
    """B1 expires first and is cheaper; B2 expires a month later."""
    return [
        batch(1, 5, "12", expiry_date=date(2025, 2, 1), batch_id=2),
        batch(1, 5, "10", expiry_date=date(2025, 1, 1), batch_id=1),
    ]


class TestAllocateFifo:

    def test_earliest_expiry_consumed_first(self):
        updated, lines, shortfall = allocate_fifo(_pair(), 7)

        assert [(l.batch_id, l.quantity_taken, l.unit_cost.amount) for l in lines] == [
            (1, 5, Decimal("10")),
            (2, 2, Decimal("12")),
        ]
        assert shortfall == 0
        assert {b.id: b.quantity for b in updated} == {1: 0, 2: 3}

    def test_weighted_unit_cost(self):
        _, lines, _ = allocate_fifo(_pair(), 7)
        result = ConsumptionResult(lines)
        assert result.total_cost.amount == Decimal("74")
        assert result.total_cost.per_unit(7).amount == Decimal("10.5714")

    def test_input_batches_untouched(self):
        batches = _pair()
        allocate_fifo(batches, 7)
        assert [b.quantity for b in batches] == [5, 5]

    def test_only_drawn_batches_returned(self):
        updated, _, _ = allocate_fifo(_pair(), 3)
        assert [b.id for b in updated] == [1]
        assert updated[0].quantity == 2

    def test_shortfall_reported_not_raised(self):
        updated, lines, shortfall = allocate_fifo(_pair(), 13)
        assert shortfall == 3
        assert sum(l.quantity_taken for l in lines) == 10
        assert all(b.quantity == 0 for b in updated)

    def test_no_batches_means_full_shortfall(self):
        updated, lines, shortfall = allocate_fifo([], 4)
        assert (updated, lines, shortfall) == ([], [], 4)

    def test_batches_without_expiry_go_last(self):
        batches = [
            batch(1, 5, "1", expiry_date=None, batch_id=1),
            batch(1, 5, "2", expiry_date=date(2030, 1, 1), batch_id=2),
        ]
        _, lines, _ = allocate_fifo(batches, 6)
        assert [l.batch_id for l in lines] == [2, 1]

    def test_same_expiry_oldest_receipt_first(self):
        early = datetime(2024, 1, 1, tzinfo=timezone.utc)
        late = datetime(2024, 3, 1, tzinfo=timezone.utc)
        batches = [
            batch(1, 5, "2", batch_id=1, received_date=late),
            batch(1, 5, "1", batch_id=2, received_date=early),
        ]
        _, lines, _ = allocate_fifo(batches, 1)
        assert lines[0].batch_id == 2

    def test_drained_batches_skipped(self):
        batches = [
            batch(1, 0, "1", expiry_date=date(2024, 1, 1), batch_id=1, original_quantity=5),
            batch(1, 5, "2", expiry_date=date(2025, 1, 1), batch_id=2),
        ]
        _, lines, _ = allocate_fifo(batches, 2)
        assert [l.batch_id for l in lines] == [2]

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValidationError, match="must be positive"):
            allocate_fifo(_pair(), quantity)


class TestStockBatch:

    def test_take_more_than_remaining_rejected(self):
        b = batch(1, 2, "1", batch_id=9)
        with pytest.raises(ValidationError, match="only 2 remaining"):
            b.take(3)

    def test_expiry_helpers(self):
        b = batch(1, 2, "1", expiry_date=date(2024, 6, 5))
        assert not b.is_expired(date(2024, 6, 5))
        assert b.is_expired(date(2024, 6, 6))
        assert b.expires_within(date(2024, 6, 1), 7)
        assert not b.expires_within(date(2024, 5, 1), 7)
