"""Unit tests for the BatchStore domain service."""

from datetime import date

import pytest

from posledger.domain.exceptions import UnknownProductError, ValidationError
from posledger.domain.model.value_objects import Money
from posledger.domain.service.batch_store import BatchStore
from tests.fakes import (
    TODAY,
    FakeBatchRepository,
    FakeProductRepository,
    batch,
    fixed_today,
    product,
)


def _store(batches=None) -> tuple[BatchStore, FakeBatchRepository]:
    repo = FakeBatchRepository(batches)
    store = BatchStore(repo, FakeProductRepository([product(1, "Milk")]), today=fixed_today)
    return store, repo


class TestReceive:

    def test_appends_full_batch(self):
        store, repo = _store()
        batch_id = store.receive(1, 12, Money.of("2.50"), expiry_date=date(2024, 7, 1),
                                 supplier="Dairy Co")
        stored = repo.get_by_id(batch_id)
        assert stored.quantity == stored.original_quantity == 12
        assert stored.cost_price == Money.of("2.50")
        assert stored.supplier == "Dairy Co"

    def test_expiring_today_accepted(self):
        store, _ = _store()
        assert store.receive(1, 1, Money.of("1"), expiry_date=TODAY)

    def test_already_expired_rejected(self):
        store, repo = _store()
        with pytest.raises(ValidationError, match="already-expired"):
            store.receive(1, 1, Money.of("1"), expiry_date=date(2024, 5, 31))
        assert repo.list_for_product(1) == []

    def test_zero_cost_rejected(self):
        store, _ = _store()
        with pytest.raises(ValidationError, match="Unit cost must be positive"):
            store.receive(1, 1, Money.zero())

    def test_infinite_cost_rejected(self):
        store, repo = _store()
        with pytest.raises(ValidationError, match="finite"):
            store.receive(1, 3, Money.of("Infinity"))
        assert repo.list_for_product(1) == []

    def test_zero_quantity_rejected(self):
        store, _ = _store()
        with pytest.raises(ValidationError, match="must be positive"):
            store.receive(1, 0, Money.of("1"))

    def test_unknown_product_rejected(self):
        store, _ = _store()
        with pytest.raises(UnknownProductError):
            store.receive(99, 1, Money.of("1"))


class TestConsume:

    def _scenario(self):
        return _store([
            batch(1, 5, "10", expiry_date=date(2025, 1, 1)),
            batch(1, 5, "12", expiry_date=date(2025, 2, 1)),
        ])

    def test_consume_persists_remaining_quantities(self):
        store, repo = self._scenario()
        result = store.consume(1, 7)

        assert [(l.batch_id, l.quantity_taken) for l in result.lines] == [(1, 5), (2, 2)]
        assert result.shortfall == 0
        assert result.total_cost.per_unit(7) == Money.of("10.5714")
        assert [b.id for b in repo.list_active(1)] == [2]
        assert repo.get_by_id(2).quantity == 3
        assert store.available(1) == 3

    def test_consume_beyond_stock_reports_shortfall(self):
        store, repo = self._scenario()
        result = store.consume(1, 12)
        assert result.shortfall == 2
        assert result.quantity_taken == 10
        assert store.list_active(1) == []
        # drained batches keep their receipt audit values
        assert [b.original_quantity for b in repo.list_for_product(1)] == [5, 5]

    def test_receive_then_consume_everything_is_conserved(self):
        store, repo = _store()
        batch_id = store.receive(1, 9, Money.of("3.20"))
        result = store.consume(1, 9)

        assert [(l.batch_id, l.quantity_taken, l.unit_cost) for l in result.lines] == [
            (batch_id, 9, Money.of("3.20")),
        ]
        assert repo.get_by_id(batch_id).quantity == 0


class TestPurge:

    def test_purge_drops_drained_batches_too(self):
        store, repo = _store([
            batch(1, 0, "10", original_quantity=5),
            batch(1, 3, "12"),
        ])
        assert store.count(1) == 2
        assert store.purge(1) == 2
        assert repo.list_for_product(1) == []
        assert store.count(1) == 0
