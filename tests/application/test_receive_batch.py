"""Integration tests for the ReceiveBatch use case.

Uses the in-memory fake unit of work, no database.
"""

from datetime import date

import pytest

from posledger.application.dto import ReceiveBatchSpec
from posledger.application.receive_batch import ReceiveBatchHandler
from posledger.domain.exceptions import EntityNotFoundError, UnknownProductError, ValidationError
from tests.fakes import FakeUnitOfWork, category, fixed_today, product, record


def _setup(**kwargs) -> tuple[ReceiveBatchHandler, FakeUnitOfWork]:
    uow = FakeUnitOfWork(products=[product(1, "Flour", "3.00")], **kwargs)
    return ReceiveBatchHandler(uow, today=fixed_today, default_min_quantity=2), uow


class TestReceiveBatch:

    def test_receipt_creates_batch_and_summary(self):
        handler, uow = _setup()
        receipt = handler.handle(ReceiveBatchSpec(quantity=10, unit_cost="2.00", product_id=1))

        assert receipt.inventory_quantity == 10
        assert receipt.avg_cost == "2.00"
        assert uow.batches.get_by_id(receipt.batch_id).original_quantity == 10
        assert uow.inventory.get_by_product_id(1).min_quantity == 2
        assert uow.commits == 1

    def test_second_receipt_moves_average(self):
        handler, _ = _setup(inventory=[record(1, 10, "2")])
        receipt = handler.handle(ReceiveBatchSpec(quantity=10, unit_cost="3", product_id=1))
        assert receipt.inventory_quantity == 20
        assert receipt.avg_cost == "2.5000"

    def test_receive_by_existing_name(self):
        handler, _ = _setup()
        receipt = handler.handle(ReceiveBatchSpec(quantity=1, unit_cost="1", product_name="flour"))
        assert receipt.product_id == 1

    def test_receive_by_new_name_creates_inventory_only_product(self):
        handler, uow = _setup()
        receipt = handler.handle(
            ReceiveBatchSpec(quantity=4, unit_cost="0.80", product_name="Yeast")
        )
        created = uow.products.get_by_id(receipt.product_id)
        assert created.name == "Yeast"
        assert created.is_menu_item is False
        assert str(created.cost_price) == "$0.80"

    def test_expired_stock_rolls_back_new_product(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="already-expired"):
            handler.handle(ReceiveBatchSpec(
                quantity=4, unit_cost="1", product_name="Yeast", expiry_date=date(2024, 1, 1),
            ))
        assert uow.products.get_by_name("Yeast") is None
        assert uow.commits == 0

    def test_unknown_product_id_rejected(self):
        handler, uow = _setup()
        with pytest.raises(UnknownProductError):
            handler.handle(ReceiveBatchSpec(quantity=1, unit_cost="1", product_id=7))
        assert uow.inventory.list_all() == []

    def test_product_reference_required(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="id or product name"):
            handler.handle(ReceiveBatchSpec(quantity=1, unit_cost="1"))

    def test_infinite_cost_rejected_before_anything_is_stored(self):
        handler, uow = _setup()
        with pytest.raises(ValidationError, match="finite"):
            handler.handle(ReceiveBatchSpec(quantity=5, unit_cost="Infinity", product_id=1))
        assert uow.batches.list_for_product(1) == []
        assert uow.inventory.get_by_product_id(1) is None

    def test_unknown_category_rejected(self):
        handler, uow = _setup()
        with pytest.raises(EntityNotFoundError, match="category #3"):
            handler.handle(ReceiveBatchSpec(quantity=2, unit_cost="1", product_id=1, category_id=3))
        assert uow.batches.list_for_product(1) == []

    def test_receipt_files_record_under_category(self):
        handler, uow = _setup(categories=[category(3, "Baking")])
        handler.handle(ReceiveBatchSpec(quantity=2, unit_cost="1", product_id=1, category_id=3))
        assert uow.inventory.get_by_product_id(1).category_id == 3
