"""Integration tests for the inventory read models: show, batches, alerts."""

from datetime import date

import pytest

from posledger.application.inventory_alerts import InventoryAlertsHandler
from posledger.application.show_batches import ShowBatchesHandler
from posledger.application.show_inventory import ShowInventoryHandler
from posledger.domain.exceptions import ValidationError
from tests.fakes import FakeUnitOfWork, batch, category, fixed_today, product, record


def _uow() -> FakeUnitOfWork:
    """Today is 2024-06-01."""
    return FakeUnitOfWork(
        products=[
            product(1, "Milk"),
            product(2, "Beans"),
            product(3, "Rice"),
            product(4, "Eggs"),
        ],
        batches=[
            batch(1, 20, "1", expiry_date=date(2024, 6, 4)),
            batch(2, 3, "2", expiry_date=date(2024, 5, 20)),
            batch(3, 50, "3"),
        ],
        inventory=[
            record(1, 20, "1", category_id=1),
            record(2, 3, "2", category_id=2),
            record(3, 50, "3", category_id=2),
            record(4, -2, "4"),
        ],
        categories=[category(1, "Dairy", sort_order=2), category(2, "Dry goods", sort_order=1)],
    )


def _show(filter_by=None, category_id=None, search=None):
    handler = ShowInventoryHandler(_uow(), today=fixed_today, expiry_warning_days=7)
    return [line.product_name for line in handler.handle(filter_by, category_id, search)]


class TestShowInventory:

    def test_grouped_by_category_order_then_name(self):
        # Eggs has no category, Dry goods sorts before Dairy
        assert _show() == ["Eggs", "Beans", "Rice", "Milk"]

    @pytest.mark.parametrize("filter_by,expected", [
        ("low", ["Beans"]),
        ("out", ["Eggs"]),
        ("expired", ["Beans"]),
        ("expiring", ["Milk"]),
    ])
    def test_filters(self, filter_by, expected):
        assert _show(filter_by) == expected

    def test_category(self):
        assert _show(category_id=2) == ["Beans", "Rice"]

    def test_search_matches_product_name(self):
        assert _show(search="BEAN") == ["Beans"]

    def test_search_matches_category_name(self):
        assert _show(search="dry") == ["Beans", "Rice"]

    def test_search_combines_with_filter(self):
        assert _show("low", search="dry") == ["Beans"]
        assert _show("out", search="dry") == []

    def test_blank_search_ignored(self):
        assert len(_show(search="  ")) == 4

    def test_unknown_filter(self):
        with pytest.raises(ValidationError, match="Unknown inventory filter"):
            _show("stale")

    def test_line_values(self):
        handler = ShowInventoryHandler(_uow(), today=fixed_today)
        rice = [line for line in handler.handle() if line.product_id == 3][0]
        assert rice.stock_value == "150"
        assert rice.stock_status == "ok"
        assert rice.category_name == "Dry goods"


class TestShowBatches:

    def test_only_active_batches(self):
        uow = _uow()
        uow.batches.add(batch(1, 0, "1", original_quantity=4))
        dtos = ShowBatchesHandler(uow).handle(1)
        assert [(b.quantity, b.expiry_date) for b in dtos] == [(20, "2024-06-04")]


class TestInventoryAlerts:

    def test_low_out_and_expiring_products_flagged(self):
        alerts = InventoryAlertsHandler(_uow(), today=fixed_today).handle()
        by_id = {a.product_id: a for a in alerts}

        assert set(by_id) == {1, 2, 4}
        assert by_id[1].nearest_expiry == "2024-06-04"
        assert by_id[2].stock_status == "low_stock"
        assert by_id[4].stock_status == "out_of_stock"
