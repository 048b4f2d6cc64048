"""End-to-end tests for the click CLI against a throwaway SQLite file."""

import logging

import pytest
from click.testing import CliRunner

from posledger.infrastructure import bootstrap
from posledger.infrastructure.cli.main import cli


@pytest.fixture()
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'pos.db'}")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    bootstrap.reset()
    yield CliRunner()
    bootstrap.reset()
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(runner: CliRunner, *args: str):
    return runner.invoke(cli, list(args))


def _stock_burger(runner: CliRunner) -> None:
    assert _run(runner, "product", "add", "--name", "Burger", "--price", "15",
                "--cost-price", "9").exit_code == 0
    result = _run(runner, "inventory", "receive", "--product-id", "1", "--quantity", "5",
                  "--unit-cost", "10", "--expiry", "2099-01-01", "--supplier", "Acme")
    assert result.exit_code == 0, result.output


class TestCli:

    def test_db_init(self, runner):
        result = _run(runner, "db", "init")
        assert result.exit_code == 0
        assert "Database ready" in result.output

    def test_product_add_and_list(self, runner):
        result = _run(runner, "product", "add", "--name", "Latte", "--price", "4.5")
        assert result.exit_code == 0
        assert "Product #1 'Latte' added at $4.50" in result.output

        listing = _run(runner, "product", "list")
        assert "Latte" in listing.output

    def test_receive_creates_batch(self, runner):
        _stock_burger(runner)
        batches = _run(runner, "inventory", "batches", "--product-id", "1")
        assert "2099-01-01" in batches.output
        assert "Acme" in batches.output

    def test_order_create_oversell_and_cancel(self, runner):
        _stock_burger(runner)

        created = _run(runner, "order", "create", "--product", "1:7", "--customer", "Ana")
        assert created.exit_code == 0, created.output
        assert "status=pending" in created.output
        assert "$105.00" in created.output

        shown = _run(runner, "inventory", "show", "--filter", "out")
        assert "Burger" in shown.output
        assert "-2" in shown.output

        cancelled = _run(runner, "order", "status", "--id", "1", "cancelled")
        assert cancelled.exit_code == 0
        assert "is now cancelled" in cancelled.output

        again = _run(runner, "order", "status", "--id", "1", "pending")
        assert again.exit_code == 1
        assert "[ValidationError]" in again.output

    def test_deduct_insufficient_stock(self, runner):
        _stock_burger(runner)
        result = _run(runner, "inventory", "deduct", "--product-id", "1", "--quantity", "50")
        assert result.exit_code == 1
        assert "[InsufficientStock]" in result.output

    def test_adjust_and_set(self, runner):
        _stock_burger(runner)
        adjusted = _run(runner, "inventory", "adjust", "--product-id", "1", "--delta", "-2",
                        "--reason", "dropped")
        assert "5 -> 3 (dropped)" in adjusted.output

        counted = _run(runner, "inventory", "set", "--product-id", "1", "--quantity", "4")
        assert "set to 4 (was 3)" in counted.output

    def test_unknown_product_reported(self, runner):
        result = _run(runner, "order", "create", "--product", "9:1")
        assert result.exit_code == 1
        assert "[UnknownProduct]" in result.output

    def test_order_requires_items(self, runner):
        result = _run(runner, "order", "create")
        assert result.exit_code == 2

    def test_combo_add(self, runner):
        _stock_burger(runner)
        result = _run(runner, "combo", "add", "--name", "Meal", "--price", "12",
                      "--items", "1:2")
        assert result.exit_code == 0, result.output
        assert "Combo #1 'Meal'" in result.output

    def test_alerts(self, runner):
        _stock_burger(runner)
        result = _run(runner, "inventory", "alerts")
        assert "Burger" in result.output
        assert "min 5" in result.output

    def test_categories_and_search(self, runner):
        _stock_burger(runner)
        added = _run(runner, "category", "add", "--name", "Grill", "--sort-order", "1")
        assert added.exit_code == 0, added.output
        assert "Category #1 'Grill' added" in added.output

        assigned = _run(runner, "inventory", "set-category", "--product-id", "1", "--category", "1")
        assert assigned.exit_code == 0, assigned.output

        found = _run(runner, "inventory", "show", "--search", "gri")
        assert "Burger" in found.output
        assert "Grill" in found.output
        missing = _run(runner, "inventory", "show", "--search", "pizza")
        assert "No inventory records found." in missing.output

        deleted = _run(runner, "category", "delete", "--id", "1")
        assert deleted.exit_code == 0
        assert "No categories found." in _run(runner, "category", "list").output

        reassigned = _run(runner, "inventory", "set-category", "--product-id", "1", "--category", "1")
        assert reassigned.exit_code == 1
        assert "[NotFound]" in reassigned.output

    def test_inventory_delete_requires_force_with_batches(self, runner):
        _stock_burger(runner)
        refused = _run(runner, "inventory", "delete", "--product-id", "1")
        assert refused.exit_code == 1
        assert "[ValidationError]" in refused.output

        forced = _run(runner, "inventory", "delete", "--product-id", "1", "--force")
        assert forced.exit_code == 0, forced.output
        assert "1 batches purged" in forced.output
        assert "No inventory records found." in _run(runner, "inventory", "show").output

    def test_non_finite_cost_reported_as_validation_error(self, runner):
        assert _run(runner, "product", "add", "--name", "Burger", "--price", "15").exit_code == 0
        result = _run(runner, "inventory", "receive", "--product-id", "1", "--quantity", "5",
                      "--unit-cost", "Infinity")
        assert result.exit_code == 1
        assert "[ValidationError]" in result.output
