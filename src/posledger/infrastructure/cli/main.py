import click

from posledger.infrastructure.bootstrap import engine
from posledger.infrastructure.cli.category_commands import (
    category_add,
    category_delete,
    category_list,
    category_update,
)
from posledger.infrastructure.cli.inventory_commands import (
    inventory_adjust,
    inventory_alerts,
    inventory_batches,
    inventory_deduct,
    inventory_delete,
    inventory_receive,
    inventory_set,
    inventory_set_category,
    inventory_show,
)
from posledger.infrastructure.cli.order_commands import order_create, order_show, order_status
from posledger.infrastructure.cli.product_commands import combo_add, product_add, product_list
from posledger.infrastructure.logging_config import setup_logging


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
def cli(log_level: str | None) -> None:
    """POS Ledger: batch-costed inventory and order fulfillment."""
    setup_logging(log_level)


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def combo() -> None:
    """Manage combos."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def category() -> None:
    """Manage inventory categories."""


@cli.group()
def order() -> None:
    """Manage orders."""


@db.command("init")
def db_init() -> None:
    """Create the database schema (idempotent)."""
    db_engine = engine()
    click.echo(f"Database ready at {db_engine.url.render_as_string(hide_password=True)}")


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
combo.add_command(combo_add)
inventory.add_command(inventory_receive)
inventory.add_command(inventory_deduct)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_set)
inventory.add_command(inventory_set_category)
inventory.add_command(inventory_delete)
inventory.add_command(inventory_show)
inventory.add_command(inventory_batches)
inventory.add_command(inventory_alerts)
category.add_command(category_add)
category.add_command(category_list)
category.add_command(category_update)
category.add_command(category_delete)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_status)
