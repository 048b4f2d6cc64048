"""CLI commands for the catalog (products and combos)."""

from __future__ import annotations

import click

from posledger.application.add_combo import AddComboHandler
from posledger.application.add_product import AddProductHandler
from posledger.domain.exceptions import DomainException
from posledger.infrastructure.bootstrap import unit_of_work
from posledger.infrastructure.cli.errors import domain_error


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Selling price (e.g. 15.00).")
@click.option("--cost-price", default="0", show_default=True, help="Catalog unit cost.")
@click.option(
    "--inventory-only", is_flag=True, default=False, help="Not shown on the POS menu."
)
def product_add(name: str, price: str, cost_price: str, inventory_only: bool) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(
            name=name, price=price, cost_price=cost_price, is_menu_item=not inventory_only
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    with unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Cost':>10} {'Menu':>5}")
    click.echo("-" * 59)
    for p in products:
        menu = "yes" if p.is_menu_item else "no"
        click.echo(
            f"{p.id:<6} {p.name:<24} {str(p.price):>10} {str(p.cost_price):>10} {menu:>5}"
        )


def _parse_combo_items(raw: str) -> list[tuple[int, int]]:
    """Parse '3:1,4:2' into [(product_id, qty), ...]."""
    items: list[tuple[int, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        pid_str, qty_str = pair.split(":", 1)
        try:
            items.append((int(pid_str), int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid combo item '{pair}'.")
    return items


@click.command("add")
@click.option("--name", required=True, help="Combo name.")
@click.option("--price", required=True, help="Combo price (e.g. 12.50).")
@click.option("--items", required=True, help="Contents as 'ProductId:Qty,ProductId:Qty'.")
def combo_add(name: str, price: str, items: str) -> None:
    """Create a combo from existing products."""
    handler = AddComboHandler(uow=unit_of_work())

    try:
        combo = handler.handle(name=name, price=price, items=_parse_combo_items(items))
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Combo #{combo.id} '{combo.name}' added at {combo.price}")
