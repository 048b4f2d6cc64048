"""CLI commands for inventory management."""

from __future__ import annotations

from datetime import datetime

import click

from posledger.application.adjust_inventory import AdjustInventoryHandler
from posledger.application.deduct_stock import DeductStockHandler
from posledger.application.delete_inventory import DeleteInventoryHandler
from posledger.application.dto import ReceiveBatchSpec
from posledger.application.inventory_alerts import InventoryAlertsHandler
from posledger.application.receive_batch import ReceiveBatchHandler
from posledger.application.set_inventory import SetInventoryHandler
from posledger.application.set_inventory_category import SetInventoryCategoryHandler
from posledger.application.show_batches import ShowBatchesHandler
from posledger.application.show_inventory import FILTERS, ShowInventoryHandler
from posledger.domain.exceptions import DomainException
from posledger.infrastructure.bootstrap import unit_of_work
from posledger.infrastructure.cli.errors import domain_error
from posledger.infrastructure.config import get_settings


@click.command("receive")
@click.option("--product-id", type=int, default=None, help="Existing product ID.")
@click.option("--product", "product_name", default=None, help="Product name (created if new).")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--unit-cost", required=True, help="Cost per unit (e.g. 8.00).")
@click.option("--expiry", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Expiry date (YYYY-MM-DD).")
@click.option("--supplier", default=None, help="Supplier name.")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--category", "category_id", type=int, default=None, help="Category ID.")
def inventory_receive(
    product_id: int | None,
    product_name: str | None,
    quantity: int,
    unit_cost: str,
    expiry: datetime | None,
    supplier: str | None,
    notes: str | None,
    category_id: int | None,
) -> None:
    """Receive a new stock batch."""
    settings = get_settings()
    handler = ReceiveBatchHandler(
        uow=unit_of_work(), default_min_quantity=settings.DEFAULT_MIN_QUANTITY
    )
    spec = ReceiveBatchSpec(
        quantity=quantity,
        unit_cost=unit_cost,
        product_id=product_id,
        product_name=product_name,
        expiry_date=expiry.date() if expiry else None,
        supplier=supplier,
        notes=notes,
        category_id=category_id,
    )

    try:
        receipt = handler.handle(spec)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Batch #{receipt.batch_id} received for product #{receipt.product_id}: "
        f"on hand {receipt.inventory_quantity}, avg cost {receipt.avg_cost}"
    )


@click.command("deduct")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to write off.")
@click.option("--reason", default=None, help="Why the stock is removed.")
def inventory_deduct(product_id: int, quantity: int, reason: str | None) -> None:
    """Write stock off through the batches (FIFO)."""
    handler = DeductStockHandler(uow=unit_of_work())

    try:
        result = handler.handle(product_id, quantity, reason)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Deducted {result.quantity} of product #{result.product_id} "
        f"({result.old_quantity} -> {result.new_quantity}), cost {result.total_cost}"
    )
    for line in result.lines:
        click.echo(f"  batch #{line.batch_id}: {line.quantity_taken} @ {line.unit_cost}")


@click.command("adjust")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Signed change (e.g. -3).")
@click.option("--reason", default=None, help="Why the count changed.")
def inventory_adjust(product_id: int, delta: int, reason: str | None) -> None:
    """Shift the on-hand quantity by a signed amount."""
    handler = AdjustInventoryHandler(uow=unit_of_work())

    try:
        result = handler.handle(product_id, delta, reason)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Inventory for product #{result.product_id}: "
        f"{result.old_quantity} -> {result.new_quantity} ({result.reason})"
    )


@click.command("set")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Counted quantity on hand.")
@click.option("--reason", default=None, help="Why the count changed.")
def inventory_set(product_id: int, quantity: int, reason: str | None) -> None:
    """Set the on-hand quantity for a product."""
    handler = SetInventoryHandler(uow=unit_of_work())

    try:
        result = handler.handle(product_id, quantity, reason)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Inventory for product #{result.product_id} set to {result.new_quantity} "
        f"(was {result.old_quantity})"
    )


@click.command("set-category")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--category", "category_id", type=int, default=None,
              help="Category ID (omit to clear).")
def inventory_set_category(product_id: int, category_id: int | None) -> None:
    """Assign an inventory category."""
    handler = SetInventoryCategoryHandler(uow=unit_of_work())

    try:
        handler.handle(product_id, category_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Category for product #{product_id} set to {category_id}")


@click.command("delete")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--force", is_flag=True, help="Also purge the product's batches.")
def inventory_delete(product_id: int, force: bool) -> None:
    """Stop tracking a product's stock."""
    handler = DeleteInventoryHandler(uow=unit_of_work())

    try:
        result = handler.handle(product_id, force=force)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Inventory for product #{result.product_id} deleted "
        f"({result.deleted_batches} batches purged)"
    )


@click.command("show")
@click.option("--filter", "filter_by", type=click.Choice(FILTERS), default=None,
              help="Only low, out, expired or expiring stock.")
@click.option("--category", "category_id", type=int, default=None, help="Category ID.")
@click.option("--search", default=None, help="Match product or category name.")
def inventory_show(filter_by: str | None, category_id: int | None, search: str | None) -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(
        uow=unit_of_work(), expiry_warning_days=get_settings().EXPIRY_WARNING_DAYS
    )

    try:
        lines = handler.handle(filter_by=filter_by, category_id=category_id, search=search)
    except DomainException as exc:
        raise domain_error(exc)

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(
        f"{'ID':<6} {'Product':<20} {'Qty':>6} {'Min':>5} {'Avg cost':>10} "
        f"{'Status':>13}  Category"
    )
    click.echo("-" * 78)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.quantity:>6} "
            f"{line.min_quantity:>5} {line.avg_cost:>10} {line.stock_status:>13}  "
            f"{line.category_name or ''}"
        )


@click.command("batches")
@click.option("--product-id", required=True, type=int, help="Product ID.")
def inventory_batches(product_id: int) -> None:
    """List the batches that still hold stock, in consumption order."""
    batches = ShowBatchesHandler(uow=unit_of_work()).handle(product_id)

    if not batches:
        click.echo("No active batches.")
        return

    click.echo(f"{'Batch':<7} {'Qty':>6} {'Orig':>6} {'Cost':>10} {'Expiry':>11}  Supplier")
    click.echo("-" * 60)
    for b in batches:
        click.echo(
            f"{b.id:<7} {b.quantity:>6} {b.original_quantity:>6} {b.cost_price:>10} "
            f"{b.expiry_date or '-':>11}  {b.supplier or ''}"
        )


@click.command("alerts")
def inventory_alerts() -> None:
    """Show low-stock and expiring products."""
    handler = InventoryAlertsHandler(
        uow=unit_of_work(), expiry_warning_days=get_settings().EXPIRY_WARNING_DAYS
    )
    alerts = handler.handle()

    if not alerts:
        click.echo("No alerts.")
        return

    for alert in alerts:
        expiry = f", expires {alert.nearest_expiry}" if alert.nearest_expiry else ""
        click.echo(
            f"#{alert.product_id} {alert.product_name}: {alert.quantity} on hand "
            f"(min {alert.min_quantity}, {alert.stock_status}){expiry}"
        )
