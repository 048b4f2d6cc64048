"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from posledger.application.create_order import CreateOrderHandler
from posledger.application.dto import LineItemSpec, OrderDTO, OrderSpec
from posledger.application.show_order import ShowOrderHandler
from posledger.application.update_order_status import UpdateOrderStatusHandler
from posledger.domain.exceptions import DomainException
from posledger.infrastructure.bootstrap import unit_of_work
from posledger.infrastructure.cli.errors import domain_error
from posledger.infrastructure.config import get_settings


def _parse_line(raw: str, kind: str) -> LineItemSpec:
    """Parse 'Id:Qty' or 'Id:Qty@Price' into a LineItemSpec."""
    body, _, price = raw.partition("@")
    if ":" not in body:
        raise click.BadParameter(
            f"Invalid {kind} item '{raw}'. Expected 'Id:Quantity' or 'Id:Quantity@Price'."
        )
    id_str, qty_str = body.split(":", 1)
    try:
        item_id, qty = int(id_str), int(qty_str)
    except ValueError:
        raise click.BadParameter(f"Invalid {kind} item '{raw}'.")
    unit_price = price.strip() or None
    if kind == "combo":
        return LineItemSpec(quantity=qty, combo_id=item_id, unit_price=unit_price)
    return LineItemSpec(quantity=qty, product_id=item_id, unit_price=unit_price)


@click.command("create")
@click.option("--product", "products", multiple=True, help="Product line 'Id:Qty[@Price]'.")
@click.option("--combo", "combos", multiple=True, help="Combo line 'Id:Qty[@Price]'.")
@click.option("--status", default="pending", show_default=True,
              type=click.Choice(["pending", "completed"]))
@click.option("--type", "order_type", default="dine_in", show_default=True,
              type=click.Choice(["dine_in", "takeaway", "delivery"]))
@click.option("--table", "table_number", default=None, help="Table number.")
@click.option("--payment", "payment_method", default=None, help="Payment method.")
@click.option("--discount-percentage", default="0", help="Percentage discount.")
@click.option("--discount-amount", default="0", help="Fixed discount (wins over percentage).")
@click.option("--delivery-fee", default="0", help="Delivery fee.")
@click.option("--customer", "customer_name", default=None, help="Customer name.")
@click.option("--phone", "customer_phone", default=None, help="Customer phone.")
@click.option("--address", "customer_address", default=None, help="Delivery address.")
@click.option("--notes", default=None, help="Order notes.")
def order_create(
    products: tuple[str, ...],
    combos: tuple[str, ...],
    status: str,
    order_type: str,
    table_number: str | None,
    payment_method: str | None,
    discount_percentage: str,
    discount_amount: str,
    delivery_fee: str,
    customer_name: str | None,
    customer_phone: str | None,
    customer_address: str | None,
    notes: str | None,
) -> None:
    """Ring up a new order (consumes stock)."""
    items = [_parse_line(raw, "product") for raw in products]
    items += [_parse_line(raw, "combo") for raw in combos]
    if not items:
        raise click.UsageError("At least one --product or --combo is required.")

    handler = CreateOrderHandler(uow=unit_of_work(), branch_id=get_settings().BRANCH_ID)
    spec = OrderSpec(
        items=items,
        status=status,
        order_type=order_type,
        table_number=table_number,
        payment_method=payment_method,
        discount_percentage=discount_percentage,
        discount_amount=discount_amount,
        delivery_fee=delivery_fee,
        notes=notes,
        customer_name=customer_name,
        customer_phone=customer_phone,
        customer_address=customer_address,
    )

    try:
        dto = handler.handle(spec)
    except DomainException as exc:
        raise domain_error(exc)

    _display_order(dto)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id}, status={dto.status}, {dto.order_type})")
    if dto.customer_name:
        click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Item':<14} {'Qty':>5} {'Price':>10} {'Unit cost':>10} {'Total':>10}")
    click.echo(f"  {'-'*53}")
    for item in dto.items:
        label = f"combo #{item.combo_id}" if item.combo_id else f"product #{item.product_id}"
        click.echo(
            f"  {label:<14} {item.quantity:>5} {item.unit_price:>10} "
            f"{item.unit_cost_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*53}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>23}")
    click.echo(f"  {'Discount':<30} {dto.discount:>23}")
    click.echo(f"  {'Delivery fee':<30} {dto.delivery_fee:>23}")
    click.echo(f"  {'Order Total':<30} {dto.total:>23}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise domain_error(exc)

    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.argument("status", type=click.Choice(["pending", "completed", "cancelled"]))
def order_status(order_id: int, status: str) -> None:
    """Move an order to a new status (cancelling restores stock)."""
    handler = UpdateOrderStatusHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order {dto.order_number} is now {dto.status}.")
