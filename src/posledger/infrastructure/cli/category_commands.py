"""CLI commands for inventory categories."""

from __future__ import annotations

import click

from posledger.application.inventory_categories import (
    AddCategoryHandler,
    DeleteCategoryHandler,
    ListCategoriesHandler,
    UpdateCategoryHandler,
)
from posledger.domain.exceptions import DomainException
from posledger.infrastructure.bootstrap import unit_of_work
from posledger.infrastructure.cli.errors import domain_error


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default=None, help="Free-form description.")
@click.option("--icon", default=None, help="Icon name.")
@click.option("--color", default=None, help="Display color (e.g. #22c55e).")
@click.option("--sort-order", type=int, default=0, help="Position in listings.")
def category_add(
    name: str,
    description: str | None,
    icon: str | None,
    color: str | None,
    sort_order: int,
) -> None:
    """Create an inventory category."""
    handler = AddCategoryHandler(uow=unit_of_work())

    try:
        created = handler.handle(name, description, icon, color, sort_order)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Category #{created.id} '{created.name}' added")


@click.command("list")
def category_list() -> None:
    """List active inventory categories."""
    categories = ListCategoriesHandler(uow=unit_of_work()).handle()

    if not categories:
        click.echo("No categories found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Order':>6}  Color")
    click.echo("-" * 45)
    for c in categories:
        click.echo(f"{c.id:<6} {c.name:<20} {c.sort_order:>6}  {c.color}")


@click.command("update")
@click.option("--id", "category_id", required=True, type=int, help="Category ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--icon", default=None, help="New icon name.")
@click.option("--color", default=None, help="New display color.")
@click.option("--sort-order", type=int, default=None, help="New position in listings.")
@click.option("--active/--inactive", "is_active", default=None,
              help="Reactivate or deactivate the category.")
def category_update(category_id: int, **changes) -> None:
    """Change an inventory category (only the given fields)."""
    handler = UpdateCategoryHandler(uow=unit_of_work())

    try:
        updated = handler.handle(category_id, **changes)
    except DomainException as exc:
        raise domain_error(exc)

    state = "active" if updated.is_active else "inactive"
    click.echo(f"Category #{updated.id} '{updated.name}' updated ({state})")


@click.command("delete")
@click.option("--id", "category_id", required=True, type=int, help="Category ID.")
def category_delete(category_id: int) -> None:
    """Deactivate an inventory category."""
    handler = DeleteCategoryHandler(uow=unit_of_work())

    try:
        handler.handle(category_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Category #{category_id} deleted")
