"""SQLAlchemy-backed implementations of the catalog repositories."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from posledger.domain.model.combo import Combo, ComboItem
from posledger.domain.model.product import Product
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.product_repository import (
    ComboRepository,
    ProductRepository,
)
from posledger.infrastructure.persistence.tables import ComboItemRow, ComboRow, ProductRow


def money_from_column(value) -> Money:
    return Money(Decimal(str(value if value is not None else 0)))


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> Product | None:
        row = self._session.scalars(
            select(ProductRow)
            .where(func.lower(ProductRow.name) == name.strip().lower())
            .order_by(ProductRow.id)
            .limit(1)
        ).first()
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        rows = self._session.scalars(select(ProductRow).order_by(ProductRow.name, ProductRow.id))
        return [self._to_domain(row) for row in rows]

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id) if product.id is not None else None
        if row is None:
            row = ProductRow()
            self._session.add(row)
        row.name = product.name
        row.price = product.price.amount
        row.cost_price = product.cost_price.amount
        row.is_menu_item = product.is_menu_item
        self._session.flush()
        product.id = row.id

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=money_from_column(row.price),
            cost_price=money_from_column(row.cost_price),
            is_menu_item=bool(row.is_menu_item),
        )


class SqlComboRepository(ComboRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, combo_id: int) -> Combo | None:
        row = self._session.get(ComboRow, combo_id)
        if row is None:
            return None
        return Combo(
            id=row.id,
            name=row.name,
            price=money_from_column(row.price),
            items=[
                ComboItem(product_id=item.product_id, quantity=Quantity(item.quantity))
                for item in row.items
            ],
        )

    def save(self, combo: Combo) -> None:
        row = self._session.get(ComboRow, combo.id) if combo.id is not None else None
        if row is None:
            row = ComboRow()
            self._session.add(row)
        row.name = combo.name
        row.price = combo.price.amount
        row.items = [
            ComboItemRow(product_id=item.product_id, quantity=item.quantity.value)
            for item in combo.items
        ]
        self._session.flush()
        combo.id = row.id
