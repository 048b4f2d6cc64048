"""Combo aggregate: a bundle of products sold under one price."""

from __future__ import annotations

from dataclasses import dataclass

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class ComboItem:
    product_id: int
    quantity: Quantity


@dataclass
class Combo:
    """Combos never consume batches directly.

    Their sale cost is derived from the constituent products' catalog
    cost prices.
    """

    id: int | None
    name: str
    price: Money
    items: list[ComboItem]

    @staticmethod
    def create(name: str, price: Money, items: list[ComboItem]) -> Combo:
        if not name or not name.strip():
            raise ValidationError("Combo name is required")
        if not items:
            raise ValidationError("Combo must contain at least one product")
        return Combo(id=None, name=name.strip(), price=price, items=list(items))
