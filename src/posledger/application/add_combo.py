"""Application service: Add Combo use case."""

from __future__ import annotations

from posledger.domain.exceptions import UnknownProductError
from posledger.domain.model.combo import Combo, ComboItem
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.unit_of_work import UnitOfWork


class AddComboHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, name: str, price: str, items: list[tuple[int, int]]) -> Combo:
        """Create a combo from ``(product_id, quantity)`` pairs."""
        combo = Combo.create(
            name,
            price=Money.of(price),
            items=[ComboItem(product_id=pid, quantity=Quantity(qty)) for pid, qty in items],
        )

        with self._uow as uow:
            for item in combo.items:
                if uow.products.get_by_id(item.product_id) is None:
                    raise UnknownProductError(
                        f"Product #{item.product_id} not found", product_id=item.product_id
                    )
            uow.combos.save(combo)
            uow.commit()
        return combo
