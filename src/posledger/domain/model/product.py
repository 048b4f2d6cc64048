"""Product aggregate.

Products live independently of the ledger: the catalog creates them and the
ledger only reads them.  ``cost_price`` is the last-resort unit cost used
when a sale cannot be costed from batches or the inventory average.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.value_objects import Money


@dataclass
class Product:
    """A sellable or stock-tracked item.

    ``is_menu_item`` distinguishes items shown on the POS screen from
    inventory-only items (raw ingredients, packaging, ...).
    """

    id: int | None
    name: str
    price: Money
    cost_price: Money = field(default_factory=Money.zero)
    is_menu_item: bool = True

    @staticmethod
    def create(
        name: str,
        price: Money,
        cost_price: Money | None = None,
        is_menu_item: bool = True,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        return Product(
            id=None,
            name=name.strip(),
            price=price,
            cost_price=cost_price if cost_price is not None else Money.zero(),
            is_menu_item=is_menu_item,
        )

    @staticmethod
    def inventory_only(name: str, unit_cost: Money) -> Product:
        """A product created implicitly by receiving stock under a new name."""
        return Product.create(name, price=unit_cost, cost_price=unit_cost, is_menu_item=False)
