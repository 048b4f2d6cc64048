"""Application service: Add Product use case."""

from __future__ import annotations

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.product import Product
from posledger.domain.model.value_objects import Money
from posledger.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        price: str,
        cost_price: str = "0",
        is_menu_item: bool = True,
    ) -> Product:
        """Add a new product to the catalog."""
        product = Product.create(
            name,
            price=Money.of(price),
            cost_price=Money.of(cost_price),
            is_menu_item=is_menu_item,
        )

        with self._uow as uow:
            if uow.products.get_by_name(product.name) is not None:
                raise ValidationError(f"Product '{product.name}' already exists")
            uow.products.save(product)
            uow.commit()
        return product
