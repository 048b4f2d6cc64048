"""Application service: Set Inventory Category use case."""

from __future__ import annotations

from posledger.application.inventory_categories import require_active_category
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.inventory_summary import InventorySummary


class SetInventoryCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, category_id: int | None) -> None:
        """Move a record into an active category, or out of any with ``None``."""
        with self._uow as uow:
            if category_id is not None:
                require_active_category(uow, category_id)
            InventorySummary(uow.inventory).set_category(product_id, category_id)
            uow.commit()
