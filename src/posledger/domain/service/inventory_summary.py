"""Domain service: InventorySummary.

Maintains the single InventoryRecord per product.  Receipts create the
record and move the weighted-average cost; consumption only moves the
quantity, which may go negative.
"""

from __future__ import annotations

from posledger.domain.exceptions import EntityNotFoundError
from posledger.domain.model.inventory import (
    DEFAULT_MIN_QUANTITY,
    AdjustmentResult,
    InventoryRecord,
)
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.inventory_repository import InventoryRepository


class InventorySummary:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        default_min_quantity: int = DEFAULT_MIN_QUANTITY,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._default_min_quantity = default_min_quantity

    def get(self, product_id: int) -> InventoryRecord | None:
        return self._inventory_repo.get_by_product_id(product_id)

    def apply_receive(
        self,
        product_id: int,
        quantity: int,
        unit_cost: Money,
        category_id: int | None = None,
    ) -> InventoryRecord:
        qty = Quantity(quantity).value
        record = self._inventory_repo.get_by_product_id(product_id)
        if record is None:
            record = InventoryRecord.open(
                product_id=product_id,
                quantity=qty,
                unit_cost=unit_cost,
                min_quantity=self._default_min_quantity,
                category_id=category_id,
            )
        else:
            record.apply_receive(qty, unit_cost)
            if category_id is not None:
                record.set_category(category_id)
        self._inventory_repo.save(record)
        return record

    def apply_consume(self, product_id: int, quantity: int) -> InventoryRecord | None:
        """Deduct from the summary.

        Products without a record are not stock-tracked; the call is a
        no-op for them and returns None.
        """
        qty = Quantity(quantity).value
        record = self._inventory_repo.get_by_product_id(product_id)
        if record is None:
            return None
        record.apply_consume(qty)
        self._inventory_repo.save(record)
        return record

    def apply_restore(self, product_id: int, quantity: int) -> InventoryRecord | None:
        qty = Quantity(quantity).value
        record = self._inventory_repo.get_by_product_id(product_id)
        if record is None:
            return None
        record.apply_restore(qty)
        self._inventory_repo.save(record)
        return record

    def set_quantity(
        self,
        product_id: int,
        new_quantity: int,
        reason: str | None = None,
    ) -> AdjustmentResult:
        record = self._require(product_id)
        result = record.set_quantity(new_quantity, reason)
        self._inventory_repo.save(record)
        return result

    def set_category(self, product_id: int, category_id: int | None) -> None:
        record = self._require(product_id)
        record.set_category(category_id)
        self._inventory_repo.save(record)

    def remove(self, product_id: int) -> None:
        if not self._inventory_repo.delete(product_id):
            raise EntityNotFoundError(
                f"Product #{product_id} has no inventory record", product_id=product_id
            )

    def _require(self, product_id: int) -> InventoryRecord:
        record = self._inventory_repo.get_by_product_id(product_id)
        if record is None:
            raise EntityNotFoundError(
                f"Product #{product_id} has no inventory record", product_id=product_id
            )
        return record
