"""Domain service: BatchStore.

Owns the stock batches of every product: appends new batches on receipt
and hands out stock in FIFO/FEFO order.  The InventoryRecord summary is
deliberately *not* updated here; callers compose BatchStore and
InventorySummary inside one unit of work.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from posledger.domain.exceptions import UnknownProductError, ValidationError
from posledger.domain.model.batch import ConsumptionResult, StockBatch, allocate_fifo
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.batch_repository import BatchRepository
from posledger.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class BatchStore:

    def __init__(
        self,
        batch_repo: BatchRepository,
        product_repo: ProductRepository,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._batch_repo = batch_repo
        self._product_repo = product_repo
        self._today = today

    def receive(
        self,
        product_id: int,
        quantity: int,
        unit_cost: Money,
        expiry_date: date | None = None,
        supplier: str | None = None,
        notes: str | None = None,
    ) -> int:
        """Append a new batch and return its id."""
        qty = Quantity(quantity).value
        if unit_cost.is_zero:
            raise ValidationError("Unit cost must be positive", product_id=product_id)
        if expiry_date is not None and expiry_date < self._today():
            raise ValidationError(
                "Cannot receive already-expired stock",
                product_id=product_id,
                expiry_date=expiry_date.isoformat(),
            )
        if self._product_repo.get_by_id(product_id) is None:
            raise UnknownProductError(
                f"Product #{product_id} not found", product_id=product_id
            )

        batch = StockBatch(
            id=None,
            product_id=product_id,
            quantity=qty,
            original_quantity=qty,
            cost_price=unit_cost,
            expiry_date=expiry_date,
            supplier=supplier,
            notes=notes,
        )
        self._batch_repo.add(batch)
        logger.info(
            "Received batch #%s: product=%s qty=%s cost=%s expiry=%s",
            batch.id, product_id, qty, unit_cost.amount, expiry_date,
        )
        return batch.id  # type: ignore[return-value]

    def consume(self, product_id: int, quantity: int) -> ConsumptionResult:
        """Draw *quantity* units in FIFO/FEFO order.

        Never fails for lack of stock: whatever the batches cannot cover
        is reported as ``shortfall`` and the caller picks a cost for it.
        """
        qty = Quantity(quantity).value
        updated, lines, shortfall = allocate_fifo(self._batch_repo.list_active(product_id), qty)
        for batch in updated:
            self._batch_repo.save(batch)
        if shortfall:
            logger.warning(
                "Batch shortfall for product %s: requested=%s uncovered=%s",
                product_id, qty, shortfall,
            )
        return ConsumptionResult(lines=lines, shortfall=shortfall)

    def available(self, product_id: int) -> int:
        return sum(batch.quantity for batch in self._batch_repo.list_active(product_id))

    def list_active(self, product_id: int) -> list[StockBatch]:
        return self._batch_repo.list_active(product_id)

    def count(self, product_id: int) -> int:
        """Number of batches ever received for a product, drained ones included."""
        return len(self._batch_repo.list_for_product(product_id))

    def purge(self, product_id: int) -> int:
        """Administrative purge: drop every batch of a product, audit rows included."""
        deleted = self._batch_repo.delete_for_product(product_id)
        logger.warning("Purged %s batches of product %s", deleted, product_id)
        return deleted
