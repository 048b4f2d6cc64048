"""Application service: Delete Inventory use case.

Stops stock-tracking a product.  The product itself stays in the catalog;
only its inventory record goes, together with its batches when forced.
"""

from __future__ import annotations

from dataclasses import dataclass

from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger


@dataclass(frozen=True)
class InventoryDeletionDTO:
    product_id: int
    deleted_batches: int


class DeleteInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, force: bool = False) -> InventoryDeletionDTO:
        with self._uow as uow:
            purged = FulfillmentLedger.for_unit_of_work(uow).remove_item(product_id, force=force)
            uow.commit()
        return InventoryDeletionDTO(product_id=product_id, deleted_batches=purged)
