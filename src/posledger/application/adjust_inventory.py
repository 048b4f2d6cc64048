"""Application service: Adjust Inventory use case (signed delta, batches untouched)."""

from __future__ import annotations

from posledger.application.dto import AdjustmentDTO
from posledger.application.set_inventory import adjustment_to_dto
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger


class AdjustInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, delta: int, reason: str | None = None) -> AdjustmentDTO:
        with self._uow as uow:
            result = FulfillmentLedger.for_unit_of_work(uow).manual_adjust(
                product_id, delta, reason
            )
            uow.commit()
        return adjustment_to_dto(result)
