"""Application service: Set Inventory use case.

Absolute override of a product's summary quantity for stock-take
corrections.  Batches are not touched.
"""

from __future__ import annotations

from posledger.application.dto import AdjustmentDTO
from posledger.domain.model.inventory import AdjustmentResult
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger

DEFAULT_REASON = "manual update"


class SetInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, quantity: int, reason: str | None = None) -> AdjustmentDTO:
        """Set the summary quantity for a product."""
        with self._uow as uow:
            result = FulfillmentLedger.for_unit_of_work(uow).set_quantity(
                product_id, quantity, reason
            )
            uow.commit()
        return adjustment_to_dto(result)


def adjustment_to_dto(result: AdjustmentResult) -> AdjustmentDTO:
    return AdjustmentDTO(
        product_id=result.product_id,
        old_quantity=result.old_quantity,
        new_quantity=result.new_quantity,
        difference=result.difference,
        reason=result.reason or DEFAULT_REASON,
    )
