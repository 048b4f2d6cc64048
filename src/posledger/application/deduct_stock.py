"""Application service: Deduct Stock use case.

Manual write-off (loss, damage, correction) that walks the batches in
FIFO/FEFO order.  Unlike a sale it refuses to oversell: when the batches
cannot cover the request the whole unit of work is discarded and
InsufficientStockError reaches the caller.
"""

from __future__ import annotations

from posledger.application.dto import DeductionDTO, consumed_line_to_dto
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger


class DeductStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, quantity: int, reason: str | None = None) -> DeductionDTO:
        with self._uow as uow:
            result = FulfillmentLedger.for_unit_of_work(uow).deduct(product_id, quantity, reason)
            uow.commit()

        return DeductionDTO(
            product_id=result.product_id,
            quantity=quantity,
            total_cost=str(result.total_cost.amount),
            old_quantity=result.old_quantity,
            new_quantity=result.new_quantity,
            reason=result.reason,
            lines=[consumed_line_to_dto(line) for line in result.lines],
        )
