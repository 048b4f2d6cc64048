"""Application service: Show Batches use case (query).

Lists a product's batches that still hold stock, in the order a sale
would consume them.
"""

from __future__ import annotations

from posledger.application.dto import BatchDTO, batch_to_dto
from posledger.domain.repository.unit_of_work import UnitOfWork


class ShowBatchesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int) -> list[BatchDTO]:
        with self._uow as uow:
            batches = uow.batches.list_active(product_id)
        return [batch_to_dto(batch) for batch in batches]
