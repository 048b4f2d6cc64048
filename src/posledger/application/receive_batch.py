"""Application service: Receive Batch use case.

Appends a stock batch and folds it into the product's inventory summary
(quantity and weighted-average cost) inside one unit of work.  Receiving
under a product name that is not in the catalog yet creates a new
inventory-only product first.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from posledger.application.dto import ReceiptDTO, ReceiveBatchSpec
from posledger.application.inventory_categories import require_active_category
from posledger.domain.exceptions import ValidationError
from posledger.domain.model.inventory import DEFAULT_MIN_QUANTITY
from posledger.domain.model.product import Product
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger

logger = logging.getLogger(__name__)


class ReceiveBatchHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        default_min_quantity: int = DEFAULT_MIN_QUANTITY,
    ) -> None:
        self._uow = uow
        self._today = today
        self._default_min_quantity = default_min_quantity

    def handle(self, spec: ReceiveBatchSpec) -> ReceiptDTO:
        quantity = Quantity(spec.quantity).value
        unit_cost = Money.of(spec.unit_cost)

        with self._uow as uow:
            if spec.category_id is not None:
                require_active_category(uow, spec.category_id)
            ledger = FulfillmentLedger.for_unit_of_work(
                uow, today=self._today, default_min_quantity=self._default_min_quantity
            )
            product_id = self._resolve_product_id(uow, spec, unit_cost)

            batch_id = ledger.batch_store.receive(
                product_id,
                quantity,
                unit_cost,
                expiry_date=spec.expiry_date,
                supplier=spec.supplier,
                notes=spec.notes,
            )
            record = ledger.summary.apply_receive(
                product_id, quantity, unit_cost, category_id=spec.category_id
            )
            uow.commit()

        return ReceiptDTO(
            batch_id=batch_id,
            product_id=product_id,
            inventory_quantity=record.quantity,
            avg_cost=str(record.avg_cost.amount),
        )

    @staticmethod
    def _resolve_product_id(uow: UnitOfWork, spec: ReceiveBatchSpec, unit_cost: Money) -> int:
        if spec.product_id is not None:
            return spec.product_id
        if not spec.product_name or not spec.product_name.strip():
            raise ValidationError("Product id or product name is required")

        existing = uow.products.get_by_name(spec.product_name.strip())
        if existing is not None:
            return existing.id  # type: ignore[return-value]

        product = Product.inventory_only(spec.product_name, unit_cost)
        uow.products.save(product)
        logger.info("Created inventory-only product #%s '%s'", product.id, product.name)
        return product.id  # type: ignore[return-value]
