"""Domain service: FulfillmentLedger.

Translates order line items into inventory effects (batch consumption,
summary deduction, frozen sale cost) and reverses them on cancellation.
It also hosts the manual stock operations that need both stores.

Like every ledger service it relies on the surrounding unit of work for
atomicity, but it still validates everything it can *before* the first
mutation (two-phase: load and validate, then mutate) so that the common
failure modes never even reach a rollback.

Policies worth knowing:
- Order fulfillment is oversell-tolerant: it never fails for stock level.
  Uncovered quantity is costed at the inventory average, then the catalog
  cost price, then zero.
- Reversal restores the summary quantity only.  Batches drawn by the sale
  stay drawn.
- Manual deduction is *not* oversell-tolerant and raises
  InsufficientStockError instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from posledger.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    UnknownProductError,
    ValidationError,
)
from posledger.domain.model.batch import ConsumedLine
from posledger.domain.model.combo import Combo
from posledger.domain.model.inventory import DEFAULT_MIN_QUANTITY, AdjustmentResult
from posledger.domain.model.order import Order, OrderLineItem
from posledger.domain.model.product import Product
from posledger.domain.model.value_objects import Money, Quantity
from posledger.domain.repository.product_repository import (
    ComboRepository,
    ProductRepository,
)
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.batch_store import BatchStore
from posledger.domain.service.inventory_summary import InventorySummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostedLine:
    line_item: OrderLineItem
    unit_cost_price: Money
    shortfall: int = 0


@dataclass(frozen=True)
class DeductionResult:
    product_id: int
    lines: list[ConsumedLine]
    total_cost: Money
    old_quantity: int
    new_quantity: int
    reason: str | None = None


class FulfillmentLedger:

    def __init__(
        self,
        batch_store: BatchStore,
        summary: InventorySummary,
        product_repo: ProductRepository,
        combo_repo: ComboRepository,
    ) -> None:
        self._batches = batch_store
        self._summary = summary
        self._product_repo = product_repo
        self._combo_repo = combo_repo

    @classmethod
    def for_unit_of_work(
        cls,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        default_min_quantity: int = DEFAULT_MIN_QUANTITY,
    ) -> FulfillmentLedger:
        """Wire the ledger and its two stores to the repositories of *uow*."""
        return cls(
            batch_store=BatchStore(uow.batches, uow.products, today=today),
            summary=InventorySummary(uow.inventory, default_min_quantity),
            product_repo=uow.products,
            combo_repo=uow.combos,
        )

    @property
    def batch_store(self) -> BatchStore:
        return self._batches

    @property
    def summary(self) -> InventorySummary:
        return self._summary

    # --- Order fulfillment ----------------------------------------------------

    def fulfill_order(self, line_items: list[OrderLineItem]) -> list[CostedLine]:
        """Consume stock for every line item and freeze its unit cost.

        Phase 1 resolves every referenced product and combo so an unknown
        id fails before anything is mutated.  Phase 2 consumes batches,
        deducts the summary and stamps ``unit_cost_price`` on each line.
        """
        # Phase 1: load and validate
        resolved: list[tuple[OrderLineItem, Product | Combo]] = []
        for item in line_items:
            if item.is_combo:
                resolved.append((item, self._require_combo(item.combo_id)))  # type: ignore[arg-type]
            else:
                resolved.append((item, self._require_product(item.product_id)))  # type: ignore[arg-type]

        # Phase 2: mutate
        costed: list[CostedLine] = []
        for item, target in resolved:
            if isinstance(target, Combo):
                line = CostedLine(item, self._combo_unit_cost(target))
            else:
                line = self._fulfill_product_line(item, target)
            item.freeze_cost(line.unit_cost_price)
            costed.append(line)
        return costed

    def reverse_order(self, order: Order) -> None:
        """Give every product line's quantity back to the inventory summary.

        Batch quantities consumed by the sale are not restored.
        """
        for item in order.product_items:
            self._summary.apply_restore(item.product_id, item.quantity.value)  # type: ignore[arg-type]
        logger.info(
            "Reversed inventory for order %s (%d product lines)",
            order.order_number, len(order.product_items),
        )

    # --- Manual stock operations ----------------------------------------------

    def manual_adjust(
        self,
        product_id: int,
        delta: int,
        reason: str | None = None,
    ) -> AdjustmentResult:
        """Shift the summary quantity by a signed *delta*; batches untouched."""
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValidationError("Adjustment must be a non-zero whole number", delta=delta)
        self._require_product(product_id)
        record = self._summary.get(product_id)
        if record is None:
            raise EntityNotFoundError(
                f"Product #{product_id} has no inventory record", product_id=product_id
            )
        return self.set_quantity(product_id, record.quantity + delta, reason)

    def set_quantity(
        self,
        product_id: int,
        new_quantity: int,
        reason: str | None = None,
    ) -> AdjustmentResult:
        self._require_product(product_id)
        result = self._summary.set_quantity(product_id, new_quantity, reason)
        logger.info(
            "Inventory for product %s set %s -> %s (%s)",
            product_id, result.old_quantity, result.new_quantity, reason or "manual update",
        )
        return result

    def deduct(
        self,
        product_id: int,
        quantity: int,
        reason: str | None = None,
    ) -> DeductionResult:
        """Write stock off through the batches (loss, damage, correction)."""
        qty = Quantity(quantity).value
        self._require_product(product_id)
        record = self._summary.get(product_id)
        if record is None:
            raise EntityNotFoundError(
                f"Product #{product_id} has no inventory record", product_id=product_id
            )

        available = self._batches.available(product_id)
        on_hand = min(available, record.quantity)
        if qty > on_hand:
            raise InsufficientStockError(
                f"Requested {qty} exceeds available stock ({on_hand})",
                product_id=product_id,
                requested=qty,
                available=on_hand,
            )

        consumption = self._batches.consume(product_id, qty)
        old_quantity = record.quantity
        updated = self._summary.apply_consume(product_id, qty)
        logger.info(
            "Deducted %s of product %s (%s), cost %s",
            qty, product_id, reason or "no reason given", consumption.total_cost.amount,
        )
        return DeductionResult(
            product_id=product_id,
            lines=consumption.lines,
            total_cost=consumption.total_cost,
            old_quantity=old_quantity,
            new_quantity=updated.quantity,  # type: ignore[union-attr]
            reason=reason,
        )

    def remove_item(self, product_id: int, force: bool = False) -> int:
        """Stop tracking a product: delete its inventory record.

        A product that still has batches (drained ones count, they are the
        cost audit trail) is refused unless *force* purges them too.
        Returns the number of purged batches.
        """
        if self._summary.get(product_id) is None:
            raise EntityNotFoundError(
                f"Product #{product_id} has no inventory record", product_id=product_id
            )
        batch_count = self._batches.count(product_id)
        if batch_count and not force:
            raise ValidationError(
                f"Cannot delete inventory item with {batch_count} batches (use force)",
                product_id=product_id,
                batch_count=batch_count,
            )

        purged = self._batches.purge(product_id) if batch_count else 0
        self._summary.remove(product_id)
        logger.info("Removed inventory record of product %s (%s batches purged)", product_id, purged)
        return purged

    # --- Internal helpers -----------------------------------------------------

    def _fulfill_product_line(self, item: OrderLineItem, product: Product) -> CostedLine:
        qty = item.quantity.value
        consumption = self._batches.consume(product.id, qty)  # type: ignore[arg-type]
        total = consumption.total_cost
        if consumption.shortfall:
            fallback = self._fallback_unit_cost(product)
            total = total + fallback * consumption.shortfall
            logger.warning(
                "Oversold product %s by %s; costing shortfall at %s",
                product.id, consumption.shortfall, fallback.amount,
            )
        self._summary.apply_consume(product.id, qty)  # type: ignore[arg-type]
        return CostedLine(item, total.per_unit(qty), consumption.shortfall)

    def _fallback_unit_cost(self, product: Product) -> Money:
        record = self._summary.get(product.id)  # type: ignore[arg-type]
        if record is not None:
            return record.avg_cost
        if product.cost_price is not None:
            return product.cost_price
        return Money.zero()

    def _combo_unit_cost(self, combo: Combo) -> Money:
        total = Money.zero()
        for component in combo.items:
            product = self._require_product(component.product_id)
            total = total + product.cost_price * component.quantity.value
        return total

    def _require_product(self, product_id: int) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise UnknownProductError(
                f"Product #{product_id} not found", product_id=product_id
            )
        return product

    def _require_combo(self, combo_id: int) -> Combo:
        combo = self._combo_repo.get_by_id(combo_id)
        if combo is None:
            raise EntityNotFoundError(f"Combo #{combo_id} not found", combo_id=combo_id)
        for component in combo.items:
            self._require_product(component.product_id)
        return combo
