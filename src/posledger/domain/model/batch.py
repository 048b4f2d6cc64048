"""StockBatch entity and the FIFO/FEFO allocation algorithm.

A batch is one received lot of a product at a fixed unit cost.  Batches
are consumed earliest-expiry first (batches without an expiry date go
last), then earliest-received first.

``allocate_fifo`` is a pure function over an in-memory sequence: it never
touches storage, so the allocation rules can be tested on their own and
the caller persists only the batches that actually changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.value_objects import Money


@dataclass
class StockBatch:
    """Invariant: ``0 <= quantity <= original_quantity``.

    ``original_quantity`` and ``cost_price`` are audit values fixed at
    receipt; only ``quantity`` (the remaining amount) ever changes.
    """

    id: int | None
    product_id: int
    quantity: int
    original_quantity: int
    cost_price: Money
    expiry_date: date | None = None
    received_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    supplier: str | None = None
    notes: str | None = None

    @property
    def is_active(self) -> bool:
        return self.quantity > 0

    def is_expired(self, today: date) -> bool:
        return self.expiry_date is not None and self.expiry_date < today

    def expires_within(self, today: date, days: int) -> bool:
        if self.expiry_date is None:
            return False
        return 0 <= (self.expiry_date - today).days <= days

    def take(self, quantity: int) -> None:
        """Remove *quantity* units from the remaining stock of this batch."""
        if quantity <= 0:
            raise ValidationError("Batch take quantity must be positive")
        if quantity > self.quantity:
            raise ValidationError(
                f"Cannot take {quantity} from batch #{self.id} "
                f"- only {self.quantity} remaining",
                batch_id=self.id,
            )
        self.quantity -= quantity


@dataclass(frozen=True)
class ConsumedLine:
    """How much of one batch a consumption used, and at what unit cost."""

    batch_id: int
    quantity_taken: int
    unit_cost: Money

    @property
    def line_cost(self) -> Money:
        return self.unit_cost * self.quantity_taken


@dataclass(frozen=True)
class ConsumptionResult:
    lines: list[ConsumedLine]
    shortfall: int = 0

    @property
    def quantity_taken(self) -> int:
        return sum(line.quantity_taken for line in self.lines)

    @property
    def total_cost(self) -> Money:
        total = Money.zero()
        for line in self.lines:
            total = total + line.line_cost
        return total


def fifo_sort_key(batch: StockBatch) -> tuple:
    """Consumption order: expiry asc (no expiry last), received asc, id asc."""
    return (
        batch.expiry_date is None,
        batch.expiry_date or date.max,
        batch.received_date,
        batch.id if batch.id is not None else 0,
    )


def allocate_fifo(
    batches: list[StockBatch],
    quantity: int,
) -> tuple[list[StockBatch], list[ConsumedLine], int]:
    """Allocate *quantity* units across *batches* in FIFO/FEFO order.

    Returns ``(updated_batches, lines, shortfall)`` where
    ``updated_batches`` are copies of only the batches that were drawn
    from (with their new remaining quantity), ``lines`` is the per-batch
    cost breakdown and ``shortfall`` is what no batch could cover.
    The input batches are left untouched.
    """
    if quantity <= 0:
        raise ValidationError("Consume quantity must be positive", quantity=quantity)

    needed = quantity
    updated: list[StockBatch] = []
    lines: list[ConsumedLine] = []

    for batch in sorted((b for b in batches if b.is_active), key=fifo_sort_key):
        if needed <= 0:
            break
        taken = min(batch.quantity, needed)
        drawn = replace(batch)
        drawn.take(taken)
        updated.append(drawn)
        lines.append(
            ConsumedLine(batch_id=batch.id, quantity_taken=taken, unit_cost=batch.cost_price)  # type: ignore[arg-type]
        )
        needed -= taken

    return updated, lines, needed
