"""Application service: Show Inventory use case (query).

Filters:
- ``low``: at or below the reorder threshold but not empty
- ``out``: nothing (or less than nothing) on hand
- ``expired``: holds at least one active batch past its expiry date
- ``expiring``: holds an active batch expiring within the warning window
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from posledger.domain.exceptions import ValidationError
from posledger.domain.model.batch import StockBatch
from posledger.domain.model.inventory import InventoryRecord
from posledger.domain.repository.unit_of_work import UnitOfWork

FILTERS = ("low", "out", "expired", "expiring")
DEFAULT_EXPIRY_WARNING_DAYS = 7


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: int
    product_name: str
    quantity: int
    min_quantity: int
    unit: str
    avg_cost: str
    stock_value: str
    stock_status: str
    category_id: int | None
    category_name: str | None
    expired_batches: int
    expiring_batches: int


class ShowInventoryHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ) -> None:
        self._uow = uow
        self._today = today
        self._expiry_warning_days = expiry_warning_days

    def handle(
        self,
        filter_by: str | None = None,
        category_id: int | None = None,
        search: str | None = None,
    ) -> list[InventoryLineDTO]:
        """List inventory records, grouped by category sort order, then by name.

        *search* is a case-insensitive substring of the product name or of
        the record's category name.
        """
        if filter_by is not None and filter_by not in FILTERS:
            raise ValidationError(
                f"Unknown inventory filter '{filter_by}' (expected one of: {', '.join(FILTERS)})"
            )

        today = self._today()
        needle = search.strip().lower() if search and search.strip() else None
        keyed: list[tuple[tuple, InventoryLineDTO]] = []
        with self._uow as uow:
            for record in uow.inventory.list_all():
                if category_id is not None and record.category_id != category_id:
                    continue
                product = uow.products.get_by_id(record.product_id)
                category = (
                    uow.categories.get_by_id(record.category_id)
                    if record.category_id is not None
                    else None
                )
                batches = uow.batches.list_active(record.product_id)
                line = self._to_dto(
                    record,
                    product.name if product else "?",
                    category.name if category else None,
                    batches,
                    today,
                )
                if needle is not None and not _mentions(line, needle):
                    continue
                if self._matches(line, filter_by):
                    # uncategorized records first, like NULLs in an ascending sort
                    rank = (category is not None, category.sort_order if category else 0)
                    keyed.append(((*rank, line.product_name.lower()), line))

        return [line for _, line in sorted(keyed, key=lambda pair: pair[0])]

    def _to_dto(
        self,
        record: InventoryRecord,
        product_name: str,
        category_name: str | None,
        batches: list[StockBatch],
        today: date,
    ) -> InventoryLineDTO:
        return InventoryLineDTO(
            product_id=record.product_id,
            product_name=product_name,
            quantity=record.quantity,
            min_quantity=record.min_quantity,
            unit=record.unit,
            avg_cost=str(record.avg_cost.amount),
            stock_value=str(record.stock_value.amount),
            stock_status=record.stock_status,
            category_id=record.category_id,
            category_name=category_name,
            expired_batches=sum(1 for b in batches if b.is_expired(today)),
            expiring_batches=sum(
                1 for b in batches if b.expires_within(today, self._expiry_warning_days)
            ),
        )

    @staticmethod
    def _matches(line: InventoryLineDTO, filter_by: str | None) -> bool:
        if filter_by == "low":
            return 0 < line.quantity <= line.min_quantity
        if filter_by == "out":
            return line.quantity <= 0
        if filter_by == "expired":
            return line.expired_batches > 0
        if filter_by == "expiring":
            return line.expiring_batches > 0
        return True


def _mentions(line: InventoryLineDTO, needle: str) -> bool:
    if needle in line.product_name.lower():
        return True
    return line.category_name is not None and needle in line.category_name.lower()
