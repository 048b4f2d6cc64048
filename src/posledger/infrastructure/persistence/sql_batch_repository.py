"""SQLAlchemy-backed implementation of BatchRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from posledger.domain.model.batch import StockBatch
from posledger.domain.repository.batch_repository import BatchRepository
from posledger.infrastructure.persistence.sql_product_repository import money_from_column
from posledger.infrastructure.persistence.tables import InventoryBatchRow

# Expiry ascending with undated batches last, then oldest receipt first.
_FIFO_ORDER = (
    InventoryBatchRow.expiry_date.is_(None),
    InventoryBatchRow.expiry_date,
    InventoryBatchRow.received_date,
    InventoryBatchRow.id,
)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands DateTime columns back naive; they are stored as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SqlBatchRepository(BatchRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, batch_id: int) -> StockBatch | None:
        row = self._session.get(InventoryBatchRow, batch_id)
        return self._to_domain(row) if row is not None else None

    def list_active(self, product_id: int) -> list[StockBatch]:
        rows = self._session.scalars(
            select(InventoryBatchRow)
            .where(
                InventoryBatchRow.product_id == product_id,
                InventoryBatchRow.quantity > 0,
            )
            .order_by(*_FIFO_ORDER)
        )
        return [self._to_domain(row) for row in rows]

    def list_for_product(self, product_id: int) -> list[StockBatch]:
        rows = self._session.scalars(
            select(InventoryBatchRow)
            .where(InventoryBatchRow.product_id == product_id)
            .order_by(*_FIFO_ORDER)
        )
        return [self._to_domain(row) for row in rows]

    def add(self, batch: StockBatch) -> None:
        row = InventoryBatchRow(
            product_id=batch.product_id,
            quantity=batch.quantity,
            original_quantity=batch.original_quantity,
            cost_price=batch.cost_price.amount,
            expiry_date=batch.expiry_date,
            received_date=batch.received_date,
            supplier=batch.supplier,
            notes=batch.notes,
        )
        self._session.add(row)
        self._session.flush()
        batch.id = row.id

    def save(self, batch: StockBatch) -> None:
        # Only the remaining quantity is mutable after receipt.
        row = self._session.get(InventoryBatchRow, batch.id)
        if row is None:
            self.add(batch)
            return
        row.quantity = batch.quantity
        self._session.flush()

    def delete_for_product(self, product_id: int) -> int:
        result = self._session.execute(
            delete(InventoryBatchRow).where(InventoryBatchRow.product_id == product_id)
        )
        return result.rowcount

    @staticmethod
    def _to_domain(row: InventoryBatchRow) -> StockBatch:
        return StockBatch(
            id=row.id,
            product_id=row.product_id,
            quantity=row.quantity,
            original_quantity=row.original_quantity,
            cost_price=money_from_column(row.cost_price),
            expiry_date=row.expiry_date,
            received_date=as_utc(row.received_date),
            supplier=row.supplier,
            notes=row.notes,
        )
