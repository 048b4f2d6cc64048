"""SQLAlchemy-backed implementation of InventoryRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from posledger.domain.model.inventory import InventoryRecord
from posledger.domain.repository.inventory_repository import InventoryRepository
from posledger.infrastructure.persistence.sql_batch_repository import as_utc
from posledger.infrastructure.persistence.sql_product_repository import money_from_column
from posledger.infrastructure.persistence.tables import InventoryRow


class SqlInventoryRepository(InventoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_product_id(self, product_id: int) -> InventoryRecord | None:
        row = self._row_for(product_id)
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[InventoryRecord]:
        rows = self._session.scalars(select(InventoryRow).order_by(InventoryRow.product_id))
        return [self._to_domain(row) for row in rows]

    def save(self, record: InventoryRecord) -> None:
        row = self._row_for(record.product_id)
        if row is None:
            row = InventoryRow(product_id=record.product_id)
            self._session.add(row)
        row.quantity = record.quantity
        row.avg_cost = record.avg_cost.amount
        row.min_quantity = record.min_quantity
        row.unit = record.unit
        row.category_id = record.category_id
        row.last_updated = record.last_updated
        self._session.flush()

    def delete(self, product_id: int) -> bool:
        row = self._row_for(product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def _row_for(self, product_id: int) -> InventoryRow | None:
        return self._session.scalars(
            select(InventoryRow).where(InventoryRow.product_id == product_id)
        ).first()

    @staticmethod
    def _to_domain(row: InventoryRow) -> InventoryRecord:
        return InventoryRecord(
            product_id=row.product_id,
            quantity=row.quantity,
            avg_cost=money_from_column(row.avg_cost),
            min_quantity=row.min_quantity,
            unit=row.unit,
            category_id=row.category_id,
            last_updated=as_utc(row.last_updated),
        )
