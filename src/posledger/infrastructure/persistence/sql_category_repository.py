"""SQLAlchemy-backed implementation of CategoryRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from posledger.domain.model.category import InventoryCategory
from posledger.domain.repository.category_repository import CategoryRepository
from posledger.infrastructure.persistence.tables import InventoryCategoryRow


class SqlCategoryRepository(CategoryRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, category_id: int) -> InventoryCategory | None:
        row = self._session.get(InventoryCategoryRow, category_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> InventoryCategory | None:
        row = self._session.scalars(
            select(InventoryCategoryRow)
            .where(func.lower(InventoryCategoryRow.name) == name.strip().lower())
            .limit(1)
        ).first()
        return self._to_domain(row) if row is not None else None

    def list_active(self) -> list[InventoryCategory]:
        rows = self._session.scalars(
            select(InventoryCategoryRow)
            .where(InventoryCategoryRow.is_active.is_(True))
            .order_by(InventoryCategoryRow.sort_order, InventoryCategoryRow.name)
        )
        return [self._to_domain(row) for row in rows]

    def save(self, category: InventoryCategory) -> None:
        row = (
            self._session.get(InventoryCategoryRow, category.id)
            if category.id is not None
            else None
        )
        if row is None:
            row = InventoryCategoryRow()
            self._session.add(row)
        row.name = category.name
        row.description = category.description
        row.icon = category.icon
        row.color = category.color
        row.sort_order = category.sort_order
        row.is_active = category.is_active
        self._session.flush()
        category.id = row.id

    @staticmethod
    def _to_domain(row: InventoryCategoryRow) -> InventoryCategory:
        return InventoryCategory(
            id=row.id,
            name=row.name,
            description=row.description,
            icon=row.icon,
            color=row.color,
            sort_order=row.sort_order,
            is_active=bool(row.is_active),
        )
