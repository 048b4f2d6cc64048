"""Application services: Inventory Category use cases.

Add, list, update and (soft-)delete the categories that group inventory
records.  ``require_active_category`` is shared by every use case that
assigns a category to a record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from posledger.domain.exceptions import EntityNotFoundError, ValidationError
from posledger.domain.model.category import InventoryCategory
from posledger.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryDTO:
    id: int
    name: str
    description: str | None
    icon: str | None
    color: str
    sort_order: int
    is_active: bool


def category_to_dto(category: InventoryCategory) -> CategoryDTO:
    return CategoryDTO(
        id=category.id,  # type: ignore[arg-type]
        name=category.name,
        description=category.description,
        icon=category.icon,
        color=category.color,
        sort_order=category.sort_order,
        is_active=category.is_active,
    )


def require_active_category(uow: UnitOfWork, category_id: int) -> InventoryCategory:
    category = uow.categories.get_by_id(category_id)
    if category is None or not category.is_active:
        raise EntityNotFoundError(
            f"Inventory category #{category_id} not found", category_id=category_id
        )
    return category


def _ensure_unique_name(uow: UnitOfWork, name: str, own_id: int | None = None) -> None:
    existing = uow.categories.get_by_name(name)
    if existing is not None and existing.id != own_id:
        raise ValidationError(f"Inventory category '{existing.name}' already exists")


class AddCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        description: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        sort_order: int = 0,
    ) -> CategoryDTO:
        category = InventoryCategory.create(name, description, icon, color, sort_order)
        with self._uow as uow:
            _ensure_unique_name(uow, category.name)
            uow.categories.save(category)
            uow.commit()
        logger.info("Inventory category #%s '%s' created", category.id, category.name)
        return category_to_dto(category)


class ListCategoriesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[CategoryDTO]:
        with self._uow as uow:
            return [category_to_dto(c) for c in uow.categories.list_active()]


class UpdateCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, category_id: int, **changes) -> CategoryDTO:
        """Apply the given field changes; omitted or ``None`` fields stay as they are.

        Passing ``is_active=True`` brings a deleted category back.
        """
        with self._uow as uow:
            category = uow.categories.get_by_id(category_id)
            if category is None:
                raise EntityNotFoundError(
                    f"Inventory category #{category_id} not found", category_id=category_id
                )
            category.update(**changes)
            _ensure_unique_name(uow, category.name, own_id=category.id)
            uow.categories.save(category)
            uow.commit()
        return category_to_dto(category)


class DeleteCategoryHandler:
    """Soft delete: the category disappears from listings and can no longer
    be assigned, but records already in it keep their ``category_id``."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, category_id: int) -> None:
        with self._uow as uow:
            category = require_active_category(uow, category_id)
            category.deactivate()
            uow.categories.save(category)
            uow.commit()
        logger.info("Inventory category #%s deactivated", category_id)
