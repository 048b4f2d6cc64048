"""Abstract repository for InventoryCategory aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from posledger.domain.model.category import InventoryCategory


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: int) -> InventoryCategory | None:
        """Return a category by ID (active or not), or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> InventoryCategory | None:
        """Case-insensitive lookup, inactive categories included."""

    @abstractmethod
    def list_active(self) -> list[InventoryCategory]:
        """Return active categories ordered by sort_order, then name."""

    @abstractmethod
    def save(self, category: InventoryCategory) -> None:
        """Persist a new or updated category, assigning ``category.id``."""
