"""InventoryCategory aggregate.

Categories group inventory records for the stock screen (dairy, packaging,
...).  They are ordered by ``sort_order`` then name, and deleting one only
deactivates it: records keep pointing at the category id.
"""

from __future__ import annotations

from dataclasses import dataclass

from posledger.domain.exceptions import ValidationError

DEFAULT_COLOR = "#6b7280"


@dataclass
class InventoryCategory:

    id: int | None
    name: str
    description: str | None = None
    icon: str | None = None
    color: str = DEFAULT_COLOR
    sort_order: int = 0
    is_active: bool = True

    @staticmethod
    def create(
        name: str,
        description: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        sort_order: int = 0,
    ) -> InventoryCategory:
        return InventoryCategory(
            id=None,
            name=_clean_name(name),
            description=description,
            icon=icon,
            color=color or DEFAULT_COLOR,
            sort_order=sort_order,
        )

    def update(
        self,
        name: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        sort_order: int | None = None,
        is_active: bool | None = None,
    ) -> None:
        """Change the given fields; ``None`` keeps the current value."""
        if name is not None:
            self.name = _clean_name(name)
        if description is not None:
            self.description = description
        if icon is not None:
            self.icon = icon
        if color is not None:
            self.color = color
        if sort_order is not None:
            self.sort_order = sort_order
        if is_active is not None:
            self.is_active = is_active

    def deactivate(self) -> None:
        self.is_active = False


def _clean_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ValidationError("Category name is required")
    return name.strip()
