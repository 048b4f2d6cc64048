"""Abstract repositories for the catalog (Product and Combo aggregates).

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and the test suite.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from posledger.domain.model.combo import Combo
from posledger.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product, assigning ``product.id`` if new."""


class ComboRepository(ABC):

    @abstractmethod
    def get_by_id(self, combo_id: int) -> Combo | None:
        """Return a combo with its items, or None if not found."""

    @abstractmethod
    def save(self, combo: Combo) -> None:
        """Persist a new combo, assigning ``combo.id``."""
