"""Abstract unit of work.

Every ledger use case runs inside one unit of work: either everything it
changed becomes visible together on ``commit()``, or nothing does.
Leaving the ``with`` block without committing rolls back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from posledger.domain.repository.batch_repository import BatchRepository
from posledger.domain.repository.category_repository import CategoryRepository
from posledger.domain.repository.inventory_repository import InventoryRepository
from posledger.domain.repository.order_repository import OrderRepository
from posledger.domain.repository.product_repository import (
    ComboRepository,
    ProductRepository,
)


class UnitOfWork(ABC):

    products: ProductRepository
    combos: ComboRepository
    batches: BatchRepository
    inventory: InventoryRepository
    categories: CategoryRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit of work visible atomically."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change."""
