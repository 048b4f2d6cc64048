"""Abstract repository for StockBatch entities."""

from __future__ import annotations

from abc import ABC, abstractmethod

from posledger.domain.model.batch import StockBatch


class BatchRepository(ABC):

    @abstractmethod
    def get_by_id(self, batch_id: int) -> StockBatch | None:
        """Return a batch by its ID, or None if not found."""

    @abstractmethod
    def list_active(self, product_id: int) -> list[StockBatch]:
        """Return batches with remaining stock, in FIFO/FEFO order."""

    @abstractmethod
    def list_for_product(self, product_id: int) -> list[StockBatch]:
        """Return every batch of a product, drained ones included."""

    @abstractmethod
    def add(self, batch: StockBatch) -> None:
        """Persist a newly received batch, assigning ``batch.id``."""

    @abstractmethod
    def save(self, batch: StockBatch) -> None:
        """Persist the remaining quantity of an existing batch."""

    @abstractmethod
    def delete_for_product(self, product_id: int) -> int:
        """Remove every batch of a product and return how many there were."""
