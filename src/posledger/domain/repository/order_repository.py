"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from posledger.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def last_order_number(self, prefix: str) -> str | None:
        """Return the most recent order number starting with *prefix*."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, assigning ``order.id`` if new."""
