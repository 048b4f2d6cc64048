"""Application service: Inventory Alerts use case (query).

A product is flagged when its summary is at or below the reorder
threshold, or when any batch still holding stock expires within the
warning window (already-expired batches included).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from posledger.application.show_inventory import DEFAULT_EXPIRY_WARNING_DAYS
from posledger.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class InventoryAlertDTO:
    product_id: int
    product_name: str
    quantity: int
    min_quantity: int
    stock_status: str
    nearest_expiry: str | None


class InventoryAlertsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        today: Callable[[], date] = date.today,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ) -> None:
        self._uow = uow
        self._today = today
        self._expiry_warning_days = expiry_warning_days

    def handle(self) -> list[InventoryAlertDTO]:
        horizon = self._today() + timedelta(days=self._expiry_warning_days)
        alerts: list[InventoryAlertDTO] = []

        with self._uow as uow:
            for record in uow.inventory.list_all():
                expiries = [
                    b.expiry_date
                    for b in uow.batches.list_active(record.product_id)
                    if b.expiry_date is not None
                ]
                nearest = min(expiries) if expiries else None
                low = record.quantity <= record.min_quantity
                expiring = nearest is not None and nearest <= horizon
                if not (low or expiring):
                    continue

                product = uow.products.get_by_id(record.product_id)
                alerts.append(
                    InventoryAlertDTO(
                        product_id=record.product_id,
                        product_name=product.name if product else "?",
                        quantity=record.quantity,
                        min_quantity=record.min_quantity,
                        stock_status=record.stock_status,
                        nearest_expiry=nearest.isoformat() if nearest else None,
                    )
                )
        return alerts
