"""Application service: Update Order Status use case.

The status change and its inventory effect (if any) are committed
together.  The effect comes from the order's transition table: entering
``cancelled`` gives the sold quantities back to the inventory summary,
every other legal change has no inventory effect.
"""

from __future__ import annotations

import logging

from posledger.application.dto import OrderDTO, order_to_dto
from posledger.domain.exceptions import EntityNotFoundError, ValidationError
from posledger.domain.model.order import InventoryEffect, OrderStatus
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.domain.service.fulfillment_ledger import FulfillmentLedger

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, status: str) -> OrderDTO:
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown order status '{status}'", status=status)

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found", order_id=order_id)

            previous = order.status
            effect = order.transition_to(new_status)
            if effect == InventoryEffect.REVERSE_INVENTORY:
                FulfillmentLedger.for_unit_of_work(uow).reverse_order(order)

            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order %s status %s -> %s", order.order_number, previous.value, new_status.value
        )
        return order_to_dto(order)
