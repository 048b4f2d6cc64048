"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from posledger.domain.model.order import Order, OrderLineItem, OrderStatus, OrderType
from posledger.domain.model.value_objects import Quantity
from posledger.domain.repository.order_repository import OrderRepository
from posledger.infrastructure.persistence.sql_batch_repository import as_utc
from posledger.infrastructure.persistence.sql_product_repository import money_from_column
from posledger.infrastructure.persistence.tables import OrderItemRow, OrderRow


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.get(OrderRow, order_id)
        return self._to_domain(row) if row is not None else None

    def last_order_number(self, prefix: str) -> str | None:
        return self._session.scalars(
            select(OrderRow.order_number)
            .where(OrderRow.order_number.like(f"{prefix}%"))
            .order_by(OrderRow.order_number.desc())
            .limit(1)
        ).first()

    def save(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id) if order.id is not None else None
        if row is None:
            # Line items and their frozen prices are written once, at creation.
            row = OrderRow(order_number=order.order_number, created_at=order.created_at)
            row.items = [self._item_to_row(item) for item in order.items]
            self._session.add(row)

        row.status = order.status.value
        row.order_type = order.order_type.value
        row.table_number = order.table_number
        row.payment_method = order.payment_method
        row.cashier_id = order.cashier_id
        row.shift_id = order.shift_id
        row.branch_id = order.branch_id
        row.subtotal = order.subtotal.amount
        row.discount_percentage = order.discount_percentage
        row.discount_amount = order.discount_amount.amount
        row.delivery_fee = order.delivery_fee.amount
        row.total = order.total.amount
        row.notes = order.notes
        row.customer_name = order.customer_name
        row.customer_phone = order.customer_phone
        row.customer_address = order.customer_address
        row.completed_at = order.completed_at
        self._session.flush()
        order.id = row.id

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _item_to_row(item: OrderLineItem) -> OrderItemRow:
        return OrderItemRow(
            product_id=item.product_id,
            combo_id=item.combo_id,
            quantity=item.quantity.value,
            price=item.unit_price.amount,
            cost_price=item.unit_cost_price.amount if item.unit_cost_price else Decimal("0"),
            notes=item.notes,
            variation_id=item.variation_id,
            is_combo=item.is_combo,
            is_spicy=item.is_spicy,
        )

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        items = [
            OrderLineItem(
                quantity=Quantity(item.quantity),
                unit_price=money_from_column(item.price),
                product_id=item.product_id,
                combo_id=item.combo_id,
                unit_cost_price=money_from_column(item.cost_price),
                notes=item.notes,
                variation_id=item.variation_id,
                is_spicy=bool(item.is_spicy),
            )
            for item in row.items
        ]
        return Order(
            id=row.id,
            order_number=row.order_number,
            items=items,
            status=OrderStatus(row.status),
            order_type=OrderType(row.order_type),
            table_number=row.table_number,
            payment_method=row.payment_method,
            cashier_id=row.cashier_id,
            shift_id=row.shift_id,
            branch_id=row.branch_id,
            discount_percentage=Decimal(str(row.discount_percentage or 0)),
            discount_amount=money_from_column(row.discount_amount),
            delivery_fee=money_from_column(row.delivery_fee),
            notes=row.notes,
            customer_name=row.customer_name,
            customer_phone=row.customer_phone,
            customer_address=row.customer_address,
            created_at=as_utc(row.created_at),
            completed_at=as_utc(row.completed_at),
        )
