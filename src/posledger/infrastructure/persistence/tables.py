from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(14, 4), nullable=False)
    cost_price = Column(Numeric(14, 4), nullable=False, default=0)
    is_menu_item = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


class ComboRow(Base):
    __tablename__ = "combos"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(14, 4), nullable=False)

    items = relationship(
        "ComboItemRow", cascade="all, delete-orphan", order_by="ComboItemRow.id"
    )


class ComboItemRow(Base):
    __tablename__ = "combo_items"

    id = Column(Integer, primary_key=True)
    combo_id = Column(Integer, ForeignKey("combos.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)


class InventoryBatchRow(Base):
    __tablename__ = "inventory_batches"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    quantity = Column(Integer, nullable=False)
    original_quantity = Column(Integer, nullable=False)
    cost_price = Column(Numeric(14, 4), nullable=False)

    expiry_date = Column(Date)
    received_date = Column(DateTime, nullable=False, default=_utcnow)
    supplier = Column(String)
    notes = Column(Text)

    __table_args__ = (
        CheckConstraint(
            "quantity >= 0 AND quantity <= original_quantity", name="ck_batch_quantity_range"
        ),
        Index("idx_inventory_batches_product_id", "product_id"),
    )


class InventoryCategoryRow(Base):
    __tablename__ = "inventory_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text)
    icon = Column(String)
    color = Column(String, nullable=False, default="#6b7280")
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


class InventoryRow(Base):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # May go negative: sales are never blocked by stock bookkeeping gaps.
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=5)
    unit = Column(String, nullable=False, default="piece")
    avg_cost = Column(Numeric(14, 4), nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("inventory_categories.id"))
    last_updated = Column(DateTime, nullable=False, default=_utcnow)


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String, nullable=False, unique=True)
    status = Column(String, nullable=False, default="pending")
    order_type = Column(String, nullable=False, default="dine_in")
    table_number = Column(String)
    payment_method = Column(String)
    cashier_id = Column(Integer)
    shift_id = Column(Integer)
    branch_id = Column(Integer, nullable=False, default=1)

    subtotal = Column(Numeric(14, 4), nullable=False, default=0)
    discount_percentage = Column(Numeric(7, 4), nullable=False, default=0)
    discount_amount = Column(Numeric(14, 4), nullable=False, default=0)
    delivery_fee = Column(Numeric(14, 4), nullable=False, default=0)
    total = Column(Numeric(14, 4), nullable=False)

    notes = Column(Text)
    customer_name = Column(String)
    customer_phone = Column(String)
    customer_address = Column(String)

    created_at = Column(DateTime, nullable=False, default=_utcnow)
    completed_at = Column(DateTime)

    items = relationship(
        "OrderItemRow", cascade="all, delete-orphan", order_by="OrderItemRow.id"
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"))
    combo_id = Column(Integer, ForeignKey("combos.id"))

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(14, 4), nullable=False)
    cost_price = Column(Numeric(14, 4), nullable=False, default=0)

    notes = Column(Text)
    variation_id = Column(Integer)
    is_combo = Column(Boolean, nullable=False, default=False)
    is_spicy = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            "(product_id IS NULL) <> (combo_id IS NULL)", name="ck_order_item_target"
        ),
        Index("idx_order_items_order_id", "order_id"),
    )


__all__ = [
    "Base",
    "ComboItemRow",
    "ComboRow",
    "InventoryBatchRow",
    "InventoryCategoryRow",
    "InventoryRow",
    "OrderItemRow",
    "OrderRow",
    "ProductRow",
]
