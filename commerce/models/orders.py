from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commerce.db import Base


class OrderStatus(Base):
    __tablename__ = "order_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    handle: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)
    color: Mapped[str] = mapped_column(String(40), default="green")
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int | None] = mapped_column(Integer)

    orders = relationship("Order", back_populates="order_status")


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    reference: Mapped[str | None] = mapped_column(String(255))
    coupon_code: Mapped[str | None] = mapped_column(String(255))
    order_status_id: Mapped[int | None] = mapped_column(
        ForeignKey("order_statuses.id", ondelete="SET NULL"), index=True
    )
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    date_ordered: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    date_paid: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    expiry_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    currency: Mapped[str | None] = mapped_column(String(3))
    payment_currency: Mapped[str | None] = mapped_column(String(3))
    last_ip: Mapped[str | None] = mapped_column(String(45))
    order_language: Mapped[str | None] = mapped_column(String(12))
    message: Mapped[str | None] = mapped_column(Text)
    return_url: Mapped[str | None] = mapped_column(String(255))
    cancel_url: Mapped[str | None] = mapped_column(String(255))
    billing_address_id: Mapped[int | None] = mapped_column(
        ForeignKey("addresses.id", ondelete="SET NULL")
    )
    shipping_address_id: Mapped[int | None] = mapped_column(
        ForeignKey("addresses.id", ondelete="SET NULL")
    )
    shipping_method_handle: Mapped[str | None] = mapped_column(String(255))
    gateway_id: Mapped[int | None] = mapped_column(
        ForeignKey("gateways.id", ondelete="SET NULL"), index=True
    )
    payment_source_id: Mapped[int | None] = mapped_column(Integer)
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"), index=True
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 4), default=Decimal("0"))
    total_paid: Mapped[Decimal] = mapped_column(Numeric(14, 4), default=Decimal("0"))

    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    date_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    order_status = relationship("OrderStatus", back_populates="orders")
    customer = relationship("Customer", back_populates="orders")
    gateway = relationship("Gateway", back_populates="orders")
    billing_address = relationship("Address", foreign_keys=[billing_address_id])
    shipping_address = relationship("Address", foreign_keys=[shipping_address_id])
    line_items = relationship(
        "LineItem", back_populates="order", cascade="all, delete-orphan"
    )

    @property
    def is_paid(self) -> bool:
        return Decimal(self.total_paid or 0) >= Decimal(self.total_price or 0)

    @property
    def outstanding_balance(self) -> Decimal:
        return Decimal(self.total_price or 0) - Decimal(self.total_paid or 0)


class LineItem(Base):
    __tablename__ = "line_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    purchasable_id: Mapped[int | None] = mapped_column(
        ForeignKey("purchasables.id", ondelete="SET NULL"), index=True
    )
    description: Mapped[str | None] = mapped_column(String(255))
    qty: Mapped[int] = mapped_column(Integer, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(14, 4), default=Decimal("0"))
    subtotal: Mapped[Decimal] = mapped_column(Numeric(14, 4), default=Decimal("0"))

    order = relationship("Order", back_populates="line_items")
    purchasable = relationship("Purchasable")
