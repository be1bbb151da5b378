from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class LineItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    purchasable_id: int | None = None
    description: str | None = None
    qty: int
    price: Decimal
    subtotal: Decimal


class OrderStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    handle: str
    color: str | None = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    reference: str | None = None
    coupon_code: str | None = None
    order_status_id: int | None = None
    order_status: OrderStatusRead | None = None
    email: str | None = None
    is_completed: bool
    date_ordered: datetime | None = None
    date_paid: datetime | None = None
    expiry_date: datetime | None = None
    currency: str | None = None
    payment_currency: str | None = None
    billing_address_id: int | None = None
    shipping_address_id: int | None = None
    shipping_method_handle: str | None = None
    gateway_id: int | None = None
    payment_source_id: int | None = None
    customer_id: int | None = None
    total_price: Decimal
    total_paid: Decimal
    is_paid: bool
    outstanding_balance: Decimal
    date_created: datetime
    date_updated: datetime
    line_items: list[LineItemRead] = Field(default_factory=list)


class OrderFilters(BaseModel):
    """Criteria accepted by the order listing, one field per query setter."""

    number: list[str] | None = None
    email: str | None = None
    is_completed: bool | None = None
    date_ordered: list[str] | None = None
    date_paid: list[str] | None = None
    expiry_date: list[str] | None = None
    date_updated: list[str] | None = None
    order_status: str | None = None
    order_status_id: str | None = None
    customer_id: str | None = None
    gateway_id: str | None = None
    user_id: int | None = None
    is_paid: bool | None = None
    is_unpaid: bool | None = None
    has_purchasables: list[int] | None = None
