"""Query builder for orders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Self

from sqlalchemy import false
from sqlalchemy.orm import Query, selectinload

from commerce.models.customers import Customer, User
from commerce.models.gateways import Gateway
from commerce.models.orders import LineItem, Order, OrderStatus
from commerce.models.purchasables import Purchasable
from commerce.queries.base import ElementCriteria, ElementQuery, and_where
from commerce.queries.params import negate_items, parse_date_param, parse_param, to_list
from commerce.services import customers as customers_service
from commerce.services.deprecations import deprecator


@dataclass
class OrderCriteria(ElementCriteria):
    number: Any = None
    email: Any = None
    is_completed: bool | None = None
    date_ordered: Any = None
    date_paid: Any = None
    expiry_date: Any = None
    order_status_id: Any = None
    customer_id: Any = None
    gateway_id: Any = None
    is_paid: bool | None = None
    is_unpaid: bool | None = None
    has_purchasables: Any = None


class OrderQuery(ElementQuery[Order]):
    """Query builder for Order model.

    Usage:
        orders = (
            OrderQuery(db)
            .is_completed()
            .order_status("shipped")
            .date_ordered(["and", ">= 2024-01-01", "< 2024-02-01"])
            .has_purchasables([shirt, 42])
            .order_by("date_ordered", "desc")
            .all()
        )

    Criteria can also be passed as keyword config:
        OrderQuery(db, email="*@example.com", is_paid=True).count()
    """

    model_class = Order
    criteria_class = OrderCriteria
    default_order_by = ("id", "asc")
    ordering_fields: ClassVar[dict[str, Any]] = {
        "id": Order.id,
        "number": Order.number,
        "email": Order.email,
        "date_ordered": Order.date_ordered,
        "date_paid": Order.date_paid,
        "expiry_date": Order.expiry_date,
        "date_created": Order.date_created,
        "date_updated": Order.date_updated,
        "total_price": Order.total_price,
        "total_paid": Order.total_paid,
    }
    settable = ElementQuery.settable | {
        "number",
        "email",
        "is_completed",
        "date_ordered",
        "date_paid",
        "expiry_date",
        "updated_after",
        "updated_before",
        "order_status",
        "order_status_id",
        "customer",
        "customer_id",
        "gateway",
        "gateway_id",
        "user",
        "is_paid",
        "is_unpaid",
        "has_purchasables",
    }

    criteria: OrderCriteria

    def number(self, value: str | list[str] | None = None) -> Self:
        self.criteria.number = value
        return self

    def email(self, value: str | list[str] | None) -> Self:
        self.criteria.email = value
        return self

    def is_completed(self, value: bool | None = True) -> Self:
        self.criteria.is_completed = value
        return self

    def date_ordered(self, value: Any) -> Self:
        self.criteria.date_ordered = value
        return self

    def date_paid(self, value: Any) -> Self:
        self.criteria.date_paid = value
        return self

    def expiry_date(self, value: Any) -> Self:
        self.criteria.expiry_date = value
        return self

    def updated_after(self, value: str | datetime) -> Self:
        """Deprecated: use ``date_updated(">= ...")`` instead."""
        deprecator.log(
            "OrderQuery.updated_after",
            "OrderQuery.updated_after() is deprecated. Use date_updated() instead.",
        )
        self._append_date_updated(">=", value)
        return self

    def updated_before(self, value: str | datetime) -> Self:
        """Deprecated: use ``date_updated("< ...")`` instead."""
        deprecator.log(
            "OrderQuery.updated_before",
            "OrderQuery.updated_before() is deprecated. Use date_updated() instead.",
        )
        self._append_date_updated("<", value)
        return self

    def _append_date_updated(self, operator: str, value: str | datetime) -> None:
        if isinstance(value, datetime):
            value = value.isoformat()
        existing = to_list(self.criteria.date_updated)
        # Legacy bounds narrow the range, so they combine with "and".
        head = existing[0].strip().lower() if existing and isinstance(existing[0], str) else None
        if head in {"and", "or"}:
            existing = existing[1:]
        elif head == "not":
            existing = negate_items(existing[1:])
        self.criteria.date_updated = ["and", *existing, f"{operator} {value}"]

    def order_status(self, value: OrderStatus | str | list[str] | None) -> Self:
        """Filter by status instance or handle(s)."""
        if isinstance(value, OrderStatus):
            self.criteria.order_status_id = value.id
        elif value is not None:
            predicate = parse_param(OrderStatus.handle, value)
            if predicate is None:
                self.criteria.order_status_id = None
            else:
                self.criteria.order_status_id = [
                    row.id for row in self.db.query(OrderStatus.id).filter(predicate).all()
                ]
        else:
            self.criteria.order_status_id = None
        return self

    def order_status_id(self, value: Any) -> Self:
        self.criteria.order_status_id = value
        return self

    def customer(self, value: Customer | int | None = None) -> Self:
        self.criteria.customer_id = value.id if isinstance(value, Customer) else value
        return self

    def customer_id(self, value: Any) -> Self:
        self.criteria.customer_id = value
        return self

    def gateway(self, value: Gateway | int | None = None) -> Self:
        self.criteria.gateway_id = value.id if isinstance(value, Gateway) else value
        return self

    def gateway_id(self, value: Any) -> Self:
        self.criteria.gateway_id = value
        return self

    def user(self, value: User | int | str | None) -> Self:
        """Filter by the customer that belongs to a user.

        A user without a customer record matches no orders.
        """
        if value is None:
            self.criteria.customer_id = None
            return self
        user_id = value.id if isinstance(value, User) else value
        customer = customers_service.get_customer_by_user_id(self.db, user_id)
        self.criteria.customer_id = customer.id if customer else []
        return self

    def is_paid(self, value: bool | None = True) -> Self:
        self.criteria.is_paid = value
        return self

    def is_unpaid(self, value: bool | None = True) -> Self:
        self.criteria.is_unpaid = value
        return self

    def has_purchasables(self, value: Purchasable | int | str | list[Any] | None) -> Self:
        self.criteria.has_purchasables = value
        return self

    def with_relations(self) -> Self:
        """Eager load status, customer, gateway and line items."""
        self._eager_options = [
            selectinload(Order.order_status),
            selectinload(Order.customer),
            selectinload(Order.gateway),
            selectinload(Order.line_items).selectinload(LineItem.purchasable),
        ]
        return self

    # -------------------------------------------------------------------------
    # Preparation
    # -------------------------------------------------------------------------

    def _before_prepare(self, query: Query) -> Query:
        criteria = self.criteria

        if criteria.number:
            if isinstance(criteria.number, (list, tuple, set)):
                query = query.filter(Order.number.in_(list(criteria.number)))
            else:
                query = query.filter(Order.number == criteria.number)

        if criteria.email:
            query = and_where(
                query, parse_param(Order.email, criteria.email, case_insensitive=True)
            )

        if criteria.is_completed:
            query = query.filter(Order.is_completed.is_(True))

        if criteria.date_ordered:
            query = and_where(query, parse_date_param(Order.date_ordered, criteria.date_ordered))

        if criteria.date_paid:
            query = and_where(query, parse_date_param(Order.date_paid, criteria.date_paid))

        if criteria.expiry_date:
            query = and_where(query, parse_date_param(Order.expiry_date, criteria.expiry_date))

        query = _reference_filter(query, Order.order_status_id, criteria.order_status_id)
        query = _reference_filter(query, Order.customer_id, criteria.customer_id)
        query = _reference_filter(query, Order.gateway_id, criteria.gateway_id)

        if criteria.is_paid:
            query = query.filter(Order.total_paid >= Order.total_price)

        if criteria.is_unpaid:
            query = query.filter(Order.total_paid < Order.total_price)

        if criteria.has_purchasables:
            purchasable_ids = _purchasable_ids(criteria.has_purchasables)
            query = (
                query.join(LineItem, LineItem.order_id == Order.id)
                .filter(LineItem.purchasable_id.in_(purchasable_ids))
                .distinct()
            )

        return super()._before_prepare(query)


def _reference_filter(query: Query, column, value: Any) -> Query:
    """Filter a foreign key column; an empty id list matches nothing."""
    if value is None or value == "":
        return query
    if isinstance(value, (list, tuple, set)) and not value:
        return query.filter(false())
    return and_where(query, parse_param(column, value))


def _purchasable_ids(value: Any) -> list[int]:
    if isinstance(value, str):
        value = to_list(value)
    elif not isinstance(value, (list, tuple, set)):
        value = [value]
    ids = []
    for purchasable in value:
        if isinstance(purchasable, Purchasable):
            ids.append(purchasable.id)
        elif isinstance(purchasable, bool):
            continue
        elif isinstance(purchasable, int):
            ids.append(purchasable)
        elif isinstance(purchasable, float):
            if purchasable.is_integer():
                ids.append(int(purchasable))
        elif isinstance(purchasable, (Decimal, str)):
            try:
                number = Decimal(purchasable.strip() if isinstance(purchasable, str) else purchasable)
            except InvalidOperation:
                continue
            # Numeric ids only; "3.0" is accepted, "3.5" is not.
            if number.is_finite() and number == number.to_integral_value():
                ids.append(int(number))
    # Drop blank ids (unsaved purchasables, zero)
    return [purchasable_id for purchasable_id in ids if purchasable_id]
