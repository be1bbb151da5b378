from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from commerce.logging import get_logger
from commerce.models.orders import Order
from commerce.queries.orders import OrderQuery
from commerce.schemas.orders import OrderFilters

logger = get_logger(__name__)

# Date criteria arrive as repeated query params; several bounds describe a range.
_DATE_FIELDS = ("date_ordered", "date_paid", "expiry_date", "date_updated")


def _date_criteria(values: list[str] | None) -> list[str] | None:
    if not values:
        return None
    if len(values) == 1 or values[0].strip().lower() in {"and", "or", "not"}:
        return list(values)
    return ["and", *values]


def build_query(db: Session, filters: OrderFilters) -> OrderQuery:
    query = OrderQuery(db)
    if filters.number:
        query.number(filters.number if len(filters.number) > 1 else filters.number[0])
    if filters.email:
        query.email(filters.email)
    if filters.is_completed is not None:
        query.is_completed(filters.is_completed)
    for field_name in _DATE_FIELDS:
        criteria = _date_criteria(getattr(filters, field_name))
        if criteria:
            getattr(query, field_name)(criteria)
    if filters.order_status:
        query.order_status(filters.order_status)
    if filters.order_status_id:
        query.order_status_id(filters.order_status_id)
    if filters.customer_id:
        query.customer_id(filters.customer_id)
    if filters.gateway_id:
        query.gateway_id(filters.gateway_id)
    if filters.user_id is not None:
        query.user(filters.user_id)
    if filters.is_paid:
        query.is_paid()
    if filters.is_unpaid:
        query.is_unpaid()
    if filters.has_purchasables:
        query.has_purchasables(filters.has_purchasables)
    return query


class Orders:
    @staticmethod
    def get(db: Session, order_id: int) -> Order:
        order = OrderQuery(db).id(order_id).with_relations().one()
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    @staticmethod
    def get_by_number(db: Session, number: str) -> Order:
        order = OrderQuery(db).number(number).with_relations().one()
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")
        return order

    @staticmethod
    def list_response(
        db: Session,
        filters: OrderFilters,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ) -> dict:
        query = (
            build_query(db, filters)
            .order_by(order_by, order_dir)
            .limit(limit)
            .offset(offset)
            .with_relations()
        )
        items = query.all()
        count = query.count()
        logger.info(
            "Listed orders",
            extra={"count": count, "returned": len(items), "criteria": list(query.criteria.populated())},
        )
        return {"items": items, "count": count, "limit": limit, "offset": offset}


orders = Orders()
