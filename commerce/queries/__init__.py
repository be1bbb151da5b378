"""Query builders for commerce elements.

Usage:
    from commerce.queries import OrderQuery

    orders = (
        OrderQuery(db)
        .is_completed()
        .email("*@example.com")
        .date_ordered(">= 2024-01-01")
        .is_unpaid()
        .order_by("date_ordered", "desc")
        .limit(50)
        .all()
    )
"""

from commerce.queries.base import ElementCriteria, ElementQuery
from commerce.queries.orders import OrderCriteria, OrderQuery
from commerce.queries.params import InvalidParamError, parse_date_param, parse_param

__all__ = [
    "ElementCriteria",
    "ElementQuery",
    "InvalidParamError",
    "OrderCriteria",
    "OrderQuery",
    "parse_date_param",
    "parse_param",
]
