from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from commerce.api.deps import get_db
from commerce.config import settings
from commerce.schemas.common import ListResponse
from commerce.schemas.orders import OrderFilters, OrderRead
from commerce.services import orders as orders_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=ListResponse[OrderRead])
def list_orders(
    number: list[str] | None = Query(default=None),
    email: str | None = None,
    is_completed: bool | None = None,
    date_ordered: list[str] | None = Query(default=None),
    date_paid: list[str] | None = Query(default=None),
    expiry_date: list[str] | None = Query(default=None),
    date_updated: list[str] | None = Query(default=None),
    order_status: str | None = None,
    order_status_id: str | None = None,
    customer_id: str | None = None,
    gateway_id: str | None = None,
    user_id: int | None = None,
    is_paid: bool | None = None,
    is_unpaid: bool | None = None,
    has_purchasables: list[int] | None = Query(default=None),
    order_by: str = Query(default="id"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=settings.order_list_max_limit),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    filters = OrderFilters(
        number=number,
        email=email,
        is_completed=is_completed,
        date_ordered=date_ordered,
        date_paid=date_paid,
        expiry_date=expiry_date,
        date_updated=date_updated,
        order_status=order_status,
        order_status_id=order_status_id,
        customer_id=customer_id,
        gateway_id=gateway_id,
        user_id=user_id,
        is_paid=is_paid,
        is_unpaid=is_unpaid,
        has_purchasables=has_purchasables,
    )
    return orders_service.orders.list_response(db, filters, order_by, order_dir, limit, offset)


@router.get("/{number}", response_model=OrderRead)
def get_order(number: str, db: Session = Depends(get_db)):
    return orders_service.orders.get_by_number(db, number)
