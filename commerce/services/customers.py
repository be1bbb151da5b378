from __future__ import annotations

from sqlalchemy.orm import Session

from commerce.models.customers import Customer


def get_customer_by_user_id(db: Session, user_id: int | str | None) -> Customer | None:
    if user_id is None or user_id == "":
        return None
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None
    return db.query(Customer).filter(Customer.user_id == user_id).first()
