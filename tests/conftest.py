import itertools
import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import commerce.models  # noqa: F401
from commerce.db import Base
from commerce.models import (
    Customer,
    Gateway,
    LineItem,
    Order,
    OrderStatus,
    Purchasable,
    User,
)
from commerce.services.deprecations import deprecator


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def _reset_deprecator():
    deprecator.reset()
    yield
    deprecator.reset()


def _utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=UTC)


@pytest.fixture()
def utc():
    return _utc


@pytest.fixture()
def statuses(db_session):
    """Order statuses keyed by handle."""
    rows = {
        "new": OrderStatus(name="New", handle="new", is_default=True, sort_order=1),
        "processing": OrderStatus(name="Processing", handle="processing", sort_order=2),
        "shipped": OrderStatus(name="Shipped", handle="shipped", sort_order=3),
    }
    db_session.add_all(rows.values())
    db_session.flush()
    return rows


@pytest.fixture()
def gateways(db_session):
    rows = {
        "stripe": Gateway(name="Stripe", handle="stripe"),
        "manual": Gateway(name="Manual", handle="manual", is_frontend_enabled=False),
    }
    db_session.add_all(rows.values())
    db_session.flush()
    return rows


@pytest.fixture()
def user(db_session):
    user = User(username=f"user-{uuid.uuid4().hex[:8]}", email="shopper@example.com")
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture()
def customer(db_session, user):
    customer = Customer(user_id=user.id)
    db_session.add(customer)
    db_session.flush()
    return customer


@pytest.fixture()
def guest_customer(db_session):
    customer = Customer()
    db_session.add(customer)
    db_session.flush()
    return customer


@pytest.fixture()
def purchasables(db_session):
    rows = {
        "shirt": Purchasable(sku="SHIRT-01", description="Shirt", price=Decimal("25.00")),
        "mug": Purchasable(sku="MUG-01", description="Mug", price=Decimal("12.50")),
        "poster": Purchasable(sku="POSTER-01", description="Poster", price=Decimal("8.00")),
    }
    db_session.add_all(rows.values())
    db_session.flush()
    return rows


@pytest.fixture()
def make_order(db_session):
    """Factory for orders; pass ``purchasables=[...]`` to add line items."""
    counter = itertools.count(1)

    def _make(**overrides) -> Order:
        n = next(counter)
        purchasables = overrides.pop("purchasables", [])
        data = {
            "number": f"{uuid.uuid4().hex}"[:32],
            "email": f"buyer{n}@example.com",
            "is_completed": True,
            "total_price": Decimal("100.00"),
            "total_paid": Decimal("0.00"),
            "currency": "USD",
        }
        data.update(overrides)
        order = Order(**data)
        for purchasable in purchasables:
            order.line_items.append(
                LineItem(
                    purchasable_id=purchasable.id,
                    description=purchasable.description,
                    qty=1,
                    price=purchasable.price,
                    subtotal=purchasable.price,
                )
            )
        db_session.add(order)
        db_session.flush()
        return order

    return _make
