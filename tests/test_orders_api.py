"""Tests for the order listing API."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from commerce.api.deps import get_db
from commerce.main import app


@pytest.fixture()
def client(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def catalog(make_order, statuses, customer, purchasables, utc):
    return {
        "paid": make_order(
            number="PAID-1",
            email="jane@shop.test",
            order_status_id=statuses["shipped"].id,
            customer_id=customer.id,
            date_ordered=utc(2024, 1, 10),
            total_paid=Decimal("100.00"),
            purchasables=[purchasables["shirt"]],
        ),
        "unpaid": make_order(
            number="UNPAID-1",
            email="bob@other.test",
            order_status_id=statuses["new"].id,
            date_ordered=utc(2024, 2, 10),
            purchasables=[purchasables["mug"]],
        ),
        "cart": make_order(number="CART-1", email=None, is_completed=False),
    }


class TestListOrders:
    def test_lists_all_orders(self, client, catalog):
        response = client.get("/orders")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert data["limit"] == 50
        assert data["offset"] == 0
        assert [item["number"] for item in data["items"]] == ["PAID-1", "UNPAID-1", "CART-1"]

    def test_filters_by_payment_state(self, client, catalog):
        paid = client.get("/orders", params={"is_paid": "true", "is_completed": "true"}).json()
        unpaid = client.get("/orders", params={"is_unpaid": "true"}).json()

        assert [item["number"] for item in paid["items"]] == ["PAID-1"]
        assert paid["items"][0]["is_paid"] is True
        assert [item["number"] for item in unpaid["items"]] == ["UNPAID-1"]
        assert Decimal(unpaid["items"][0]["outstanding_balance"]) == Decimal("100")

    def test_filters_by_email_wildcard(self, client, catalog):
        data = client.get("/orders", params={"email": "*@SHOP.test"}).json()

        assert [item["number"] for item in data["items"]] == ["PAID-1"]

    def test_repeated_date_params_form_a_range(self, client, catalog):
        data = client.get(
            "/orders",
            params=[("date_ordered", ">= 2024-02-01"), ("date_ordered", "< 2024-03-01")],
        ).json()

        assert [item["number"] for item in data["items"]] == ["UNPAID-1"]

    def test_repeated_date_params_accept_leading_not(self, client, catalog):
        response = client.get(
            "/orders",
            params=[
                ("date_ordered", "not"),
                ("date_ordered", "2024-01-10"),
                ("date_ordered", "2024-02-10"),
            ],
        )

        assert response.status_code == 200
        assert [item["number"] for item in response.json()["items"]] == ["CART-1"]

    def test_filters_by_status_handle(self, client, catalog):
        data = client.get("/orders", params={"order_status": "shipped"}).json()

        assert [item["number"] for item in data["items"]] == ["PAID-1"]
        assert data["items"][0]["order_status"]["handle"] == "shipped"

    def test_filters_by_purchasables(self, client, catalog, purchasables):
        data = client.get(
            "/orders",
            params=[
                ("has_purchasables", purchasables["shirt"].id),
                ("has_purchasables", purchasables["mug"].id),
            ],
        ).json()

        assert {item["number"] for item in data["items"]} == {"PAID-1", "UNPAID-1"}

    def test_filters_by_user(self, client, catalog, user):
        data = client.get("/orders", params={"user_id": user.id}).json()

        assert [item["number"] for item in data["items"]] == ["PAID-1"]

    def test_ordering_and_pagination(self, client, catalog):
        data = client.get(
            "/orders",
            params={"order_by": "number", "order_dir": "desc", "limit": 1, "offset": 1},
        ).json()

        assert data["count"] == 3
        assert [item["number"] for item in data["items"]] == ["PAID-1"]

    def test_malformed_param_returns_400(self, client, catalog):
        response = client.get("/orders", params={"customer_id": "abc"})

        assert response.status_code == 400
        assert "customer_id" in response.json()["detail"]

    def test_malformed_date_returns_400(self, client, catalog):
        response = client.get("/orders", params={"date_paid": ">= soon"})

        assert response.status_code == 400

    def test_invalid_order_dir_returns_422(self, client):
        response = client.get("/orders", params={"order_dir": "sideways"})

        assert response.status_code == 422


class TestGetOrder:
    def test_returns_order_with_line_items(self, client, catalog):
        response = client.get("/orders/PAID-1")

        assert response.status_code == 200
        data = response.json()
        assert data["number"] == "PAID-1"
        assert [item["description"] for item in data["line_items"]] == ["Shirt"]

    def test_missing_order_returns_404(self, client):
        response = client.get("/orders/NOPE")

        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found"
