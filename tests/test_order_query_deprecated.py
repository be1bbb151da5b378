from __future__ import annotations

import logging

import pytest

from commerce.queries import OrderQuery
from commerce.services.deprecations import deprecator


def _numbers(query: OrderQuery) -> set[str]:
    return {order.number for order in query.all()}


@pytest.fixture()
def updated_orders(make_order, utc):
    make_order(number="JAN", date_updated=utc(2024, 1, 15))
    make_order(number="FEB", date_updated=utc(2024, 2, 15))
    make_order(number="MAR", date_updated=utc(2024, 3, 15))


def test_updated_after_filters_and_warns(db_session, updated_orders, caplog):
    with caplog.at_level(logging.WARNING, logger="commerce.deprecations"):
        with pytest.warns(DeprecationWarning, match="updated_after"):
            query = OrderQuery(db_session).updated_after("2024-02-01")

    assert query.criteria.date_updated == ["and", ">= 2024-02-01"]
    assert _numbers(query) == {"FEB", "MAR"}
    assert "Use date_updated() instead" in caplog.text
    assert deprecator.count("OrderQuery.updated_after") == 1


def test_updated_before_filters_and_warns(db_session, updated_orders):
    with pytest.warns(DeprecationWarning, match="updated_before"):
        query = OrderQuery(db_session).updated_before("2024-02-01")

    assert _numbers(query) == {"JAN"}
    assert deprecator.count("OrderQuery.updated_before") == 1


def test_updated_after_and_before_form_a_range(db_session, updated_orders, utc):
    with pytest.warns(DeprecationWarning):
        query = (
            OrderQuery(db_session)
            .updated_after(utc(2024, 2, 1))
            .updated_before(utc(2024, 3, 1))
        )

    assert query.criteria.date_updated == [
        "and",
        ">= 2024-02-01T00:00:00+00:00",
        "< 2024-03-01T00:00:00+00:00",
    ]
    assert _numbers(query) == {"FEB"}


def test_updated_after_extends_existing_date_updated(db_session, updated_orders):
    query = OrderQuery(db_session).date_updated("< 2024-03-01")

    with pytest.warns(DeprecationWarning):
        query.updated_after("2024-02-01")

    assert query.criteria.date_updated == ["and", "< 2024-03-01", ">= 2024-02-01"]
    assert _numbers(query) == {"FEB"}


def test_legacy_config_keys_go_through_setters(db_session, updated_orders):
    with pytest.warns(DeprecationWarning):
        query = OrderQuery(db_session, updated_after="2024-03-01")

    assert _numbers(query) == {"MAR"}
    assert deprecator.count("OrderQuery.updated_after") == 1


def test_deprecator_counts_every_occurrence(db_session):
    with pytest.warns(DeprecationWarning):
        OrderQuery(db_session).updated_before("2024-01-01").updated_before("2024-02-01")

    assert deprecator.count("OrderQuery.updated_before") == 2


def test_updated_after_extends_negated_date_updated(db_session, updated_orders):
    query = OrderQuery(db_session).date_updated(["not", "2024-01-15", "2024-03-15"])

    with pytest.warns(DeprecationWarning):
        query.updated_after("2024-01-01")

    assert query.criteria.date_updated == [
        "and",
        "!= 2024-01-15",
        "!= 2024-03-15",
        ">= 2024-01-01",
    ]
    assert _numbers(query) == {"FEB"}


def test_deprecator_count_for_unseen_key_is_zero():
    assert deprecator.count("OrderQuery.never_called") == 0
