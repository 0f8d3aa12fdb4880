from datetime import date

import pytest

from stockcast.domain.models import Order
from stockcast.domain.orders import (
    add_months,
    is_overdue,
    is_received,
    open_orders,
    resolve_expected_date,
    resolve_open_orders,
)


def _order(sku="D1", qty=10, order_date=None, expected=None, received=False, row=2):
    return Order(
        order_date=order_date,
        expected_date=expected,
        product_sku=sku,
        quantity=qty,
        received=received,
        row_index=row,
        product_name=f"item {sku}",
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        ("כן", True),
        (" v ", True),
        ("V", True),
        ("✓", True),
        ("TRUE", True),
        ("yes", True),
        (True, True),
        ("", False),
        ("לא", False),
        ("no", False),
        (None, False),
        (False, False),
    ],
)
def test_is_received(value, expected):
    assert is_received(value) is expected


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 10), 3) == date(2024, 4, 10)
    assert add_months(date(2023, 11, 30), 3) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)


def test_resolve_expected_date_prefers_explicit_date():
    o = _order(order_date=date(2024, 1, 1), expected=date(2024, 2, 1))
    r = resolve_expected_date(o)
    assert r.expected_date == date(2024, 2, 1)
    assert r.estimated is False
    assert r.quantity == 10


def test_resolve_expected_date_falls_back_to_order_date_plus_lead():
    o = _order(order_date=date(2024, 1, 10))
    r = resolve_expected_date(o)
    assert r.expected_date == date(2024, 4, 10)
    assert r.estimated is True
    assert resolve_expected_date(o, lead_months=1).expected_date == date(2024, 2, 10)


def test_resolve_expected_date_without_dates():
    assert resolve_expected_date(_order()) is None


def test_resolve_open_orders_splits_and_sorts():
    orders = [
        _order(sku="A", expected=date(2024, 5, 1), row=2),
        _order(sku="B", received=True, expected=date(2024, 1, 1), row=3),
        _order(sku="A", order_date=date(2024, 1, 1), row=4),
        _order(sku="C", row=5),
    ]
    resolved = resolve_open_orders(orders)
    assert [r.order.row_index for r in resolved.scheduled] == [4, 2]
    assert [o.row_index for o in resolved.unscheduled] == [5]
    assert len(resolved) == 3

    only_a = resolved.for_sku("A")
    assert len(only_a.scheduled) == 2
    assert only_a.unscheduled == ()


def test_open_orders_filters_received():
    orders = [_order(received=True), _order(row=3)]
    assert [o.row_index for o in open_orders(orders)] == [3]


def test_is_overdue():
    today = date(2024, 6, 1)
    assert is_overdue(_order(expected=date(2024, 5, 31)), today)
    assert not is_overdue(_order(expected=date(2024, 6, 1)), today)
    # pedido em 01/01 + 3 meses = 01/04, já passou
    assert is_overdue(_order(order_date=date(2024, 1, 1)), today)
    assert not is_overdue(_order(), today)
