"""
Open-order resolution.

An order is *open* while its received column does not hold one of the
recognized values. Every open order gets an expected-arrival date:

- the explicit expected date, when it parsed;
- otherwise the order date plus ``expected_lead_months`` calendar months;
- otherwise none (the order stays open but is *unscheduled*: it is left
  out of the forecast arrival folding and of the date-ordered list).

Month arithmetic uses ``pandas.DateOffset``, which clamps to the last day
of the target month (Nov 30 + 3 months = Feb 28/29).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Optional

import pandas as pd

from stockcast.config import DEFAULTS, RECEIVED_VALUES
from stockcast.domain.models import OpenOrders, Order, ResolvedOrder


def is_received(value: Any) -> bool:
    """True when ``value`` (trimmed, case-insensitive) is a received mark."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in RECEIVED_VALUES


def add_months(d: date, months: int) -> date:
    """Calendar month arithmetic, clamped to the end of the target month."""
    return (pd.Timestamp(d) + pd.DateOffset(months=months)).date()


def resolve_expected_date(order: Order, lead_months: Optional[int] = None) -> Optional[ResolvedOrder]:
    """Resolve the arrival date of one order, or ``None`` if impossible."""
    if order.expected_date is not None:
        return ResolvedOrder(order=order, expected_date=order.expected_date, estimated=False)
    if order.order_date is None:
        return None
    months = DEFAULTS.expected_lead_months if lead_months is None else lead_months
    return ResolvedOrder(order=order, expected_date=add_months(order.order_date, months), estimated=True)


def open_orders(orders: Iterable[Order]) -> List[Order]:
    """Orders not yet marked as received, in sheet order."""
    return [o for o in orders if not o.received]


def resolve_open_orders(orders: Iterable[Order], lead_months: Optional[int] = None) -> OpenOrders:
    """Split open orders into date-ordered scheduled ones and unscheduled ones.

    The scheduled list is sorted ascending by resolved date; ties keep the
    sheet order.
    """
    scheduled: List[ResolvedOrder] = []
    unscheduled: List[Order] = []
    for order in open_orders(orders):
        resolved = resolve_expected_date(order, lead_months)
        if resolved is None:
            unscheduled.append(order)
        else:
            scheduled.append(resolved)
    scheduled.sort(key=lambda r: r.expected_date)
    return OpenOrders(scheduled=tuple(scheduled), unscheduled=tuple(unscheduled))


def is_overdue(order: Order, today: date, lead_months: Optional[int] = None) -> bool:
    """Open order whose (resolved) expected date is already in the past."""
    resolved = resolve_expected_date(order, lead_months)
    if resolved is None:
        return False
    return resolved.expected_date < today
