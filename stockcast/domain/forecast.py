"""
Stock-level forecast for a single product.

Given the sparse, irregular stock observations of one sku, its current
(authoritative) stock, its minimum threshold and its resolved open orders,
``build_forecast`` returns the point series used by the dashboard chart:

- one point per deduplicated history sample (``actual``);
- a bridge point at today when the last sample is older than today;
- ``forecast_weeks`` weekly points projected from
  ``max(today, last sample date)`` with two parallel lines: ``decline_only``
  (no replenishment) and ``with_arrivals`` (open orders folded in).

The projection rate is ``-min_amount / 180`` whenever a minimum threshold
is configured, regardless of the observed trend; the least-squares slope
of the history is only used when no threshold exists. Both are returned.

All functions are pure and total: they never raise for malformed input
and keep no state between calls.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from stockcast.config import DEFAULTS
from stockcast.domain.models import (
    ForecastPoint,
    ForecastResult,
    ResolvedOrder,
    StockSample,
    round_half_up,
)


def _day_label(d: date) -> str:
    return d.strftime("%d/%m")


def dedupe_samples(samples: Sequence[StockSample]) -> List[StockSample]:
    """Drop a sample equal to its predecessor in day/month label and quantity.

    ``samples`` must already be sorted by date. Flat runs collapse to their
    first observation; the year is not part of the comparison.
    """
    out: List[StockSample] = []
    prev: Optional[StockSample] = None
    for s in samples:
        if (
            prev is not None
            and _day_label(s.date) == _day_label(prev.date)
            and s.quantity == prev.quantity
        ):
            prev = s
            continue
        out.append(s)
        prev = s
    return out


def regression_slope(samples: Sequence[StockSample]) -> float:
    """Ordinary least-squares slope of quantity over elapsed days.

    x is the number of days since the first sample, y the quantity:

        slope = (nΣxy − ΣxΣy) / (nΣx² − (Σx)²)

    Returns 0.0 for fewer than two samples or when every sample falls on
    the same day (zero variance in x).
    """
    n = len(samples)
    if n < 2:
        return 0.0
    first = samples[0].date
    xs = [float((s.date - first).days) for s in samples]
    ys = [float(s.quantity) for s in samples]
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denom


def min_rate_for(min_amount: Optional[float], horizon_days: Optional[int] = None) -> float:
    """Depletion rate that consumes ``min_amount`` over the horizon (≤ 0)."""
    if min_amount is None:
        return 0.0
    horizon = DEFAULTS.min_rate_horizon_days if horizon_days is None else horizon_days
    return -(min_amount / horizon)


def find_critical_point(
    points: Sequence[ForecastPoint],
    min_amount: Optional[float],
    has_orders: bool,
) -> Optional[ForecastPoint]:
    """First projected point where stock reaches ``min_amount`` for good.

    Only points without an ``actual`` value are scanned. Without open orders
    the first point with ``decline_only <= min_amount`` is returned. With
    open orders the value is ``with_arrivals`` (falling back to
    ``decline_only``) and the scan looks past the last point still above
    the threshold, so a dip that a pending arrival lifts back up does not
    count.
    """
    if min_amount is None:
        return None
    future = [p for p in points if p.actual is None]

    def value(p: ForecastPoint) -> Optional[int]:
        if has_orders and p.with_arrivals is not None:
            return p.with_arrivals
        return p.decline_only

    def first_at_or_below(candidates: Iterable[ForecastPoint]) -> Optional[ForecastPoint]:
        for p in candidates:
            v = value(p)
            if v is not None and v <= min_amount:
                return p
        return None

    if not has_orders:
        return first_at_or_below(future)

    last_above = -1
    for i, p in enumerate(future):
        v = value(p)
        if v is not None and v > min_amount:
            last_above = i
    if last_above < 0:
        return first_at_or_below(future)
    return first_at_or_below(future[last_above + 1:])


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0


def build_forecast(
    sku: str,
    current_stock: int,
    history: Iterable[StockSample],
    open_orders: Iterable[ResolvedOrder] = (),
    min_amount: Optional[int] = None,
    today: Optional[date] = None,
) -> ForecastResult:
    """Build the forecast series and rate metrics for one product.

    Args:
        sku: Product sku; ``history`` is filtered to it.
        current_stock: Stock figure the projection starts from.
        history: Stock observations (any order, any sku, dates may be None).
        open_orders: Open orders of this sku with resolved expected dates.
        min_amount: Minimum threshold, or ``None`` when not configured.
        today: Reference date (defaults to ``date.today()``).

    Returns:
        ``ForecastResult``; empty (no points, zero rates) when there are
        fewer than two usable samples and no stock.
    """
    today = today or date.today()
    current_stock = _as_int(current_stock)
    weeks = DEFAULTS.forecast_weeks
    step = DEFAULTS.forecast_step_days
    min_rate = min_rate_for(min_amount)

    samples = sorted(
        (s for s in history if s.product_sku == sku and s.date is not None),
        key=lambda s: s.date,
    )
    samples = dedupe_samples(samples)
    orders = sorted(open_orders, key=lambda r: r.expected_date)
    has_orders = bool(orders)

    rows: List[Dict[str, Optional[int]]] = []
    dates: List[date] = []
    real_rate = 0.0

    if len(samples) >= 2:
        real_rate = regression_slope(samples)
        rate = min_rate if min_amount is not None else real_rate
        for s in samples:
            dates.append(s.date)
            rows.append({"actual": s.quantity, "decline_only": None, "with_arrivals": None})
        rows[-1]["decline_only"] = current_stock
        last_date = samples[-1].date
        if last_date < today:
            dates.append(today)
            rows.append({"actual": None, "decline_only": current_stock, "with_arrivals": None})
        start = max(today, last_date)
    elif current_stock > 0:
        rate = min_rate if min_amount is not None else 0.0
        dates.append(today)
        rows.append({"actual": current_stock, "decline_only": current_stock, "with_arrivals": None})
        start = today
    else:
        return ForecastResult(sku=sku, min_rate=min_rate, min_amount=min_amount)

    # orders already due are assumed to have arrived at the start point
    overdue_qty = sum(r.quantity for r in orders if r.expected_date <= start)
    start_qty = current_stock + overdue_qty
    rows[-1]["decline_only"] = start_qty
    if has_orders:
        rows[-1]["with_arrivals"] = start_qty

    running_decline = float(start_qty)
    running_arrivals = float(start_qty)
    for i in range(1, weeks + 1):
        prev_date = start + timedelta(days=(i - 1) * step)
        cur_date = start + timedelta(days=i * step)
        running_decline += rate * step
        running_arrivals += rate * step
        for r in orders:
            if prev_date < r.expected_date <= cur_date:
                running_arrivals += r.quantity
        dates.append(cur_date)
        rows.append({
            "actual": None,
            "decline_only": max(0, round_half_up(running_decline)),
            "with_arrivals": max(0, round_half_up(running_arrivals)) if has_orders else None,
        })

    points = tuple(
        ForecastPoint(date=d, min_threshold=min_amount, **row)
        for d, row in zip(dates, rows)
    )
    return ForecastResult(
        sku=sku,
        points=points,
        decline_rate=rate,
        real_rate=real_rate,
        min_rate=min_rate,
        min_amount=min_amount,
        critical_point=find_critical_point(points, min_amount, has_orders),
    )
