"""
Caso de uso: previsão de estoque por produto.

Fluxo:
1) Lê produtos, histórico, mínimos e encomendas pelo repositório.
2) Estoque atual = ``warehouse_quantity`` do cadastro (0 se o sku não existir).
3) Resolve as encomendas em aberto do sku (data prevista ou pedido + 3 meses).
4) Chama o motor de previsão e registra o resultado no log.

``run_critical_dates`` repete o fluxo para cada item da visão geral e
devolve apenas os skus com data crítica.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional

from stockcast.adapters.normalizer import threshold_map
from stockcast.domain.forecast import build_forecast
from stockcast.domain.models import ForecastResult, OverviewItem
from stockcast.domain.orders import resolve_open_orders
from stockcast.domain.views import inventory_overview
from stockcast.infra.logger import log_forecast
from stockcast.infra.repositories import SheetRepository


def run_forecast(repo: SheetRepository, sku: str, today: Optional[date] = None) -> ForecastResult:
    sku = (sku or "").strip()
    stock_by_sku = {p.sku: p.warehouse_quantity for p in repo.products()}
    thresholds = threshold_map(repo.min_amounts())
    open_orders = resolve_open_orders(repo.orders()).for_sku(sku)

    result = build_forecast(
        sku=sku,
        current_stock=stock_by_sku.get(sku, 0),
        history=repo.history(),
        open_orders=open_orders.scheduled,
        min_amount=thresholds.get(sku),
        today=today,
    )
    log_forecast(
        sku,
        len(result.points),
        result.decline_rate,
        result.real_rate,
        result.critical_date.isoformat() if result.critical_date else None,
        unscheduled_orders=len(open_orders.unscheduled),
    )
    return result


def run_critical_dates(
    repo: SheetRepository,
    today: Optional[date] = None,
    items: Optional[Iterable[OverviewItem]] = None,
) -> Dict[str, date]:
    """sku -> data crítica, para os itens da visão geral que têm uma."""
    if items is None:
        items = inventory_overview(repo.products(), repo.orders())
    history = repo.history()
    thresholds = threshold_map(repo.min_amounts())
    resolved = resolve_open_orders(repo.orders())

    out: Dict[str, date] = {}
    for item in items:
        result = build_forecast(
            sku=item.sku,
            current_stock=item.current_stock,
            history=history,
            open_orders=resolved.for_sku(item.sku).scheduled,
            min_amount=thresholds.get(item.sku),
            today=today,
        )
        if result.critical_date is not None:
            out[item.sku] = result.critical_date
    return out
