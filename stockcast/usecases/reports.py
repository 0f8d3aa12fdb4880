"""
Relatórios do painel:
- visão geral (com busca e ordenação por data crítica)
- estoque baixo
- estatísticas do topo
- encomendas em aberto agrupadas
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from stockcast.domain.models import DashboardStats, LowStockItem, OrderGroup, OverviewItem
from stockcast.domain.views import (
    dashboard_stats,
    group_open_orders,
    inventory_overview,
    low_stock_items,
    search_overview,
    sort_by_critical_date,
)
from stockcast.infra.logger import log_system_event
from stockcast.infra.repositories import SheetRepository
from stockcast.usecases.product_forecast import run_critical_dates


def run_overview(
    repo: SheetRepository,
    search: Optional[str] = None,
    today: Optional[date] = None,
) -> List[OverviewItem]:
    """Visão geral filtrada; itens com data crítica primeiro (mais próxima antes)."""
    items = inventory_overview(repo.products(), repo.orders())
    critical = run_critical_dates(repo, today=today, items=items)
    result = sort_by_critical_date(search_overview(items, search), critical)
    log_system_event("report_overview", {"items": len(result), "critical": len(critical)})
    return result


def run_low_stock(repo: SheetRepository) -> List[LowStockItem]:
    items = low_stock_items(repo.inventory(), repo.products())
    log_system_event("report_low_stock", {"items": len(items)})
    return items


def run_stats(repo: SheetRepository) -> DashboardStats:
    return dashboard_stats(inventory_overview(repo.products(), repo.orders()))


def run_open_orders(
    repo: SheetRepository,
    group_by: str = "date",
    search: Optional[str] = None,
    today: Optional[date] = None,
) -> List[OrderGroup]:
    groups = group_open_orders(repo.orders(), mode=group_by, today=today, query=search)
    log_system_event("report_open_orders", {"groups": len(groups), "group_by": group_by})
    return groups
