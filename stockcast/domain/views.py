"""
Visões agregadas do painel.

Projeções somente-leitura construídas a partir dos registros normalizados:
lista de estoque baixo, totais "a caminho" por sku, tabela de visão geral,
estatísticas do topo do painel e agrupamento das encomendas em aberto.
Nenhuma função aqui faz I/O.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from stockcast.config import DEFAULTS, UNKNOWN_LABEL
from stockcast.domain.models import (
    DashboardStats,
    InventoryItem,
    LowStockItem,
    Order,
    OrderGroup,
    OverviewItem,
    Product,
)
from stockcast.domain.orders import is_overdue, open_orders


def low_stock_items(
    inventory: Iterable[InventoryItem],
    products: Iterable[Product],
    threshold: Optional[int] = None,
) -> List[LowStockItem]:
    """Itens com quantidade abaixo do limite de estoque baixo.

    Para skus repetidos na aba de inventário vale a última ocorrência.
    O nome vem do cadastro de produtos (ou o próprio sku, se ausente).
    Ordenado por quantidade crescente.
    """
    limit = DEFAULTS.low_stock_threshold if threshold is None else threshold
    latest: Dict[str, int] = {}
    for item in inventory:
        latest[item.sku] = item.quantity
    names = {p.sku: p.name for p in products}
    items = [
        LowStockItem(product_name=names.get(sku) or sku, sku=sku, quantity=qty)
        for sku, qty in latest.items()
        if qty < limit
    ]
    items.sort(key=lambda i: i.quantity)
    return items


def on_the_way_totals(orders: Iterable[Order]) -> Dict[str, int]:
    """Soma das quantidades em aberto por sku (encomendas sem sku são ignoradas)."""
    totals: Dict[str, int] = {}
    for order in open_orders(orders):
        if not order.product_sku:
            continue
        totals[order.product_sku] = totals.get(order.product_sku, 0) + order.quantity
    return totals


def inventory_overview(products: Iterable[Product], orders: Iterable[Order]) -> List[OverviewItem]:
    """Visão geral: estoque do cadastro + quantidade a caminho, por produto.

    Produtos sem estoque e sem nada a caminho ficam de fora.
    """
    totals = on_the_way_totals(orders)
    items = [
        OverviewItem(
            product_name=p.name,
            sku=p.sku,
            current_stock=p.warehouse_quantity,
            on_the_way=totals.get(p.sku, 0),
        )
        for p in products
    ]
    return [i for i in items if i.current_stock > 0 or i.on_the_way > 0]


def dashboard_stats(items: Sequence[OverviewItem], threshold: Optional[int] = None) -> DashboardStats:
    limit = DEFAULTS.low_stock_threshold if threshold is None else threshold
    return DashboardStats(
        total_stock=sum(i.current_stock for i in items),
        products_on_the_way=sum(1 for i in items if i.on_the_way > 0),
        low_stock_count=sum(1 for i in items if i.current_stock < limit),
    )


def search_overview(items: Iterable[OverviewItem], query: Optional[str]) -> List[OverviewItem]:
    q = (query or "").strip().lower()
    if not q:
        return list(items)
    return [i for i in items if q in i.product_name.lower() or q in i.sku.lower()]


def sort_by_critical_date(
    items: Iterable[OverviewItem],
    critical_dates: Mapping[str, date],
) -> List[OverviewItem]:
    """Itens com data crítica primeiro (a mais próxima antes); o resto mantém a ordem."""
    with_date = [i for i in items if critical_dates.get(i.sku) is not None]
    without = [i for i in items if critical_dates.get(i.sku) is None]
    with_date.sort(key=lambda i: critical_dates[i.sku])
    return with_date + without


def group_open_orders(
    orders: Iterable[Order],
    mode: str = "date",
    today: Optional[date] = None,
    query: Optional[str] = None,
) -> List[OrderGroup]:
    """Agrupa encomendas em aberto por data do pedido ou por nome do produto.

    Regras:
        - filtro opcional (substring no nome ou no texto da data do pedido);
        - grupos com alguma encomenda atrasada vêm primeiro;
        - modo ``date``: grupo mais recente primeiro (grupos sem data
          legível vão para o fim);
        - modo ``product``: ordem alfabética do nome.
    """
    if mode not in ("date", "product"):
        raise ValueError(f"modo de agrupamento inválido: {mode!r}")
    today = today or date.today()
    q = (query or "").strip().lower()

    groups: Dict[str, List[Order]] = {}
    for order in open_orders(orders):
        if q and q not in order.product_name.lower() and q not in order.order_date_text.lower():
            continue
        key = order.order_date_text if mode == "date" else order.product_name
        groups.setdefault(key or UNKNOWN_LABEL, []).append(order)

    out = [
        OrderGroup(label=label, orders=ords, has_overdue=any(is_overdue(o, today) for o in ords))
        for label, ords in groups.items()
    ]

    if mode == "date":
        # datas mais recentes primeiro; sem data legível vai para o fim
        out.sort(key=lambda g: g.orders[0].order_date or date.min, reverse=True)
    else:
        out.sort(key=lambda g: g.label)
    # ordenação estável: atrasados na frente sem desfazer a ordem acima
    out.sort(key=lambda g: not g.has_overdue)
    return out
