"""
Modelos (dataclasses) do domínio.

Observação importante:
- Todos os registros são imutáveis (``frozen=True``); são produzidos pelo
  normalizador a partir das linhas da planilha e relidos a cada ciclo.
- Datas ausentes ou ilegíveis são representadas por ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from math import floor
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class InventoryItem:
    """Linha da aba de inventário (snapshot de quantidade por sku)."""
    sku: str
    quantity: int = 0


@dataclass(frozen=True)
class Product:
    """Cadastro de produto. ``warehouse_quantity`` é o estoque oficial."""
    sku: str
    name: str = ""
    barcode: str = ""
    warehouse_quantity: int = 0


@dataclass(frozen=True)
class StockSample:
    """Nível de estoque observado em uma data (aba de histórico)."""
    product_sku: str
    date: Optional[date]
    quantity: int = 0


@dataclass(frozen=True)
class MinimumThreshold:
    """Estoque mínimo configurado para um sku (sempre > 0)."""
    product_sku: str
    min_amount: int


@dataclass(frozen=True)
class Order:
    """Encomenda a fornecedor. ``row_index`` é a linha 1-based na planilha."""
    order_date: Optional[date]
    expected_date: Optional[date]
    product_sku: str
    quantity: int
    received: bool
    row_index: int
    product_name: str = ""
    supplier_sku: str = ""
    order_date_text: str = ""
    comments: str = ""


@dataclass(frozen=True)
class ResolvedOrder:
    """Encomenda em aberto com data de chegada resolvida."""
    order: Order
    expected_date: date
    estimated: bool = False     # True quando veio de order_date + 3 meses

    @property
    def quantity(self) -> int:
        return self.order.quantity


@dataclass(frozen=True)
class OpenOrders:
    """Encomendas em aberto: com data resolvida (ordenadas) e sem data."""
    scheduled: Tuple[ResolvedOrder, ...] = ()
    unscheduled: Tuple[Order, ...] = ()

    def for_sku(self, sku: str) -> "OpenOrders":
        return OpenOrders(
            scheduled=tuple(r for r in self.scheduled if r.order.product_sku == sku),
            unscheduled=tuple(o for o in self.unscheduled if o.product_sku == sku),
        )

    def __len__(self) -> int:
        return len(self.scheduled) + len(self.unscheduled)


@dataclass(frozen=True)
class ForecastPoint:
    """Ponto da série de previsão (histórico, ponte ou projeção)."""
    date: date
    actual: Optional[int] = None
    decline_only: Optional[int] = None
    with_arrivals: Optional[int] = None
    min_threshold: Optional[int] = None

    @property
    def label(self) -> str:
        return self.date.strftime("%d/%m")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "label": self.label,
            "actual": self.actual,
            "decline_only": self.decline_only,
            "with_arrivals": self.with_arrivals,
            "min_threshold": self.min_threshold,
        }


@dataclass(frozen=True)
class ForecastResult:
    """Saída do motor de previsão para um produto. Taxas em unidades/dia."""
    sku: str
    points: Tuple[ForecastPoint, ...] = ()
    decline_rate: float = 0.0
    real_rate: float = 0.0
    min_rate: float = 0.0
    min_amount: Optional[int] = None
    critical_point: Optional[ForecastPoint] = None

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def critical_date(self) -> Optional[date]:
        return self.critical_point.date if self.critical_point else None

    def monthly(self, days_per_month: int = 30) -> Dict[str, int]:
        """Taxas convertidas para unidades/mês (multiplica e arredonda)."""
        return {
            "decline_rate": round_half_up(self.decline_rate * days_per_month),
            "real_rate": round_half_up(self.real_rate * days_per_month),
            "min_rate": round_half_up(self.min_rate * days_per_month),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "points": [p.to_dict() for p in self.points],
            "decline_rate": self.decline_rate,
            "real_rate": self.real_rate,
            "min_rate": self.min_rate,
            "min_amount": self.min_amount,
            "critical_date": self.critical_date.isoformat() if self.critical_date else None,
        }


@dataclass(frozen=True)
class LowStockItem:
    product_name: str
    sku: str
    quantity: int


@dataclass(frozen=True)
class OverviewItem:
    product_name: str
    sku: str
    current_stock: int
    on_the_way: int


@dataclass(frozen=True)
class OrderGroup:
    label: str
    orders: List[Order] = field(default_factory=list)
    has_overdue: bool = False


@dataclass(frozen=True)
class DashboardStats:
    total_stock: int
    products_on_the_way: int
    low_stock_count: int


def round_half_up(x: float) -> int:
    """Arredonda para o inteiro mais próximo; .5 sobe (em direção a +inf)."""
    return int(floor(x + 0.5))
