# stockcast/adapters/normalizer.py
"""
Normalização das linhas da planilha em registros tipados do domínio.

Os cabeçalhos das abas não têm grafia fixa (variações de aspas/geresh,
espaços). Cada campo é resolvido por uma regra explícita, em ordem de
prioridade:

1. rótulo exato configurado;
2. primeira coluna cujo rótulo contém todos os marcadores configurados;
3. rótulo padrão (pode não existir na aba: o campo vem vazio e a linha
   segue o fluxo normal; modo degradado, não é erro).

Linhas sem a chave obrigatória (sku; nome do item nas encomendas) são
descartadas silenciosamente.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from stockcast.adapters.parsers import clean_text, parse_date, parse_int
from stockcast.domain.models import (
    InventoryItem,
    MinimumThreshold,
    Order,
    Product,
    StockSample,
)
from stockcast.domain.orders import is_received

Row = Mapping[str, Any]


@dataclass(frozen=True)
class ColumnRule:
    """Regra de resolução de um campo lógico para um cabeçalho da aba."""
    field: str
    exact: Optional[str] = None
    markers: Tuple[str, ...] = ()
    default: Optional[str] = None

    def find(self, columns: Sequence[str]) -> Optional[str]:
        """Cabeçalho encontrado pelas regras 1 e 2, ou None."""
        if self.exact is not None and self.exact in columns:
            return self.exact
        for col in columns:
            if self.markers and all(mk in col for mk in self.markers):
                return col
        return None

    def resolve(self, columns: Sequence[str]) -> str:
        found = self.find(columns)
        if found is not None:
            return found
        return self.default if self.default is not None else (self.exact or self.field)


# ---------------------------
# regras por tipo de entidade
# ---------------------------

COLUMN_RULES: Dict[str, Tuple[ColumnRule, ...]] = {
    "inventory": (
        ColumnRule("sku", exact='מק"ט דרמלוסופי', markers=("דרמלוסופי",), default='מק"ט דרמלוסופי'),
        ColumnRule("quantity", exact="כמות", markers=("כמות",), default="כמות"),
    ),
    "products": (
        ColumnRule("name", exact="מוצר", default="מוצר"),
        ColumnRule("sku", exact="מקט דרמלוסופי", markers=("דרמלוסופי",), default="מקט דרמלוסופי"),
        ColumnRule("barcode", exact="ברקוד", default="ברקוד"),
        ColumnRule("warehouse_quantity", exact="כמות במחסן", markers=("מחסן",), default="כמות במחסן"),
    ),
    "history": (
        ColumnRule("sku", exact='מ"קט דרמלוסופי', markers=("דרמלוסופי",), default='מ"קט דרמלוסופי'),
        ColumnRule("quantity", exact="כמות", markers=("כמות",), default="כמות"),
        ColumnRule("date", exact="תאריך", markers=("תאריך",), default="תאריך"),
    ),
    "min_amount": (
        ColumnRule("sku", markers=("דרמלוסופי",), default='מק"ט דרמלוסופי'),
        ColumnRule("min_amount", markers=("מינימום",), default="מלאי מינימום"),
    ),
    "orders": (
        ColumnRule("order_date", exact="תאריך הזמנה", default="תאריך הזמנה"),
        ColumnRule("supplier_sku", exact='מק"ט פאר-פארם', default='מק"ט פאר-פארם'),
        ColumnRule("product_sku", markers=("קוד", "דרמה"), default="קוד דרמה"),
        ColumnRule("quantity", markers=("כמות",), default='כמות סה"כ'),
        ColumnRule("product_name", exact="שם פריט", default="שם פריט"),
        ColumnRule("received", markers=("התקבל",), default="התקבל"),
        ColumnRule("expected_date", markers=("צפי",), default="תאריך צפי"),
        ColumnRule("comments", exact="לוג", markers=("לוג",), default="לוג"),
    ),
}

# primeira linha de dados na planilha (linha 1 = cabeçalho)
FIRST_DATA_ROW = 2


def resolve_columns(kind: str, columns: Sequence[str]) -> Dict[str, str]:
    """Mapeia campo lógico -> cabeçalho efetivo para um tipo de entidade."""
    try:
        rules = COLUMN_RULES[kind]
    except KeyError:
        raise ValueError(f"tipo de entidade desconhecido: {kind!r}") from None
    return {rule.field: rule.resolve(columns) for rule in rules}


def rule_for(kind: str, field: str) -> ColumnRule:
    for rule in COLUMN_RULES.get(kind, ()):
        if rule.field == field:
            return rule
    raise ValueError(f"campo desconhecido: {kind}.{field}")


def _columns_of(rows: Sequence[Row], columns: Optional[Sequence[str]]) -> List[str]:
    if columns is not None:
        return list(columns)
    return list(rows[0].keys()) if rows else []


def _getter(row: Row, mapping: Dict[str, str]) -> Callable[[str], str]:
    return lambda fld: clean_text(row.get(mapping[fld]))


# ---------------------------
# normalizadores por entidade
# ---------------------------

def normalize_inventory(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> List[InventoryItem]:
    mapping = resolve_columns("inventory", _columns_of(rows, columns))
    out: List[InventoryItem] = []
    for row in rows:
        get = _getter(row, mapping)
        sku = get("sku")
        if not sku:
            continue
        out.append(InventoryItem(sku=sku, quantity=parse_int(get("quantity"))))
    return out


def normalize_products(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> List[Product]:
    mapping = resolve_columns("products", _columns_of(rows, columns))
    out: List[Product] = []
    for row in rows:
        get = _getter(row, mapping)
        sku = get("sku")
        if not sku:
            continue
        out.append(Product(
            sku=sku,
            name=get("name"),
            barcode=get("barcode"),
            warehouse_quantity=parse_int(get("warehouse_quantity")),
        ))
    return out


def normalize_history(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> List[StockSample]:
    """Histórico de níveis de estoque.

    Linhas sem sku ou sem texto de data são descartadas; datas presentes
    mas ilegíveis são mantidas como ``None`` (o motor de previsão as ignora).
    """
    mapping = resolve_columns("history", _columns_of(rows, columns))
    out: List[StockSample] = []
    for row in rows:
        get = _getter(row, mapping)
        sku, date_txt = get("sku"), get("date")
        if not sku or not date_txt:
            continue
        out.append(StockSample(
            product_sku=sku,
            date=parse_date(date_txt),
            quantity=parse_int(get("quantity")),
        ))
    return out


def normalize_min_amounts(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> List[MinimumThreshold]:
    mapping = resolve_columns("min_amount", _columns_of(rows, columns))
    out: List[MinimumThreshold] = []
    for row in rows:
        get = _getter(row, mapping)
        sku = get("sku")
        if not sku:
            continue
        amount = parse_int(get("min_amount"))
        if amount > 0:
            out.append(MinimumThreshold(product_sku=sku, min_amount=amount))
    return out


def normalize_orders(rows: Sequence[Row], columns: Optional[Sequence[str]] = None) -> List[Order]:
    """Encomendas. ``row_index`` é a posição na aba (cabeçalho = linha 1)."""
    mapping = resolve_columns("orders", _columns_of(rows, columns))
    out: List[Order] = []
    for idx, row in enumerate(rows):
        get = _getter(row, mapping)
        name = get("product_name")
        if not name:
            continue
        order_date_txt = get("order_date")
        out.append(Order(
            order_date=parse_date(order_date_txt),
            expected_date=parse_date(get("expected_date")),
            product_sku=get("product_sku"),
            quantity=parse_int(get("quantity")),
            received=is_received(get("received")),
            row_index=idx + FIRST_DATA_ROW,
            product_name=name,
            supplier_sku=get("supplier_sku"),
            order_date_text=order_date_txt,
            comments=get("comments"),
        ))
    return out


NORMALIZERS: Dict[str, Callable[..., list]] = {
    "inventory": normalize_inventory,
    "products": normalize_products,
    "history": normalize_history,
    "min_amount": normalize_min_amounts,
    "orders": normalize_orders,
}


def normalize_rows(kind: str, rows: Iterable[Row], columns: Optional[Sequence[str]] = None) -> list:
    """Ponto de entrada genérico: linhas soltas + tipo -> registros tipados."""
    try:
        fn = NORMALIZERS[kind]
    except KeyError:
        raise ValueError(f"tipo de entidade desconhecido: {kind!r}") from None
    return fn(list(rows), columns)


def threshold_map(thresholds: Iterable[MinimumThreshold]) -> Dict[str, int]:
    """sku -> mínimo; em caso de duplicata vale a última linha."""
    out: Dict[str, int] = {}
    for t in thresholds:
        out[t.product_sku] = t.min_amount
    return out
