# stockcast/usecases/sheet_commands.py
"""
Casos de uso de escrita na planilha (produtos e encomendas).

Fluxo comum:
1) Localiza as colunas pelas mesmas regras do normalizador.
2) Escreve pela ``SheetStore`` (linhas endereçadas pelo número da planilha).
3) Invalida a aba no cache do repositório.

Erros de endereçamento (linha inválida, aba ou coluna inexistente) sobem
como ``SheetError``.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Union

from stockcast.adapters.normalizer import rule_for
from stockcast.adapters.parsers import clean_text
from stockcast.config import RECEIVED_MARK
from stockcast.infra.logger import log_system_event
from stockcast.infra.repositories import SheetRepository
from stockcast.infra.sheet_store import SheetError

COMMENT_SEPARATOR = " | "

DateLike = Union[date, str, None]


def _fmt_date(value: DateLike) -> str:
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return clean_text(value)


def _headers(repo: SheetRepository, kind: str, fields) -> Dict[str, str]:
    columns = repo.store.read(kind).columns
    return {f: rule_for(kind, f).resolve(columns) for f in fields}


def add_product(repo: SheetRepository, name: str, sku: str, barcode: str = "") -> int:
    """Acrescenta um produto ao cadastro. Retorna a linha criada."""
    if not clean_text(sku):
        raise ValueError("sku é obrigatório")
    cols = _headers(repo, "products", ("name", "sku", "barcode"))
    row = repo.store.append_row("products", {
        cols["name"]: clean_text(name),
        cols["sku"]: clean_text(sku),
        cols["barcode"]: clean_text(barcode),
    })
    repo.refresh("products")
    log_system_event("product_added", {"sku": sku, "row": row})
    return row


def add_order(
    repo: SheetRepository,
    product_name: str,
    product_sku: str,
    quantity: Union[int, str],
    order_date: DateLike = None,
    expected_date: DateLike = None,
    supplier_sku: str = "",
    comments: str = "",
) -> int:
    """Acrescenta uma encomenda (coluna "התקבל" vazia). Retorna a linha criada."""
    if not clean_text(product_name):
        raise ValueError("nome do item é obrigatório")
    cols = _headers(repo, "orders", (
        "order_date", "supplier_sku", "product_sku", "quantity",
        "product_name", "received", "expected_date", "comments",
    ))
    row = repo.store.append_row("orders", {
        cols["order_date"]: _fmt_date(order_date or date.today()),
        cols["supplier_sku"]: clean_text(supplier_sku),
        cols["product_sku"]: clean_text(product_sku),
        cols["quantity"]: clean_text(quantity),
        cols["product_name"]: clean_text(product_name),
        cols["received"]: "",
        cols["expected_date"]: _fmt_date(expected_date),
        cols["comments"]: clean_text(comments),
    })
    repo.refresh("orders")
    log_system_event("order_added", {"sku": product_sku, "row": row})
    return row


def update_order_status(repo: SheetRepository, row_index: int, received: bool) -> None:
    """Marca (ou desmarca) uma encomenda como recebida."""
    columns = repo.store.read("orders").columns
    col = rule_for("orders", "received").find(columns)
    if col is None:
        raise SheetError("coluna התקבל não encontrada")
    repo.store.update_cell("orders", row_index, col, RECEIVED_MARK if received else "")
    repo.refresh("orders")
    log_system_event("order_status_updated", {"row": row_index, "received": received})


def update_order_comments(repo: SheetRepository, row_index: int, comment: str) -> Optional[str]:
    """Acrescenta um comentário ao log da encomenda.

    Usa a coluna "לוג" (rótulo exato, depois substring) e a cria se não
    existir. Comentários anteriores são mantidos, separados por " | ".
    Comentário vazio não altera nada.

    Returns:
        O novo conteúdo da célula, ou ``None`` se nada foi escrito.
    """
    store = repo.store
    columns = store.read("orders").columns
    col = rule_for("orders", "comments").find(columns)
    if col is not None:
        existing = clean_text(store.get_cell("orders", row_index, col))
    else:
        store.validate_row("orders", row_index)
        existing = ""
    text = clean_text(comment)
    if not text:
        return None
    if col is None:
        col = store.ensure_column("orders", rule_for("orders", "comments").exact)
    value = f"{existing}{COMMENT_SEPARATOR}{text}" if existing else text
    store.update_cell("orders", row_index, col, value)
    repo.refresh("orders")
    log_system_event("order_comment_added", {"row": row_index})
    return value


def sync_missing_products(repo: SheetRepository) -> int:
    """Cadastra os skus que aparecem nas encomendas mas não nos produtos.

    O nome vem da primeira encomenda com aquele sku. Retorna quantos
    produtos foram acrescentados.
    """
    store = repo.store
    orders = store.read("orders")
    sku_col = rule_for("orders", "product_sku").find(orders.columns)
    if sku_col is None:
        raise SheetError("coluna do sku não encontrada nas encomendas")
    name_col = rule_for("orders", "product_name").find(orders.columns)

    products = store.read("products")
    prod_sku_col = rule_for("products", "sku").find(products.columns)
    if prod_sku_col is None:
        raise SheetError("coluna do sku não encontrada nos produtos")
    existing = {clean_text(r.get(prod_sku_col)) for r in products.rows}
    existing.discard("")

    cols = _headers(repo, "products", ("name", "sku", "barcode"))
    added = 0
    seen = set()
    for r in orders.rows:
        sku = clean_text(r.get(sku_col))
        if not sku or sku in existing or sku in seen:
            continue
        seen.add(sku)
        name = clean_text(r.get(name_col)) if name_col else ""
        store.append_row("products", {cols["name"]: name, cols["sku"]: sku, cols["barcode"]: ""})
        added += 1

    if added:
        repo.refresh("products")
    log_system_event("products_synced", {"added": added})
    return added
