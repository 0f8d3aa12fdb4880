# stockcast/adapters/cli.py
"""
CLI do painel de estoque (Typer).

Comandos principais:
- overview                -> visão geral (estoque + a caminho), críticos primeiro
- low-stock               -> produtos com estoque baixo
- stats                   -> números do topo do painel
- orders                  -> encomendas em aberto agrupadas
- forecast <sku>          -> série de previsão e taxas de um produto
- critical                -> produtos com data crítica prevista
- mark-received <linha>   -> marca/desmarca encomenda como recebida
- comment <linha> <texto> -> acrescenta comentário ao log da encomenda
- add-product / add-order -> acrescenta linhas na planilha
- sync-products           -> cadastra skus que só existem nas encomendas
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from stockcast.adapters.parsers import parse_date
from stockcast.config import DATA_DIR, DEFAULTS
from stockcast.domain.models import ForecastResult
from stockcast.infra.repositories import SheetRepository
from stockcast.infra.sheet_store import SheetError
from stockcast.usecases.product_forecast import run_critical_dates, run_forecast
from stockcast.usecases.reports import run_low_stock, run_open_orders, run_overview, run_stats
from stockcast.usecases.sheet_commands import (
    add_order,
    add_product,
    sync_missing_products,
    update_order_comments,
    update_order_status,
)


app = typer.Typer(help="Painel de estoque (CLI)")
console = Console()


# -----------------------
# util
# -----------------------

def _repo(data_dir: str) -> SheetRepository:
    return SheetRepository(data_dir)


def _parse_today(today: Optional[str]) -> Optional[date]:
    if not today:
        return None
    d = parse_date(today)
    if d is None:
        raise typer.BadParameter(f"data inválida: {today}")
    return d


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, ForecastResult):
        return obj.to_dict()
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, list):
        return [_jsonable(o) for o in obj]
    return obj


def _print_json(obj) -> None:
    typer.echo(json.dumps(_jsonable(obj), ensure_ascii=False, indent=2, default=str))


def _fail(message: str) -> None:
    console.print(Panel(message, title="Erro", border_style="red"))
    raise typer.Exit(1)


def _display_table(data: List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe uma lista de dicionários como tabela Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        if column in ("quantity", "current_stock", "on_the_way", "actual",
                      "decline_only", "with_arrivals", "min_threshold"):
            table.add_column(column, justify="right")
        elif column in ("date", "critical_date", "expected_date"):
            table.add_column(column, justify="center")
        else:
            table.add_column(column)

    for row in data:
        values = []
        for col in columns:
            val = row.get(col)
            if val is None:
                values.append("[dim]-[/dim]")
            elif isinstance(val, date):
                values.append(val.strftime("%d/%m/%Y"))
            else:
                values.append(str(val))
        table.add_row(*values)
    console.print(table)


DataDirOpt = typer.Option(DATA_DIR, "--data-dir", help="Diretório com as abas exportadas")
JsonOpt = typer.Option(False, "--json", help="Saída em JSON")
TodayOpt = typer.Option(None, "--today", help="Data de referência (dd/mm/yyyy ou ISO)")


# -----------------------
# relatórios
# -----------------------

@app.command("overview")
def cmd_overview(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filtro por nome ou sku"),
    today: Optional[str] = TodayOpt,
    data_dir: str = DataDirOpt,
    as_json: bool = JsonOpt,
):
    """Visão geral do estoque; produtos com data crítica primeiro."""
    repo = _repo(data_dir)
    ref = _parse_today(today)
    items = run_overview(repo, search=search, today=ref)
    if as_json:
        _print_json(items)
        return
    critical = run_critical_dates(repo, today=ref, items=items)
    rows = [
        {
            "sku": i.sku,
            "product": i.product_name,
            "current_stock": i.current_stock,
            "on_the_way": i.on_the_way,
            "critical_date": critical.get(i.sku),
        }
        for i in items
    ]
    _display_table(rows, title="Visão Geral do Estoque")


@app.command("low-stock")
def cmd_low_stock(data_dir: str = DataDirOpt, as_json: bool = JsonOpt):
    """Produtos com quantidade abaixo do limite de estoque baixo."""
    items = run_low_stock(_repo(data_dir))
    if as_json:
        _print_json(items)
        return
    _display_table(
        [{"sku": i.sku, "product": i.product_name, "quantity": i.quantity} for i in items],
        title=f"Estoque Baixo (< {DEFAULTS.low_stock_threshold})",
    )


@app.command("stats")
def cmd_stats(data_dir: str = DataDirOpt, as_json: bool = JsonOpt):
    """Estoque total, produtos a caminho e contagem de estoque baixo."""
    stats = run_stats(_repo(data_dir))
    if as_json:
        _print_json(stats)
        return
    _display_table([asdict(stats)], title="Resumo")


@app.command("orders")
def cmd_orders(
    group_by: str = typer.Option("date", "--group-by", "-g", help="date | product"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filtro por nome ou data do pedido"),
    today: Optional[str] = TodayOpt,
    data_dir: str = DataDirOpt,
    as_json: bool = JsonOpt,
):
    """Encomendas em aberto agrupadas por data do pedido ou produto."""
    if group_by not in ("date", "product"):
        raise typer.BadParameter("use 'date' ou 'product'", param_hint="--group-by")
    groups = run_open_orders(_repo(data_dir), group_by=group_by, search=search, today=_parse_today(today))
    if as_json:
        _print_json(groups)
        return
    if not groups:
        console.print(Panel("Nenhuma encomenda em aberto", title="Encomendas", border_style="yellow"))
        return
    for g in groups:
        title = f"{g.label}  [bold red](atrasada)[/]" if g.has_overdue else g.label
        _display_table(
            [
                {
                    "row": o.row_index,
                    "product": o.product_name,
                    "sku": o.product_sku,
                    "quantity": o.quantity,
                    "expected_date": o.expected_date,
                }
                for o in g.orders
            ],
            title=title,
        )


@app.command("forecast")
def cmd_forecast(
    sku: str = typer.Argument(..., help="Sku do produto"),
    today: Optional[str] = TodayOpt,
    data_dir: str = DataDirOpt,
    as_json: bool = JsonOpt,
):
    """Série de previsão de estoque de um produto."""
    result = run_forecast(_repo(data_dir), sku, today=_parse_today(today))
    if as_json:
        _print_json(result)
        return
    if result.is_empty:
        console.print(Panel("Sem dados suficientes de histórico", title=sku, border_style="yellow"))
        return
    _display_table(
        [
            {
                "date": p.date,
                "actual": p.actual,
                "decline_only": p.decline_only,
                "with_arrivals": p.with_arrivals,
                "min_threshold": p.min_threshold,
            }
            for p in result.points
        ],
        title=f"Previsão {sku}",
    )
    monthly = result.monthly(DEFAULTS.days_per_month)
    console.print(f"Taxa usada: [bold]{monthly['decline_rate']}[/]/mês")
    console.print(f"Taxa real (regressão): {monthly['real_rate']}/mês")
    if result.min_amount is not None:
        console.print(f"Taxa do mínimo: {monthly['min_rate']}/mês (mínimo {result.min_amount})")
    if result.critical_date:
        console.print(f"[bold red]Data crítica: {result.critical_date.strftime('%d/%m/%Y')}[/]")


@app.command("critical")
def cmd_critical(today: Optional[str] = TodayOpt, data_dir: str = DataDirOpt, as_json: bool = JsonOpt):
    """Produtos com data crítica prevista, da mais próxima para a mais distante."""
    dates = run_critical_dates(_repo(data_dir), today=_parse_today(today))
    ordered = sorted(dates.items(), key=lambda kv: kv[1])
    if as_json:
        _print_json({sku: d.isoformat() for sku, d in ordered})
        return
    _display_table([{"sku": sku, "critical_date": d} for sku, d in ordered], title="Datas Críticas")


# -----------------------
# escrita
# -----------------------

@app.command("mark-received")
def cmd_mark_received(
    row: int = typer.Argument(..., help="Linha da encomenda na planilha"),
    undo: bool = typer.Option(False, "--undo", help="Desmarca como recebida"),
    data_dir: str = DataDirOpt,
):
    """Marca uma encomenda como recebida."""
    try:
        update_order_status(_repo(data_dir), row, received=not undo)
    except SheetError as e:
        _fail(str(e))
    typer.echo(f"linha {row}: {'em aberto' if undo else 'recebida'}")


@app.command("comment")
def cmd_comment(
    row: int = typer.Argument(..., help="Linha da encomenda na planilha"),
    text: str = typer.Argument(..., help="Comentário"),
    data_dir: str = DataDirOpt,
):
    """Acrescenta um comentário ao log da encomenda."""
    try:
        value = update_order_comments(_repo(data_dir), row, text)
    except SheetError as e:
        _fail(str(e))
    typer.echo(value or "nada a acrescentar")


@app.command("add-product")
def cmd_add_product(
    name: str = typer.Argument(...),
    sku: str = typer.Argument(...),
    barcode: str = typer.Option("", "--barcode"),
    data_dir: str = DataDirOpt,
):
    """Acrescenta um produto ao cadastro."""
    try:
        row = add_product(_repo(data_dir), name, sku, barcode)
    except (SheetError, ValueError) as e:
        _fail(str(e))
    typer.echo(f"produto {sku} na linha {row}")


@app.command("add-order")
def cmd_add_order(
    product_name: str = typer.Argument(...),
    sku: str = typer.Argument(...),
    quantity: int = typer.Argument(...),
    order_date: Optional[str] = typer.Option(None, "--order-date", help="dd/mm/yyyy (padrão: hoje)"),
    expected_date: Optional[str] = typer.Option(None, "--expected-date", help="dd/mm/yyyy"),
    supplier_sku: str = typer.Option("", "--supplier-sku"),
    comments: str = typer.Option("", "--comments"),
    data_dir: str = DataDirOpt,
):
    """Acrescenta uma encomenda em aberto."""
    try:
        row = add_order(
            _repo(data_dir),
            product_name=product_name,
            product_sku=sku,
            quantity=quantity,
            order_date=order_date,
            expected_date=expected_date,
            supplier_sku=supplier_sku,
            comments=comments,
        )
    except (SheetError, ValueError) as e:
        _fail(str(e))
    typer.echo(f"encomenda na linha {row}")


@app.command("sync-products")
def cmd_sync_products(data_dir: str = DataDirOpt):
    """Cadastra os skus das encomendas que faltam no cadastro de produtos."""
    try:
        added = sync_missing_products(_repo(data_dir))
    except SheetError as e:
        _fail(str(e))
    typer.echo(f"{added} produto(s) acrescentado(s)")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
