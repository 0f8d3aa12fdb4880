from datetime import date

from stockcast.usecases.product_forecast import run_critical_dates, run_forecast
from stockcast.usecases.reports import run_low_stock, run_open_orders, run_overview, run_stats

TODAY = date(2024, 1, 15)


def test_run_forecast_uses_product_stock_and_threshold(repo):
    result = run_forecast(repo, " A1 ", today=TODAY)
    assert result.sku == "A1"
    assert result.points[2].decline_only == 86
    assert result.min_amount == 80
    assert result.critical_date == date(2024, 1, 29)


def test_run_forecast_empty_without_stock_or_history(repo):
    # B2: sem histórico e sem estoque, mas 30 a caminho
    assert run_forecast(repo, "B2", today=TODAY).is_empty


def test_run_forecast_ignores_unscheduled_orders(repo):
    repo.store.append_row("orders", {"שם פריט": "סרום", "קוד דרמה": "C3", 'כמות סה"כ': "50"})
    repo.refresh("orders")
    result = run_forecast(repo, "C3", today=TODAY)
    assert all(p.with_arrivals is None for p in result.points)
    assert {p.decline_only for p in result.points} == {5}


def test_run_critical_dates(repo):
    assert run_critical_dates(repo, today=TODAY) == {"A1": date(2024, 1, 29)}


def test_reports(repo):
    assert [i.sku for i in run_overview(repo, today=TODAY)] == ["A1", "B2", "C3"]
    assert [i.sku for i in run_overview(repo, search="סרום", today=TODAY)] == ["C3"]
    assert [i.sku for i in run_low_stock(repo)] == ["B2"]
    assert run_stats(repo).total_stock == 91
    groups = run_open_orders(repo, group_by="product", today=TODAY)
    assert sorted(g.label for g in groups) == sorted(["סבון", "ג'ל חדש"])
