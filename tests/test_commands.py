from datetime import date

import pytest

from conftest import ORDER_COLUMNS, SHEETS, write_sheet
from stockcast.infra.repositories import SheetRepository
from stockcast.infra.sheet_store import SheetError
from stockcast.usecases.sheet_commands import (
    add_order,
    add_product,
    sync_missing_products,
    update_order_comments,
    update_order_status,
)


def test_update_order_status_roundtrip(repo):
    update_order_status(repo, 2, True)
    assert repo.store.get_cell("orders", 2, "התקבל") == "כן"
    assert repo.orders()[0].received is True

    update_order_status(repo, 2, False)
    assert repo.store.get_cell("orders", 2, "התקבל") == ""
    assert repo.orders()[0].received is False


def test_update_order_status_invalid_row(repo):
    with pytest.raises(SheetError):
        update_order_status(repo, 10, True)


def test_update_order_comments_appends(repo):
    assert update_order_comments(repo, 3, " נבדק ") == "הגיע | נבדק"
    assert update_order_comments(repo, 2, "ligar amanhã") == "ligar amanhã"
    assert repo.orders()[1].comments == "הגיע | נבדק"


def test_update_order_comments_empty_is_noop(repo):
    assert update_order_comments(repo, 3, "   ") is None
    assert repo.store.get_cell("orders", 3, "לוג") == "הגיע"


def test_update_order_comments_creates_column(tmp_path):
    _, rows = SHEETS["orders.csv"]
    write_sheet(tmp_path / "orders.csv", ORDER_COLUMNS[:-1], [r[:-1] for r in rows])
    repo = SheetRepository(tmp_path)

    assert update_order_comments(repo, 2, "") is None
    assert "לוג" not in repo.store.read("orders").columns

    assert update_order_comments(repo, 2, "atrasou") == "atrasou"
    assert repo.store.get_cell("orders", 2, "לוג") == "atrasou"


def test_update_order_comments_invalid_row(tmp_path):
    _, rows = SHEETS["orders.csv"]
    write_sheet(tmp_path / "orders.csv", ORDER_COLUMNS[:-1], [r[:-1] for r in rows])
    with pytest.raises(SheetError):
        update_order_comments(SheetRepository(tmp_path), 9, "x")


def test_add_product(repo):
    row = add_product(repo, "ג'ל", "D4", barcode="729004")
    assert row == 5
    assert repo.products()[-1].sku == "D4"
    assert repo.products()[-1].barcode == "729004"


def test_add_product_requires_sku(repo):
    with pytest.raises(ValueError):
        add_product(repo, "ג'ל", "  ")


def test_add_order(repo):
    row = add_order(repo, "ג'ל", "D4", 12, order_date=date(2024, 2, 1), expected_date="01/03/2024")
    assert row == 5
    order = repo.orders()[-1]
    assert order.row_index == 5
    assert order.received is False
    assert order.quantity == 12
    assert order.order_date_text == "01/02/2024"
    assert order.expected_date == date(2024, 3, 1)


def test_add_order_defaults_to_today(repo):
    add_order(repo, "ג'ל", "D4", 1)
    assert repo.orders()[-1].order_date == date.today()


def test_add_order_requires_name(repo):
    with pytest.raises(ValueError):
        add_order(repo, "", "D4", 1)


def test_sync_missing_products(repo):
    assert sync_missing_products(repo) == 1
    added = repo.products()[-1]
    assert (added.sku, added.name) == ("D4", "ג'ל חדש")
    assert sync_missing_products(repo) == 0
