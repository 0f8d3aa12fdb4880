from datetime import date

import pytest

from stockcast.adapters.normalizer import (
    ColumnRule,
    normalize_history,
    normalize_inventory,
    normalize_min_amounts,
    normalize_orders,
    normalize_products,
    normalize_rows,
    resolve_columns,
    rule_for,
    threshold_map,
)
from stockcast.domain.models import MinimumThreshold


ORDER_COLUMNS = [
    "תאריך הזמנה", 'מק"ט פאר-פארם', "קוד דרמה", 'כמות סה"כ',
    "שם פריט", "התקבל?", "תאריך צפי להגעה", "לוג",
]


def _order_row(name="קרם", sku="D1", qty="10", received="", order_date="01/01/2024",
               expected="", comments=""):
    return dict(zip(ORDER_COLUMNS, [order_date, "PP1", sku, qty, name, received, expected, comments]))


def test_column_rule_exact_then_markers_then_default():
    rule = ColumnRule("sku", exact='מק"ט דרמלוסופי', markers=("דרמלוסופי",), default="fallback")
    assert rule.find(['מק"ט דרמלוסופי', "מקט דרמלוסופי"]) == 'מק"ט דרמלוסופי'
    assert rule.find(["x", "מק''ט דרמלוסופי "]) == "מק''ט דרמלוסופי "
    assert rule.find(["x", "y"]) is None
    assert rule.resolve(["x", "y"]) == "fallback"


def test_resolve_columns_orders_uses_markers():
    mapping = resolve_columns("orders", ORDER_COLUMNS)
    assert mapping["product_sku"] == "קוד דרמה"
    assert mapping["received"] == "התקבל?"
    assert mapping["expected_date"] == "תאריך צפי להגעה"
    assert mapping["quantity"] == 'כמות סה"כ'


def test_resolve_columns_unknown_kind():
    with pytest.raises(ValueError):
        resolve_columns("suppliers", [])
    with pytest.raises(ValueError):
        rule_for("orders", "price")


def test_normalize_inventory_drops_rows_without_sku():
    rows = [
        {'מק"ט דרמלוסופי': "A1", "כמות": "1,200"},
        {'מק"ט דרמלוסופי': "", "כמות": "5"},
        {'מק"ט דרמלוסופי': " B2 ", "כמות": "abc"},
    ]
    items = normalize_inventory(rows)
    assert [(i.sku, i.quantity) for i in items] == [("A1", 1200), ("B2", 0)]


def test_normalize_products():
    rows = [{"מוצר": "סרום", "מקט דרמלוסופי": "A1", "ברקוד": "729", "כמות במחסן": "40"}]
    (p,) = normalize_products(rows)
    assert (p.sku, p.name, p.barcode, p.warehouse_quantity) == ("A1", "סרום", "729", 40)


def test_normalize_products_missing_quantity_column_is_zero():
    rows = [{"מוצר": "סרום", "מקט דרמלוסופי": "A1"}]
    (p,) = normalize_products(rows)
    assert p.warehouse_quantity == 0
    assert p.barcode == ""


def test_normalize_history_keeps_unparseable_dates_as_none():
    cols = ['מ"קט דרמלוסופי', "כמות", "תאריך"]
    rows = [
        dict(zip(cols, ["A1", "100", "01/01/2024"])),
        dict(zip(cols, ["A1", "90", "not a date"])),
        dict(zip(cols, ["A1", "80", ""])),
        dict(zip(cols, ["", "80", "02/01/2024"])),
    ]
    samples = normalize_history(rows, cols)
    assert [(s.date, s.quantity) for s in samples] == [(date(2024, 1, 1), 100), (None, 90)]


def test_normalize_min_amounts_only_positive():
    cols = ['מק"ט דרמלוסופי', "מלאי מינימום"]
    rows = [
        dict(zip(cols, ["A1", "40"])),
        dict(zip(cols, ["A2", "0"])),
        dict(zip(cols, ["A3", ""])),
    ]
    assert normalize_min_amounts(rows, cols) == [MinimumThreshold("A1", 40)]


def test_threshold_map_last_row_wins():
    m = threshold_map([MinimumThreshold("A1", 40), MinimumThreshold("A1", 55)])
    assert m == {"A1": 55}


def test_normalize_orders_row_index_counts_skipped_rows():
    rows = [
        _order_row(name="קרם", received="כן"),
        _order_row(name=""),
        _order_row(name="סבון", received=" V ", expected="15/03/2024", comments="ok"),
        _order_row(name="ג'ל", received="לא"),
    ]
    orders = normalize_orders(rows, ORDER_COLUMNS)
    assert [o.row_index for o in orders] == [2, 4, 5]
    assert [o.received for o in orders] == [True, True, False]
    assert orders[1].expected_date == date(2024, 3, 15)
    assert orders[1].comments == "ok"
    assert orders[0].order_date == date(2024, 1, 1)
    assert orders[0].order_date_text == "01/01/2024"
    assert orders[0].supplier_sku == "PP1"


def test_normalize_rows_dispatch():
    rows = [{'מק"ט דרמלוסופי': "A1", "כמות": "3"}]
    assert normalize_rows("inventory", rows)[0].quantity == 3
    assert normalize_rows("orders", []) == []
    with pytest.raises(ValueError):
        normalize_rows("nope", rows)
