from pathlib import Path

import pandas as pd
import pytest

from stockcast.infra.repositories import SheetRepository
from stockcast.infra.sheet_store import SheetStore


ORDER_COLUMNS = [
    "תאריך הזמנה", 'מק"ט פאר-פארם', "קוד דרמה", 'כמות סה"כ',
    "שם פריט", "התקבל", "תאריך צפי", "לוג",
]

SHEETS = {
    "products.csv": (
        ["מוצר", "מקט דרמלוסופי", "ברקוד", "כמות במחסן"],
        [
            ["קרם לחות", "A1", "729001", "86"],
            ["סבון", "B2", "729002", "0"],
            ["סרום", "C3", "", "5"],
        ],
    ),
    "inventory.csv": (
        ['מק"ט דרמלוסופי', "כמות"],
        [["A1", "86"], ["B2", "3"], ["C3", "20"]],
    ),
    "history.csv": (
        ['מ"קט דרמלוסופי', "כמות", "תאריך"],
        [
            ["A1", "100", "01/01/2024"],
            ["A1", "100", "08/01/2024"],
            ["A1", "86", "15/01/2024"],
        ],
    ),
    "min_amount.csv": (
        ['מק"ט דרמלוסופי', "מלאי מינימום"],
        [["A1", "80"]],
    ),
    "orders.csv": (
        ORDER_COLUMNS,
        [
            ["01/01/2024", "PP1", "B2", "30", "סבון", "", "15/02/2024", ""],
            ["01/12/2023", "PP2", "A1", "10", "קרם לחות", "כן", "", "הגיע"],
            ["10/01/2024", "PP3", "D4", "5", "ג'ל חדש", "", "", ""],
        ],
    ),
}


def write_sheet(path: Path, columns, rows) -> None:
    pd.DataFrame(rows, columns=columns).to_csv(path, index=False, encoding="utf-8")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    for name, (columns, rows) in SHEETS.items():
        write_sheet(tmp_path / name, columns, rows)
    return tmp_path


@pytest.fixture
def store(data_dir: Path) -> SheetStore:
    return SheetStore(data_dir)


@pytest.fixture
def repo(store: SheetStore) -> SheetRepository:
    return SheetRepository(store)
