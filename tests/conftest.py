from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest
from openpyxl import Workbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sheetbind.utils.log import reset_logging

WorkbookFactory = Callable[..., Path]

ORDERS_ROWS: list[list[object]] = [
    ["id", "status", "note"],
    ["1001", "new", "first"],
    [None, "new", "missing id"],
    [1003, "hold", None],
]


@pytest.fixture(autouse=True)
def _fresh_logging() -> None:
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Return a factory writing ``{sheet_title: rows}`` into an .xlsx under tmp_path."""

    def _make(sheets: dict[str, Sequence[Sequence[object]]], name: str = "book.xlsx") -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title=title)
            for row in rows:
                ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return path

    return _make


@pytest.fixture()
def orders_path(make_workbook: WorkbookFactory) -> Path:
    """Sheet "Orders": header row 1, data rows 2-4, row 3 column A blank."""

    return make_workbook({"Orders": ORDERS_ROWS, "Archive": [["id"], ["9"]]}, name="orders.xlsx")
