from __future__ import annotations

import pytest
from openpyxl import Workbook

from sheetbind.errors import BindingConfigError, SheetNotFoundError
from sheetbind.schemas.binding import ColFlag, ColumnBinding, SheetLocator, parse_flags


def test_column_binding_normalizes_letters() -> None:
    binding = ColumnBinding(" ab ", ColFlag.WRITE_BACK)

    assert binding.col == "AB"
    assert binding.address(12) == "AB12"
    assert binding.write_back
    assert not binding.skip_if_empty


@pytest.mark.parametrize("col", ["", "   ", "A1", "1", "ZZZZ"])
def test_column_binding_rejects_bad_address(col: str) -> None:
    with pytest.raises(BindingConfigError):
        ColumnBinding(col)


def test_column_binding_rejects_conflicting_skip_flags() -> None:
    with pytest.raises(BindingConfigError):
        ColumnBinding("A", ColFlag.SKIP_IF_EMPTY | ColFlag.SKIP_IF_NOT_EMPTY)


def test_parse_flags_combines_names() -> None:
    flags = parse_flags(["write_back", "Skip_If_Empty"])

    assert flags == ColFlag.WRITE_BACK | ColFlag.SKIP_IF_EMPTY
    assert parse_flags([]) == ColFlag.NONE
    with pytest.raises(BindingConfigError):
        parse_flags(["update_back"])


def test_sheet_locator_requires_exactly_one_selector() -> None:
    with pytest.raises(BindingConfigError):
        SheetLocator()
    with pytest.raises(BindingConfigError):
        SheetLocator(index=0, name="Orders")
    with pytest.raises(BindingConfigError):
        SheetLocator(name="  ")
    with pytest.raises(BindingConfigError):
        SheetLocator(index=-1)


def test_sheet_locator_resolves_by_index_and_name() -> None:
    wb = Workbook()
    wb.active.title = "Orders"
    wb.create_sheet("Archive")

    assert SheetLocator(index=0).resolve(wb).title == "Orders"
    assert SheetLocator(index=1).resolve(wb).title == "Archive"
    assert SheetLocator(name="Archive").resolve(wb).title == "Archive"
    assert str(SheetLocator(index=1)) == "1"


def test_sheet_locator_unresolved_raises() -> None:
    wb = Workbook()

    with pytest.raises(SheetNotFoundError):
        SheetLocator(index=3).resolve(wb)
    with pytest.raises(SheetNotFoundError, match="Missing"):
        SheetLocator(name="Missing").resolve(wb)
