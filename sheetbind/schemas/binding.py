"""
RESPONSIBILITIES
- Define the declarative metadata carried by record fields and record types.
- Validate column letters and flag combinations at construction time.
- Resolve a sheet locator to an openpyxl worksheet.
PROCESS OVERVIEW
1. column() attaches a ColumnBinding to a dataclass field through its metadata.
2. SheetLocator picks a worksheet by 0-based index or by title.
3. The registry reads both once per record type and never again.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Flag, auto
from typing import Any

from openpyxl.utils.cell import column_index_from_string
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheetbind.errors import BindingConfigError, SheetNotFoundError

BINDING_METADATA_KEY = "sheetbind.column"


class ColFlag(Flag):
    NONE = 0
    WRITE_BACK = auto()
    SKIP_IF_EMPTY = auto()
    SKIP_IF_NOT_EMPTY = auto()


_FLAG_NAMES: dict[str, ColFlag] = {
    "write_back": ColFlag.WRITE_BACK,
    "skip_if_empty": ColFlag.SKIP_IF_EMPTY,
    "skip_if_not_empty": ColFlag.SKIP_IF_NOT_EMPTY,
}


def parse_flags(names: list[str] | tuple[str, ...]) -> ColFlag:
    """Combine flag names such as ``"write_back"`` into a single ``ColFlag``."""

    flags = ColFlag.NONE
    for name in names:
        key = str(name).strip().lower()
        if key not in _FLAG_NAMES:
            raise BindingConfigError(
                f"Unknown column flag '{name}'; expected one of {', '.join(sorted(_FLAG_NAMES))}"
            )
        flags |= _FLAG_NAMES[key]
    return flags


@dataclass(frozen=True)
class ColumnBinding:
    """Column letters plus read/write policy for one record field."""

    col: str
    flags: ColFlag = ColFlag.NONE

    def __post_init__(self) -> None:
        letters = str(self.col or "").strip().upper()
        if not letters:
            raise BindingConfigError("Column address must not be empty")
        try:
            column_index_from_string(letters)
        except ValueError as exc:
            raise BindingConfigError(f"Invalid column address: {self.col!r}") from exc
        if ColFlag.SKIP_IF_EMPTY in self.flags and ColFlag.SKIP_IF_NOT_EMPTY in self.flags:
            raise BindingConfigError(
                f"Column {letters}: SKIP_IF_EMPTY and SKIP_IF_NOT_EMPTY cannot be combined"
            )
        object.__setattr__(self, "col", letters)

    def address(self, row: int) -> str:
        return f"{self.col}{row}"

    @property
    def write_back(self) -> bool:
        return ColFlag.WRITE_BACK in self.flags

    @property
    def skip_if_empty(self) -> bool:
        return ColFlag.SKIP_IF_EMPTY in self.flags

    @property
    def skip_if_not_empty(self) -> bool:
        return ColFlag.SKIP_IF_NOT_EMPTY in self.flags


def column(col: str, flags: ColFlag = ColFlag.NONE, *, default: Any = None) -> Any:
    """Declare a bound dataclass field.

    Example::

        order_id: str | None = column("A", ColFlag.SKIP_IF_EMPTY)
    """

    return dataclasses.field(
        default=default,
        metadata={BINDING_METADATA_KEY: ColumnBinding(col, flags)},
    )


@dataclass(frozen=True)
class SheetLocator:
    """Worksheet selector by 0-based index or by title (exactly one)."""

    index: int | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if self.name is not None:
            if not str(self.name).strip():
                raise BindingConfigError("Sheet name must not be blank")
            if self.index is not None:
                raise BindingConfigError("Sheet locator takes an index or a name, not both")
            return
        if self.index is None:
            raise BindingConfigError("Sheet locator requires an index or a name")
        if self.index < 0:
            raise BindingConfigError(f"Sheet index must be >= 0, got {self.index}")

    def __str__(self) -> str:
        return str(self.index) if self.name is None else self.name

    def resolve(self, workbook: Workbook) -> Worksheet:
        worksheet = None
        if self.name is not None:
            if self.name in workbook.sheetnames:
                worksheet = workbook[self.name]
        elif self.index is not None and self.index < len(workbook.worksheets):
            worksheet = workbook.worksheets[self.index]
        if worksheet is None:
            raise SheetNotFoundError(f"Sheet '{self}' not found")
        return worksheet


__all__ = [
    "BINDING_METADATA_KEY",
    "ColFlag",
    "ColumnBinding",
    "SheetLocator",
    "column",
    "parse_flags",
]
