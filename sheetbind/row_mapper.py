"""
RESPONSIBILITIES
- Translate worksheet rows into record instances using a RecordBinding.
- Write write-back fields of records into their cells.
PROCESS OVERVIEW
1. data_rows() yields the row numbers below the header row.
2. read_row() coerces every bound cell to stripped text and applies skip flags.
3. write_back() writes non-None write-back values whose type or value differs
   from the cell, and reports whether anything changed so callers can skip
   the save.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from openpyxl.worksheet.worksheet import Worksheet

from sheetbind.errors import RecordStateError
from sheetbind.registry import RecordBinding
from sheetbind.schemas.record import BaseRecord
from sheetbind.utils.cancel import CancelToken


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def first_data_row(worksheet: Worksheet) -> int:
    # Row min_row is the header.
    return worksheet.min_row + 1


def data_rows(worksheet: Worksheet, start: int | None = None) -> Iterator[int]:
    """Yield row numbers from max(start, first data row) to the last populated row."""

    first = first_data_row(worksheet)
    begin = first if start is None else max(start, first)
    yield from range(begin, worksheet.max_row + 1)


class RowMapper:
    """Row <-> record translation for one workbook path."""

    def __init__(self, source_path: str) -> None:
        self.source_path = source_path

    def read_row(
        self,
        worksheet: Worksheet,
        binding: RecordBinding,
        row: int,
        read_all: bool = False,
    ) -> tuple[BaseRecord | None, bool]:
        """Map *row* to a record.

        Returns ``(record, is_empty)``. ``record`` is ``None`` when a skip flag
        fired or no bound cell held text. ``is_empty`` is ``True`` only when
        every bound cell was blank; a skipped row holding text is not empty.
        """

        record = binding.new_record()
        skipped = False
        assigned = False
        has_text = False
        for field in binding.fields:
            text = cell_text(worksheet[field.binding.address(row)].value)
            if not text:
                if not read_all and field.binding.skip_if_empty:
                    skipped = True
                continue
            has_text = True
            if skipped:
                continue
            if not read_all and field.binding.skip_if_not_empty:
                skipped = True
                continue
            field.set(record, text)
            assigned = True

        is_empty = not has_text
        if skipped or not assigned:
            return None, is_empty

        record.line_index = row
        record.source_path = self.source_path
        return record, is_empty

    def write_back(
        self,
        worksheet: Worksheet,
        binding: RecordBinding,
        records: Iterable[BaseRecord],
        cancel_token: CancelToken | None = None,
    ) -> bool:
        """Write write-back fields of *records* into *worksheet*; return whether a cell changed."""

        pending = list(records)
        for record in pending:
            if not isinstance(record, binding.record_type):
                raise RecordStateError(
                    f"Expected {binding.record_type.__qualname__}, got {type(record).__qualname__}"
                )
            if record.line_index < 1:
                raise RecordStateError(
                    f"{binding.record_type.__qualname__} has no line_index; read it before saving"
                )

        changed = False
        write_fields = binding.write_back_fields
        for record in pending:
            for field in write_fields:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                value = field.get(record)
                if value is None:
                    continue
                cell = worksheet[field.binding.address(record.line_index)]
                # Unchanged means same type and same value: True over 1 is a change.
                if type(cell.value) is type(value) and cell.value == value:
                    continue
                cell.value = value
                changed = True
        return changed


__all__ = ["RowMapper", "cell_text", "data_rows", "first_data_row"]
