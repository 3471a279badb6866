"""
RESPONSIBILITIES
- Hand out qualifying rows one at a time, resuming where the last call stopped.
PROCESS OVERVIEW
1. get_next() starts at max(cursor, first data row) and walks forward.
2. The cursor moves past a row before that row is mapped, so a skipped or
   failing row is never offered again.
3. reset() forgets every cursor; the next call starts from the first data row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeVar

from sheetbind.registry import RecordBinding, get_binding
from sheetbind.row_mapper import data_rows
from sheetbind.schemas.record import BaseRecord
from sheetbind.services.base import BaseExcelService
from sheetbind.utils.cancel import CancelToken

R = TypeVar("R", bound=BaseRecord)

_UNSTARTED = -1


@dataclass
class CursorState:
    """Next row to read, per record type."""

    positions: dict[type, int] = field(default_factory=dict)

    def get(self, record_type: type) -> int:
        return self.positions.setdefault(record_type, _UNSTARTED)

    def advance(self, record_type: type, next_row: int) -> None:
        self.positions[record_type] = next_row

    def clear(self) -> None:
        self.positions.clear()


class ReadLineExcelService(BaseExcelService):
    """Resumable forward-only cursor over a worksheet."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._cursors = CursorState()

    async def get_next(self, record_type: type[R], *, cancel_token: CancelToken | None = None) -> R | None:
        binding = get_binding(record_type)
        return await self._coordinator.run(self._next_record, binding, cancel_token=cancel_token)

    async def position(self, record_type: type, *, cancel_token: CancelToken | None = None) -> int:
        """Return the row the next ``get_next`` call starts from (-1 before the first call)."""

        return await self._coordinator.run(self._position, record_type, cancel_token=cancel_token)

    def _position(self, record_type: type, cancel_token: CancelToken) -> int:
        return self._cursors.positions.get(record_type, _UNSTARTED)

    def _reset(self, cancel_token: CancelToken) -> None:
        self._cursors.clear()
        self.logger.debug("Cursors reset", extra={"path": str(self.file_path)})

    def _next_record(self, binding: RecordBinding, cancel_token: CancelToken) -> BaseRecord | None:
        record_type = binding.record_type
        with self._open_for_read() as workbook:
            worksheet = binding.locator.resolve(workbook)
            for row in data_rows(worksheet, start=self._cursors.get(record_type)):
                cancel_token.raise_if_cancelled()
                self._cursors.advance(record_type, row + 1)
                record, _ = self._mapper.read_row(worksheet, binding, row)
                if record is not None:
                    return record
        return None
