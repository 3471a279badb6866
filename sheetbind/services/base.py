"""
RESPONSIBILITIES
- Provide the bulk read/write service every strategy builds on.
- Resolve bindings before I/O, then open, map and save within one lock hold.
- Report a structured health snapshot for the backing workbook.
PROCESS OVERVIEW
1. get_records() scans header+1..last row, collecting mapped records.
2. save_record()/save_records() write back write-back fields; save only if changed.
3. get_frame() exposes get_records() as a pandas.DataFrame.
4. reset() is a lock-guarded hook that stateful subclasses override.
5. healthcheck() checks existence, permissions and lock state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence, TypeVar

import pandas as pd

from sheetbind.config import ServiceSettings
from sheetbind.errors import RecordStateError
from sheetbind.frame import records_to_frame
from sheetbind.registry import RecordBinding, get_binding
from sheetbind.row_mapper import RowMapper, data_rows
from sheetbind.schemas.record import BaseRecord
from sheetbind.services.coordinator import AccessCoordinator
from sheetbind.utils.cancel import CancelToken
from sheetbind.utils.excel_io import open_workbook, save_workbook
from sheetbind.utils.log import configure_logging, get_logger

R = TypeVar("R", bound=BaseRecord)


@dataclass(slots=True)
class ServiceHealth:
    """Structured report produced by health checks."""

    path: str
    exists: bool
    readable: bool
    writable: bool
    busy: bool
    issues: list[str] = field(default_factory=list)

    def is_healthy(self) -> bool:
        """Return True when no issues are observed."""

        return not self.issues and self.exists and self.readable and self.writable


class BaseExcelService:
    """Bulk reader/writer over one workbook path."""

    def __init__(
        self,
        file_path: Path | str,
        *,
        run_in_worker: bool | None = None,
        settings: ServiceSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or ServiceSettings()
        configure_logging(self.settings.log_dir, self.settings.log_level)
        self.logger = logger or get_logger(self.__class__.__name__)
        worker = self.settings.run_in_worker if run_in_worker is None else run_in_worker
        self._coordinator = AccessCoordinator(file_path, run_in_worker=worker, logger=self.logger)
        self._mapper = RowMapper(str(self._coordinator.path))

    @property
    def file_path(self) -> Path:
        return self._coordinator.path

    @property
    def run_in_worker(self) -> bool:
        return self._coordinator.run_in_worker

    @run_in_worker.setter
    def run_in_worker(self, value: bool) -> None:
        self._coordinator.run_in_worker = value

    # Public API -------------------------------------------------------------------

    async def reset(self, *, cancel_token: CancelToken | None = None) -> None:
        await self._coordinator.run(self._reset, cancel_token=cancel_token)

    async def get_records(
        self,
        record_type: type[R],
        *,
        read_all: bool = False,
        stop_at_empty_line: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> list[R]:
        binding = get_binding(record_type)
        return await self._coordinator.run(
            self._read_records, binding, read_all, stop_at_empty_line, cancel_token=cancel_token
        )

    async def get_frame(
        self,
        record_type: type[R],
        *,
        read_all: bool = False,
        stop_at_empty_line: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> pd.DataFrame:
        binding = get_binding(record_type)
        records = await self._coordinator.run(
            self._read_records, binding, read_all, stop_at_empty_line, cancel_token=cancel_token
        )
        return records_to_frame(binding, records)

    async def save_record(self, record: BaseRecord, *, cancel_token: CancelToken | None = None) -> bool:
        return await self.save_records([record], cancel_token=cancel_token)

    async def save_records(
        self,
        records: Iterable[BaseRecord],
        *,
        cancel_token: CancelToken | None = None,
    ) -> bool:
        """Write back every record's write-back fields; return whether the workbook was saved."""

        pending = list(records)
        if not pending:
            return False
        record_types = {type(record) for record in pending}
        if len(record_types) > 1:
            names = ", ".join(sorted(t.__qualname__ for t in record_types))
            raise RecordStateError(f"save_records expects a single record type, got: {names}")
        binding = get_binding(record_types.pop())
        return await self._coordinator.run(self._save_records, binding, pending, cancel_token=cancel_token)

    def healthcheck(self) -> ServiceHealth:
        path = self.file_path
        issues: list[str] = []
        exists = path.exists()
        if not exists:
            issues.append(f"Workbook missing: {path}")
        readable = exists and os.access(path, os.R_OK)
        writable = exists and os.access(path, os.W_OK) and os.access(path.parent, os.W_OK)
        if exists and not readable:
            issues.append(f"Workbook not readable: {path}")
        if exists and not writable:
            issues.append(f"Workbook or its directory not writable: {path}")
        return ServiceHealth(
            path=str(path),
            exists=exists,
            readable=readable,
            writable=writable,
            busy=self._coordinator.busy,
            issues=issues,
        )

    # Operation bodies (run with the lock held) -------------------------------------

    def _open_for_read(self):
        return open_workbook(self.file_path)

    def _reset(self, cancel_token: CancelToken) -> None:
        return None

    def _read_records(
        self,
        binding: RecordBinding,
        read_all: bool,
        stop_at_empty_line: bool,
        cancel_token: CancelToken,
    ) -> list[BaseRecord]:
        self.logger.debug(
            "Reading records",
            extra={"path": str(self.file_path), "record": binding.type_name, "sheet": str(binding.locator)},
        )
        records: list[BaseRecord] = []
        with self._open_for_read() as workbook:
            worksheet = binding.locator.resolve(workbook)
            for row in data_rows(worksheet):
                cancel_token.raise_if_cancelled()
                record, is_empty = self._mapper.read_row(worksheet, binding, row, read_all)
                if record is not None:
                    records.append(record)
                elif stop_at_empty_line and is_empty:
                    self.logger.debug("Stopped at empty line", extra={"row": row})
                    break
        self.logger.info(
            "Records loaded",
            extra={"path": str(self.file_path), "record": binding.type_name, "rows": len(records)},
        )
        return records

    def _save_records(
        self,
        binding: RecordBinding,
        records: Sequence[BaseRecord],
        cancel_token: CancelToken,
    ) -> bool:
        with open_workbook(self.file_path, for_write=True, keep_vba=self.settings.keep_vba) as workbook:
            worksheet = binding.locator.resolve(workbook)
            changed = self._mapper.write_back(worksheet, binding, records, cancel_token)
            if not changed:
                self.logger.debug("No write-back changes", extra={"path": str(self.file_path)})
                return False
            cancel_token.raise_if_cancelled()
            try:
                save_workbook(workbook, self.file_path)
            except OSError:
                self.logger.error("Failed to save workbook", extra={"path": str(self.file_path)})
                raise
        self.logger.info(
            "Workbook saved",
            extra={"path": str(self.file_path), "record": binding.type_name, "records": len(records)},
        )
        return True


class ExcelService(BaseExcelService):
    """Bulk snapshot reader/writer."""


__all__ = ["BaseExcelService", "ExcelService", "ServiceHealth"]
