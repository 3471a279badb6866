from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from openpyxl import load_workbook

from sheetbind.errors import BindingConfigError, OperationCancelled
from sheetbind.registry import sheet
from sheetbind.row_mapper import RowMapper
from sheetbind.schemas.binding import ColFlag, column
from sheetbind.schemas.record import BaseRecord
from sheetbind.services.read_line import CursorState, ReadLineExcelService
from sheetbind.utils.cancel import CancelToken


@sheet(index=0)
@dataclass
class CursorOrder(BaseRecord):
    order_id: str | None = column("A", ColFlag.SKIP_IF_EMPTY)
    status: str | None = column("B", ColFlag.WRITE_BACK)


@sheet(name="Archive")
@dataclass
class ArchivedOrder(BaseRecord):
    order_id: str | None = column("A")


@dataclass
class Loose(BaseRecord):
    order_id: str | None = column("A")


@pytest.fixture()
def service(orders_path: Path) -> ReadLineExcelService:
    return ReadLineExcelService(orders_path, run_in_worker=False)


def test_cursor_state_defaults_to_unstarted() -> None:
    state = CursorState()

    assert state.get(CursorOrder) == -1
    state.advance(CursorOrder, 5)
    assert state.get(CursorOrder) == 5
    state.clear()
    assert state.positions == {}


@pytest.mark.asyncio
async def test_cursor_scenario_returns_2_then_4_then_none(service: ReadLineExcelService) -> None:
    first = await service.get_next(CursorOrder)
    second = await service.get_next(CursorOrder)
    third = await service.get_next(CursorOrder)

    assert first is not None and first.line_index == 2
    assert second is not None and second.line_index == 4
    assert third is None
    assert await service.get_next(CursorOrder) is None
    assert await service.position(CursorOrder) == 5


@pytest.mark.asyncio
async def test_cursors_are_per_type(service: ReadLineExcelService) -> None:
    assert await service.position(CursorOrder) == -1

    order = await service.get_next(CursorOrder)
    archived = await service.get_next(ArchivedOrder)

    assert order is not None and order.line_index == 2
    assert archived is not None and archived.order_id == "9"
    assert await service.get_next(ArchivedOrder) is None
    assert (await service.get_next(CursorOrder)).line_index == 4


@pytest.mark.asyncio
async def test_reset_restarts_from_first_data_row(service: ReadLineExcelService) -> None:
    while await service.get_next(CursorOrder) is not None:
        pass

    await service.reset()

    again = await service.get_next(CursorOrder)
    assert again is not None and again.line_index == 2


@pytest.mark.asyncio
async def test_failing_row_still_advances_cursor(monkeypatch, service: ReadLineExcelService) -> None:
    original = RowMapper.read_row
    failures = []

    def _flaky(self, worksheet, binding, row, read_all=False):
        if row == 2 and not failures:
            failures.append(row)
            raise ValueError("unreadable row")
        return original(self, worksheet, binding, row, read_all)

    monkeypatch.setattr(RowMapper, "read_row", _flaky)

    with pytest.raises(ValueError):
        await service.get_next(CursorOrder)

    nxt = await service.get_next(CursorOrder)
    assert nxt is not None and nxt.line_index == 4


@pytest.mark.asyncio
async def test_rows_appended_later_are_picked_up(orders_path: Path) -> None:
    service = ReadLineExcelService(orders_path, run_in_worker=True)
    while await service.get_next(CursorOrder) is not None:
        pass

    wb = load_workbook(orders_path)
    wb["Orders"].append(["1005", "new", None])
    wb.save(orders_path)

    fresh = await service.get_next(CursorOrder)
    assert fresh is not None
    assert fresh.line_index == 5
    assert fresh.order_id == "1005"


@pytest.mark.asyncio
async def test_unregistered_type_is_rejected(service: ReadLineExcelService) -> None:
    with pytest.raises(BindingConfigError):
        await service.get_next(Loose)


@pytest.mark.asyncio
@pytest.mark.parametrize("run_in_worker", [True, False])
async def test_token_cancelled_mid_scan_keeps_cursor_progress(
    monkeypatch, orders_path: Path, run_in_worker: bool
) -> None:
    service = ReadLineExcelService(orders_path, run_in_worker=run_in_worker)
    token = CancelToken()

    def _skip_then_cancel(self, worksheet, binding, row, read_all=False):
        token.cancel()
        return None, False

    monkeypatch.setattr(RowMapper, "read_row", _skip_then_cancel)

    with pytest.raises(OperationCancelled):
        await service.get_next(CursorOrder, cancel_token=token)
    assert await service.position(CursorOrder) == 3
    assert not service.healthcheck().busy
