"""
RESPONSIBILITIES
- Open workbooks through openpyxl for a single logical operation.
- Persist modified workbooks atomically via a temporary file swap.
PROCESS OVERVIEW
1. open_workbook() loads a fresh handle and always closes it on exit.
2. Read operations load cached formula results (data_only=True).
3. Write operations load formulas as-is so a save does not flatten them;
   keep_vba (implied for .xlsm/.xltm) applies to writes only.
4. save_workbook() writes to <name>.tmp and replaces the original in one step.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from openpyxl import Workbook, load_workbook

_MACRO_SUFFIXES = frozenset({".xlsm", ".xltm"})


@contextmanager
def open_workbook(path: Path, *, for_write: bool = False, keep_vba: bool = False) -> Iterator[Workbook]:
    """Yield an openpyxl workbook for *path*, closing it afterwards."""

    if for_write:
        vba = keep_vba or path.suffix.lower() in _MACRO_SUFFIXES
        workbook = load_workbook(path, keep_vba=vba)
    else:
        workbook = load_workbook(path, data_only=True)
    try:
        yield workbook
    finally:
        workbook.close()


def _tmp_path(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def save_workbook(workbook: Workbook, path: Path) -> None:
    """Save *workbook* over *path* atomically."""

    tmp_path = _tmp_path(path)
    try:
        workbook.save(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


__all__ = ["open_workbook", "save_workbook"]
