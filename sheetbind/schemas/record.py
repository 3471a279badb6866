"""
RESPONSIBILITIES
- Define the base dataclass every mapped record type inherits from.
PROCESS OVERVIEW
1. Subclasses declare bound fields with column(...), all with defaults.
2. The row mapper fills line_index/source_path when a row is read.
3. Write-back targets the row recorded in line_index.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BaseRecord:
    """One logical worksheet row.

    ``line_index`` is the 1-based row number the record was read from (0 until
    a read sets it); ``source_path`` is the workbook it came from.
    """

    line_index: int = 0
    source_path: str | None = None
