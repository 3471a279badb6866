"""pandas export of mapped records."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from sheetbind.registry import RecordBinding
from sheetbind.schemas.record import BaseRecord

META_COLUMNS: tuple[str, ...] = ("line_index", "source_path")


def records_to_frame(binding: RecordBinding, records: Sequence[BaseRecord]) -> pd.DataFrame:
    """Return *records* as a DataFrame with bound fields followed by row metadata."""

    columns = [field.name for field in binding.fields] + list(META_COLUMNS)
    rows = [
        {column: getattr(record, column) for column in columns}
        for record in records
    ]
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)


__all__ = ["META_COLUMNS", "records_to_frame"]
