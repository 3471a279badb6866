"""Declarative binding metadata and the record base class."""

from .binding import ColFlag, ColumnBinding, SheetLocator, column, parse_flags
from .record import BaseRecord

__all__ = [
    "BaseRecord",
    "ColFlag",
    "ColumnBinding",
    "SheetLocator",
    "column",
    "parse_flags",
]
