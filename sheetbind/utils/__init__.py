"""Shared helpers: workbook I/O, logging and cancellation."""

from .cancel import CancelToken
from .excel_io import open_workbook, save_workbook
from .log import configure_logging, get_logger, reset_logging

__all__ = [
    "CancelToken",
    "configure_logging",
    "get_logger",
    "open_workbook",
    "reset_logging",
    "save_workbook",
]
