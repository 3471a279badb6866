"""Consumption strategies built on the access coordinator."""

from .base import BaseExcelService, ExcelService, ServiceHealth
from .coordinator import AccessCoordinator
from .load_queue import LoadQueueExcelService, QueueState
from .read_line import CursorState, ReadLineExcelService

__all__ = [
    "AccessCoordinator",
    "BaseExcelService",
    "CursorState",
    "ExcelService",
    "LoadQueueExcelService",
    "QueueState",
    "ReadLineExcelService",
    "ServiceHealth",
]
