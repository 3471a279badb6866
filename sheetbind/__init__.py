"""
Declarative mapping between dataclass records and worksheet rows.
"""

from .config import ServiceSettings, load_settings
from .errors import (
    BindingConfigError,
    ConfigError,
    OperationCancelled,
    RecordStateError,
    SheetBindError,
    SheetNotFoundError,
)
from .mapping import load_record_mappings
from .registry import RecordBinding, get_binding, register_record, sheet
from .row_mapper import RowMapper
from .schemas import BaseRecord, ColFlag, ColumnBinding, SheetLocator, column
from .services import (
    AccessCoordinator,
    BaseExcelService,
    ExcelService,
    LoadQueueExcelService,
    ReadLineExcelService,
    ServiceHealth,
)
from .utils.cancel import CancelToken

__all__ = [
    "AccessCoordinator",
    "BaseExcelService",
    "BaseRecord",
    "BindingConfigError",
    "CancelToken",
    "ColFlag",
    "ColumnBinding",
    "ConfigError",
    "ExcelService",
    "LoadQueueExcelService",
    "OperationCancelled",
    "ReadLineExcelService",
    "RecordBinding",
    "RecordStateError",
    "RowMapper",
    "ServiceHealth",
    "ServiceSettings",
    "SheetBindError",
    "SheetLocator",
    "SheetNotFoundError",
    "column",
    "get_binding",
    "load_record_mappings",
    "load_settings",
    "register_record",
    "sheet",
]

__version__ = "0.1.0"
