"""Custom exceptions used across sheetbind."""


class SheetBindError(Exception):
    """Base error for the library."""


class ConfigError(SheetBindError):
    """Configuration related error."""


class BindingConfigError(ConfigError):
    """Raised when a record type's column/sheet bindings are missing or invalid."""


class SheetNotFoundError(BindingConfigError):
    """Raised when a sheet locator cannot be resolved against a workbook."""


class RecordStateError(SheetBindError):
    """Raised when a record is used in a state the operation cannot handle."""


class OperationCancelled(SheetBindError):
    """Raised when a cancel token fires between rows or before I/O."""
