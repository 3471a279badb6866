"""
RESPONSIBILITIES
- Build and hold the per-type binding table (sheet locator + ordered bound fields).
- Offer decorator and explicit registration entry points.
- Fail fast with BindingConfigError before any workbook is opened.
PROCESS OVERVIEW
1. @sheet(...) or register_record(...) validates the record type once.
2. The resulting RecordBinding is cached in a process-wide, lock-guarded registry.
3. Services call get_binding() at the start of every operation.
"""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, TypeVar

from sheetbind.errors import BindingConfigError
from sheetbind.schemas.binding import BINDING_METADATA_KEY, ColumnBinding, SheetLocator
from sheetbind.schemas.record import BaseRecord

R = TypeVar("R", bound=BaseRecord)

_IMPLICIT_FIELDS = frozenset(field.name for field in dataclasses.fields(BaseRecord))

_BINDINGS: dict[type, "RecordBinding"] = {}
_REGISTRY_GUARD = threading.Lock()


@dataclass(frozen=True)
class FieldBinding:
    name: str
    binding: ColumnBinding

    def get(self, record: BaseRecord) -> Any:
        return getattr(record, self.name)

    def set(self, record: BaseRecord, value: Any) -> None:
        setattr(record, self.name, value)


@dataclass(frozen=True)
class RecordBinding:
    """Resolved mapping table for one record type."""

    record_type: type
    locator: SheetLocator
    fields: tuple[FieldBinding, ...]

    @property
    def type_name(self) -> str:
        return f"{self.record_type.__module__}.{self.record_type.__qualname__}"

    @property
    def write_back_fields(self) -> tuple[FieldBinding, ...]:
        return tuple(field for field in self.fields if field.binding.write_back)

    def new_record(self) -> BaseRecord:
        return self.record_type()


def _check_record_type(record_type: type) -> None:
    if not isinstance(record_type, type) or not dataclasses.is_dataclass(record_type):
        raise BindingConfigError(f"'{record_type!r}' must be a dataclass")
    if not issubclass(record_type, BaseRecord):
        raise BindingConfigError(f"'{record_type.__qualname__}' must inherit from BaseRecord")
    missing_defaults = [
        field.name
        for field in dataclasses.fields(record_type)
        if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING
    ]
    if missing_defaults:
        raise BindingConfigError(
            f"'{record_type.__qualname__}' fields need defaults: {', '.join(missing_defaults)}"
        )


def _build_binding(
    record_type: type,
    locator: SheetLocator,
    columns: Mapping[str, ColumnBinding] | None,
) -> RecordBinding:
    _check_record_type(record_type)
    declared = {field.name: field for field in dataclasses.fields(record_type)}
    overrides = dict(columns or {})

    unknown = sorted(set(overrides) - set(declared))
    if unknown:
        raise BindingConfigError(
            f"'{record_type.__qualname__}' has no fields named: {', '.join(unknown)}"
        )
    implicit = sorted(set(overrides) & _IMPLICIT_FIELDS)
    if implicit:
        raise BindingConfigError(f"Implicit fields cannot be bound to a column: {', '.join(implicit)}")

    fields: list[FieldBinding] = []
    for name, field in declared.items():
        if name in _IMPLICIT_FIELDS:
            continue
        binding = overrides.get(name) or field.metadata.get(BINDING_METADATA_KEY)
        if binding is None:
            continue
        if not isinstance(binding, ColumnBinding):
            raise BindingConfigError(f"Field '{name}' carries an invalid column binding: {binding!r}")
        fields.append(FieldBinding(name=name, binding=binding))

    if not fields:
        raise BindingConfigError(f"'{record_type.__qualname__}' declares no column-bound fields")
    return RecordBinding(record_type=record_type, locator=locator, fields=tuple(fields))


def register_record(
    record_type: type[R],
    locator: SheetLocator,
    columns: Mapping[str, ColumnBinding] | None = None,
) -> RecordBinding:
    """Register (or replace) the binding table for ``record_type``.

    ``columns`` maps field names to bindings and takes precedence over any
    ``column(...)`` metadata declared on the dataclass.
    """

    binding = _build_binding(record_type, locator, columns)
    with _REGISTRY_GUARD:
        _BINDINGS[record_type] = binding
    return binding


def sheet(*, index: int | None = None, name: str | None = None) -> Callable[[type[R]], type[R]]:
    """Class decorator registering a dataclass record with its worksheet.

    Apply it above ``@dataclass``::

        @sheet(name="Orders")
        @dataclass
        class Order(BaseRecord):
            order_id: str | None = column("A", ColFlag.SKIP_IF_EMPTY)
    """

    locator = SheetLocator(index=index, name=name)

    def decorator(record_type: type[R]) -> type[R]:
        register_record(record_type, locator)
        return record_type

    return decorator


def get_binding(record_type: type) -> RecordBinding:
    with _REGISTRY_GUARD:
        binding = _BINDINGS.get(record_type)
    if binding is None:
        name = getattr(record_type, "__qualname__", repr(record_type))
        raise BindingConfigError(f"'{name}' must be registered with a sheet locator")
    return binding


def unregister_record(record_type: type) -> None:
    with _REGISTRY_GUARD:
        _BINDINGS.pop(record_type, None)


__all__ = [
    "FieldBinding",
    "RecordBinding",
    "get_binding",
    "register_record",
    "sheet",
    "unregister_record",
]
