"""YAML-declared record mappings."""

# Module responsibilities:
# - Parse record mapping files into validated pydantic models.
# - Register the resulting bindings for caller-supplied record types.

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from sheetbind.errors import BindingConfigError
from sheetbind.registry import RecordBinding, register_record
from sheetbind.schemas.binding import ColumnBinding, SheetLocator, parse_flags


class ColumnSpec(BaseModel):
    """One bound field: column letters plus flag names."""

    model_config = ConfigDict(extra="forbid")

    col: str
    flags: List[str] = Field(default_factory=list)


class RecordMapping(BaseModel):
    """Sheet locator and column table for one record type."""

    model_config = ConfigDict(extra="forbid")

    sheet: Optional[str] = None
    sheet_index: Optional[int] = None
    columns: Dict[str, Union[str, ColumnSpec]]

    @model_validator(mode="after")
    def _one_locator(self) -> "RecordMapping":
        if (self.sheet is None) == (self.sheet_index is None):
            raise ValueError("exactly one of 'sheet' or 'sheet_index' is required")
        return self

    def locator(self) -> SheetLocator:
        return SheetLocator(index=self.sheet_index, name=self.sheet)

    def column_bindings(self) -> Dict[str, ColumnBinding]:
        bindings: Dict[str, ColumnBinding] = {}
        for field_name, spec in self.columns.items():
            if isinstance(spec, str):
                bindings[field_name] = ColumnBinding(spec)
            else:
                bindings[field_name] = ColumnBinding(spec.col, parse_flags(spec.flags))
        return bindings


class MappingFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    records: Dict[str, RecordMapping]


def load_mapping_file(path: str | Path) -> MappingFile:
    """Load and validate a mapping YAML file."""

    mapping_path = Path(path)
    if not mapping_path.exists():
        raise BindingConfigError(f"Mapping file not found: {mapping_path}")
    try:
        with mapping_path.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise BindingConfigError(f"Invalid mapping YAML: {exc}") from exc
    if not isinstance(payload, dict):
        raise BindingConfigError("Invalid mapping YAML structure (expected mapping)")
    try:
        return MappingFile.model_validate(payload)
    except ValidationError as exc:
        raise BindingConfigError(f"Invalid mapping file {mapping_path}: {exc}") from exc


def load_record_mappings(path: str | Path, types: Mapping[str, type]) -> Dict[str, RecordBinding]:
    """Register bindings from *path* for the record types named in *types*.

    Every record named in the file must be present in *types*; the returned
    dict maps record names to their registered bindings.
    """

    mapping_file = load_mapping_file(path)
    missing = sorted(set(mapping_file.records) - set(types))
    if missing:
        raise BindingConfigError(f"Mapping names unknown record types: {', '.join(missing)}")

    registered: Dict[str, RecordBinding] = {}
    for name, record_mapping in mapping_file.records.items():
        registered[name] = register_record(
            types[name],
            record_mapping.locator(),
            record_mapping.column_bindings(),
        )
    return registered


__all__ = [
    "ColumnSpec",
    "MappingFile",
    "RecordMapping",
    "load_mapping_file",
    "load_record_mappings",
]
