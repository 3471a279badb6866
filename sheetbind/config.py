"""Runtime settings for sheetbind services.

Settings come from an optional YAML file and are then overridden by
``SHEETBIND_*`` environment variables, so deployments can flip the worker
thread or log destination without touching code.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from sheetbind.errors import ConfigError

ENV_PREFIX = "SHEETBIND_"
_ENV_FIELDS = ("run_in_worker", "log_level", "log_dir", "keep_vba")


class ServiceSettings(BaseModel):
    """Knobs shared by every service instance."""

    model_config = ConfigDict(extra="forbid")

    run_in_worker: bool = True
    log_level: str = "INFO"
    log_dir: Path | None = None
    keep_vba: bool = False


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Settings YAML must be a mapping")
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in _ENV_FIELDS:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip():
            overrides[name] = raw.strip()
    return overrides


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ServiceSettings:
    """Load settings from YAML (optional) plus environment overrides."""

    data: Dict[str, Any] = _load_yaml(Path(path)) if path else {}
    data.update(_env_overrides(os.environ if environ is None else environ))
    try:
        return ServiceSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


__all__ = ["ServiceSettings", "load_settings"]
