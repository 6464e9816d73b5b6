from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..excel.columns import DEFAULT_ALIASES

"""Config loader.

Responsibilities:
- Load the optional YAML config (default: config/attendance.yml)
- Validate it against config_schema.json shipped next to this module
- Apply defaults for everything the file leaves out

A missing file is not an error: the built-in defaults are used.
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/attendance.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AppConfig:
    columns: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    sheet_name: str = "Attendance"  # used for sheets synthesized without a source file
    output_directory: str = "./out"
    error_log_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> AppConfig:
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return AppConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = AppConfig()
    columns = dict(defaults.columns)
    for canonical, aliases in (data.get("columns") or {}).items():
        columns[canonical] = tuple(aliases)
    return AppConfig(
        columns=columns,
        sheet_name=data.get("sheet_name", defaults.sheet_name),
        output_directory=data.get("output_directory", defaults.output_directory),
        error_log_directory=data.get("error_log_directory", defaults.error_log_directory),
    )
