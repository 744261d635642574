from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import jsonschema
import pandas as pd
import yaml
from jsonschema.exceptions import ValidationError

from ..errors import ConfigError
from ..excel.reader import read_excel_file
from ..models.config_models import DateColumnLocator, HarvestConfig, SourceConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/harvest.yml) or the legacy config.xlsx workbook
  (sheet "Config", row 2: file name | sheet name | date column)
- Validate against the bundled JSON schema
- Check values: non-empty names, date column as letters or a 0-based index
- Build the immutable HarvestConfig
"""

__all__ = [
    "ConfigError",
    "CONFIG_SHEET",
    "SCHEMA_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
CONFIG_SHEET = "Config"
DATASET_SUFFIX = ".xlsx"

_LETTERS_RE = re.compile(r"[A-Za-z]+")
_INDEX_RE = re.compile(r"[0-9]+")


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            fails validation (missing keys, wrong types, unknown keys)
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


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"invalid yaml: expected a mapping, got {type(data).__name__}")
    return data


def _read_config_workbook(path: Path) -> dict[str, Any]:
    """Read the legacy config workbook: row 1 holds labels, row 2 the values."""
    try:
        sheets = read_excel_file(path, target_sheets=[CONFIG_SHEET])
    except (OSError, ValueError, BadZipFile) as e:
        raise ConfigError(
            f"failed to open {path.name}: {e}\n"
            f"Make sure file {path.name} exists or is in the working directory"
        ) from e
    if CONFIG_SHEET not in sheets:
        raise ConfigError(f"failed to get sheet {CONFIG_SHEET}\nMake sure the sheet is named {CONFIG_SHEET}")
    df = sheets[CONFIG_SHEET]
    if df.shape[0] < 2:
        raise ConfigError(f"sheet {CONFIG_SHEET} has no value row\nMake sure the values are in row 2")

    values = df.iloc[1].tolist() + [None] * 3
    keys = ("dataset_file", "sheet_name", "date_column")
    return {k: ("" if pd.isna(v) else str(v).strip()) for k, v in zip(keys, values[:3])}


def _parse_date_column(value: str | int) -> DateColumnLocator:
    if isinstance(value, int):
        return DateColumnLocator.from_index(value)
    text = value.strip()
    if not text:
        raise ConfigError("date_column value cannot be empty")
    if _INDEX_RE.fullmatch(text):
        return DateColumnLocator.from_index(int(text))
    if not _LETTERS_RE.fullmatch(text):
        raise ConfigError(
            f"date_column {text!r} must be a column letter (no numbers) or a 0-based column index"
        )
    try:
        return DateColumnLocator.from_letter(text)
    except ValueError as e:
        raise ConfigError(f"date_column {text!r} is not a valid column: {e}") from e


def _dataset_path(name: str) -> Path:
    path = Path(name)
    if path.suffix.lower() != DATASET_SUFFIX:
        path = Path(name + DATASET_SUFFIX)
    return path


def _build_config(data: dict[str, Any]) -> HarvestConfig:
    dataset_file = data["dataset_file"].strip()
    sheet_name = data["sheet_name"].strip()
    if not dataset_file:
        raise ConfigError("dataset_file value cannot be empty")
    if not sheet_name:
        raise ConfigError("sheet_name value cannot be empty")

    src_raw = data.get("source") or {}
    source = SourceConfig(**{k: (str(v) if k in ("gid", "station") else v) for k, v in src_raw.items()})
    return HarvestConfig(
        dataset_file=_dataset_path(dataset_file),
        sheet_name=sheet_name,
        date_column=_parse_date_column(data["date_column"]),
        source=source,
    )


def load_config(path: Path) -> HarvestConfig:
    """Load and validate the harvest configuration.

    Args:
        path: YAML file (.yml/.yaml) or legacy config workbook (.xlsx)

    Returns:
        Immutable HarvestConfig

    Raises:
        ConfigError: Missing file, unreadable content or invalid values
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    suffix = path.suffix.lower()
    if suffix in (".yml", ".yaml"):
        data = _read_yaml(path)
    elif suffix == ".xlsx":
        data = _read_config_workbook(path)
    else:
        raise ConfigError(f"unsupported config format: {path.name} (expected .yml or .xlsx)")

    _validate_config_schema(data)
    return _build_config(data)
