"""
Configuration Loader (``checkbook_config.loader``).

Responsibility
--------------
Loads the YAML preferences file and parses it into the frozen dataclasses
in ``checkbook_config.schema``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Missing sections or keys fall back to the dataclass defaults.
* A present but invalid value is never replaced by a default: it raises
  ``InvalidPreferencesError`` naming the dotted field.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``InvalidPreferencesError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from checkbook_config.schema import (
    BatchPrintPreferences,
    CheckbookConfig,
    DatabaseConfig,
    PrintMode,
)
from checkbook_kernel.exceptions import InvalidPreferencesError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidPreferencesError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPreferencesError("<root>", data, "expected a mapping")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidPreferencesError(name, value, "expected a mapping")
    return value


def _optional_text(section: str, data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidPreferencesError(f"{section}.{key}", value, "expected a string")
    return value.strip() or None


def _delay(section: str, data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPreferencesError(f"{section}.{key}", value, "expected a number of seconds")
    if value < 0:
        raise InvalidPreferencesError(f"{section}.{key}", value, "must not be negative")
    return float(value)


def parse_batch_print(data: dict[str, Any]) -> BatchPrintPreferences:
    """Parse the ``batch_print`` section."""
    defaults = BatchPrintPreferences()
    section = "batch_print"

    raw_mode = data.get("mode", defaults.mode.value)
    try:
        mode = PrintMode(raw_mode)
    except ValueError:
        allowed = ", ".join(m.value for m in PrintMode)
        raise InvalidPreferencesError(f"{section}.mode", raw_mode, f"expected one of {allowed}")

    auto_number = data.get("auto_number", defaults.auto_number)
    if not isinstance(auto_number, bool):
        raise InvalidPreferencesError(f"{section}.auto_number", auto_number, "expected true or false")

    return BatchPrintPreferences(
        mode=mode,
        printer_device_name=_optional_text(section, data, "printer_device_name"),
        pdf_export_path=_optional_text(section, data, "pdf_export_path"),
        settle_delay_seconds=_delay(
            section, data, "settle_delay_seconds", defaults.settle_delay_seconds,
        ),
        sheet_settle_delay_seconds=_delay(
            section, data, "sheet_settle_delay_seconds", defaults.sheet_settle_delay_seconds,
        ),
        spool_delay_seconds=_delay(
            section, data, "spool_delay_seconds", defaults.spool_delay_seconds,
        ),
        auto_number=auto_number,
    )


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    """Parse the ``database`` section."""
    defaults = DatabaseConfig()
    url = data.get("url", defaults.url)
    if not isinstance(url, str) or not url.strip():
        raise InvalidPreferencesError("database.url", url, "expected a SQLAlchemy URL")
    echo = data.get("echo", defaults.echo)
    if not isinstance(echo, bool):
        raise InvalidPreferencesError("database.echo", echo, "expected true or false")
    return DatabaseConfig(url=url.strip(), echo=echo)


def parse_config(data: dict[str, Any]) -> CheckbookConfig:
    return CheckbookConfig(
        batch_print=parse_batch_print(_section(data, "batch_print")),
        database=parse_database(_section(data, "database")),
    )


def load_preferences(path: Path | str) -> CheckbookConfig:
    """Load and validate a preferences file."""
    return parse_config(load_yaml_file(Path(path)))
