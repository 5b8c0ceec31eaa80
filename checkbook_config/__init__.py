"""
checkbook_config -- public entrypoint for checkbook preferences.

Responsibility:
    ``get_active_config()`` returns the frozen ``CheckbookConfig`` the
    application runs with.  Without a path it is the built-in defaults;
    with one, the YAML file is loaded and validated by ``loader``.

Architecture position:
    Sits above ``checkbook_kernel`` and beside ``checkbook_batch``.  The
    kernel never imports from here.

Failure modes:
    - ``FileNotFoundError`` -- an explicit path that does not exist.
    - ``InvalidPreferencesError`` -- a value failed validation.
"""

from __future__ import annotations

from pathlib import Path

from checkbook_config.loader import load_preferences
from checkbook_config.schema import (
    BatchPrintPreferences,
    CheckbookConfig,
    DatabaseConfig,
    PrintMode,
)
from checkbook_kernel.logging_config import get_logger

_logger = get_logger("config")


def get_active_config(path: Path | str | None = None) -> CheckbookConfig:
    """Defaults when ``path`` is None, otherwise the validated file contents."""
    if path is None:
        config = CheckbookConfig()
        source = "<defaults>"
    else:
        config = load_preferences(path)
        source = str(path)

    _logger.info(
        "config_loaded",
        extra={
            "config_source": source,
            "print_mode": config.batch_print.mode.value,
            "auto_number": config.batch_print.auto_number,
            "database_url": config.database.url,
        },
    )
    return config


__all__ = [
    "BatchPrintPreferences",
    "CheckbookConfig",
    "DatabaseConfig",
    "PrintMode",
    "get_active_config",
    "load_preferences",
]
