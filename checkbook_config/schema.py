"""
Checkbook configuration schema.

Frozen dataclasses the YAML preferences file is parsed into.  Defaults
describe a fresh desktop install: interactive printing, auto-numbering on,
a local SQLite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Batch printing
# ---------------------------------------------------------------------------


class PrintMode(str, Enum):
    """How a staged check is delivered."""

    INTERACTIVE = "interactive"  # OS print dialog
    SILENT = "silent"  # Straight to a named printer
    PDF = "pdf"  # Written to an export folder


@dataclass(frozen=True)
class BatchPrintPreferences:
    """Delivery mode and pacing for batch runs."""

    mode: PrintMode = PrintMode.INTERACTIVE
    printer_device_name: str | None = None
    pdf_export_path: str | None = None
    settle_delay_seconds: float = 0.3  # Render surface settle, standard layout
    sheet_settle_delay_seconds: float = 0.8  # Three-up sheets render slower
    spool_delay_seconds: float = 2.0  # Let the spooler take the job
    auto_number: bool = True


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = "sqlite:///checkbook.db"
    echo: bool = False


@dataclass(frozen=True)
class CheckbookConfig:
    """Everything read from one preferences file."""

    batch_print: BatchPrintPreferences = field(default_factory=BatchPrintPreferences)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
