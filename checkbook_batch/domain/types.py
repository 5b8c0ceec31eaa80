"""
checkbook_batch.domain.types -- Value objects for batch printing.

ZERO I/O.  Frozen dataclasses with enum state fields, except the
ImportQueue, which is the mutable holder the import subsystem fills and
the Commit Phase clears.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from checkbook_config.schema import PrintMode
from checkbook_kernel.domain.types import BalanceSnapshot

# =============================================================================
# State enums
# =============================================================================


class BatchState(str, Enum):
    """Observable lifecycle of one orchestrator."""

    IDLE = "idle"  # Nothing started yet
    RUNNING = "running"  # Walking the queue
    AWAITING_DECISION = "awaiting_decision"  # Suspended on a print failure
    COMMITTING = "committing"  # Commit Phase in progress
    FINISHED = "finished"  # Summary available
    FAILED = "failed"  # Walk raised; what printed before it was committed


class PrintFailureDecision(str, Enum):
    """Operator answer to a print failure."""

    ABORT = "abort"  # Stop the batch; this item is not charged
    SKIP = "skip"  # Count as failed and continue


# =============================================================================
# Input queue
# =============================================================================


@dataclass(frozen=True)
class ImportQueueItem:
    """One pending payment as produced by the import subsystem.

    ``amount`` is the raw spreadsheet text and ``date`` the raw cell value;
    both are normalised by the runners.
    """

    payee: str = ""
    amount: str = ""
    date: object = None
    memo: str = ""
    external_memo: str = ""
    internal_memo: str = ""
    line_items_text: str = ""
    ledger_name: str | None = None
    gl_code: str | None = None
    gl_description: str | None = None
    address: str | None = None
    check_number: str | None = None


class ImportQueue:
    """Ordered, mutable list of pending items."""

    def __init__(self, items: Iterable[ImportQueueItem] = ()):
        self._items: list[ImportQueueItem] = list(items)

    def append(self, item: ImportQueueItem) -> None:
        self._items.append(item)

    def extend(self, items: Iterable[ImportQueueItem]) -> None:
        self._items.extend(items)

    def snapshot(self) -> tuple[ImportQueueItem, ...]:
        return tuple(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ImportQueueItem]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


# =============================================================================
# Print boundary
# =============================================================================


@dataclass(frozen=True)
class PrinterInfo:
    name: str
    display_name: str = ""
    is_default: bool = False


@dataclass(frozen=True)
class PrintRequest:
    """What the host is asked to do with the currently staged surface."""

    mode: PrintMode
    filename: str
    device_name: str | None = None  # SILENT only
    folder_path: str | None = None  # PDF only


@dataclass(frozen=True)
class PrintResult:
    success: bool
    error: str | None = None
    filepath: str | None = None

    @classmethod
    def ok(cls, filepath: str | None = None) -> PrintResult:
        return cls(success=True, filepath=filepath)

    @classmethod
    def failed(cls, error: str | None = None) -> PrintResult:
        return cls(success=False, error=error)


# =============================================================================
# Render surface payloads
# =============================================================================


@dataclass(frozen=True)
class PrintableCheck:
    """Everything drawn on one check face."""

    date: date
    payee: str
    address: str
    amount: Decimal
    amount_words: str
    snapshot: BalanceSnapshot
    check_number: str | None = None
    memo: str = ""
    external_memo: str = ""
    internal_memo: str = ""
    line_items_text: str = ""
    gl_code: str | None = None
    gl_description: str | None = None


@dataclass(frozen=True)
class PrintableSheet:
    """A three-up sheet.  Empty slots are None."""

    top: PrintableCheck | None = None
    middle: PrintableCheck | None = None
    bottom: PrintableCheck | None = None

    @property
    def filled(self) -> tuple[PrintableCheck, ...]:
        return tuple(c for c in (self.top, self.middle, self.bottom) if c is not None)


# =============================================================================
# Progress and results
# =============================================================================


@dataclass(frozen=True)
class BatchProgress:
    current: int = 0
    total: int = 0


@dataclass(frozen=True)
class BatchSummary:
    """Returned once per run, after the Commit Phase."""

    processed: int
    total: int
    cancelled: bool
    failed: int


@dataclass(frozen=True)
class PrintFailureDecisionNeeded:
    """Published while a runner is suspended on a failed print.

    ``item_index`` is the 0-based queue position of the failed item (the
    first filled slot for a sheet); ``sheet_number`` is 1-based and only
    set in three-up mode.
    """

    label: str
    error: str
    item_index: int
    sheet_number: int | None = None
