"""
checkbook_kernel.domain.types -- Pure frozen dataclasses for ledger data.

ZERO I/O.  These are the shapes the repository hands out and the batch
engine builds; ORM models convert to and from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class TransactionKind(str, Enum):
    """What a history record does to its ledger's balance."""

    CHECK = "check"  # Debit
    DEPOSIT = "deposit"  # Credit
    NOTE = "note"  # No balance effect


class LayoutMode(str, Enum):
    """Physical check layout of a profile."""

    STANDARD = "standard"  # One check per page
    THREE_UP = "three_up"  # Three checks per sheet


class SheetSlot(str, Enum):
    """Position of a check on a three-up sheet, in print order."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


SHEET_SLOTS: tuple[SheetSlot, ...] = (SheetSlot.TOP, SheetSlot.MIDDLE, SheetSlot.BOTTOM)


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balance before and after a transaction, captured at creation."""

    previous_balance: Decimal
    transaction_amount: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class Ledger:
    """A named account the checks are drawn against.

    ``balance`` is a cache of the derived balance; the Balance Oracle is
    authoritative.
    """

    ledger_id: UUID
    name: str
    starting_balance: Decimal = Decimal("0")
    lock_start: bool = True
    balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class Profile:
    """Check stock configuration and the running check-number counter."""

    profile_id: UUID
    name: str
    layout_mode: LayoutMode = LayoutMode.STANDARD
    next_check_number: int = 1001


@dataclass(frozen=True)
class TransactionRecord:
    """Immutable history entry.  Amount is stored positive."""

    record_id: UUID
    kind: TransactionKind
    date: date
    payee: str
    amount: Decimal
    ledger_id: UUID
    snapshot: BalanceSnapshot
    timestamp: datetime
    profile_id: UUID | None = None
    check_number: str | None = None
    gl_code: str | None = None
    gl_description: str | None = None
    address: str | None = None
    memo: str = ""
    external_memo: str = ""
    internal_memo: str = ""
    line_items_text: str = ""
    sheet_slot: SheetSlot | None = None
