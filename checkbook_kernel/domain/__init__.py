"""Pure domain core: DTOs, Balance Oracle, amount and date normalisation, clock."""

from checkbook_kernel.domain.amounts import amount_to_words, sanitize_amount
from checkbook_kernel.domain.balance import (
    apply_to_balance,
    build_snapshot,
    compute_balance,
    signed_amount,
)
from checkbook_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from checkbook_kernel.domain.dates import normalize_date, parse_date
from checkbook_kernel.domain.types import (
    SHEET_SLOTS,
    BalanceSnapshot,
    LayoutMode,
    Ledger,
    Profile,
    SheetSlot,
    TransactionKind,
    TransactionRecord,
)

__all__ = [
    "amount_to_words",
    "sanitize_amount",
    "apply_to_balance",
    "build_snapshot",
    "compute_balance",
    "signed_amount",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "normalize_date",
    "parse_date",
    "SHEET_SLOTS",
    "BalanceSnapshot",
    "LayoutMode",
    "Ledger",
    "Profile",
    "SheetSlot",
    "TransactionKind",
    "TransactionRecord",
]
