"""
BatchSession -- ephemeral working state for one batch run.

Everything a walk changes lives here until the Commit Phase: local ledger
balances, the pending history, counters, the running check number and the
cooperative cancel flag.  Nothing in the session touches the database
except the lazy first read of a persisted ledger's Oracle balance.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID, uuid4

from checkbook_batch.domain.types import BatchProgress, BatchState
from checkbook_batch.services.ledger_router import LedgerRouter
from checkbook_kernel.domain.balance import ZERO
from checkbook_kernel.domain.types import LayoutMode, TransactionRecord


@dataclass
class BatchSession:
    """Mutable per-run state.  One instance per ``run``."""

    mode: LayoutMode
    total: int
    auto_number: bool
    start_number: int
    router: LedgerRouter
    balance_loader: Callable[[UUID], Decimal]
    profile_id: UUID | None = None
    batch_id: UUID = field(default_factory=uuid4)
    local_balances: dict[UUID, Decimal] = field(default_factory=dict)
    pending_history: list[TransactionRecord] = field(default_factory=list)
    processed: int = 0
    failed: int = 0
    cancelled: bool = False
    current: int = 0
    state: BatchState = BatchState.RUNNING
    next_check_number: int = 0

    def __post_init__(self) -> None:
        self.next_check_number = self.start_number

    @property
    def progress(self) -> BatchProgress:
        return BatchProgress(current=self.current, total=self.total)

    def resolve_ledger(self, name: str | None) -> UUID:
        """Route a queue name; a freshly provisioned ledger starts at zero."""
        ledger_id = self.router.resolve(name)
        if self.router.is_new(ledger_id):
            self.local_balances.setdefault(ledger_id, ZERO)
        return ledger_id

    def balance_for(self, ledger_id: UUID) -> Decimal:
        """Local balance, loaded from the Oracle on first touch."""
        if ledger_id not in self.local_balances:
            self.local_balances[ledger_id] = self.balance_loader(ledger_id)
        return self.local_balances[ledger_id]

    def set_balance(self, ledger_id: UUID, balance: Decimal) -> None:
        self.local_balances[ledger_id] = balance

    def check_number_for(self, own_number: str | None) -> str | None:
        """Running number with auto-numbering, else the item's own (or None)."""
        if self.auto_number:
            return str(self.next_check_number)
        return own_number or None

    def consume_check_number(self) -> None:
        if self.auto_number:
            self.next_check_number += 1

    def advance(self, current: int) -> None:
        self.current = current
