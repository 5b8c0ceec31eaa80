"""
BatchRunner -- steps shared by the standard and three-up walks.

Contract:
    A runner walks the queue snapshot strictly sequentially, staging each
    check on the render surface, printing it, and charging the batch-local
    ledger balance only after a confirmed print and the spool wait.  It
    never writes to the database; the Commit Phase does.

Invariants enforced:
    - Invalid items (sanitised amount <= 0 or blank payee) are skipped
      without side effects and consume no check number.
    - A failed print is never charged and always goes to the operator.
    - Cancellation is observed only at the top of each iteration.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from checkbook_batch.domain.types import (
    BatchState,
    ImportQueueItem,
    PrintableCheck,
    PrintFailureDecision,
    PrintFailureDecisionNeeded,
    PrintResult,
)
from checkbook_batch.services.decisions import DecisionProvider
from checkbook_batch.services.print_adapter import PrintAdapter
from checkbook_batch.services.render_surface import RenderSurface
from checkbook_batch.services.session import BatchSession
from checkbook_config.schema import BatchPrintPreferences
from checkbook_kernel.domain.amounts import amount_to_words, sanitize_amount
from checkbook_kernel.domain.balance import ZERO, build_snapshot
from checkbook_kernel.domain.clock import Clock
from checkbook_kernel.domain.dates import normalize_date
from checkbook_kernel.domain.types import SheetSlot, TransactionKind, TransactionRecord
from checkbook_kernel.logging_config import get_logger
from checkbook_kernel.services.ledger_repository import LedgerRepository

logger = get_logger("batch.runner")


def is_printable(item: ImportQueueItem) -> bool:
    return sanitize_amount(item.amount) > ZERO and bool((item.payee or "").strip())


@dataclass(frozen=True)
class PreparedCheck:
    """A validated queue item with its target ledger and rendered face."""

    index: int
    item: ImportQueueItem
    ledger_id: UUID
    amount: Decimal
    check: PrintableCheck


class BatchRunner(ABC):
    """Base class for the two layout walks."""

    def __init__(
        self,
        session: BatchSession,
        repository: LedgerRepository,
        adapter: PrintAdapter,
        surface: RenderSurface,
        decisions: DecisionProvider,
        clock: Clock,
        preferences: BatchPrintPreferences,
    ) -> None:
        self.session = session
        self._repository = repository
        self._adapter = adapter
        self._surface = surface
        self._decisions = decisions
        self._clock = clock
        self._preferences = preferences

    @abstractmethod
    async def walk(self, items: Sequence[ImportQueueItem]) -> None:
        """Process the queue snapshot, leaving results in the session."""

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    def _prepare(self, index: int, item: ImportQueueItem) -> PreparedCheck:
        """Resolve ledger, date, lookups and the prospective snapshot.

        Reads the local balance (loading it on first touch) but does not
        change it.
        """
        session = self.session
        amount = sanitize_amount(item.amount)
        ledger_id = session.resolve_ledger(item.ledger_name)
        previous = session.balance_for(ledger_id)

        gl_code, gl_description = item.gl_code, item.gl_description
        if not gl_code or not gl_description:
            hist_code, hist_description = self._repository.gl_details_from_history(item.payee)
            gl_code = gl_code or hist_code
            gl_description = gl_description or hist_description

        address = (
            item.address
            or self._repository.address_from_history(item.payee)
            or item.payee
        )

        check = PrintableCheck(
            date=normalize_date(item.date, self._clock.today()),
            payee=item.payee.strip(),
            address=address,
            amount=amount,
            amount_words=amount_to_words(amount),
            snapshot=build_snapshot(TransactionKind.CHECK, previous, amount),
            check_number=session.check_number_for(item.check_number),
            memo=item.memo or "",
            external_memo=item.external_memo or "",
            internal_memo=item.internal_memo or "",
            line_items_text=item.line_items_text or "",
            gl_code=gl_code or None,
            gl_description=gl_description or None,
        )
        return PreparedCheck(
            index=index, item=item, ledger_id=ledger_id, amount=amount, check=check,
        )

    async def _print(self, filename: str, settle_delay: float) -> PrintResult:
        await asyncio.sleep(settle_delay)
        return await self._adapter.print_current(filename)

    async def _wait_for_spooler(self) -> None:
        await asyncio.sleep(self._preferences.spool_delay_seconds)

    async def _ask_operator(self, needed: PrintFailureDecisionNeeded) -> PrintFailureDecision:
        logger.warning(
            "print_failed",
            extra={
                "label": needed.label,
                "error": needed.error,
                "failed_item_index": needed.item_index,
                "failed_sheet_number": needed.sheet_number,
            },
        )
        self.session.state = BatchState.AWAITING_DECISION
        try:
            decision = await self._decisions.request_decision(needed)
        finally:
            self.session.state = BatchState.RUNNING
        logger.info(
            "print_failure_decision",
            extra={"label": needed.label, "decision": decision.value},
        )
        return decision

    def _record(
        self,
        prepared: PreparedCheck,
        timestamp: datetime,
        slot: SheetSlot | None = None,
    ) -> TransactionRecord:
        check = prepared.check
        return TransactionRecord(
            record_id=uuid4(),
            kind=TransactionKind.CHECK,
            date=check.date,
            payee=check.payee,
            amount=prepared.amount,
            ledger_id=prepared.ledger_id,
            snapshot=check.snapshot,
            timestamp=timestamp,
            profile_id=self.session.profile_id,
            check_number=check.check_number,
            gl_code=check.gl_code,
            gl_description=check.gl_description,
            address=check.address,
            memo=check.memo,
            external_memo=check.external_memo,
            internal_memo=check.internal_memo,
            line_items_text=check.line_items_text,
            sheet_slot=slot,
        )
