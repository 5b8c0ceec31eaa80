"""
StandardRunner -- one check per page, one print call per queue item.

Per item: cancellation check, validation, ledger resolution, date
normalisation, staging, settle wait, print, then either the operator
decision (failure) or the spool wait and the local charge (success).
"""

from __future__ import annotations

from collections.abc import Sequence

from checkbook_batch.domain.types import (
    ImportQueueItem,
    PrintFailureDecision,
    PrintFailureDecisionNeeded,
)
from checkbook_batch.services.print_adapter import generate_print_filename
from checkbook_batch.services.runner import BatchRunner, PreparedCheck, is_printable
from checkbook_kernel.logging_config import LogContext, get_logger

logger = get_logger("batch.standard_runner")


class StandardRunner(BatchRunner):

    async def walk(self, items: Sequence[ImportQueueItem]) -> None:
        session = self.session
        for index, item in enumerate(items):
            if session.cancelled:
                logger.info("batch_cancel_observed", extra={"stopped_at": index})
                break

            session.advance(index + 1)

            if not is_printable(item):
                logger.info("batch_item_skipped_invalid", extra={"skipped_index": index})
                continue

            with LogContext.bind(item_index=str(index)):
                prepared = self._prepare(index, item)
                with LogContext.bind(ledger_id=str(prepared.ledger_id)):
                    if not await self._print_and_charge(prepared):
                        break

    async def _print_and_charge(self, prepared: PreparedCheck) -> bool:
        """Print one check and charge it; False when the operator aborts."""
        session = self.session
        item = prepared.item
        self._surface.stage_check(prepared.check)
        filename = generate_print_filename(
            item.payee, prepared.check.date, item.amount, prepared.index + 1,
        )

        result = await self._print(filename, self._preferences.settle_delay_seconds)
        if not result.success:
            decision = await self._ask_operator(
                PrintFailureDecisionNeeded(
                    label=item.payee,
                    error=result.error or "",
                    item_index=prepared.index,
                ),
            )
            if decision == PrintFailureDecision.ABORT:
                session.cancelled = True
                return False
            session.failed += 1
            return True

        await self._wait_for_spooler()

        session.set_balance(prepared.ledger_id, prepared.check.snapshot.new_balance)
        record = self._record(prepared, self._clock.now())
        session.pending_history.append(record)
        session.processed += 1
        session.consume_check_number()

        logger.info(
            "batch_item_recorded",
            extra={
                "check_number": record.check_number,
                "amount": record.amount,
                "new_balance": record.snapshot.new_balance,
            },
        )
        return True
