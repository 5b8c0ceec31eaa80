"""
SheetRunner -- three checks per sheet, one print call per sheet.

The queue is walked in chunks of up to three items; slots are top, middle
and bottom by position in the chunk, and an invalid item leaves its slot
empty.  Each slot's deduction is staged immediately so later slots in the
same chunk see it.  A failed sheet rolls back every staged deduction and
the check-number counter before the operator is asked, and so does
anything raised while the sheet is staged or printing.
"""

from __future__ import annotations

from collections.abc import Sequence

from checkbook_batch.domain.types import (
    ImportQueueItem,
    PrintableSheet,
    PrintFailureDecision,
    PrintFailureDecisionNeeded,
)
from checkbook_batch.services.print_adapter import generate_print_filename
from checkbook_batch.services.runner import BatchRunner, PreparedCheck, is_printable
from checkbook_kernel.domain.types import SHEET_SLOTS, SheetSlot
from checkbook_kernel.logging_config import LogContext, get_logger

logger = get_logger("batch.sheet_runner")

SHEET_SIZE = len(SHEET_SLOTS)


class SheetRunner(BatchRunner):

    async def walk(self, items: Sequence[ImportQueueItem]) -> None:
        session = self.session
        for chunk_start in range(0, len(items), SHEET_SIZE):
            if session.cancelled:
                logger.info("batch_cancel_observed", extra={"stopped_at": chunk_start})
                break

            chunk = items[chunk_start:chunk_start + SHEET_SIZE]
            sheet_number = chunk_start // SHEET_SIZE + 1

            with LogContext.bind(sheet_number=str(sheet_number)):
                counter_before = session.next_check_number
                staged: list[tuple[SheetSlot, PreparedCheck]] = []
                try:
                    for offset, item in enumerate(chunk):
                        index = chunk_start + offset
                        if not is_printable(item):
                            logger.info(
                                "batch_item_skipped_invalid", extra={"skipped_index": index},
                            )
                            continue
                        prepared = self._prepare(index, item)
                        session.set_balance(
                            prepared.ledger_id, prepared.check.snapshot.new_balance,
                        )
                        session.consume_check_number()
                        staged.append((SHEET_SLOTS[offset], prepared))
                except BaseException:
                    self._roll_back(staged, counter_before)
                    raise

                session.advance(chunk_start + len(chunk))

                if not staged:
                    logger.info("sheet_skipped_empty")
                    continue

                self._surface.stage_sheet(
                    PrintableSheet(**{slot.value: p.check for slot, p in staged}),
                )
                first = staged[0][1]
                filename = generate_print_filename(
                    first.item.payee, first.check.date, first.item.amount, sheet_number,
                )

                try:
                    result = await self._print(
                        filename, self._preferences.sheet_settle_delay_seconds,
                    )
                    if result.success:
                        await self._wait_for_spooler()
                except BaseException:
                    self._roll_back(staged, counter_before)
                    raise

                if not result.success:
                    self._roll_back(staged, counter_before)
                    decision = await self._ask_operator(
                        PrintFailureDecisionNeeded(
                            label=f"Sheet ({len(staged)} checks starting with {first.item.payee})",
                            error=result.error or "",
                            item_index=first.index,
                            sheet_number=sheet_number,
                        ),
                    )
                    if decision == PrintFailureDecision.ABORT:
                        session.cancelled = True
                        break
                    session.failed += len(staged)
                    continue

                timestamp = self._clock.now()
                for slot, prepared in staged:
                    session.pending_history.append(self._record(prepared, timestamp, slot))
                    session.processed += 1

                logger.info(
                    "sheet_recorded",
                    extra={"filled_slots": [slot.value for slot, _ in staged]},
                )

    def _roll_back(self, staged: list[tuple[SheetSlot, PreparedCheck]], counter_before: int) -> None:
        """Undo the chunk's staged deductions and check numbers."""
        for _, prepared in reversed(staged):
            self.session.set_balance(prepared.ledger_id, prepared.check.snapshot.previous_balance)
        self.session.next_check_number = counter_before
        logger.info(
            "sheet_rolled_back",
            extra={"rolled_back_slots": len(staged), "check_number_restored": counter_before},
        )
