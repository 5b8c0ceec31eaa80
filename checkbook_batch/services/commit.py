"""
Commit Phase -- the single point where a batch touches shared state.

Runs exactly once per batch, after the walk completes or is aborted:
persists provisioned ledgers, reconciles touched balances, appends the
pending history, advances the profile's check counter (auto-numbering
with at least one success), then clears the queue and the render surface.
Items printed before an Abort stay recorded.
"""

from __future__ import annotations

from checkbook_batch.domain.types import BatchSummary, ImportQueue
from checkbook_batch.services.render_surface import RenderSurface
from checkbook_batch.services.session import BatchSession
from checkbook_kernel.logging_config import get_logger
from checkbook_kernel.services.ledger_repository import LedgerRepository

logger = get_logger("batch.commit")


def next_check_number_after(session: BatchSession) -> int | None:
    """The profile counter to store, or None to leave it alone."""
    if session.auto_number and session.processed > 0:
        return session.start_number + session.processed
    return None


def run_commit_phase(
    session: BatchSession,
    repository: LedgerRepository,
    queue: ImportQueue,
    surface: RenderSurface,
) -> BatchSummary:
    next_number = next_check_number_after(session)
    repository.commit_batch(
        new_ledgers=session.router.new_ledgers,
        local_balances=dict(session.local_balances),
        records=list(session.pending_history),
        profile_id=session.profile_id,
        next_check_number=next_number,
    )

    queue.clear()
    surface.reset()

    summary = BatchSummary(
        processed=session.processed,
        total=session.total,
        cancelled=session.cancelled,
        failed=session.failed,
    )
    logger.info(
        "batch_committed",
        extra={
            "processed": summary.processed,
            "total": summary.total,
            "cancelled": summary.cancelled,
            "failed": summary.failed,
            "new_ledger_count": len(session.router.new_ledgers),
            "next_check_number": next_number,
        },
    )
    return summary
