"""
BatchPrintOrchestrator -- DI container and entry point for batch printing.

Contract:
    Wires the ledger repository, print adapter, render surface, decision
    provider, clock and preferences.  ``run()`` validates the print
    configuration, picks the runner for the profile's layout, walks the
    queue and runs the Commit Phase.  ``cancel()`` sets the cooperative
    flag the runner checks at the top of each iteration.

Invariants enforced:
    - One walk in flight per orchestrator (BatchAlreadyRunningError).
    - Configuration errors are raised before any item is staged.
    - Shared state changes only inside the Commit Phase.
    - A walk that raises still commits what printed before it, then
      re-raises with state FAILED.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from checkbook_batch.domain.types import (
    BatchProgress,
    BatchState,
    BatchSummary,
    ImportQueue,
    PrintFailureDecisionNeeded,
)
from checkbook_batch.services.commit import run_commit_phase
from checkbook_batch.services.decisions import DecisionProvider, OperatorDecisionGate
from checkbook_batch.services.ledger_router import LedgerRouter
from checkbook_batch.services.print_adapter import (
    PrintAdapter,
    PrintHost,
    validate_print_configuration,
)
from checkbook_batch.services.render_surface import InMemoryRenderSurface, RenderSurface
from checkbook_batch.services.runner import BatchRunner
from checkbook_batch.services.session import BatchSession
from checkbook_batch.services.sheet_runner import SheetRunner
from checkbook_batch.services.standard_runner import StandardRunner
from checkbook_config.schema import BatchPrintPreferences
from checkbook_kernel.domain.clock import Clock, SystemClock
from checkbook_kernel.domain.types import LayoutMode
from checkbook_kernel.exceptions import BatchAlreadyRunningError
from checkbook_kernel.logging_config import LogContext, get_logger
from checkbook_kernel.services.ledger_repository import LedgerRepository

logger = get_logger("batch.orchestrator")


class BatchPrintOrchestrator:
    """Runs batches against one repository and one print host.

    Non-goals:
        - Does NOT retry failed prints.
        - Does NOT own the database session lifecycle beyond the commit
          inside ``LedgerRepository.commit_batch``.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        print_adapter: PrintAdapter,
        preferences: BatchPrintPreferences,
        surface: RenderSurface | None = None,
        decisions: DecisionProvider | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository
        self._adapter = print_adapter
        self._preferences = preferences
        self._surface = surface if surface is not None else InMemoryRenderSurface()
        self._decisions = decisions if decisions is not None else OperatorDecisionGate()
        self._clock = clock or SystemClock()
        self._session: BatchSession | None = None
        self._running_batch_id: UUID | None = None
        self._last_summary: BatchSummary | None = None

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def from_session(
        cls,
        session: Session,
        host: PrintHost,
        preferences: BatchPrintPreferences | None = None,
        clock: Clock | None = None,
        surface: RenderSurface | None = None,
        decisions: DecisionProvider | None = None,
    ) -> BatchPrintOrchestrator:
        """Create a fully wired orchestrator from a database session."""
        effective_clock = clock or SystemClock()
        effective_prefs = preferences or BatchPrintPreferences()
        return cls(
            repository=LedgerRepository(session, clock=effective_clock),
            print_adapter=PrintAdapter(host, effective_prefs),
            preferences=effective_prefs,
            surface=surface,
            decisions=decisions,
            clock=effective_clock,
        )

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    async def run(
        self,
        queue: ImportQueue,
        profile_id: UUID,
        active_ledger_id: UUID,
        auto_number: bool | None = None,
        start_number: int | None = None,
    ) -> BatchSummary:
        """
        Print and record the queue.

        ``auto_number`` defaults to the preferences; ``start_number``
        defaults to the profile's next check number.

        Raises:
            BatchAlreadyRunningError: Another run is in flight.
            ConfigurationError: Print delivery is misconfigured.
            ProfileNotFoundError / LedgerNotFoundError: Unknown ids.
            Anything the walk raises, after the Commit Phase has recorded
            the items that printed before it.
        """
        if self._running_batch_id is not None:
            raise BatchAlreadyRunningError(str(self._running_batch_id))
        batch_id = uuid4()
        self._running_batch_id = batch_id

        try:
            await validate_print_configuration(self._preferences, self._adapter.host)

            profile = self._repository.get_profile(profile_id)
            self._repository.get_ledger(active_ledger_id)

            items = queue.snapshot()
            session = BatchSession(
                mode=profile.layout_mode,
                total=len(items),
                auto_number=(
                    self._preferences.auto_number if auto_number is None else auto_number
                ),
                start_number=(
                    profile.next_check_number if start_number is None else start_number
                ),
                router=LedgerRouter(self._repository.list_ledgers(), active_ledger_id),
                balance_loader=self._repository.current_balance,
                profile_id=profile_id,
                batch_id=batch_id,
            )
            self._session = session

            with LogContext.bind(batch_id=str(batch_id), profile_id=str(profile_id)):
                logger.info(
                    "batch_started",
                    extra={
                        "layout_mode": session.mode.value,
                        "print_mode": self._adapter.mode.value,
                        "total": session.total,
                        "auto_number": session.auto_number,
                        "start_number": session.start_number,
                    },
                )

                try:
                    await self._runner_for(session).walk(items)
                except BaseException:
                    self._commit_interrupted(session, queue)
                    raise

                session.state = BatchState.COMMITTING
                summary = run_commit_phase(session, self._repository, queue, self._surface)
                session.state = BatchState.FINISHED

            self._last_summary = summary
            return summary
        finally:
            self._running_batch_id = None

    def cancel(self) -> None:
        """Stop before the next item or sheet; finished items stay recorded."""
        if self._session is None or self._running_batch_id is None:
            return
        self._session.cancelled = True
        logger.info("batch_cancel_requested", extra={"cancel_batch_id": str(self._session.batch_id)})

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def state(self) -> BatchState:
        if self._session is None:
            return BatchState.IDLE
        return self._session.state

    @property
    def progress(self) -> BatchProgress:
        if self._session is None:
            return BatchProgress()
        return self._session.progress

    @property
    def is_running(self) -> bool:
        return self._running_batch_id is not None

    @property
    def pending_decision(self) -> PrintFailureDecisionNeeded | None:
        return getattr(self._decisions, "pending", None)

    @property
    def decisions(self) -> DecisionProvider:
        return self._decisions

    @property
    def surface(self) -> RenderSurface:
        return self._surface

    @property
    def repository(self) -> LedgerRepository:
        return self._repository

    @property
    def last_summary(self) -> BatchSummary | None:
        return self._last_summary

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _commit_interrupted(self, session: BatchSession, queue: ImportQueue) -> None:
        """Record what printed before the walk raised; the caller re-raises."""
        logger.error(
            "batch_walk_interrupted",
            exc_info=True,
            extra={"processed": session.processed, "failed": session.failed},
        )
        session.cancelled = True
        session.state = BatchState.COMMITTING
        try:
            self._last_summary = run_commit_phase(
                session, self._repository, queue, self._surface,
            )
        finally:
            session.state = BatchState.FAILED

    def _runner_for(self, session: BatchSession) -> BatchRunner:
        runner_cls = SheetRunner if session.mode == LayoutMode.THREE_UP else StandardRunner
        return runner_cls(
            session=session,
            repository=self._repository,
            adapter=self._adapter,
            surface=self._surface,
            decisions=self._decisions,
            clock=self._clock,
            preferences=self._preferences,
        )
