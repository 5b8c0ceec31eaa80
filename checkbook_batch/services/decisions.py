"""
Operator decisions on print failures.

A failed print suspends the runner until exactly one Abort/Skip token
arrives.  ``DecisionProvider`` is the seam; ``OperatorDecisionGate`` is the
interactive implementation: it publishes the pending request and resolves
an ``asyncio.Future`` when the UI answers.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from checkbook_batch.domain.types import PrintFailureDecision, PrintFailureDecisionNeeded
from checkbook_kernel.exceptions import DecisionAlreadyPendingError, NoPendingDecisionError


@runtime_checkable
class DecisionProvider(Protocol):
    async def request_decision(
        self, needed: PrintFailureDecisionNeeded,
    ) -> PrintFailureDecision: ...


class OperatorDecisionGate:
    """
    Suspension point between a runner and the operator.

    ``request_decision`` must be awaited on the event loop that later calls
    ``resolve``.
    """

    def __init__(self) -> None:
        self._pending: PrintFailureDecisionNeeded | None = None
        self._future: asyncio.Future[PrintFailureDecision] | None = None
        self._published: asyncio.Event | None = None

    @property
    def pending(self) -> PrintFailureDecisionNeeded | None:
        return self._pending

    async def request_decision(
        self, needed: PrintFailureDecisionNeeded,
    ) -> PrintFailureDecision:
        if self._future is not None:
            raise DecisionAlreadyPendingError(needed.label)

        self._future = asyncio.get_running_loop().create_future()
        self._pending = needed
        self._event().set()
        try:
            return await self._future
        finally:
            self._future = None
            self._pending = None
            self._event().clear()

    async def wait_pending(self) -> PrintFailureDecisionNeeded:
        """Wait until a runner is suspended on this gate."""
        await self._event().wait()
        assert self._pending is not None
        return self._pending

    def resolve(self, decision: PrintFailureDecision | str) -> None:
        """
        Feed the operator's answer.

        Raises:
            NoPendingDecisionError: Nothing is waiting for a decision.
        """
        if self._future is None or self._future.done():
            raise NoPendingDecisionError(str(getattr(decision, "value", decision)))
        self._future.set_result(PrintFailureDecision(decision))

    def abort(self) -> None:
        self.resolve(PrintFailureDecision.ABORT)

    def skip(self) -> None:
        self.resolve(PrintFailureDecision.SKIP)

    def _event(self) -> asyncio.Event:
        if self._published is None:
            self._published = asyncio.Event()
        return self._published
