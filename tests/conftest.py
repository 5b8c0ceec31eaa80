"""
Pytest fixtures for the checkbook test suite.

Provides:
- An in-memory SQLite session per test, with the append-only listeners
- A DeterministicClock
- JSON log capture
- A scriptable fake print host and decision provider
- Zero-delay batch preferences
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from checkbook_batch.domain.types import (
    PrinterInfo,
    PrintFailureDecision,
    PrintFailureDecisionNeeded,
    PrintRequest,
    PrintResult,
)
from checkbook_batch.orchestrator import BatchPrintOrchestrator
from checkbook_batch.services.render_surface import InMemoryRenderSurface
from checkbook_config.schema import BatchPrintPreferences
from checkbook_kernel.db.base import Base
from checkbook_kernel.db.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from checkbook_kernel.domain.clock import DeterministicClock
from checkbook_kernel.domain.types import LayoutMode
from checkbook_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from checkbook_kernel.services.ledger_repository import LedgerRepository

import checkbook_kernel.models  # noqa: F401

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture checkbook_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, orchestrator):
            ...
            logs = captured_logs()
            assert any(r["message"] == "batch_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("checkbook_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def engine():
    eng = create_engine("sqlite:///:memory:")
    event.listen(eng, "connect", _enable_foreign_keys)
    Base.metadata.create_all(eng)
    register_immutability_listeners()
    yield eng
    unregister_immutability_listeners()
    eng.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    sess = factory()
    yield sess
    sess.close()


@pytest.fixture
def clock():
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def repository(session, clock):
    return LedgerRepository(session, clock=clock)


@pytest.fixture
def operating_ledger(repository):
    return repository.create_ledger("Operating", starting_balance=Decimal("1000.00"))


@pytest.fixture
def standard_profile(repository):
    return repository.create_profile("Standard Checks", LayoutMode.STANDARD, next_check_number=1001)


@pytest.fixture
def three_up_profile(repository):
    return repository.create_profile("Three-Up Sheets", LayoutMode.THREE_UP, next_check_number=5001)


# =============================================================================
# Batch fixtures
# =============================================================================


@pytest.fixture
def preferences():
    """Interactive printing, auto-numbering, no waits."""
    return BatchPrintPreferences(
        settle_delay_seconds=0,
        sheet_settle_delay_seconds=0,
        spool_delay_seconds=0,
    )


class FakePrintHost:
    """
    Print host that records every request.

    ``outcomes`` is consumed one entry per ``deliver`` call: a PrintResult
    is returned, an Exception is raised.  When exhausted every call
    succeeds.
    """

    def __init__(
        self,
        outcomes: Iterable[PrintResult | Exception] = (),
        printers: Iterable[str] = ("Office Laser",),
    ):
        self._outcomes = list(outcomes)
        self.printers = [PrinterInfo(name=n) for n in printers]
        self.requests: list[PrintRequest] = []
        self.staged_at_delivery: list[object] = []
        self.surface = None

    async def deliver(self, request: PrintRequest) -> PrintResult:
        self.requests.append(request)
        if self.surface is not None:
            self.staged_at_delivery.append(self.surface.current)
        if self._outcomes:
            outcome = self._outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return PrintResult.ok()

    async def list_printers(self) -> list[PrinterInfo]:
        return list(self.printers)


class ScriptedDecisionProvider:
    """Answers print failures from a fixed script, recording each request."""

    def __init__(self, decisions: Iterable[PrintFailureDecision] = ()):
        self._decisions = list(decisions)
        self.requests: list[PrintFailureDecisionNeeded] = []

    async def request_decision(self, needed: PrintFailureDecisionNeeded) -> PrintFailureDecision:
        self.requests.append(needed)
        if not self._decisions:
            raise AssertionError(f"Unexpected print failure: {needed.label}")
        return self._decisions.pop(0)


@pytest.fixture
def make_host():
    """The FakePrintHost class, for tests that script outcomes."""
    return FakePrintHost


@pytest.fixture
def make_decisions():
    """The ScriptedDecisionProvider class."""
    return ScriptedDecisionProvider


@pytest.fixture
def surface():
    return InMemoryRenderSurface()


@pytest.fixture
def make_orchestrator(session, clock, preferences, surface):
    """Build an orchestrator around a host and decision provider."""

    def _make(host=None, decisions=None, prefs=None):
        host = host if host is not None else FakePrintHost()
        host.surface = surface
        return BatchPrintOrchestrator.from_session(
            session,
            host,
            preferences=prefs or preferences,
            clock=clock,
            surface=surface,
            decisions=decisions if decisions is not None else ScriptedDecisionProvider(),
        )

    return _make
