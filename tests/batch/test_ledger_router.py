"""LedgerRouter: batch-local name to ledger id routing."""

import string
from uuid import uuid4

from hypothesis import given
from hypothesis import strategies as st

from checkbook_batch.services.ledger_router import LedgerRouter
from checkbook_kernel.domain.types import Ledger

OPERATING = Ledger(ledger_id=uuid4(), name="Operating")
PAYROLL = Ledger(ledger_id=uuid4(), name="Payroll")


def _router(*known):
    return LedgerRouter(known or (OPERATING, PAYROLL), default_ledger_id=OPERATING.ledger_id)


class TestResolve:

    def test_blank_name_is_default(self):
        router = _router()
        assert router.resolve(None) == OPERATING.ledger_id
        assert router.resolve("") == OPERATING.ledger_id
        assert router.resolve("   ") == OPERATING.ledger_id
        assert router.new_ledgers == []

    def test_existing_name_any_case(self):
        router = _router()
        assert router.resolve(" payroll ") == PAYROLL.ledger_id
        assert router.resolve("PAYROLL") == PAYROLL.ledger_id
        assert router.new_ledgers == []

    def test_unknown_name_provisions_once(self, captured_logs):
        router = _router()
        first = router.resolve("Ops")
        second = router.resolve("ops")
        third = router.resolve("  OPS")
        assert first == second == third
        assert router.is_new(first)
        assert not router.is_new(OPERATING.ledger_id)
        assert [l.name for l in router.new_ledgers] == ["Ops"]
        assert router.ledger_name(first) == "Ops"

        provisioned = [r for r in captured_logs() if r["message"] == "ledger_provisioned"]
        assert len(provisioned) == 1
        assert provisioned[0]["ledger_name"] == "Ops"

    def test_new_ledgers_start_at_zero(self):
        router = _router()
        router.resolve("Ops")
        ledger = router.new_ledgers[0]
        assert ledger.starting_balance == 0
        assert ledger.balance == 0

    def test_new_ledgers_in_provisioning_order(self):
        router = _router()
        for name in ("Zeta", "Alpha", "zeta", "Mid"):
            router.resolve(name)
        assert [l.name for l in router.new_ledgers] == ["Zeta", "Alpha", "Mid"]

    def test_id_factory(self):
        fixed = uuid4()
        router = LedgerRouter([OPERATING], OPERATING.ledger_id, id_factory=lambda: fixed)
        assert router.resolve("Ops") == fixed

    @given(name=st.text(alphabet=string.ascii_letters, min_size=1, max_size=12))
    def test_same_name_same_id_in_any_case(self, name):
        router = _router()
        assert router.resolve(name) == router.resolve(name.upper()) == router.resolve(name.lower())
