"""
Standard layout batch runs: one check per page, one print call per item.
"""

import asyncio
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from checkbook_batch.domain.types import (
    ImportQueue,
    ImportQueueItem,
    PrintableCheck,
    PrintFailureDecision,
    PrintResult,
)
from checkbook_batch.services.print_adapter import CANCELLED_OR_FAILED

ABORT = PrintFailureDecision.ABORT
SKIP = PrintFailureDecision.SKIP


def _item(payee, amount, ledger=None, **kw) -> ImportQueueItem:
    return ImportQueueItem(payee=payee, amount=amount, ledger_name=ledger, **kw)


def _run(orchestrator, items, profile, ledger, **kw):
    queue = ImportQueue(items)
    summary = asyncio.run(orchestrator.run(queue, profile.profile_id, ledger.ledger_id, **kw))
    return summary, queue


class TestHappyPath:

    def test_routes_skips_and_numbers(
        self, make_orchestrator, make_host, repository, operating_ledger, standard_profile,
    ):
        host = make_host()
        orchestrator = make_orchestrator(host=host)
        items = [
            _item("Acme", "100.00", "Ops"),
            _item("", "50.00"),
            _item("Bob", "75.00", "ops"),
        ]

        summary, queue = _run(orchestrator, items, standard_profile, operating_ledger)

        assert summary.processed == 2
        assert summary.total == 3
        assert summary.failed == 0
        assert summary.cancelled is False

        ops = repository.find_ledger_by_name("Ops")
        assert ops is not None
        assert repository.current_balance(ops.ledger_id) == Decimal("-175.00")
        assert repository.get_ledger(ops.ledger_id).balance == Decimal("-175.00")
        assert repository.current_balance(operating_ledger.ledger_id) == Decimal("1000.00")

        history = repository.history(ops.ledger_id)
        assert [(r.payee, r.check_number) for r in history] == [("Acme", "1001"), ("Bob", "1002")]
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1003

        assert [r.filename for r in host.requests] == [
            "Check_001_Acme_2024-03-15_10000",
            "Check_003_Bob_2024-03-15_7500",
        ]
        assert len(queue) == 0

    def test_snapshots_chain_through_local_balance(
        self, make_orchestrator, make_host, repository, operating_ledger, standard_profile,
    ):
        host = make_host()
        orchestrator = make_orchestrator(host=host)

        _run(
            orchestrator,
            [_item("Acme", "100"), _item("Bob", "$1,250.50")],
            standard_profile,
            operating_ledger,
        )

        staged = host.staged_at_delivery
        assert all(isinstance(s, PrintableCheck) for s in staged)
        assert staged[0].snapshot.previous_balance == Decimal("1000.00")
        assert staged[0].snapshot.new_balance == Decimal("900.00")
        assert staged[1].snapshot.previous_balance == Decimal("900.00")
        assert staged[1].snapshot.new_balance == Decimal("-350.50")
        assert staged[1].amount_words == "One Thousand Two Hundred Fifty and 50/100"
        assert repository.current_balance(operating_ledger.ledger_id) == Decimal("-350.50")

    def test_first_touch_reads_persisted_history(
        self, make_orchestrator, make_host, repository, operating_ledger, standard_profile,
    ):
        repository.record_check(operating_ledger.ledger_id, "Earlier", "200")
        host = make_host()
        orchestrator = make_orchestrator(host=host)

        _run(orchestrator, [_item("Acme", "100")], standard_profile, operating_ledger)

        assert host.staged_at_delivery[0].snapshot.previous_balance == Decimal("800.00")
        assert repository.current_balance(operating_ledger.ledger_id) == Decimal("700.00")

    def test_surface_reset_after_commit(
        self, make_orchestrator, operating_ledger, standard_profile, surface,
    ):
        orchestrator = make_orchestrator()
        _run(orchestrator, [_item("Acme", "1")], standard_profile, operating_ledger)
        assert surface.current is None
        assert surface.reset_count == 1
        assert len(surface.staged) == 1


class TestItemFields:

    def test_date_is_normalised(
        self, make_orchestrator, make_host, repository, operating_ledger, standard_profile,
    ):
        host = make_host()
        orchestrator = make_orchestrator(host=host)
        _run(
            orchestrator,
            [_item("Acme", "10", date="01/15/2024"), _item("Bob", "10", date=45306)],
            standard_profile,
            operating_ledger,
        )
        assert [r.date for r in repository.history()] == [date(2024, 1, 15), date(2024, 1, 15)]
        assert host.requests[0].filename == "Check_001_Acme_2024-01-15_1000"

    def test_address_falls_back_to_history_then_payee(
        self, make_orchestrator, repository, operating_ledger, standard_profile,
    ):
        repository.record_check(operating_ledger.ledger_id, "Acme", "1", address="1 Main St")
        orchestrator = make_orchestrator()
        _run(
            orchestrator,
            [
                _item("Acme", "10"),
                _item("Bob", "10"),
                _item("Carol", "10", address="9 Elm Ave"),
            ],
            standard_profile,
            operating_ledger,
        )
        addresses = [r.address for r in repository.history()][1:]
        assert addresses == ["1 Main St", "Bob", "9 Elm Ave"]

    def test_gl_details_fall_back_to_history(
        self, make_orchestrator, repository, operating_ledger, standard_profile,
    ):
        repository.record_check(
            operating_ledger.ledger_id, "Acme", "1", gl_code="6100", gl_description="Supplies",
        )
        orchestrator = make_orchestrator()
        _run(
            orchestrator,
            [_item("Acme", "10"), _item("Acme", "10", gl_code="7000")],
            standard_profile,
            operating_ledger,
        )
        batch = repository.history()[1:]
        assert [(r.gl_code, r.gl_description) for r in batch] == [
            ("6100", "Supplies"),
            ("7000", "Supplies"),
        ]

    def test_memos_carried_to_record(
        self, make_orchestrator, repository, operating_ledger, standard_profile,
    ):
        orchestrator = make_orchestrator()
        _run(
            orchestrator,
            [_item(
                "Acme", "10", memo="Invoice 7", external_memo="Thanks",
                internal_memo="Approved by JB", line_items_text="Paper x2",
            )],
            standard_profile,
            operating_ledger,
        )
        record = repository.history()[0]
        assert record.memo == "Invoice 7"
        assert record.external_memo == "Thanks"
        assert record.internal_memo == "Approved by JB"
        assert record.line_items_text == "Paper x2"
        assert record.profile_id == standard_profile.profile_id

    @pytest.mark.parametrize("amount", ["", "0", "-10", "abc"])
    def test_invalid_amounts_are_skipped(
        self, make_orchestrator, make_host, repository, operating_ledger, standard_profile, amount,
    ):
        host = make_host()
        orchestrator = make_orchestrator(host=host)
        summary, _ = _run(orchestrator, [_item("Acme", amount)], standard_profile, operating_ledger)
        assert summary.processed == 0
        assert summary.failed == 0
        assert host.requests == []
        assert repository.history() == []
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1001


class TestPrintFailures:

    def test_abort_keeps_earlier_items(
        self, make_orchestrator, make_host, make_decisions, repository,
        operating_ledger, standard_profile,
    ):
        host = make_host([PrintResult.ok(), PrintResult.failed("Paper jam")])
        decisions = make_decisions([ABORT])
        orchestrator = make_orchestrator(host=host, decisions=decisions)

        summary, _ = _run(
            orchestrator,
            [_item("Acme", "100"), _item("Bob", "75"), _item("Carol", "20")],
            standard_profile,
            operating_ledger,
        )

        assert summary.cancelled is True
        assert summary.processed == 1
        assert summary.failed == 0
        assert len(host.requests) == 2
        assert [r.payee for r in repository.history()] == ["Acme"]
        assert repository.current_balance(operating_ledger.ledger_id) == Decimal("900.00")
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1002

        needed = decisions.requests[0]
        assert needed.label == "Bob"
        assert needed.error == "Paper jam"
        assert needed.item_index == 1
        assert needed.sheet_number is None

    def test_skip_continues_without_charging(
        self, make_orchestrator, make_host, make_decisions, repository,
        operating_ledger, standard_profile,
    ):
        host = make_host([PrintResult.ok(), PrintResult.failed(None), PrintResult.ok()])
        decisions = make_decisions([SKIP])
        orchestrator = make_orchestrator(host=host, decisions=decisions)

        summary, _ = _run(
            orchestrator,
            [_item("Acme", "100"), _item("Bob", "75"), _item("Carol", "20")],
            standard_profile,
            operating_ledger,
        )

        assert summary.processed == 2
        assert summary.failed == 1
        assert summary.cancelled is False
        assert decisions.requests[0].error == CANCELLED_OR_FAILED
        history = repository.history()
        assert [(r.payee, r.check_number) for r in history] == [("Acme", "1001"), ("Carol", "1002")]
        assert repository.current_balance(operating_ledger.ledger_id) == Decimal("880.00")

    def test_host_exception_is_a_failed_print(
        self, make_orchestrator, make_host, make_decisions, repository,
        operating_ledger, standard_profile,
    ):
        host = make_host([RuntimeError("spooler offline")])
        decisions = make_decisions([SKIP])
        orchestrator = make_orchestrator(host=host, decisions=decisions)

        summary, _ = _run(orchestrator, [_item("Acme", "10")], standard_profile, operating_ledger)

        assert decisions.requests[0].error == "spooler offline"
        assert summary.failed == 1
        assert repository.history() == []
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1001

    def test_failed_item_ledger_still_provisioned(
        self, make_orchestrator, make_host, make_decisions, repository,
        operating_ledger, standard_profile,
    ):
        host = make_host([PrintResult.failed("jam")])
        orchestrator = make_orchestrator(host=host, decisions=make_decisions([SKIP]))

        _run(orchestrator, [_item("Acme", "10", "Payroll")], standard_profile, operating_ledger)

        payroll = repository.find_ledger_by_name("Payroll")
        assert payroll is not None
        assert repository.current_balance(payroll.ledger_id) == Decimal("0")


class TestCheckNumbers:

    @pytest.mark.parametrize(
        "outcomes, decisions, expected_processed",
        [
            ([], [], 4),
            ([PrintResult.failed("x")], [SKIP], 3),
            ([PrintResult.ok(), PrintResult.failed("x"), PrintResult.failed("y")], [SKIP, SKIP], 2),
            ([PrintResult.ok(), PrintResult.ok(), PrintResult.failed("x")], [ABORT], 2),
        ],
    )
    def test_next_number_is_start_plus_processed(
        self, make_orchestrator, make_host, make_decisions, repository,
        operating_ledger, standard_profile, outcomes, decisions, expected_processed,
    ):
        orchestrator = make_orchestrator(host=make_host(outcomes), decisions=make_decisions(decisions))
        items = [_item(f"Payee {n}", "5") for n in range(4)] + [_item("", "5")]

        summary, _ = _run(orchestrator, items, standard_profile, operating_ledger)

        assert summary.processed == expected_processed
        assert repository.get_profile(standard_profile.profile_id).next_check_number == (
            1001 + expected_processed
        )
        numbers = [int(r.check_number) for r in repository.history()]
        assert numbers == list(range(1001, 1001 + expected_processed))

    def test_start_number_override(
        self, make_orchestrator, repository, operating_ledger, standard_profile,
    ):
        orchestrator = make_orchestrator()
        _run(
            orchestrator,
            [_item("Acme", "1"), _item("Bob", "1")],
            standard_profile,
            operating_ledger,
            start_number=4000,
        )
        assert [r.check_number for r in repository.history()] == ["4000", "4001"]
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 4002

    def test_manual_numbers_leave_counter_alone(
        self, make_orchestrator, repository, operating_ledger, standard_profile,
    ):
        orchestrator = make_orchestrator()
        _run(
            orchestrator,
            [_item("Acme", "1", check_number="77"), _item("Bob", "1")],
            standard_profile,
            operating_ledger,
            auto_number=False,
        )
        assert [r.check_number for r in repository.history()] == ["77", None]
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1001

    def test_auto_number_default_from_preferences(
        self, make_orchestrator, repository, operating_ledger, standard_profile, preferences,
    ):
        orchestrator = make_orchestrator(prefs=replace(preferences, auto_number=False))
        _run(orchestrator, [_item("Acme", "1", check_number="12")], standard_profile, operating_ledger)
        assert repository.history()[0].check_number == "12"
        assert repository.get_profile(standard_profile.profile_id).next_check_number == 1001
