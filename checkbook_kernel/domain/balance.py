"""
Balance Oracle -- derived ledger balances.

Responsibility:
    Computes a ledger's spendable balance from its starting balance and its
    transaction history.  There is no running total anywhere that the
    oracle trusts: every call walks the history it is given.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  The repository
    loads history and calls ``compute_balance``.

Deleting any subset of records and recomputing gives the correct balance
for the remaining history, which is why deletion is the only mutation
records support.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from checkbook_kernel.domain.types import BalanceSnapshot, TransactionKind, TransactionRecord

ZERO = Decimal("0")


def signed_amount(kind: TransactionKind, amount: Decimal) -> Decimal:
    """Contribution of one record to its ledger's balance."""
    if kind == TransactionKind.DEPOSIT:
        return amount
    if kind == TransactionKind.CHECK:
        return -amount
    return ZERO


def compute_balance(
    starting_balance: Decimal,
    records: Iterable[TransactionRecord],
    ledger_id: UUID,
) -> Decimal:
    """starting_balance + sum(deposits) - sum(checks) for ``ledger_id``.

    Records belonging to other ledgers are ignored.  No history -> the
    starting balance.
    """
    total = starting_balance
    for record in records:
        if record.ledger_id != ledger_id:
            continue
        total += signed_amount(record.kind, record.amount)
    return total


def apply_to_balance(
    kind: TransactionKind,
    previous_balance: Decimal,
    amount: Decimal,
) -> Decimal:
    return previous_balance + signed_amount(kind, amount)


def build_snapshot(
    kind: TransactionKind,
    previous_balance: Decimal,
    amount: Decimal,
) -> BalanceSnapshot:
    """Snapshot satisfying new = previous - amount (check) / + amount (deposit)."""
    return BalanceSnapshot(
        previous_balance=previous_balance,
        transaction_amount=amount,
        new_balance=apply_to_balance(kind, previous_balance, amount),
    )
