"""
Module: checkbook_kernel.selectors.ledger_selector
Responsibility: Read-only ledger and history queries, including the derived
    balance.  The stored ``LedgerModel.balance`` column is never read here;
    every balance is recomputed from history by the Balance Oracle.
Architecture position: Kernel > Selectors.

Failure modes:
    - Lookups return None (or an empty list) rather than raising.  The
      repository decides which absences are errors.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, select

from checkbook_kernel.domain.balance import ZERO, compute_balance
from checkbook_kernel.domain.types import Ledger, Profile, TransactionKind, TransactionRecord
from checkbook_kernel.models.ledger import LedgerModel, ProfileModel
from checkbook_kernel.models.transaction import TransactionRecordModel
from checkbook_kernel.selectors.base import BaseSelector


def _normalize_name(name: str) -> str:
    return name.strip().lower()


class LedgerSelector(BaseSelector[LedgerModel]):
    """
    Selector for ledgers, profiles and transaction history.

    History is always returned in append order (``seq`` ascending).
    """

    # -- Ledgers ------------------------------------------------------------

    def get_ledger(self, ledger_id: UUID) -> Ledger | None:
        model = self.session.get(LedgerModel, ledger_id)
        return model.to_dto() if model is not None else None

    def list_ledgers(self) -> list[Ledger]:
        stmt = select(LedgerModel).order_by(LedgerModel.name, LedgerModel.id)
        return [m.to_dto() for m in self.session.scalars(stmt)]

    def find_ledger_by_name(self, name: str) -> Ledger | None:
        """Case-insensitive, whitespace-trimmed match."""
        key = _normalize_name(name or "")
        if not key:
            return None
        for ledger in self.list_ledgers():
            if _normalize_name(ledger.name) == key:
                return ledger
        return None

    def balance(self, ledger_id: UUID) -> Decimal:
        """Derived balance; an unknown ledger has balance zero."""
        ledger = self.get_ledger(ledger_id)
        if ledger is None:
            return ZERO
        return compute_balance(ledger.starting_balance, self.history(ledger_id), ledger_id)

    # -- Profiles -----------------------------------------------------------

    def get_profile(self, profile_id: UUID) -> Profile | None:
        model = self.session.get(ProfileModel, profile_id)
        return model.to_dto() if model is not None else None

    # -- History ------------------------------------------------------------

    def history(
        self,
        ledger_id: UUID | None = None,
        search: str | None = None,
    ) -> list[TransactionRecord]:
        """
        Records in append order, optionally for one ledger.

        ``search`` matches payee or memo case-insensitively, or the amount's
        text.
        """
        stmt = select(TransactionRecordModel).order_by(TransactionRecordModel.seq)
        if ledger_id is not None:
            stmt = stmt.where(TransactionRecordModel.ledger_id == ledger_id)
        records = [m.to_dto() for m in self.session.scalars(stmt)]
        if search:
            term = search.strip().lower()
            records = [
                r for r in records
                if term in r.payee.lower()
                or term in r.memo.lower()
                or term in str(r.amount)
            ]
        return records

    def max_seq(self) -> int:
        return self.session.scalar(select(func.max(TransactionRecordModel.seq))) or 0

    def latest_check_for_payee(
        self,
        payee: str,
        *,
        with_address: bool = False,
        with_gl: bool = False,
    ) -> TransactionRecord | None:
        """Most recent check written to ``payee`` (case-insensitive)."""
        key = _normalize_name(payee or "")
        if not key:
            return None
        stmt = (
            select(TransactionRecordModel)
            .where(func.lower(func.trim(TransactionRecordModel.payee)) == key)
            .where(TransactionRecordModel.kind == TransactionKind.CHECK.value)
            .order_by(TransactionRecordModel.seq.desc())
        )
        if with_address:
            stmt = stmt.where(TransactionRecordModel.address.is_not(None)).where(
                TransactionRecordModel.address != "",
            )
        if with_gl:
            stmt = stmt.where(
                or_(
                    TransactionRecordModel.gl_code.is_not(None),
                    TransactionRecordModel.gl_description.is_not(None),
                ),
            )
        model = self.session.scalars(stmt.limit(1)).first()
        return model.to_dto() if model is not None else None
