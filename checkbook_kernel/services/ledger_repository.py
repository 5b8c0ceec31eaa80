"""
LedgerRepository -- the only write path into ledgers, profiles and history.

Responsibility:
    Creates ledgers and profiles, appends and deletes history records, and
    applies a finished batch in one transaction (``commit_batch``).  Reads
    are delegated to ``LedgerSelector``.

Architecture position:
    Kernel > Services.  Called by the batch Commit Phase and by single-record
    callers (manual check, deposit, note).

Invariants enforced:
    - The Balance Oracle is the only source of truth for a balance.  After
      every write the affected ledgers' cached ``balance`` column is
      overwritten with the Oracle value; a differing caller-side value is
      logged as ``ledger_balance_drift`` and discarded.
    - History is append-only.  Deletion is the only mutation.
      Constructing a repository installs the append-only listener.
    - Every snapshot satisfies new = previous - amount (check) or
      previous + amount (deposit); notes leave the balance unchanged.

Failure modes:
    - InvalidTransactionError: non-positive amount or blank payee/description.
    - LedgerNotFoundError / ProfileNotFoundError / TransactionNotFoundError.
    - DuplicateLedgerError: name already used (case-insensitive).
    - Any database error rolls the session back and propagates.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import delete
from sqlalchemy.orm import Session

from checkbook_kernel.db.immutability import register_immutability_listeners
from checkbook_kernel.domain.amounts import quantize_cents, sanitize_amount
from checkbook_kernel.domain.balance import ZERO, build_snapshot
from checkbook_kernel.domain.clock import Clock, SystemClock
from checkbook_kernel.domain.dates import normalize_date
from checkbook_kernel.domain.types import (
    LayoutMode,
    Ledger,
    Profile,
    TransactionKind,
    TransactionRecord,
)
from checkbook_kernel.exceptions import (
    DuplicateLedgerError,
    InvalidTransactionError,
    LedgerNotFoundError,
    ProfileNotFoundError,
    TransactionNotFoundError,
)
from checkbook_kernel.logging_config import LogContext, get_logger
from checkbook_kernel.models.ledger import LedgerModel, ProfileModel
from checkbook_kernel.models.transaction import TransactionRecordModel
from checkbook_kernel.selectors.ledger_selector import LedgerSelector

logger = get_logger("services.ledger_repository")

_DEFAULT_NAME_RE = re.compile(r"^Ledger (\d+)$")


class LedgerRepository:
    """
    Persistence facade for the checkbook.

    Contract:
        Every public write commits the session before returning.  Reads
        never write.

    Non-goals:
        - Does NOT print or stage anything; the batch engine owns that.
        - Does NOT trust ``LedgerModel.balance`` for any computation.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._selector = LedgerSelector(session)
        register_immutability_listeners()

    @property
    def session(self) -> Session:
        return self._session

    # =========================================================================
    # Reads
    # =========================================================================

    def get_ledger(self, ledger_id: UUID) -> Ledger:
        ledger = self._selector.get_ledger(ledger_id)
        if ledger is None:
            raise LedgerNotFoundError(str(ledger_id))
        return ledger

    def list_ledgers(self) -> list[Ledger]:
        return self._selector.list_ledgers()

    def find_ledger_by_name(self, name: str) -> Ledger | None:
        return self._selector.find_ledger_by_name(name)

    def current_balance(self, ledger_id: UUID) -> Decimal:
        """Balance Oracle value for a persisted ledger (unknown -> 0)."""
        return self._selector.balance(ledger_id)

    def history(
        self,
        ledger_id: UUID | None = None,
        search: str | None = None,
    ) -> list[TransactionRecord]:
        return self._selector.history(ledger_id, search=search)

    def get_profile(self, profile_id: UUID) -> Profile:
        profile = self._selector.get_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        return profile

    def address_from_history(self, payee: str) -> str | None:
        """Address of the most recent check to the same payee, if any."""
        record = self._selector.latest_check_for_payee(payee, with_address=True)
        return record.address if record is not None else None

    def gl_details_from_history(self, payee: str) -> tuple[str | None, str | None]:
        """(gl_code, gl_description) of the most recent coded check to the payee."""
        record = self._selector.latest_check_for_payee(payee, with_gl=True)
        if record is None:
            return None, None
        return record.gl_code, record.gl_description

    # =========================================================================
    # Ledger and profile writes
    # =========================================================================

    def create_ledger(
        self,
        name: str | None = None,
        starting_balance: Decimal | str = ZERO,
        lock_start: bool = True,
    ) -> Ledger:
        """
        Create a ledger.  Without a name the next free "Ledger N" is used.

        Raises:
            DuplicateLedgerError: A ledger with this name exists (any case).
        """
        name = (name or "").strip() or self._next_default_name()
        existing = self._selector.find_ledger_by_name(name)
        if existing is not None:
            raise DuplicateLedgerError(name, str(existing.ledger_id))

        start = sanitize_amount(starting_balance)
        model = LedgerModel(
            id=uuid4(),
            name=name,
            starting_balance=start,
            lock_start=lock_start,
            balance=start,
        )
        self._session.add(model)
        self._commit()
        with LogContext.bind(ledger_id=str(model.id)):
            logger.info("ledger_created", extra={"ledger_name": name})
        return model.to_dto()

    def rename_ledger(self, ledger_id: UUID, name: str) -> Ledger:
        model = self._ledger_model(ledger_id)
        name = name.strip()
        existing = self._selector.find_ledger_by_name(name)
        if existing is not None and existing.ledger_id != ledger_id:
            raise DuplicateLedgerError(name, str(existing.ledger_id))
        model.name = name
        self._commit()
        return model.to_dto()

    def set_starting_balance(self, ledger_id: UUID, amount: Decimal | str) -> Ledger:
        model = self._ledger_model(ledger_id)
        model.starting_balance = sanitize_amount(amount)
        self._refresh_cached_balances([ledger_id])
        self._commit()
        with LogContext.bind(ledger_id=str(ledger_id)):
            logger.info(
                "ledger_starting_balance_set",
                extra={"starting_balance": model.starting_balance},
            )
        return model.to_dto()

    def toggle_ledger_lock(self, ledger_id: UUID) -> Ledger:
        model = self._ledger_model(ledger_id)
        model.lock_start = not model.lock_start
        self._commit()
        return model.to_dto()

    def reset_ledger(self, ledger_id: UUID) -> Ledger:
        """Delete the ledger's history and zero its starting balance."""
        model = self._ledger_model(ledger_id)
        self._session.execute(
            delete(TransactionRecordModel).where(TransactionRecordModel.ledger_id == ledger_id),
        )
        model.starting_balance = ZERO
        model.balance = ZERO
        self._commit()
        with LogContext.bind(ledger_id=str(ledger_id)):
            logger.info("ledger_reset")
        return model.to_dto()

    def create_profile(
        self,
        name: str,
        layout_mode: LayoutMode = LayoutMode.STANDARD,
        next_check_number: int = 1001,
    ) -> Profile:
        model = ProfileModel(
            id=uuid4(),
            name=name,
            layout_mode=LayoutMode(layout_mode).value,
            next_check_number=next_check_number,
        )
        self._session.add(model)
        self._commit()
        return model.to_dto()

    def set_next_check_number(self, profile_id: UUID, next_check_number: int) -> Profile:
        model = self._profile_model(profile_id)
        model.next_check_number = next_check_number
        self._commit()
        return model.to_dto()

    # =========================================================================
    # Single-record writes
    # =========================================================================

    def record_check(
        self,
        ledger_id: UUID,
        payee: str,
        amount: Decimal | str,
        *,
        check_date: date | str | None = None,
        check_number: str | None = None,
        profile_id: UUID | None = None,
        memo: str = "",
        external_memo: str = "",
        internal_memo: str = "",
        line_items_text: str = "",
        gl_code: str | None = None,
        gl_description: str | None = None,
        address: str | None = None,
    ) -> TransactionRecord:
        """
        Append a check against the ledger's derived balance.

        Raises:
            InvalidTransactionError: amount <= 0 or blank payee.
            LedgerNotFoundError: Unknown ledger.
        """
        value = sanitize_amount(amount)
        if value <= ZERO:
            raise InvalidTransactionError("amount must be greater than zero")
        if not (payee or "").strip():
            raise InvalidTransactionError("payee is required")

        return self._append_single(
            kind=TransactionKind.CHECK,
            ledger_id=ledger_id,
            payee=payee.strip(),
            amount=value,
            when=check_date,
            profile_id=profile_id,
            check_number=check_number or None,
            gl_code=gl_code or None,
            gl_description=gl_description or None,
            address=address or None,
            memo=memo or "",
            external_memo=external_memo or "",
            internal_memo=internal_memo or "",
            line_items_text=line_items_text or "",
        )

    def record_deposit(
        self,
        ledger_id: UUID,
        description: str,
        amount: Decimal | str,
        *,
        deposit_date: date | str | None = None,
        profile_id: UUID | None = None,
    ) -> TransactionRecord:
        """
        Append a deposit or adjustment.  The description is stored as both
        payee and memo.

        Raises:
            InvalidTransactionError: amount <= 0 or blank description.
        """
        value = sanitize_amount(amount)
        if value <= ZERO:
            raise InvalidTransactionError("amount must be greater than zero")
        if not (description or "").strip():
            raise InvalidTransactionError("description is required")

        description = description.strip()
        return self._append_single(
            kind=TransactionKind.DEPOSIT,
            ledger_id=ledger_id,
            payee=description,
            amount=value,
            when=deposit_date,
            profile_id=profile_id,
            memo=description,
        )

    def record_note(
        self,
        ledger_id: UUID,
        text: str,
        *,
        note_date: date | str | None = None,
        profile_id: UUID | None = None,
    ) -> TransactionRecord:
        """Append a zero-effect annotation to the ledger's history."""
        if not (text or "").strip():
            raise InvalidTransactionError("note text is required")
        return self._append_single(
            kind=TransactionKind.NOTE,
            ledger_id=ledger_id,
            payee=text.strip(),
            amount=ZERO,
            when=note_date,
            profile_id=profile_id,
            memo=text.strip(),
        )

    def delete_transaction(self, record_id: UUID) -> TransactionRecord:
        """
        Remove a record.  The ledger balance corrects itself because it is
        re-derived from the remaining history.
        """
        model = self._session.get(TransactionRecordModel, record_id)
        if model is None:
            raise TransactionNotFoundError(str(record_id))
        record = model.to_dto()
        self._session.delete(model)
        self._session.flush()
        self._refresh_cached_balances([record.ledger_id])
        self._commit()
        with LogContext.bind(ledger_id=str(record.ledger_id)):
            logger.info(
                "transaction_deleted",
                extra={
                    "record_id": str(record_id),
                    "kind": record.kind.value,
                    "amount": record.amount,
                },
            )
        return record

    # =========================================================================
    # Batch write
    # =========================================================================

    def commit_batch(
        self,
        new_ledgers: Sequence[Ledger],
        local_balances: Mapping[UUID, Decimal],
        records: Sequence[TransactionRecord],
        profile_id: UUID | None = None,
        next_check_number: int | None = None,
    ) -> None:
        """
        Apply a finished batch in one database transaction.

        Inserts the ledgers provisioned during the batch, appends the
        records in order, stores the profile's next check number when given,
        and reconciles each touched ledger's cached balance against the
        Oracle.
        """
        try:
            for ledger in new_ledgers:
                self._session.add(LedgerModel.from_dto(ledger))
            self._session.flush()

            seq = self._selector.max_seq()
            for record in records:
                seq += 1
                self._session.add(TransactionRecordModel.from_dto(record, seq=seq))

            if profile_id is not None and next_check_number is not None:
                profile = self._profile_model(profile_id)
                profile.next_check_number = next_check_number

            self._session.flush()

            touched = list(local_balances)
            touched += [r.ledger_id for r in records if r.ledger_id not in local_balances]
            self._refresh_cached_balances(touched, expected=local_balances)

            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "batch_persisted",
            extra={
                "new_ledger_count": len(new_ledgers),
                "record_count": len(records),
                "profile_id": str(profile_id) if profile_id else None,
                "next_check_number": next_check_number,
            },
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _append_single(
        self,
        *,
        kind: TransactionKind,
        ledger_id: UUID,
        payee: str,
        amount: Decimal,
        when: date | str | None,
        profile_id: UUID | None,
        **fields: object,
    ) -> TransactionRecord:
        self._ledger_model(ledger_id)
        previous = self.current_balance(ledger_id)
        record = TransactionRecord(
            record_id=uuid4(),
            kind=kind,
            date=normalize_date(when, self._clock.today()),
            payee=payee,
            amount=quantize_cents(amount),
            ledger_id=ledger_id,
            snapshot=build_snapshot(kind, previous, quantize_cents(amount)),
            timestamp=self._clock.now(),
            profile_id=profile_id,
            **fields,
        )
        self._session.add(
            TransactionRecordModel.from_dto(record, seq=self._selector.max_seq() + 1),
        )
        self._session.flush()
        self._refresh_cached_balances([ledger_id])
        self._commit()
        with LogContext.bind(ledger_id=str(ledger_id)):
            logger.info(
                "transaction_recorded",
                extra={
                    "record_id": str(record.record_id),
                    "kind": kind.value,
                    "amount": record.amount,
                    "new_balance": record.snapshot.new_balance,
                },
            )
        return record

    def _refresh_cached_balances(
        self,
        ledger_ids: Iterable[UUID],
        expected: Mapping[UUID, Decimal] | None = None,
    ) -> None:
        seen: set[UUID] = set()
        for ledger_id in ledger_ids:
            if ledger_id in seen:
                continue
            seen.add(ledger_id)
            model = self._session.get(LedgerModel, ledger_id)
            if model is None:
                continue
            oracle = self._selector.balance(ledger_id)
            if expected is not None and ledger_id in expected:
                local = expected[ledger_id]
                if local != oracle:
                    with LogContext.bind(ledger_id=str(ledger_id)):
                        logger.warning(
                            "ledger_balance_drift",
                            extra={"local_balance": local, "oracle_balance": oracle},
                        )
            model.balance = oracle

    def _next_default_name(self) -> str:
        numbers = [
            int(m.group(1))
            for m in (_DEFAULT_NAME_RE.match(l.name) for l in self.list_ledgers())
            if m is not None
        ]
        return f"Ledger {max(numbers, default=0) + 1}"

    def _ledger_model(self, ledger_id: UUID) -> LedgerModel:
        model = self._session.get(LedgerModel, ledger_id)
        if model is None:
            raise LedgerNotFoundError(str(ledger_id))
        return model

    def _profile_model(self, profile_id: UUID) -> ProfileModel:
        model = self._session.get(ProfileModel, profile_id)
        if model is None:
            raise ProfileNotFoundError(str(profile_id))
        return model

    def _commit(self) -> None:
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
