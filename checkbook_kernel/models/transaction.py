"""
ORM model for the append-only transaction history.

Rows are inserted and deleted, never updated (see db/immutability.py).
``seq`` is the append order; records sharing a timestamp (one three-up
sheet) keep their slot order through it.
The balance snapshot is flattened into three columns.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from checkbook_kernel.db.base import Base, UUIDString
from checkbook_kernel.domain.types import (
    BalanceSnapshot,
    SheetSlot,
    TransactionKind,
    TransactionRecord,
)

_MONEY = Numeric(18, 2, asdecimal=True)


class TransactionRecordModel(Base):
    """Persistent check / deposit / note record."""

    __tablename__ = "transaction_records"

    __table_args__ = (
        Index("ix_transaction_records_ledger", "ledger_id"),
        Index("ix_transaction_records_payee", "payee"),
        Index("ix_transaction_records_seq", "seq"),
    )

    seq: Mapped[int] = mapped_column(BigInteger, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    payee: Mapped[str] = mapped_column(String(300), nullable=False)
    amount: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    ledger_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("ledgers.id", ondelete="CASCADE"),
        nullable=False,
    )
    profile_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    check_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    gl_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    gl_description: Mapped[str | None] = mapped_column(String(300), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    external_memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    internal_memo: Mapped[str] = mapped_column(Text, nullable=False, default="")
    line_items_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    previous_balance: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    transaction_amount: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    new_balance: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sheet_slot: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def to_dto(self) -> TransactionRecord:
        return TransactionRecord(
            record_id=self.id,
            kind=TransactionKind(self.kind),
            date=self.date,
            payee=self.payee,
            amount=Decimal(self.amount),
            ledger_id=self.ledger_id,
            snapshot=BalanceSnapshot(
                previous_balance=Decimal(self.previous_balance),
                transaction_amount=Decimal(self.transaction_amount),
                new_balance=Decimal(self.new_balance),
            ),
            timestamp=self.timestamp,
            profile_id=self.profile_id,
            check_number=self.check_number,
            gl_code=self.gl_code,
            gl_description=self.gl_description,
            address=self.address,
            memo=self.memo or "",
            external_memo=self.external_memo or "",
            internal_memo=self.internal_memo or "",
            line_items_text=self.line_items_text or "",
            sheet_slot=SheetSlot(self.sheet_slot) if self.sheet_slot else None,
        )

    @classmethod
    def from_dto(cls, dto: TransactionRecord, *, seq: int) -> TransactionRecordModel:
        return cls(
            id=dto.record_id,
            seq=seq,
            kind=dto.kind.value,
            date=dto.date,
            payee=dto.payee,
            amount=dto.amount,
            ledger_id=dto.ledger_id,
            profile_id=dto.profile_id,
            check_number=dto.check_number,
            gl_code=dto.gl_code,
            gl_description=dto.gl_description,
            address=dto.address,
            memo=dto.memo,
            external_memo=dto.external_memo,
            internal_memo=dto.internal_memo,
            line_items_text=dto.line_items_text,
            previous_balance=dto.snapshot.previous_balance,
            transaction_amount=dto.snapshot.transaction_amount,
            new_balance=dto.snapshot.new_balance,
            timestamp=dto.timestamp,
            sheet_slot=dto.sheet_slot.value if dto.sheet_slot else None,
        )
