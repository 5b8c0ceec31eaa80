"""
ORM models for ledgers and profiles.

``LedgerModel.balance`` is the legacy cached balance column.  Services keep
it equal to the Balance Oracle's value; nothing reads it as the truth.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from checkbook_kernel.db.base import Base
from checkbook_kernel.domain.types import LayoutMode, Ledger, Profile


class LedgerModel(Base):
    """Persistent ledger."""

    __tablename__ = "ledgers"

    __table_args__ = (
        Index("ix_ledgers_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    starting_balance: Mapped[Decimal] = mapped_column(
        Numeric(18, 2, asdecimal=True), nullable=False, default=Decimal("0"),
    )
    lock_start: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(18, 2, asdecimal=True), nullable=False, default=Decimal("0"),
    )

    def to_dto(self) -> Ledger:
        return Ledger(
            ledger_id=self.id,
            name=self.name,
            starting_balance=Decimal(self.starting_balance or 0),
            lock_start=bool(self.lock_start),
            balance=Decimal(self.balance or 0),
        )

    @classmethod
    def from_dto(cls, dto: Ledger) -> LedgerModel:
        return cls(
            id=dto.ledger_id,
            name=dto.name,
            starting_balance=dto.starting_balance,
            lock_start=dto.lock_start,
            balance=dto.balance,
        )


class ProfileModel(Base):
    """Persistent check profile and its next-check-number counter."""

    __tablename__ = "profiles"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    layout_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LayoutMode.STANDARD.value,
    )
    next_check_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1001)

    def to_dto(self) -> Profile:
        return Profile(
            profile_id=self.id,
            name=self.name,
            layout_mode=LayoutMode(self.layout_mode),
            next_check_number=self.next_check_number,
        )

    @classmethod
    def from_dto(cls, dto: Profile) -> ProfileModel:
        return cls(
            id=dto.profile_id,
            name=dto.name,
            layout_mode=dto.layout_mode.value,
            next_check_number=dto.next_check_number,
        )
