"""Kernel services (the write side)."""

from checkbook_kernel.services.ledger_repository import LedgerRepository

__all__ = ["LedgerRepository"]
