"""Read-only query selectors."""

from checkbook_kernel.selectors.base import BaseSelector
from checkbook_kernel.selectors.ledger_selector import LedgerSelector

__all__ = [
    "BaseSelector",
    "LedgerSelector",
]
