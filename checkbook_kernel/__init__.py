"""
Checkbook Kernel

Persistence and pure domain core for a desktop check-printing ledger:
- Append-only transaction history
- Balances derived from history (no trusted running totals)
- Decimal money, normalised check dates
- Structured JSON logging
"""

__version__ = "0.1.0"
