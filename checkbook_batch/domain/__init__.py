"""
checkbook_batch.domain -- Pure types and value objects for batch printing.

ZERO I/O.
"""

from checkbook_batch.domain.types import (
    BatchProgress,
    BatchState,
    BatchSummary,
    ImportQueue,
    ImportQueueItem,
    PrintableCheck,
    PrintableSheet,
    PrinterInfo,
    PrintFailureDecision,
    PrintFailureDecisionNeeded,
    PrintRequest,
    PrintResult,
)

__all__ = [
    "BatchProgress",
    "BatchState",
    "BatchSummary",
    "ImportQueue",
    "ImportQueueItem",
    "PrintableCheck",
    "PrintableSheet",
    "PrinterInfo",
    "PrintFailureDecision",
    "PrintFailureDecisionNeeded",
    "PrintRequest",
    "PrintResult",
]
