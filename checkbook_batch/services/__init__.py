"""Batch print services: routing, print boundary, decisions, runners, commit."""

from checkbook_batch.services.commit import run_commit_phase
from checkbook_batch.services.decisions import DecisionProvider, OperatorDecisionGate
from checkbook_batch.services.ledger_router import LedgerRouter
from checkbook_batch.services.print_adapter import (
    PrintAdapter,
    PrintHost,
    generate_print_filename,
    validate_print_configuration,
)
from checkbook_batch.services.render_surface import InMemoryRenderSurface, RenderSurface
from checkbook_batch.services.session import BatchSession
from checkbook_batch.services.sheet_runner import SheetRunner
from checkbook_batch.services.standard_runner import StandardRunner

__all__ = [
    "BatchSession",
    "DecisionProvider",
    "InMemoryRenderSurface",
    "LedgerRouter",
    "OperatorDecisionGate",
    "PrintAdapter",
    "PrintHost",
    "RenderSurface",
    "SheetRunner",
    "StandardRunner",
    "generate_print_filename",
    "run_commit_phase",
    "validate_print_configuration",
]
