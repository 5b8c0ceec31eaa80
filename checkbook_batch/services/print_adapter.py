"""
PrintAdapter -- the boundary between the batch engine and the platform's
print host.

Contract:
    ``PrintHost`` is implemented by the platform (OS print dialog, spooler,
    PDF writer).  ``PrintAdapter.print_current()`` builds the request for
    the configured ``PrintMode`` and always returns a ``PrintResult``: a
    raised exception or an unexplained failure becomes a failed result with
    operator-readable text.

    ``validate_print_configuration()`` runs before any queue walk and
    raises a ``ConfigurationError`` subclass when delivery cannot work.

Non-goals:
    - Does NOT retry.  Every failure goes to the operator.
    - Does NOT render anything; it prints whatever the surface has staged.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Protocol, runtime_checkable

from checkbook_batch.domain.types import PrinterInfo, PrintRequest, PrintResult
from checkbook_config.schema import BatchPrintPreferences, PrintMode
from checkbook_kernel.domain.amounts import sanitize_amount
from checkbook_kernel.exceptions import (
    PdfExportFolderMissingError,
    PrinterNotConfiguredError,
    PrinterNotFoundError,
)
from checkbook_kernel.logging_config import get_logger

logger = get_logger("batch.print_adapter")

CANCELLED_OR_FAILED = "Print was cancelled or failed"
UNKNOWN_PRINT_ERROR = "Unknown print error"

_FILENAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")


@runtime_checkable
class PrintHost(Protocol):
    """Platform print services."""

    async def deliver(self, request: PrintRequest) -> PrintResult: ...

    async def list_printers(self) -> list[PrinterInfo]: ...


def generate_print_filename(payee: str, check_date: date, amount: str, batch_index: int) -> str:
    """
    ``Check_<NNN>_<payee>_<date>_<cents>``, e.g.
    ``Check_001_Acme_Corp_2024-01-15_10000``.
    """
    safe_payee = _FILENAME_UNSAFE_RE.sub("_", payee or "Unknown")
    cents = f"{sanitize_amount(amount):.2f}".replace(".", "")
    return f"Check_{batch_index:03d}_{safe_payee}_{check_date.isoformat()}_{cents}"


async def validate_print_configuration(
    preferences: BatchPrintPreferences,
    host: PrintHost,
) -> None:
    """
    Raise before the walk when the delivery mode cannot work.

    Raises:
        PrinterNotConfiguredError: Silent mode without a printer.
        PrinterNotFoundError: Silent mode printer not reported by the host.
        PdfExportFolderMissingError: PDF mode without an export folder.
    """
    if preferences.mode == PrintMode.SILENT:
        if not preferences.printer_device_name:
            raise PrinterNotConfiguredError()
        printers = await host.list_printers()
        names = [p.name for p in printers]
        if preferences.printer_device_name not in names:
            raise PrinterNotFoundError(preferences.printer_device_name, names)
    elif preferences.mode == PrintMode.PDF:
        if not preferences.pdf_export_path:
            raise PdfExportFolderMissingError()


class PrintAdapter:
    """Delivers the currently staged surface through the host."""

    def __init__(self, host: PrintHost, preferences: BatchPrintPreferences) -> None:
        self._host = host
        self._preferences = preferences

    @property
    def host(self) -> PrintHost:
        return self._host

    @property
    def mode(self) -> PrintMode:
        return self._preferences.mode

    def build_request(self, filename: str) -> PrintRequest:
        prefs = self._preferences
        if prefs.mode == PrintMode.PDF:
            return PrintRequest(
                mode=PrintMode.PDF, filename=filename, folder_path=prefs.pdf_export_path,
            )
        if prefs.mode == PrintMode.SILENT and prefs.printer_device_name:
            return PrintRequest(
                mode=PrintMode.SILENT, filename=filename, device_name=prefs.printer_device_name,
            )
        return PrintRequest(mode=PrintMode.INTERACTIVE, filename=filename)

    async def print_current(self, filename: str) -> PrintResult:
        request = self.build_request(filename)
        try:
            result = await self._host.deliver(request)
        except Exception as exc:
            logger.warning(
                "print_delivery_raised",
                extra={"print_filename": filename, "print_mode": request.mode.value},
                exc_info=True,
            )
            return PrintResult.failed(str(exc) or UNKNOWN_PRINT_ERROR)

        if not result.success:
            return PrintResult.failed(result.error or CANCELLED_OR_FAILED)
        return result
