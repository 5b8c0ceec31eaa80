"""
Render surface boundary.

The batch engine stages what the next print call must render; the host
renders whatever is staged when ``PrintHost.deliver`` runs.  The real
surface belongs to the render subsystem; ``InMemoryRenderSurface`` is the
default and keeps every staged state for inspection.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from checkbook_batch.domain.types import PrintableCheck, PrintableSheet


@runtime_checkable
class RenderSurface(Protocol):
    """What the next print call renders."""

    @property
    def current(self) -> PrintableCheck | PrintableSheet | None: ...

    def stage_check(self, check: PrintableCheck) -> None: ...

    def stage_sheet(self, sheet: PrintableSheet) -> None: ...

    def reset(self) -> None: ...


class InMemoryRenderSurface:
    """Render surface that only remembers what was staged."""

    def __init__(self) -> None:
        self._current: PrintableCheck | PrintableSheet | None = None
        self.staged: list[PrintableCheck | PrintableSheet] = []
        self.reset_count = 0

    @property
    def current(self) -> PrintableCheck | PrintableSheet | None:
        return self._current

    def stage_check(self, check: PrintableCheck) -> None:
        self._current = check
        self.staged.append(check)

    def stage_sheet(self, sheet: PrintableSheet) -> None:
        self._current = sheet
        self.staged.append(sheet)

    def reset(self) -> None:
        self._current = None
        self.reset_count += 1
