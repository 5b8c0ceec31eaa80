"""
Check date normalisation.  ZERO I/O.

Queue dates come from spreadsheets: ISO strings, US or European slash
dates, long-form month names, or raw spreadsheet serial numbers (days
since 1899-12-30, the epoch that absorbs the 1900 leap-year bug).  All of
them become a ``datetime.date``; anything unrecognisable falls back to the
caller's "today".
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

SPREADSHEET_EPOCH = date(1899, 12, 30)

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SERIAL_RE = re.compile(r"^\d+(\.\d+)?$")

# Tried in order; US month-first wins over day-first for ambiguous dates.
_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

# Serial numbers outside this window are not treated as dates.
_MAX_SERIAL = 2958465  # 9999-12-31


def from_spreadsheet_serial(serial: float) -> date:
    """Convert a spreadsheet day serial to a calendar date (time part dropped)."""
    return SPREADSHEET_EPOCH + timedelta(days=int(serial))


def parse_date(value: object) -> date | None:
    """Parse a queue date value, or return None if it is not a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if 0 < value <= _MAX_SERIAL:
            return from_spreadsheet_serial(value)
        return None

    text = str(value).strip()
    if not text:
        return None
    if _ISO_RE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    if _SERIAL_RE.match(text):
        serial = float(text)
        if 0 < serial <= _MAX_SERIAL:
            return from_spreadsheet_serial(serial)
        return None
    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: object, today: date) -> date:
    """Canonical calendar date for a queue value; ``today`` when blank or unparsable."""
    parsed = parse_date(value)
    return parsed if parsed is not None else today
