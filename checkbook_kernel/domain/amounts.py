"""
Amount parsing and check-style amount words.  ZERO I/O.

Queue amounts arrive as free text from spreadsheets ("$1,250.00",
" 75 ", "").  They are sanitised into Decimal cents; anything that does
not parse is zero, which the batch engine treats as an invalid item.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")

_STRIP_RE = re.compile(r"[$,\s]")

_ONES = (
    "Zero", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight",
    "Nine", "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
    "Sixteen", "Seventeen", "Eighteen", "Nineteen",
)
_TENS = (
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy",
    "Eighty", "Ninety",
)


def quantize_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def sanitize_amount(value: str | int | float | Decimal | None) -> Decimal:
    """Parse a currency string into Decimal cents.

    Strips ``$``, commas and whitespace.  Empty, None or unparsable input
    gives ``Decimal("0.00")``.
    """
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        parsed = Decimal(repr(value))
    else:
        cleaned = _STRIP_RE.sub("", str(value))
        if not cleaned:
            return Decimal("0.00")
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation:
            return Decimal("0.00")
    if not parsed.is_finite():
        return Decimal("0.00")
    try:
        return quantize_cents(parsed)
    except InvalidOperation:
        # Too many digits for the context precision
        return Decimal("0.00")


def _int_to_words(n: int) -> str:
    if n < 20:
        return _ONES[n]
    if n < 100:
        tens, rest = divmod(n, 10)
        return f"{_TENS[tens]}-{_ONES[rest]}" if rest else _TENS[tens]
    if n < 1000:
        hundreds, rest = divmod(n, 100)
        head = f"{_ONES[hundreds]} Hundred"
        return f"{head} {_int_to_words(rest)}" if rest else head
    for size, label in ((1_000_000_000, "Billion"), (1_000_000, "Million"), (1000, "Thousand")):
        if n >= size:
            high, rest = divmod(n, size)
            head = f"{_int_to_words(high)} {label}"
            return f"{head} {_int_to_words(rest)}" if rest else head
    return str(n)


def amount_to_words(value: str | Decimal | None) -> str:
    """US check style: ``"One Hundred Twenty-Three and 45/100"``.

    Returns an empty string when the input is not a number.
    """
    if value is None:
        return ""
    if isinstance(value, Decimal):
        amount = value
    else:
        cleaned = _STRIP_RE.sub("", str(value))
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return ""
    if not amount.is_finite():
        return ""
    amount = quantize_cents(abs(amount))
    dollars = int(amount)
    cents = int((amount - dollars) * 100)
    return f"{_int_to_words(dollars)} and {cents:02d}/100"
