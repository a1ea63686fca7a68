"""Normalization of spreadsheet dates and numbers."""

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_FALLBACK_YEAR = 2026

_GVIZ_DATE = re.compile(r"^Date\((\d{1,4}),(\d{1,2}),(\d{1,2})(?:,[\d,\s]*)?\)$")
_SLASH_FULL = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_SLASH_PARTIAL = re.compile(r"^(\d{1,2})/(\d{1,2})$")
_CANONICAL = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def normalize_date(
    raw: object, fallback_year: int = DEFAULT_FALLBACK_YEAR
) -> str | None:
    """Return a canonical ``YYYY-MM-DD`` string, or None when unparseable.

    Accepted shapes, in priority order:
    - ``Date(2026,0,8)`` from the gviz export (month is zero-based)
    - ``2026/1/8``
    - ``1/8`` (year taken from ``fallback_year``)
    - ``date`` / ``datetime`` values (date portion only)
    - ``2026-01-08`` (already canonical)
    """
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None

    match = _GVIZ_DATE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build_date(year, month + 1, day)
    match = _SLASH_FULL.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build_date(year, month, day)
    match = _SLASH_PARTIAL.match(text)
    if match:
        month, day = (int(part) for part in match.groups())
        return _build_date(fallback_year, month, day)
    match = _CANONICAL.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _build_date(year, month, day)
    return None


def _build_date(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_number(raw: object) -> float | None:
    """Parse a cell into a float; empty and non-numeric cells are None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(value):
        return None
    return value


def normalize_int(raw: object) -> int | None:
    """Parse a cell into an int (rounded half up), or None."""
    value = normalize_number(raw)
    if value is None:
        return None
    return int(round_half_up(value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the dashboard does: halves go up, towards +infinity."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def format_fixed(value: float, digits: int) -> str:
    """Format with a fixed number of decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def is_positive(value: float | None) -> bool:
    """True when a measurement is present and greater than zero."""
    return value is not None and value > 0
