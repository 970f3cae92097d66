"""Date parsing for statement rows.

Statement dates arrive as day-precision strings in a handful of layouts.
Day-first layouts are tried before anything else because the source
statements are Indian (``05/01/2025`` is 5 January).
"""

import re
from datetime import date, datetime
from typing import NamedTuple

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_DATE_FORMATS = (
    "%d/%m/%Y",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d/%m/%y",
    "%d-%m-%y",
    "%d %b %Y",
    "%d-%b-%Y",
    "%d %b %y",
    "%d-%b-%y",
)

_ISO_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")
_SEPARATORS = re.compile(r"[/\-]")


class MonthKey(NamedTuple):
    """Sortable bucket key plus its display label.

    ``key`` is ``YYYY-MM`` so plain string order is calendar order;
    ``label`` is the short form shown on charts (``"Jan 25"``).
    """

    key: str
    label: str


UNKNOWN_MONTH = MonthKey("Unknown", "Unknown")


def parse_date(value: str | None) -> date | None:
    """Parse a statement date, returning ``None`` when no layout fits."""
    text = (value or "").strip()
    if not text:
        return None

    iso = _ISO_TIMESTAMP.match(text)
    if iso:
        text = iso.group(1)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _make_month_key(year: int, month: int) -> MonthKey:
    return MonthKey(f"{year:04d}-{month:02d}", f"{MONTH_ABBREVIATIONS[month - 1]} {year % 100:02d}")


def _month_key_from_parts(value: str) -> MonthKey:
    """Rebuild a month from numeric date parts when full parsing failed.

    Handles partial or out-of-range dates such as ``12/2024`` or
    ``31/02/2025``: the year is the four-digit leading part or else the last
    part, and the month is the part next to it.
    """
    parts = [part for part in _SEPARATORS.split(value.strip()) if part]
    if len(parts) < 2 or not all(part.isdigit() for part in parts):
        return UNKNOWN_MONTH

    if len(parts[0]) == 4:
        year_part, month_part = parts[0], parts[1]
    else:
        year_part, month_part = parts[-1], parts[-2]

    month = int(month_part)
    if not 1 <= month <= 12:
        return UNKNOWN_MONTH

    if len(year_part) == 2:
        year = 2000 + int(year_part)
    elif len(year_part) == 4:
        year = int(year_part)
    else:
        return UNKNOWN_MONTH

    return _make_month_key(year, month)


def month_key(value: str | None) -> MonthKey:
    """Bucket key for the calendar month of ``value``.

    Falls back to part-wise reconstruction, then to ``UNKNOWN_MONTH``.
    """
    parsed = parse_date(value)
    if parsed is not None:
        return _make_month_key(parsed.year, parsed.month)
    if not value:
        return UNKNOWN_MONTH
    return _month_key_from_parts(value)
