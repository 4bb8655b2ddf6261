"""
Date helpers for history reporting and exports.
"""

import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union

DateLike = Union[date, datetime, str, None]


def today() -> date:
    return date.today()


def to_date(value: DateLike) -> Optional[date]:
    """
    Coerce a date, datetime or ISO string to a date.

    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def format_display_date(value: DateLike, fmt: str = "%d/%m/%Y") -> str:
    """Render a date the way the front desk reads it, blank when missing."""
    parsed = to_date(value)
    return parsed.strftime(fmt) if parsed else ""


def month_label(year: int, month: int) -> str:
    """Human month label, e.g. "March 2025"."""
    return f"{calendar.month_name[month]} {year}"


def month_key(value: DateLike) -> Optional[Tuple[int, int]]:
    parsed = to_date(value)
    return (parsed.year, parsed.month) if parsed else None


def year_bounds(year: int) -> Tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
