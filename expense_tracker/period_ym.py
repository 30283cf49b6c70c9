# expense_tracker/period_ym.py
"""
Helpers for working with calendar months.

Definitions
- month: "YYYY-MM", e.g., "2025-01" for Jan 2025
- occurred_at: "YYYY-MM-DD", the economic date of an expense

Dates are zero-padded strings, so plain string comparison orders them
correctly; month filtering relies on that.

Public API:
- parse_month("YYYY-MM") -> (year, month)
- month_range("YYYY-MM") -> MonthRange(start, end_exclusive)
- month_of("YYYY-MM-DD") -> "YYYY-MM"
- parse_occurred_at("YYYY-MM-DD") -> "YYYY-MM-DD"
- current_month(today=None) -> "YYYY-MM"
- month_reference_date("YYYY-MM", today=None) -> "YYYY-MM-DD"
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from expense_tracker.errors import ValidationError

__all__ = [
    "MonthRange",
    "parse_month",
    "month_range",
    "month_of",
    "parse_occurred_at",
    "current_month",
    "month_reference_date",
]

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class MonthRange:
    """Half-open interval [start, end_exclusive) of YYYY-MM-DD strings."""

    start: str
    end_exclusive: str


# ---------- Parsing / validation ----------


def parse_month(month: str) -> Tuple[int, int]:
    """'2025-03' -> (2025, 3). Raises ValidationError on anything else."""
    if not month or not isinstance(month, str):
        raise ValidationError("Month is required (YYYY-MM).")
    s = month.strip()
    if not _MONTH_RE.match(s):
        raise ValidationError("Invalid month; expected 'YYYY-MM'.")
    y, m = int(s[:4]), int(s[5:])
    if m < 1 or m > 12:
        raise ValidationError("Month must be 01–12")
    return y, m


def parse_occurred_at(value: Optional[str]) -> str:
    """Validate a YYYY-MM-DD date string and return it trimmed."""
    s = (value or "").strip()
    if not s:
        raise ValidationError("Please select a date.")
    if not _DATE_RE.match(s):
        raise ValidationError("Invalid date; expected 'YYYY-MM-DD'.")
    try:
        date.fromisoformat(s)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {s}") from exc
    return s


# ---------- Ranges ----------


def month_range(month: str) -> MonthRange:
    """
    '2024-01' -> [2024-01-01, 2024-02-01)
    '2024-12' -> [2024-12-01, 2025-01-01)
    """
    y, m = parse_month(month)
    ny, nm = (y + 1, 1) if m == 12 else (y, m + 1)
    return MonthRange(start=f"{y:04d}-{m:02d}-01", end_exclusive=f"{ny:04d}-{nm:02d}-01")


def month_of(occurred_at: str) -> str:
    """'2025-06-15' -> '2025-06'"""
    return parse_occurred_at(occurred_at)[:7]


def current_month(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"{d.year:04d}-{d.month:02d}"


def month_reference_date(month: str, today: Optional[date] = None) -> str:
    """
    Date used for a single whole-month conversion (e.g., budget currency alignment):
    the month's last day, but never later than today (no rates exist for the future).
    """
    y, m = parse_month(month)
    last = date(y, m, calendar.monthrange(y, m)[1])
    ref = min(last, today or date.today())
    return ref.isoformat()
