# expense_tracker/currency.py
from __future__ import annotations

from typing import Optional

from expense_tracker.config import DEFAULT_CURRENCY


def normalize_currency(code: Optional[str]) -> str:
    """
    Canonical currency code: trimmed, upper-case, EUR when blank/missing.
    Old expense rows were stored without a currency, so this runs on every read too.
    """
    value = (code or "").strip().upper()
    return value or DEFAULT_CURRENCY


def same_currency(a: Optional[str], b: Optional[str]) -> bool:
    return normalize_currency(a) == normalize_currency(b)


def format_money(amount: float, code: Optional[str]) -> str:
    """12.5, 'usd' -> '12.50 USD'"""
    return f"{amount:.2f} {normalize_currency(code)}"
