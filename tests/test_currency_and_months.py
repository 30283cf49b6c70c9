# tests/test_currency_and_months.py
from datetime import date

import pytest

from expense_tracker.currency import format_money, normalize_currency, same_currency
from expense_tracker.errors import ValidationError
from expense_tracker.period_ym import (
    current_month,
    month_of,
    month_range,
    month_reference_date,
    parse_occurred_at,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("usd", "USD"),
        ("  gbp ", "GBP"),
        ("EUR", "EUR"),
        ("", "EUR"),
        ("   ", "EUR"),
        (None, "EUR"),
    ],
)
def test_normalize_currency(raw, expected):
    assert normalize_currency(raw) == expected


@pytest.mark.parametrize("raw", ["usd", " Jpy", "", None, "eur "])
def test_normalize_currency_is_idempotent(raw):
    once = normalize_currency(raw)
    assert normalize_currency(once) == once


def test_same_currency_ignores_case_and_blank():
    assert same_currency(" usd", "USD")
    assert same_currency(None, "eur")
    assert not same_currency("USD", "EUR")


def test_format_money_two_decimals():
    assert format_money(12.5, "usd") == "12.50 USD"
    assert format_money(140, None) == "140.00 EUR"


def test_month_range_regular_month():
    rng = month_range("2024-01")
    assert rng.start == "2024-01-01"
    assert rng.end_exclusive == "2024-02-01"


def test_month_range_december_rolls_over_year():
    rng = month_range("2024-12")
    assert rng.start == "2024-12-01"
    assert rng.end_exclusive == "2025-01-01"


@pytest.mark.parametrize("bad", ["2024-13", "2024-00", "24-01", "2024/01", "", "2024-1"])
def test_bad_months_rejected(bad):
    with pytest.raises(ValidationError):
        month_range(bad)


def test_occurred_at_validation():
    assert parse_occurred_at(" 2024-03-05 ") == "2024-03-05"
    assert month_of("2024-03-05") == "2024-03"
    for bad in ["", None, "2024-3-5", "2024-02-30", "20240305"]:
        with pytest.raises(ValidationError):
            parse_occurred_at(bad)


def test_current_month():
    assert current_month(date(2025, 1, 9)) == "2025-01"


def test_month_reference_date_is_capped_at_today():
    assert month_reference_date("2024-02", today=date(2025, 1, 1)) == "2024-02-29"
    assert month_reference_date("2025-01", today=date(2025, 1, 9)) == "2025-01-09"
