# tests/test_fx.py
"""
FX converter against a stubbed daily-rate source (no network).
"""

from __future__ import annotations

import asyncio
import math

import httpx
import pytest

from expense_tracker.errors import FxLookupError
from expense_tracker.services.fx import FxConverter


def run(coro):
    return asyncio.run(coro)


def test_same_currency_is_identity_without_io(fx, fx_source):
    assert run(fx.get_rate("2024-03-01", "usd", " USD ")) == 1.0
    assert run(fx.convert("2024-03-01", 42.5, "EUR", "eur")) == 42.5
    assert fx_source.calls == []
    assert len(fx.cache) == 0


def test_rate_is_fetched_once_then_cached(fx, fx_source):
    fx_source.rates[("2024-03-01", "USD", "EUR")] = 0.9

    assert run(fx.convert("2024-03-01", 100, "usd", "eur")) == pytest.approx(90.0)
    assert run(fx.convert("2024-03-01", 10, "USD", "EUR")) == pytest.approx(9.0)

    assert fx_source.calls == [("2024-03-01", "USD", "EUR")]
    assert fx.cache[("2024-03-01", "USD", "EUR")] == 0.9


def test_rates_are_cached_per_date(fx, fx_source):
    fx_source.rates[("2024-03-01", "USD", "EUR")] = 0.9
    fx_source.rates[("2024-04-01", "USD", "EUR")] = 0.8

    a = run(fx.convert("2024-03-01", 100, "USD", "EUR"))
    b = run(fx.convert("2024-04-01", 100, "USD", "EUR"))

    assert a == pytest.approx(90.0)
    assert b == pytest.approx(80.0)
    assert len(fx_source.calls) == 2


def test_preseeded_cache_skips_network(fx_source):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(fx_source), base_url="https://fx.test/v1"
    )
    fx = FxConverter(client, cache={("2024-05-02", "GBP", "EUR"): 1.25})

    assert run(fx.convert("2024-05-02", 8, "gbp", "EUR")) == pytest.approx(10.0)
    assert fx_source.calls == []


@pytest.mark.parametrize("amount", [math.nan, math.inf, -math.inf])
def test_non_finite_amount_converts_to_zero(fx, fx_source, amount):
    assert run(fx.convert("2024-03-01", amount, "USD", "EUR")) == 0.0
    assert fx_source.calls == []


def test_upstream_error_status_raises(fx, fx_source):
    fx_source.fail_dates.add("2024-03-01")
    with pytest.raises(FxLookupError) as info:
        run(fx.get_rate("2024-03-01", "USD", "EUR"))
    assert "503" in info.value.message
    assert info.value.date == "2024-03-01"
    assert ("2024-03-01", "USD", "EUR") not in fx.cache


def test_missing_rate_raises(fx, fx_source):
    # source answers 404 for unknown pairs
    with pytest.raises(FxLookupError):
        run(fx.get_rate("2024-03-01", "USD", "XXX"))


@pytest.mark.parametrize("bad_rates", [{}, {"EUR": 0}, {"EUR": -1.2}, {"EUR": "abc"}, {"EUR": None}])
def test_invalid_rate_in_body_raises(bad_rates):
    def handler(request):
        return httpx.Response(200, json={"rates": bad_rates})

    fx = FxConverter(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://fx.test/v1")
    )
    with pytest.raises(FxLookupError):
        run(fx.get_rate("2024-03-01", "USD", "EUR"))
    assert len(fx.cache) == 0


def test_unreachable_source_raises():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    fx = FxConverter(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://fx.test/v1")
    )
    with pytest.raises(FxLookupError):
        run(fx.convert("2024-03-01", 5, "USD", "EUR"))


def test_request_shape(fx, fx_source):
    fx_source.rates[("2023-12-29", "JPY", "EUR")] = 0.0064
    run(fx.get_rate("2023-12-29", " jpy", "eur"))
    assert fx_source.calls == [("2023-12-29", "JPY", "EUR")]


def test_round_trip_with_reciprocal_rates_is_approximate(fx, fx_source):
    fx_source.rates[("2024-03-01", "USD", "EUR")] = 0.9
    fx_source.rates[("2024-03-01", "EUR", "USD")] = 1 / 0.9

    there = run(fx.convert("2024-03-01", 123.45, "USD", "EUR"))
    back = run(fx.convert("2024-03-01", there, "EUR", "USD"))
    assert back == pytest.approx(123.45, rel=1e-12)
