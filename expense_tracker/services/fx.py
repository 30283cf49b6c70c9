# expense_tracker/services/fx.py
"""
Historical FX rates with a process-local cache.

Plain words:
- A rate is looked up for the expense's own date (not "today"), so old
  expenses keep converting the same way they did when they were entered.
- Published daily rates never change, so cache entries never expire.
- Same currency -> rate 1, no network, no cache entry.
- Lookup failures are raised as FxLookupError; callers decide whether to
  skip the expense or give up.
"""

from __future__ import annotations

import logging
import math
from typing import MutableMapping, Optional, Tuple

import httpx

from expense_tracker.config import Settings
from expense_tracker.currency import normalize_currency, same_currency
from expense_tracker.errors import FxLookupError

logger = logging.getLogger("et.fx")

# (date "YYYY-MM-DD", from code, to code) -> rate, amount_to = amount_from * rate
RateKey = Tuple[str, str, str]
RateCache = MutableMapping[RateKey, float]


class FxConverter:
    def __init__(self, client: httpx.AsyncClient, cache: Optional[RateCache] = None):
        self.client = client
        # Any mutable mapping works; tests pre-seed or inspect it.
        self.cache: RateCache = cache if cache is not None else {}

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[RateCache] = None) -> "FxConverter":
        client = httpx.AsyncClient(
            base_url=settings.fx_base_url,
            timeout=settings.fx_timeout_seconds,
        )
        return cls(client, cache=cache)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get_rate(self, date: str, from_currency: str, to_currency: str) -> float:
        f = normalize_currency(from_currency)
        t = normalize_currency(to_currency)
        if f == t:
            return 1.0

        key = (date, f, t)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        rate = await self._fetch_rate(date, f, t)
        # Concurrent misses for the same key write the same value; no lock needed.
        self.cache[key] = rate
        return rate

    async def convert(
        self, date: str, amount: float, from_currency: str, to_currency: str
    ) -> float:
        if not math.isfinite(amount):
            return 0.0
        if same_currency(from_currency, to_currency):
            return amount
        rate = await self.get_rate(date, from_currency, to_currency)
        return amount * rate

    async def _fetch_rate(self, date: str, f: str, t: str) -> float:
        logger.debug("FX cache miss %s %s->%s", date, f, t)
        try:
            response = await self.client.get(f"/{date}", params={"from": f, "to": t})
        except httpx.HTTPError as exc:
            logger.warning("FX API unreachable for %s %s->%s: %s", date, f, t, exc)
            raise FxLookupError(
                "FX API unavailable.", date=date, from_currency=f, to_currency=t
            ) from exc

        if not response.is_success:
            raise FxLookupError(
                f"FX API request failed ({response.status_code}).",
                date=date,
                from_currency=f,
                to_currency=t,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise FxLookupError(
                "FX API returned invalid JSON.", date=date, from_currency=f, to_currency=t
            ) from exc

        rates = payload.get("rates") if isinstance(payload, dict) else None
        raw = rates.get(t) if isinstance(rates, dict) else None
        try:
            rate = float(raw)
        except (TypeError, ValueError):
            rate = math.nan

        if not math.isfinite(rate) or rate <= 0:
            raise FxLookupError(
                "FX rate missing/invalid in response.",
                date=date,
                from_currency=f,
                to_currency=t,
            )
        return rate
