# expense_tracker/services/dashboard.py
"""
Month summary for the dashboard, with stale-result protection.

A client that switches months fires a new refresh while the previous one may
still be waiting on FX lookups. Each refresh takes a token from
RefreshTracker; starting a new one cancels the user's previous token, and a
cancelled refresh never writes to ``latest`` (the state clients read back).
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from expense_tracker.schemas import CategoryTotalOut, MonthSummary
from expense_tracker.services.aggregation import (
    AggregationCancelled,
    CancellationToken,
    aggregate,
    category_totals,
)
from expense_tracker.services.budgets import get_budget_for_month
from expense_tracker.services.categories import list_categories
from expense_tracker.services.expenses import list_expenses_in_month
from expense_tracker.services.fx import FxConverter
from expense_tracker.services.profiles import get_profile

logger = logging.getLogger("et.dashboard")


def _load_month(session: Session, user_id: str, month: str):
    # sync storage reads; refresh() runs this off the event loop
    return (
        list_categories(session, user_id),
        list_expenses_in_month(session, user_id, month),
        get_profile(session, user_id).base_currency,
        get_budget_for_month(session, user_id, month),
    )


class RefreshTracker:
    """Per-user generation counter."""

    def __init__(self) -> None:
        self._generation = 0
        self._current: Dict[str, CancellationToken] = {}

    def begin(self, user_id: str) -> CancellationToken:
        previous = self._current.get(user_id)
        if previous is not None:
            previous.cancel()
        self._generation += 1
        token = CancellationToken(generation=self._generation)
        self._current[user_id] = token
        return token

    def is_current(self, user_id: str, token: CancellationToken) -> bool:
        return self._current.get(user_id) is token and not token.cancelled

    def finish(self, user_id: str, token: CancellationToken) -> None:
        if self._current.get(user_id) is token:
            del self._current[user_id]


class DashboardService:
    def __init__(self, tracker: Optional[RefreshTracker] = None) -> None:
        self.tracker = tracker or RefreshTracker()
        self.latest: Dict[str, MonthSummary] = {}  # last committed summary per user

    async def refresh(
        self,
        session: Session,
        user_id: str,
        month: str,
        converter: FxConverter,
    ) -> MonthSummary:
        token = self.tracker.begin(user_id)
        try:
            categories, expenses, base, budget = await run_in_threadpool(
                _load_month, session, user_id, month
            )

            agg = await aggregate(expenses, base, converter, token)
            if not self.tracker.is_current(user_id, token):
                raise AggregationCancelled()
        except AggregationCancelled:
            logger.info("Dropped stale dashboard refresh user=%s month=%s", user_id, month)
            raise

        summary = MonthSummary(
            month=month,
            base_currency=base,
            total=agg.total,
            complete=agg.complete,
            unavailable=agg.unavailable,
            categories=[
                CategoryTotalOut(category_id=row.category_id, name=row.name, total=row.total)
                for row in category_totals(agg, categories)
            ],
            budget=budget,
        )
        self.latest[user_id] = summary
        self.tracker.finish(user_id, token)
        return summary
