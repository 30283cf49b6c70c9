# expense_tracker/services/budget_alerts.py
"""
Budget check + push alert after an expense is written.

Plain words:
- Reaching the budget exactly already counts as "over".
- Totals and budget must be in the same currency before comparing: the month
  is aggregated in the user's base currency and the budget amount is converted
  into it once. If that single conversion fails we do not compare at all.
- Push delivery is best effort. A failed send is logged, never raised: the
  expense that triggered the check is already saved.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from expense_tracker.currency import format_money
from expense_tracker.errors import FxLookupError, NotificationDispatchError
from expense_tracker.period_ym import month_reference_date
from expense_tracker.schemas import BudgetCheck, BudgetCheckStatus
from expense_tracker.services.aggregation import aggregate
from expense_tracker.services.budgets import get_budget_for_month
from expense_tracker.services.expenses import list_expenses_in_month
from expense_tracker.services.fx import FxConverter
from expense_tracker.services.notifications import AlertPayload, NotificationDispatcher
from expense_tracker.services.profiles import get_profile

logger = logging.getLogger("et.alerts")

ALERT_TITLE = "Budget alert"


def should_alert(total: float, budget_amount: float) -> bool:
    return total >= budget_amount


def build_alert_payload(
    total: float, budget_amount: float, currency: str, url: str
) -> AlertPayload:
    return AlertPayload(
        title=ALERT_TITLE,
        body=(
            f"You spent {format_money(total, currency)} this month "
            f"(budget: {format_money(budget_amount, currency)})."
        ),
        url=url,
    )


def _load_inputs(session: Session, user_id: str, month: str):
    budget = get_budget_for_month(session, user_id, month)
    if budget is None:
        return None, None, []
    base = get_profile(session, user_id).base_currency
    return budget, base, list_expenses_in_month(session, user_id, month)


async def check_budget(
    session: Session,
    user_id: str,
    month: str,
    converter: FxConverter,
    dispatcher: NotificationDispatcher,
    *,
    alert_url: str,
    today: Optional[date] = None,
) -> BudgetCheck:
    budget, base, expenses = await run_in_threadpool(_load_inputs, session, user_id, month)
    if budget is None:
        return BudgetCheck(month=month, status=BudgetCheckStatus.no_budget)

    agg = await aggregate(expenses, base, converter)

    try:
        limit = await converter.convert(
            month_reference_date(month, today), budget.amount, budget.currency, base
        )
    except FxLookupError as exc:
        logger.warning(
            "Budget check skipped for user=%s month=%s: %s", user_id, month, exc.message
        )
        return BudgetCheck(
            month=month,
            status=BudgetCheckStatus.skipped,
            total=agg.total,
            currency=base,
            detail=exc.message,
        )

    result = BudgetCheck(
        month=month,
        status=BudgetCheckStatus.under,
        total=agg.total,
        budget_amount=limit,
        currency=base,
    )
    if not should_alert(agg.total, limit):
        return result

    payload = build_alert_payload(agg.total, limit, base, alert_url)
    try:
        await dispatcher.send(user_id, payload)
    except NotificationDispatchError as exc:
        logger.warning("Push not sent (likely not subscribed): %s", exc.message)
        result.status = BudgetCheckStatus.alert_failed
        result.detail = exc.message
        return result

    logger.info("Budget alert sent user=%s month=%s", user_id, month)
    result.status = BudgetCheckStatus.alerted
    return result
