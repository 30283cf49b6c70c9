# expense_tracker/services/budgets.py
from __future__ import annotations

from typing import Optional

from sqlmodel import Session

from expense_tracker.currency import normalize_currency
from expense_tracker.models import Budget, utc_now
from expense_tracker.period_ym import parse_month
from expense_tracker.schemas import BudgetRead, budget_from_row
from expense_tracker.services.common import require_positive_amount, storage_guard


def budget_key(user_id: str, month: str) -> str:
    """Deterministic document id: one budget per user per month."""
    return f"{user_id}_{month}"


def get_budget_for_month(session: Session, user_id: str, month: str) -> Optional[BudgetRead]:
    parse_month(month)
    with storage_guard(session, "load budget"):
        row = session.get(Budget, budget_key(user_id, month))
    if not row or row.user_id != user_id:
        return None
    return budget_from_row(row)


def upsert_budget(
    session: Session,
    user_id: str,
    month: str,
    amount: float,
    currency: Optional[str],
) -> BudgetRead:
    """Create the month's budget, or overwrite it in place. Never adds a second row."""
    parse_month(month)
    value = require_positive_amount(amount)
    code = normalize_currency(currency)

    with storage_guard(session, "save budget"):
        key = budget_key(user_id, month)
        row = session.get(Budget, key)
        if row is None:
            row = Budget(id=key, user_id=user_id, month=month, amount=value, currency=code)
        else:
            row.amount = value
            row.currency = code
            row.updated_at = utc_now()
        session.add(row)
        session.commit()
        session.refresh(row)
    return budget_from_row(row)
