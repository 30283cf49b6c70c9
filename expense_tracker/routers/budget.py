# expense_tracker/routers/budget.py
# Purpose: the monthly budget (one per user per month, overwrite on save).
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from expense_tracker.db import get_session
from expense_tracker.schemas import BudgetIn, BudgetRead
from expense_tracker.security import require_user_id
from expense_tracker.services.budgets import get_budget_for_month, upsert_budget
from expense_tracker.services.profiles import get_profile

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/{month}", response_model=Optional[BudgetRead])
def read_budget(
    month: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    """The month's budget, or null if none was set."""
    return get_budget_for_month(session, user_id, month)


@router.put("/{month}", response_model=BudgetRead)
def save_budget(
    month: str,
    payload: BudgetIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    # No currency given -> capture the current base currency with the budget.
    currency = payload.currency or get_profile(session, user_id).base_currency
    return upsert_budget(session, user_id, month, payload.amount, currency)
