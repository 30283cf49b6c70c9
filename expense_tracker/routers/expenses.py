# expense_tracker/routers/expenses.py
# Purpose: expense CRUD for the signed-in user.
# - Create/update re-check the month's budget and may push an alert.
# - The budget check never turns a saved expense into a failed request.
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from expense_tracker.config import get_settings
from expense_tracker.db import get_session
from expense_tracker.deps import get_dispatcher, get_fx_converter
from expense_tracker.errors import AppError
from expense_tracker.period_ym import current_month, month_of, parse_month
from expense_tracker.schemas import (
    BudgetCheck,
    BudgetCheckStatus,
    ConvertedLinesOut,
    ExpenseIn,
    ExpenseMutationOut,
    ExpenseRead,
)
from expense_tracker.security import require_user_id
from expense_tracker.services import expenses as svc
from expense_tracker.services.aggregation import convert_line_items
from expense_tracker.services.budget_alerts import check_budget
from expense_tracker.services.fx import FxConverter
from expense_tracker.services.notifications import NotificationDispatcher
from expense_tracker.services.profiles import get_profile

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger("et.alerts")


async def _budget_check_after_write(
    session: Session,
    user_id: str,
    expense: ExpenseRead,
    converter: FxConverter,
    dispatcher: NotificationDispatcher,
) -> BudgetCheck:
    month = month_of(expense.occurred_at)
    try:
        return await check_budget(
            session,
            user_id,
            month,
            converter,
            dispatcher,
            alert_url=get_settings().alert_url,
        )
    except AppError as exc:
        # The expense is committed; report the check as skipped, not the write as failed.
        logger.warning("Budget check failed after write user=%s: %s", user_id, exc.message)
        return BudgetCheck(month=month, status=BudgetCheckStatus.skipped, detail=exc.message)


@router.get("", response_model=List[ExpenseRead])
def list_expenses(
    month: Optional[str] = Query(None, description="YYYY-MM; all expenses if omitted"),
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    if month:
        return svc.list_expenses_in_month(session, user_id, month)
    return svc.list_expenses(session, user_id)


@router.get("/converted", response_model=ConvertedLinesOut)
async def converted_lines(
    month: Optional[str] = Query(None),
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
    converter: FxConverter = Depends(get_fx_converter),
):
    """Each expense of the month in the base currency; null = unavailable (offline/FX down)."""
    month = month or current_month()
    parse_month(month)
    base = (await run_in_threadpool(get_profile, session, user_id)).base_currency
    expenses = await run_in_threadpool(svc.list_expenses_in_month, session, user_id, month)
    converted = await convert_line_items(expenses, base, converter)
    return ConvertedLinesOut(base_currency=base, converted=converted)


@router.post("", response_model=ExpenseMutationOut, status_code=status.HTTP_201_CREATED)
async def create_expense(
    payload: ExpenseIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
    converter: FxConverter = Depends(get_fx_converter),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    expense = await run_in_threadpool(svc.create_expense, session, user_id, payload)
    check = await _budget_check_after_write(session, user_id, expense, converter, dispatcher)
    return ExpenseMutationOut(expense=expense, budget_check=check)


@router.put("/{expense_id}", response_model=ExpenseMutationOut)
async def update_expense(
    expense_id: str,
    payload: ExpenseIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
    converter: FxConverter = Depends(get_fx_converter),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    expense = await run_in_threadpool(
        svc.update_expense, session, user_id, expense_id, payload
    )
    check = await _budget_check_after_write(session, user_id, expense, converter, dispatcher)
    return ExpenseMutationOut(expense=expense, budget_check=check)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    svc.delete_expense(session, user_id, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
