# expense_tracker/services/expenses.py
"""
Expense storage helpers.

Why:
- Keep router code thin.
- Validate before anything touches storage (amount, category, date).
- Normalize currency on the way in, and on the way out via expense_from_row.
"""

from __future__ import annotations

from typing import List

from sqlmodel import Session, select

from expense_tracker.currency import normalize_currency
from expense_tracker.errors import NotFoundError, ValidationError
from expense_tracker.models import Expense
from expense_tracker.period_ym import month_range, parse_occurred_at
from expense_tracker.schemas import ExpenseIn, ExpenseRead, expense_from_row
from expense_tracker.services.common import require_positive_amount, storage_guard


def _clean(data: ExpenseIn) -> dict:
    """
    Validated, normalized column values.

    Plain words:
    - amount must be finite and > 0
    - category is required (by id)
    - occurred_at must be YYYY-MM-DD
    - note is trimmed; blank becomes "" (not NULL)
    """
    amount = require_positive_amount(data.amount)
    category_id = (data.category_id or "").strip()
    if not category_id:
        raise ValidationError("Please select a category.")
    occurred_at = parse_occurred_at(data.occurred_at)
    return {
        "amount": amount,
        "currency": normalize_currency(data.currency),
        "category_id": category_id,
        "occurred_at": occurred_at,
        "note": (data.note or "").strip(),
    }


def _ordered(stmt):
    # newest economic date first; same date -> newest created first
    return stmt.order_by(Expense.occurred_at.desc(), Expense.created_at.desc())


def _get_owned(session: Session, user_id: str, expense_id: str) -> Expense:
    row = session.get(Expense, expense_id)
    if not row or row.user_id != user_id:
        raise NotFoundError("Expense not found.")
    return row


def create_expense(session: Session, user_id: str, data: ExpenseIn) -> ExpenseRead:
    row = Expense(user_id=user_id, **_clean(data))
    with storage_guard(session, "create expense"):
        session.add(row)
        session.commit()
        session.refresh(row)
    return expense_from_row(row)


def update_expense(
    session: Session, user_id: str, expense_id: str, data: ExpenseIn
) -> ExpenseRead:
    values = _clean(data)
    with storage_guard(session, "update expense"):
        row = _get_owned(session, user_id, expense_id)
        for name, value in values.items():
            setattr(row, name, value)
        session.add(row)
        session.commit()
        session.refresh(row)
    return expense_from_row(row)


def delete_expense(session: Session, user_id: str, expense_id: str) -> None:
    with storage_guard(session, "delete expense"):
        row = _get_owned(session, user_id, expense_id)
        session.delete(row)
        session.commit()


def list_expenses(session: Session, user_id: str) -> List[ExpenseRead]:
    with storage_guard(session, "load expenses"):
        rows = session.exec(_ordered(select(Expense).where(Expense.user_id == user_id))).all()
    return [expense_from_row(r) for r in rows]


def list_expenses_in_month(session: Session, user_id: str, month: str) -> List[ExpenseRead]:
    """Expenses with start <= occurred_at < end_exclusive for the given YYYY-MM."""
    rng = month_range(month)
    stmt = select(Expense).where(
        Expense.user_id == user_id,
        Expense.occurred_at >= rng.start,
        Expense.occurred_at < rng.end_exclusive,
    )
    with storage_guard(session, "load expenses"):
        rows = session.exec(_ordered(stmt)).all()
    return [expense_from_row(r) for r in rows]
