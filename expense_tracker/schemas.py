# expense_tracker/schemas.py
"""
API payloads and normalized in-memory records.

The *_from_row helpers are the storage boundary: they turn raw SQLModel rows
(models.py) into records whose currency is always normalized.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from expense_tracker.currency import normalize_currency
from expense_tracker.models import Budget, Category, Expense, Profile

# ---------- Inputs ----------


class CategoryIn(BaseModel):
    name: str = ""


class ExpenseIn(BaseModel):
    amount: float
    currency: Optional[str] = None
    category_id: Optional[str] = None
    occurred_at: Optional[str] = None  # YYYY-MM-DD
    note: Optional[str] = None


class BudgetIn(BaseModel):
    amount: float
    currency: Optional[str] = None  # defaults to the profile base currency


class ProfileIn(BaseModel):
    base_currency: str


class PushSubscriptionIn(BaseModel):
    # shape belongs to the browser PushManager; we only forward it
    subscription: Dict[str, object]


# ---------- Normalized records ----------


class CategoryRead(BaseModel):
    id: str
    user_id: str
    name: str
    created_at: datetime


class ExpenseRead(BaseModel):
    id: str
    user_id: str
    amount: float
    currency: str
    category_id: str
    occurred_at: str
    note: str = ""
    created_at: datetime


class BudgetRead(BaseModel):
    id: str
    user_id: str
    month: str
    amount: float
    currency: str


class ProfileRead(BaseModel):
    base_currency: str


def category_from_row(row: Category) -> CategoryRead:
    return CategoryRead(
        id=row.id, user_id=row.user_id, name=row.name, created_at=row.created_at
    )


def expense_from_row(row: Expense) -> ExpenseRead:
    return ExpenseRead(
        id=row.id,
        user_id=row.user_id,
        amount=row.amount,
        currency=normalize_currency(row.currency),
        category_id=row.category_id,
        occurred_at=row.occurred_at,
        note=row.note or "",
        created_at=row.created_at,
    )


def budget_from_row(row: Budget) -> BudgetRead:
    return BudgetRead(
        id=row.id,
        user_id=row.user_id,
        month=row.month,
        amount=row.amount,
        currency=normalize_currency(row.currency),
    )


def profile_from_row(row: Optional[Profile]) -> ProfileRead:
    # no profile document yet -> EUR
    return ProfileRead(base_currency=normalize_currency(row.base_currency if row else None))


# ---------- Outputs ----------


class BudgetCheckStatus(str, Enum):
    no_budget = "no_budget"
    under = "under"
    alerted = "alerted"
    alert_failed = "alert_failed"  # over budget, but the push did not go out
    skipped = "skipped"  # could not align currencies; no comparison made


class BudgetCheck(BaseModel):
    month: str
    status: BudgetCheckStatus
    total: Optional[float] = None
    budget_amount: Optional[float] = None
    currency: Optional[str] = None
    detail: Optional[str] = None


class ExpenseMutationOut(BaseModel):
    expense: ExpenseRead
    budget_check: Optional[BudgetCheck] = None


class CategoryTotalOut(BaseModel):
    category_id: str
    name: str
    total: float


class ConvertedLinesOut(BaseModel):
    base_currency: str
    # expense id -> amount in base currency; None = unavailable (FX lookup failed)
    converted: Dict[str, Optional[float]] = Field(default_factory=dict)


class MonthSummary(BaseModel):
    month: str
    base_currency: str
    total: float
    complete: bool = True
    unavailable: List[str] = Field(default_factory=list)
    categories: List[CategoryTotalOut] = Field(default_factory=list)
    budget: Optional[BudgetRead] = None
