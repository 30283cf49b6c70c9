# expense_tracker/models.py
# Raw stored records. Read them through expense_tracker.schemas (normalized),
# never straight into business logic: legacy rows may lack a currency.
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex  # opaque document id


def utc_now() -> datetime:
    return datetime.now(timezone.utc)  # aware; naive values are rejected on insert


def _timestamp():
    return Field(default_factory=utc_now, sa_type=DateTime(timezone=True))


class Category(SQLModel, table=True):
    __tablename__ = "category"
    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)  # owner (identity provider uid)
    name: str  # trimmed, non-empty
    created_at: datetime = _timestamp()


class Expense(SQLModel, table=True):
    __tablename__ = "expense"
    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    amount: float  # > 0, currency-agnostic magnitude
    currency: Optional[str] = None  # old rows: NULL -> read back as EUR
    category_id: str = Field(index=True)  # may dangle after a category delete

    # Economic date "YYYY-MM-DD": month filtering + FX lookup date
    occurred_at: str = Field(index=True)

    note: str = ""
    created_at: datetime = _timestamp()  # tie-breaker, newest first


class Budget(SQLModel, table=True):
    __tablename__ = "budget"
    # deterministic key "{user_id}_{month}" -> ONE budget per user per month
    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    month: str = Field(index=True)  # "YYYY-MM"
    amount: float
    currency: Optional[str] = None  # captured when the budget was set
    updated_at: datetime = _timestamp()


class Profile(SQLModel, table=True):
    __tablename__ = "profile"
    user_id: str = Field(primary_key=True)
    base_currency: Optional[str] = None
    updated_at: datetime = _timestamp()
