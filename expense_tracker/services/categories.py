# expense_tracker/services/categories.py
from __future__ import annotations

from typing import List, Optional

from sqlmodel import Session, select

from expense_tracker.errors import NotFoundError, ValidationError
from expense_tracker.models import Category
from expense_tracker.schemas import CategoryRead, category_from_row
from expense_tracker.services.common import storage_guard


def _clean_name(name: Optional[str]) -> str:
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Category name is required.")
    return trimmed


def _get_owned(session: Session, user_id: str, category_id: str) -> Category:
    """Return the row only if it belongs to this user."""
    row = session.get(Category, category_id)
    if not row or row.user_id != user_id:
        raise NotFoundError("Category not found.")
    return row


def list_categories(session: Session, user_id: str) -> List[CategoryRead]:
    """Current user's categories, newest first."""
    with storage_guard(session, "load categories"):
        rows = session.exec(
            select(Category)
            .where(Category.user_id == user_id)
            .order_by(Category.created_at.desc())
        ).all()
    return [category_from_row(r) for r in rows]


def create_category(session: Session, user_id: str, name: Optional[str]) -> CategoryRead:
    row = Category(user_id=user_id, name=_clean_name(name))
    with storage_guard(session, "save category"):
        session.add(row)
        session.commit()
        session.refresh(row)
    return category_from_row(row)


def update_category(
    session: Session, user_id: str, category_id: str, name: Optional[str]
) -> CategoryRead:
    trimmed = _clean_name(name)
    with storage_guard(session, "save category"):
        row = _get_owned(session, user_id, category_id)
        row.name = trimmed
        session.add(row)
        session.commit()
        session.refresh(row)
    return category_from_row(row)


def delete_category(session: Session, user_id: str, category_id: str) -> None:
    # Expenses keep their category_id; they show up as "Unknown category".
    with storage_guard(session, "delete category"):
        row = _get_owned(session, user_id, category_id)
        session.delete(row)
        session.commit()
