# expense_tracker/services/common.py
from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from expense_tracker.errors import StorageError, ValidationError


@contextmanager
def storage_guard(session: Session, action: str) -> Iterator[None]:
    """
    Translate driver failures into StorageError("Failed to <action>.").
    Rolls back so the session stays usable for the rest of the request.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        raise StorageError(f"Failed to {action}.") from exc


def require_positive_amount(value: Optional[float]) -> float:
    """Reject missing, non-finite and non-positive amounts before anything is written."""
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a positive number.")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number.")
    return amount
