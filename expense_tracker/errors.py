# expense_tracker/errors.py
"""
Closed error taxonomy for the app.

Collaborators (database driver, HTTP clients, pydantic) each fail in their own
shape; ``classify_error`` folds those into one of the kinds below so routers
only ever deal with ``AppError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import httpx
import pydantic
from sqlalchemy.exc import NoResultFound, SQLAlchemyError


class ErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    storage = "storage"
    fx_lookup = "fx_lookup"
    notification_dispatch = "notification_dispatch"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.storage

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """User input failed a precondition; never reaches storage."""

    kind = ErrorKind.validation


class NotFoundError(AppError):
    kind = ErrorKind.not_found


class StorageError(AppError):
    """Document store read/write failed."""

    kind = ErrorKind.storage


class FxLookupError(AppError):
    """No usable rate for one (date, from, to) lookup."""

    kind = ErrorKind.fx_lookup

    def __init__(
        self,
        message: str,
        *,
        date: Optional[str] = None,
        from_currency: Optional[str] = None,
        to_currency: Optional[str] = None,
    ):
        super().__init__(message)
        self.date = date
        self.from_currency = from_currency
        self.to_currency = to_currency


class NotificationDispatchError(AppError):
    """Push subscribe/send failed. Always a soft failure for business operations."""

    kind = ErrorKind.notification_dispatch

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# Which AppError an httpx failure becomes depends on who we were talking to.
_HTTP_ERRORS = {
    "fx": FxLookupError,
    "push": NotificationDispatchError,
}


def classify_error(exc: BaseException, *, collaborator: str = "storage") -> AppError:
    """
    Map a collaborator-specific failure onto the app taxonomy.

    - AppError passes through unchanged
    - SQLAlchemy failures -> StorageError (NoResultFound -> NotFoundError)
    - httpx failures -> FxLookupError / NotificationDispatchError by collaborator
    - pydantic / ValueError -> ValidationError
    """
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, NoResultFound):
        return NotFoundError("Record not found.")
    if isinstance(exc, SQLAlchemyError):
        return StorageError(f"Storage failure: {exc.__class__.__name__}")
    if isinstance(exc, httpx.HTTPError):
        cls = _HTTP_ERRORS.get(collaborator, StorageError)
        return cls(f"{collaborator} request failed: {exc.__class__.__name__}")
    if isinstance(exc, pydantic.ValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        return ValidationError(str(first.get("msg", "Invalid input.")))
    if isinstance(exc, ValueError):
        return ValidationError(str(exc))
    return StorageError(f"Unexpected failure: {exc.__class__.__name__}")


# HTTP status per kind (used by the exception handler in main.py)
STATUS_BY_KIND = {
    ErrorKind.validation: 400,
    ErrorKind.not_found: 404,
    ErrorKind.storage: 503,
    ErrorKind.fx_lookup: 502,
    ErrorKind.notification_dispatch: 502,
}


__all__ = [
    "ErrorKind",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "FxLookupError",
    "NotificationDispatchError",
    "classify_error",
    "STATUS_BY_KIND",
]
