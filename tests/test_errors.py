# tests/test_errors.py
import httpx
import pydantic
import pytest
from sqlalchemy.exc import NoResultFound, OperationalError

from expense_tracker.errors import (
    STATUS_BY_KIND,
    ErrorKind,
    FxLookupError,
    NotFoundError,
    NotificationDispatchError,
    StorageError,
    ValidationError,
    classify_error,
)
from expense_tracker.schemas import ExpenseIn


def test_app_errors_pass_through():
    err = FxLookupError("down", date="2024-01-01")
    assert classify_error(err) is err


def test_storage_failures():
    assert isinstance(classify_error(OperationalError("SELECT", {}, Exception("locked"))), StorageError)
    assert isinstance(classify_error(NoResultFound()), NotFoundError)


def test_http_failures_depend_on_collaborator():
    exc = httpx.ConnectError("refused")
    assert isinstance(classify_error(exc, collaborator="fx"), FxLookupError)
    assert isinstance(classify_error(exc, collaborator="push"), NotificationDispatchError)


def test_input_failures_become_validation():
    assert isinstance(classify_error(ValueError("bad")), ValidationError)
    with pytest.raises(pydantic.ValidationError) as info:
        ExpenseIn(amount="not a number")
    assert classify_error(info.value).kind == ErrorKind.validation


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)
    assert STATUS_BY_KIND[ErrorKind.validation] == 400
