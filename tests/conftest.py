# tests/conftest.py
# Test setup: temporary SQLite DB, stubbed FX source + push relay, dependency overrides.

import os
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

# Ensure repo root on sys.path so "import expense_tracker" works
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the app's default engine off disk; settings read env at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from expense_tracker.db import create_db_and_tables, get_session, make_engine  # noqa: E402
from expense_tracker.deps import get_dashboard, get_dispatcher, get_fx_converter  # noqa: E402
from expense_tracker.errors import NotificationDispatchError  # noqa: E402
from expense_tracker.main import app as fastapi_app  # noqa: E402
from expense_tracker.services.dashboard import DashboardService  # noqa: E402
from expense_tracker.services.fx import FxConverter  # noqa: E402

FX_BASE = "https://fx.test/v1"


class StubFxSource:
    """
    httpx.MockTransport handler that behaves like GET /{date}?from=&to=.
    rates: {(date, from, to): rate}; dates in fail_dates answer 503.
    """

    def __init__(self):
        self.rates = {}
        self.fail_dates = set()
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        date = request.url.path.rsplit("/", 1)[-1]
        f = request.url.params.get("from")
        t = request.url.params.get("to")
        self.calls.append((date, f, t))
        if date in self.fail_dates:
            return httpx.Response(503, json={"message": "unavailable"})
        rate = self.rates.get((date, f, t))
        if rate is None:
            return httpx.Response(404, json={"message": "not found"})
        return httpx.Response(
            200, json={"amount": 1.0, "base": f, "date": date, "rates": {t: rate}}
        )


class RecordingDispatcher:
    """In-memory stand-in for the push relay."""

    def __init__(self):
        self.subscriptions = {}
        self.sent = []
        self.fail = False

    async def subscribe(self, user_id, subscription):
        if self.fail:
            raise NotificationDispatchError("Push relay failed (500).", status_code=500)
        self.subscriptions[user_id] = subscription

    async def send(self, user_id, payload):
        if self.fail:
            raise NotificationDispatchError(
                "No push subscription for this user.", status_code=404
            )
        self.sent.append((user_id, payload))


@pytest.fixture()
def tmp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "test_expenses.db"


@pytest.fixture()
def test_engine(tmp_db_path: Path):
    # File-based SQLite so multiple connections share the same DB
    url = f"sqlite:///{tmp_db_path}"
    engine = make_engine(url)
    create_db_and_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session(test_engine):
    with Session(test_engine) as s:
        yield s


@pytest.fixture()
def fx_source():
    return StubFxSource()


@pytest.fixture()
def fx(fx_source):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fx_source), base_url=FX_BASE)
    return FxConverter(client)


@pytest.fixture()
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture()
def client(test_engine, fx, dispatcher):
    # Override the app's collaborators with test doubles
    def _get_test_session():
        with Session(test_engine) as s:
            yield s

    dashboard = DashboardService()
    fastapi_app.dependency_overrides[get_session] = _get_test_session
    fastapi_app.dependency_overrides[get_fx_converter] = lambda: fx
    fastapi_app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    fastapi_app.dependency_overrides[get_dashboard] = lambda: dashboard
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
