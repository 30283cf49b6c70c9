# expense_tracker/deps.py
# FastAPI dependencies for the long-lived collaborators kept on app.state.
# Tests swap them via app.dependency_overrides.
from fastapi import Request

from expense_tracker.services.dashboard import DashboardService
from expense_tracker.services.fx import FxConverter
from expense_tracker.services.notifications import NotificationDispatcher


def get_fx_converter(request: Request) -> FxConverter:
    return request.app.state.fx


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.push


def get_dashboard(request: Request) -> DashboardService:
    return request.app.state.dashboard
