# expense_tracker/routers/dashboard.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from expense_tracker.db import get_session
from expense_tracker.deps import get_dashboard, get_fx_converter
from expense_tracker.period_ym import current_month, parse_month
from expense_tracker.schemas import MonthSummary
from expense_tracker.security import require_user_id
from expense_tracker.services.dashboard import DashboardService
from expense_tracker.services.fx import FxConverter

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=MonthSummary)
async def month_summary(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
    converter: FxConverter = Depends(get_fx_converter),
    dashboard: DashboardService = Depends(get_dashboard),
):
    # A newer request for the same user supersedes this one -> 409 (see main.py).
    month = month or current_month()
    parse_month(month)
    return await dashboard.refresh(session, user_id, month, converter)
