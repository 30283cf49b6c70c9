# expense_tracker/routers/settings.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from expense_tracker.db import get_session
from expense_tracker.schemas import ProfileIn, ProfileRead
from expense_tracker.security import require_user_id
from expense_tracker.services.profiles import get_profile, set_base_currency

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/profile", response_model=ProfileRead)
def read_profile(
    user_id: str = Depends(require_user_id), session: Session = Depends(get_session)
):
    return get_profile(session, user_id)


@router.put("/profile", response_model=ProfileRead)
def update_profile(
    payload: ProfileIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    return set_base_currency(session, user_id, payload.base_currency)
