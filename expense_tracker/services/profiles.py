# expense_tracker/services/profiles.py
from __future__ import annotations

from sqlmodel import Session

from expense_tracker.currency import normalize_currency
from expense_tracker.models import Profile, utc_now
from expense_tracker.schemas import ProfileRead, profile_from_row
from expense_tracker.services.common import storage_guard


def get_profile(session: Session, user_id: str) -> ProfileRead:
    with storage_guard(session, "load profile"):
        row = session.get(Profile, user_id)
    return profile_from_row(row)


def set_base_currency(session: Session, user_id: str, base_currency: str) -> ProfileRead:
    code = normalize_currency(base_currency)
    with storage_guard(session, "save profile"):
        row = session.get(Profile, user_id)
        if row is None:
            row = Profile(user_id=user_id, base_currency=code)
        else:
            row.base_currency = code
            row.updated_at = utc_now()
        session.add(row)
        session.commit()
        session.refresh(row)
    return profile_from_row(row)
