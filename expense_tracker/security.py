# expense_tracker/security.py
from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status
from fastapi.requests import Request

# Sign-in lives with the identity provider; its gateway forwards the uid here.
USER_HEADER = "X-User-Id"


# ------------ Identity helpers ------------


def get_user_id_from_request(request: Request) -> Optional[str]:
    """Read the caller's uid from the header (if present). Returns str or None."""
    uid = (request.headers.get(USER_HEADER) or "").strip()
    return uid or None


def require_user_id(x_user_id: Optional[str] = Header(None, alias=USER_HEADER)) -> str:
    """
    FastAPI dependency: the authenticated uid, or 401.
    Usage: user_id: str = Depends(require_user_id)
    """
    uid = (x_user_id or "").strip()
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user id.",
        )
    return uid


__all__ = [
    "USER_HEADER",
    "get_user_id_from_request",
    "require_user_id",
]
