# expense_tracker/routers/categories.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from expense_tracker.db import get_session
from expense_tracker.schemas import CategoryIn, CategoryRead
from expense_tracker.security import require_user_id
from expense_tracker.services import categories as svc

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(
    user_id: str = Depends(require_user_id), session: Session = Depends(get_session)
):
    return svc.list_categories(session, user_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    return svc.create_category(session, user_id, payload.name)


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: str,
    payload: CategoryIn,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    return svc.update_category(session, user_id, category_id, payload.name)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    user_id: str = Depends(require_user_id),
    session: Session = Depends(get_session),
):
    svc.delete_category(session, user_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
