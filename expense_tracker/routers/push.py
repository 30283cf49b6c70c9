# expense_tracker/routers/push.py
# Explicit push actions from the settings screen. Unlike the budget alert,
# a relay failure here IS the result, so it is returned as an error (502).
from fastapi import APIRouter, Depends

from expense_tracker.config import get_settings
from expense_tracker.deps import get_dispatcher
from expense_tracker.schemas import PushSubscriptionIn
from expense_tracker.security import require_user_id
from expense_tracker.services.notifications import AlertPayload, NotificationDispatcher

router = APIRouter(prefix="/push", tags=["push"])


@router.post("/subscribe")
async def subscribe(
    payload: PushSubscriptionIn,
    user_id: str = Depends(require_user_id),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    await dispatcher.subscribe(user_id, payload.subscription)
    return {"ok": True}


@router.post("/test")
async def send_test(
    user_id: str = Depends(require_user_id),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    await dispatcher.send(
        user_id,
        AlertPayload(
            title="Budget alert",
            body="You are close to your monthly budget.",
            url=get_settings().alert_url,
        ),
    )
    return {"ok": True}
