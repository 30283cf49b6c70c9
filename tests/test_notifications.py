# tests/test_notifications.py
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from expense_tracker.errors import NotificationDispatchError
from expense_tracker.services.notifications import AlertPayload, PushRelayClient

PAYLOAD = AlertPayload(title="Budget alert", body="You spent 1.00 EUR", url="/app/dashboard")


def _relay(handler) -> PushRelayClient:
    return PushRelayClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://relay.test")
    )


def test_send_posts_notify_body():
    seen = []

    def handler(request):
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"ok": True})

    asyncio.run(_relay(handler).send("uid-1", PAYLOAD))

    assert seen == [
        (
            "/notify",
            {
                "userId": "uid-1",
                "title": "Budget alert",
                "body": "You spent 1.00 EUR",
                "url": "/app/dashboard",
            },
        )
    ]


def test_subscribe_posts_subscription():
    seen = []

    def handler(request):
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(201, json={"ok": True})

    sub = {"endpoint": "https://push.example/abc", "keys": {"p256dh": "k", "auth": "a"}}
    asyncio.run(_relay(handler).subscribe("uid-1", sub))

    assert seen == [("/subscribe", {"userId": "uid-1", "subscription": sub})]


@pytest.mark.parametrize("status", [404, 500, 503])
def test_relay_failures_raise_dispatch_error(status):
    relay = _relay(lambda request: httpx.Response(status, json={"error": "x"}))
    with pytest.raises(NotificationDispatchError) as info:
        asyncio.run(relay.send("uid-1", PAYLOAD))
    assert info.value.status_code == status


def test_unreachable_relay_raises_dispatch_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NotificationDispatchError):
        asyncio.run(_relay(handler).send("uid-1", PAYLOAD))
