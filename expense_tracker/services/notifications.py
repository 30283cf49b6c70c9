# expense_tracker/services/notifications.py
"""
Client for the push relay. The relay owns subscriptions and delivery;
we only register a browser subscription and ask it to deliver alerts.

Relay contract:
- POST /subscribe {userId, subscription} -> 200/201
- POST /notify {userId, title, body, url} -> 200 delivered, 404 no subscription, 5xx failed
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Protocol

import httpx

from expense_tracker.config import Settings
from expense_tracker.errors import NotificationDispatchError, classify_error

logger = logging.getLogger("et.push")


@dataclass(frozen=True)
class AlertPayload:
    title: str
    body: str
    url: str


class NotificationDispatcher(Protocol):
    async def subscribe(self, user_id: str, subscription: Dict[str, Any]) -> None: ...

    async def send(self, user_id: str, payload: AlertPayload) -> None: ...


class PushRelayClient:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "PushRelayClient":
        return cls(
            httpx.AsyncClient(
                base_url=settings.push_server_url,
                timeout=settings.push_timeout_seconds,
            )
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def subscribe(self, user_id: str, subscription: Dict[str, Any]) -> None:
        await self._post("/subscribe", {"userId": user_id, "subscription": subscription})
        logger.info("Push subscription saved for user=%s", user_id)

    async def send(self, user_id: str, payload: AlertPayload) -> None:
        await self._post("/notify", {"userId": user_id, **asdict(payload)})
        logger.info("Push sent to user=%s: %s", user_id, payload.title)

    async def _post(self, path: str, body: Dict[str, Any]) -> None:
        try:
            response = await self.client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise classify_error(exc, collaborator="push") from exc

        if response.status_code == 404:
            raise NotificationDispatchError(
                "No push subscription for this user.", status_code=404
            )
        if not response.is_success:
            raise NotificationDispatchError(
                f"Push relay failed ({response.status_code}).",
                status_code=response.status_code,
            )
