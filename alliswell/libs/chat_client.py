"""
Python client for the ALL IS WELL web API.

Mirrors what the browser does: signs in with a form post, keeps the
conversation locally, screens every message for crisis phrases before
any request, and resends the full history with each chat call.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from alliswell.domain import ChatTurn
from alliswell.domain.services.chat_relay import ChatUnavailableError
from alliswell.domain.services.conversation import Conversation, ConversationOutcome
from alliswell.domain.services.crisis import CrisisInterceptor

logger = structlog.get_logger()


class ChatClientError(Exception):
    """Raised when the web API rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class WellnessChatClient:
    """Cookie-authenticated client for ``/login`` and ``/api/chat``."""

    def __init__(
        self,
        base_url: str,
        *,
        interceptor: CrisisInterceptor | None = None,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            follow_redirects=False,
        )
        self.conversation = Conversation(interceptor)

    async def __aenter__(self) -> WellnessChatClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http.aclose()

    async def login(self, name: str, password: str) -> None:
        response = await self.http.post("/login", data={"name": name, "password": password})
        # Failed logins bounce back to the login form
        if response.status_code >= 400 or response.headers.get("location") == "/login":
            raise ChatClientError("Login failed", status_code=response.status_code)

    async def send(self, text: str) -> ConversationOutcome:
        """Send one message, or answer locally with crisis resources."""
        outcome = await self.conversation.submit(text, self._post_chat)
        if outcome.intercepted:
            logger.info("chat_client_crisis_intercepted")
        return outcome

    async def _post_chat(
        self, message: str, history: Sequence[ChatTurn]
    ) -> ConversationOutcome:
        payload: dict[str, Any] = {
            "message": message,
            "history": [{"role": turn.role.value, "text": turn.text} for turn in history],
        }
        try:
            response = await self.http.post("/api/chat", json=payload)
        except httpx.HTTPError as exc:
            raise ChatUnavailableError() from exc

        if response.status_code in (401, 403):
            raise ChatClientError("Not signed in", status_code=response.status_code)
        if response.status_code >= 500:
            raise ChatUnavailableError()

        try:
            body = response.json()
        except ValueError as exc:
            raise ChatUnavailableError() from exc

        if response.status_code >= 400 or not body.get("success"):
            raise ChatClientError(
                body.get("error", "Chat request rejected"), status_code=response.status_code
            )
        return ConversationOutcome(
            reply=str(body["message"]),
            intercepted=bool(body.get("crisis")),
            resources=list(body.get("resources") or []),
        )
