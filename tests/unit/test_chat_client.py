"""Tests for the Python web API client."""

from __future__ import annotations

import json

import httpx
import pytest

from alliswell.domain.services.chat_relay import ChatUnavailableError
from alliswell.libs.chat_client import ChatClientError, WellnessChatClient

BASE_URL = "http://alliswell.test"


class FakeServer:
    def __init__(self, chat_status: int = 200) -> None:
        self.chat_status = chat_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/login":
            return httpx.Response(
                303,
                headers={
                    "location": "/",
                    "set-cookie": "alliswell_session=signed-token; Path=/; HttpOnly",
                },
            )
        if self.chat_status != 200:
            return httpx.Response(self.chat_status, json={"success": False, "error": "nope"})
        return httpx.Response(
            200,
            json={"success": True, "message": "Tell me more.", "timestamp": "2026-01-01T00:00:00Z"},
        )


def make_client(server: FakeServer) -> WellnessChatClient:
    return WellnessChatClient(BASE_URL, transport=httpx.MockTransport(server))


class TestWellnessChatClient:
    async def test_login_then_chat_sends_cookie_and_history(self) -> None:
        server = FakeServer()
        async with make_client(server) as client:
            await client.login("river", "calm-waters-42")
            await client.send("hello")
            outcome = await client.send("work is busy")

        assert outcome.reply == "Tell me more."
        chat_request = server.requests[-1]
        assert "alliswell_session=signed-token" in chat_request.headers["cookie"]
        body = json.loads(chat_request.content)
        assert body == {
            "message": "work is busy",
            "history": [
                {"role": "user", "text": "hello"},
                {"role": "assistant", "text": "Tell me more."},
            ],
        }

    async def test_crisis_message_makes_no_request(self) -> None:
        server = FakeServer()
        async with make_client(server) as client:
            outcome = await client.send("I keep thinking about suicide")

        assert outcome.intercepted
        assert server.requests == []

    async def test_failed_login(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(303, headers={"location": "/login"})

        async with WellnessChatClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ChatClientError):
                await client.login("river", "wrong")

    async def test_unauthenticated_chat(self) -> None:
        async with make_client(FakeServer(chat_status=401)) as client:
            with pytest.raises(ChatClientError) as exc_info:
                await client.send("hello")

        assert exc_info.value.status_code == 401

    async def test_server_failure_is_chat_unavailable(self) -> None:
        async with make_client(FakeServer(chat_status=500)) as client:
            with pytest.raises(ChatUnavailableError):
                await client.send("hello")

    async def test_server_crisis_reply_is_kept_out_of_history(self) -> None:
        replies = iter(
            [
                {"success": True, "crisis": True, "message": "Please reach out.", "resources": []},
                {"success": True, "message": "Tell me more.", "timestamp": "2026-01-01T00:00:00Z"},
            ]
        )
        sent: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(200, json=next(replies))

        async with WellnessChatClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            first = await client.send("a message only the server flags")
            await client.send("hello")

        assert first.intercepted
        assert sent[1]["history"] == []
