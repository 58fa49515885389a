from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.infrastructure.db.models import SessionModel
from alliswell.libs.completions import Completion, CompletionError

DEFAULT_USER = {
    "name": "river",
    "email": "river@example.com",
    "password": "calm-waters-42",
}


class MockCompletionClient:
    """Mock chat-completions client recording every call."""

    def __init__(self, reply: str = "Thanks for sharing that with me.", should_fail: bool = False):
        self.reply = reply
        self.should_fail = should_fail
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> Completion:
        self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})

        if self.should_fail:
            raise CompletionError("Mocked completion failure")

        return Completion(text=self.reply, model="mock-model", completion_tokens=8, latency_ms=5)


class FakeRedis:
    """Minimal async stand-in for the redis client used by the session store."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.expiry: dict[str, int | None] = {}

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.data[key] = value.encode("utf-8")
        self.expiry[key] = ex
        return True

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def delete(self, key: str) -> int:
        self.expiry.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0


class BrokenRedis(FakeRedis):
    """Redis client whose server has gone away."""

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        raise RedisConnectionError("connection refused")

    async def delete(self, key: str) -> int:
        raise RedisConnectionError("connection refused")


async def session_count(db_session: AsyncSession, user_id: str) -> int:
    stmt = select(func.count()).select_from(SessionModel).where(SessionModel.user_id == user_id)
    return (await db_session.execute(stmt)).scalar_one()


def register_user(client: TestClient, **overrides: str):
    data = {**DEFAULT_USER, **overrides}
    return client.post("/register", data=data, follow_redirects=False)


def login_user(client: TestClient, name: str | None = None, password: str | None = None):
    return client.post(
        "/login",
        data={
            "name": DEFAULT_USER["name"] if name is None else name,
            "password": DEFAULT_USER["password"] if password is None else password,
        },
        follow_redirects=False,
    )
