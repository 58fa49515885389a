"""Tests for the database and Redis session stores."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from alliswell.infrastructure.repositories.session_store import (
    DatabaseSessionStore,
    RedisSessionStore,
    SessionStoreError,
)
from tests.utils import BrokenRedis, FakeRedis, session_count


class TestDatabaseSessionStore:
    async def test_create_and_get(self, session_store: DatabaseSessionStore) -> None:
        record = await session_store.create("user-1", timedelta(hours=1))

        fetched = await session_store.get(record.session_id)

        assert fetched is not None
        assert fetched.user_id == "user-1"
        assert fetched.session_id == record.session_id
        assert not fetched.is_expired()

    async def test_session_ids_are_unguessable(self, session_store: DatabaseSessionStore) -> None:
        first = await session_store.create("user-1", timedelta(hours=1))
        second = await session_store.create("user-1", timedelta(hours=1))

        assert first.session_id != second.session_id
        assert len(first.session_id) >= 32

    async def test_unknown_session_returns_none(self, session_store: DatabaseSessionStore) -> None:
        assert await session_store.get("missing") is None

    async def test_expired_session_is_removed(self, session_store: DatabaseSessionStore) -> None:
        record = await session_store.create("user-1", timedelta(seconds=-1))

        assert await session_store.get(record.session_id) is None
        assert await session_count(session_store.session, "user-1") == 0

    async def test_destroy(self, session_store: DatabaseSessionStore) -> None:
        record = await session_store.create("user-1", timedelta(hours=1))

        await session_store.destroy(record.session_id)

        assert await session_store.get(record.session_id) is None


class TestRedisSessionStore:
    async def test_create_sets_key_with_ttl(self) -> None:
        client = FakeRedis()
        store = RedisSessionStore(client)

        record = await store.create("user-1", timedelta(hours=2))

        key = f"session:{record.session_id}"
        assert client.expiry[key] == 7200
        assert json.loads(client.data[key])["user_id"] == "user-1"

    async def test_get_roundtrip(self) -> None:
        store = RedisSessionStore(FakeRedis())
        record = await store.create("user-1", timedelta(hours=1))

        fetched = await store.get(record.session_id)

        assert fetched is not None
        assert fetched.user_id == "user-1"

    async def test_expired_payload_is_dropped(self) -> None:
        client = FakeRedis()
        store = RedisSessionStore(client)
        past = datetime.now(UTC) - timedelta(minutes=1)
        await client.set("session:old", json.dumps({"user_id": "u", "expires_at": past.isoformat()}))

        assert await store.get("old") is None
        assert "session:old" not in client.data

    async def test_invalid_payload_is_dropped(self) -> None:
        client = FakeRedis()
        store = RedisSessionStore(client)
        await client.set("session:bad", "not json")

        assert await store.get("bad") is None
        assert "session:bad" not in client.data

    async def test_destroy_failure_is_wrapped(self) -> None:
        store = RedisSessionStore(BrokenRedis())

        with pytest.raises(SessionStoreError):
            await store.destroy("any")
