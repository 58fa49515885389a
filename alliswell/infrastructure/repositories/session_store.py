"""Session backing stores: a database table or Redis keys with a TTL."""

from __future__ import annotations

import json
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import structlog
from redis.exceptions import RedisError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.domain import SessionRecord
from alliswell.infrastructure.db.models import SessionModel

logger = structlog.get_logger()


class SessionStoreError(Exception):
    """Raised when the backing store cannot be read or written."""


class SessionStore(Protocol):
    """Protocol for session persistence (allows swapping backends)."""

    async def create(self, user_id: str, ttl: timedelta) -> SessionRecord:
        ...

    async def get(self, session_id: str) -> SessionRecord | None:
        ...

    async def destroy(self, session_id: str) -> None:
        ...


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DatabaseSessionStore:
    """Sessions stored in the ``sessions`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, user_id: str, ttl: timedelta) -> SessionRecord:
        record = SessionRecord(
            session_id=new_session_id(),
            user_id=user_id,
            expires_at=datetime.now(UTC) + ttl,
        )
        try:
            self.session.add(
                SessionModel(
                    id=record.session_id,
                    user_id=record.user_id,
                    expires_at=record.expires_at,
                )
            )
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SessionStoreError("Could not create session") from exc
        return record

    async def get(self, session_id: str) -> SessionRecord | None:
        try:
            row = await self.session.get(SessionModel, session_id)
        except SQLAlchemyError as exc:
            raise SessionStoreError("Could not read session") from exc

        if row is None:
            return None

        record = SessionRecord(
            session_id=row.id,
            user_id=row.user_id,
            expires_at=_as_utc(row.expires_at),
        )
        if record.is_expired():
            await logger.ainfo("session_expired", user_id=record.user_id)
            await self.destroy(session_id)
            return None
        return record

    async def destroy(self, session_id: str) -> None:
        try:
            await self.session.execute(delete(SessionModel).where(SessionModel.id == session_id))
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SessionStoreError("Could not destroy session") from exc


class RedisSessionStore:
    """Sessions stored as ``<prefix><session_id>`` keys expiring with the session."""

    def __init__(self, client: Any, *, key_prefix: str = "session:") -> None:
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def create(self, user_id: str, ttl: timedelta) -> SessionRecord:
        record = SessionRecord(
            session_id=new_session_id(),
            user_id=user_id,
            expires_at=datetime.now(UTC) + ttl,
        )
        value = json.dumps(
            {"user_id": record.user_id, "expires_at": record.expires_at.isoformat()}
        )
        try:
            await self.client.set(
                self._key(record.session_id), value, ex=max(int(ttl.total_seconds()), 1)
            )
        except RedisError as exc:
            raise SessionStoreError("Could not create session") from exc
        return record

    async def get(self, session_id: str) -> SessionRecord | None:
        try:
            raw = await self.client.get(self._key(session_id))
        except RedisError as exc:
            raise SessionStoreError("Could not read session") from exc

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        try:
            data = json.loads(raw)
            record = SessionRecord(
                session_id=session_id,
                user_id=data["user_id"],
                expires_at=datetime.fromisoformat(data["expires_at"]),
            )
        except (ValueError, KeyError, TypeError):
            await logger.awarning("session_payload_invalid")
            await self.destroy(session_id)
            return None

        if record.is_expired():
            await self.destroy(session_id)
            return None
        return record

    async def destroy(self, session_id: str) -> None:
        try:
            await self.client.delete(self._key(session_id))
        except RedisError as exc:
            raise SessionStoreError("Could not destroy session") from exc
