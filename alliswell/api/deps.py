from __future__ import annotations

from collections.abc import AsyncIterator
from functools import lru_cache

import redis.asyncio as aioredis
import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from alliswell.core.auth import TokenError, decode_session_token
from alliswell.core.config import get_settings
from alliswell.domain import RequestContext
from alliswell.domain.services.auth_service import AuthService, UnauthorizedError
from alliswell.domain.services.chat_relay import ChatRelay
from alliswell.domain.services.crisis import CrisisInterceptor
from alliswell.infrastructure.db.session import get_session
from alliswell.infrastructure.repositories.session_store import (
    DatabaseSessionStore,
    RedisSessionStore,
    SessionStore,
)

logger = structlog.get_logger()


class NotAuthenticatedError(Exception):
    """Raised by the session gate; handled as a redirect or a JSON 401."""

    def __init__(self, detail: str = "Authentication required", *, api: bool = False) -> None:
        super().__init__(detail)
        self.detail = detail
        self.api = api


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


@lru_cache
def get_redis_client() -> aioredis.Redis:
    return aioredis.from_url(get_settings().redis_url)


def get_session_store(
    db: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SessionStore:
    if get_settings().session_backend == "redis":
        return RedisSessionStore(get_redis_client())
    return DatabaseSessionStore(db)


def get_auth_service(
    db: AsyncSession = Depends(get_db_session),  # noqa: B008
    sessions: SessionStore = Depends(get_session_store),  # noqa: B008
) -> AuthService:
    return AuthService(db, sessions)


async def get_request_context(
    request: Request,
    auth: AuthService = Depends(get_auth_service),  # noqa: B008
) -> RequestContext:
    """Resolve the caller's session cookie into an explicit request context."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        return RequestContext()

    try:
        session_id = decode_session_token(token)
    except TokenError:
        await logger.awarning("session_cookie_invalid")
        return RequestContext()

    try:
        user = await auth.require_session(session_id)
    except UnauthorizedError:
        return RequestContext()

    return RequestContext(user=user, session_id=session_id)


def require_login(
    context: RequestContext = Depends(get_request_context),  # noqa: B008
) -> RequestContext:
    """Gate for HTML routes: anonymous callers are sent to the login page."""
    if not context.is_authenticated:
        raise NotAuthenticatedError("You must be logged in to access that feature.")
    return context


def require_api_login(
    context: RequestContext = Depends(get_request_context),  # noqa: B008
) -> RequestContext:
    """Gate for JSON routes: anonymous callers get a 401 body."""
    if not context.is_authenticated:
        raise NotAuthenticatedError("Authentication required", api=True)
    return context


@lru_cache
def get_crisis_interceptor() -> CrisisInterceptor:
    return CrisisInterceptor(get_settings().crisis_phrases)


@lru_cache
def get_chat_relay() -> ChatRelay:
    return ChatRelay()
