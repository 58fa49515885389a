"""Signing and verification of the session cookie value."""

from __future__ import annotations

from datetime import UTC, datetime

import jwt

from alliswell.core.config import get_settings


class TokenError(Exception):
    """Raised when a session cookie cannot be decoded or validated."""


def create_session_token(session_id: str, *, expires_at: datetime) -> str:
    """Sign a session id for storage in the browser cookie."""
    settings = get_settings()

    now = datetime.now(UTC)
    payload = {
        "sub": session_id,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "iss": settings.app_name,
    }

    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> str:
    """Return the session id carried by a signed cookie value."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            issuer=settings.app_name,
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid session token") from exc

    session_id = payload.get("sub")
    if not isinstance(session_id, str) or not session_id:
        raise TokenError("Session token missing subject")
    return session_id
