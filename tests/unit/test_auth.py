from datetime import UTC, datetime, timedelta

import jwt
import pytest

from alliswell.core.auth import TokenError, create_session_token, decode_session_token
from alliswell.core.config import get_settings


def test_create_and_decode_session_token_roundtrip() -> None:
    token = create_session_token("session-123", expires_at=datetime.now(UTC) + timedelta(hours=1))

    assert decode_session_token(token) == "session-123"


def test_session_token_does_not_expose_user_data() -> None:
    token = create_session_token("session-123", expires_at=datetime.now(UTC) + timedelta(hours=1))

    payload = jwt.decode(token, options={"verify_signature": False})

    assert set(payload) == {"sub", "iat", "exp", "iss"}


def test_tampered_token_is_rejected() -> None:
    token = create_session_token("session-123", expires_at=datetime.now(UTC) + timedelta(hours=1))
    forged = jwt.encode(
        {"sub": "someone-else", "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp())},
        "not-the-secret",
        algorithm="HS256",
    )

    with pytest.raises(TokenError):
        decode_session_token(forged)
    with pytest.raises(TokenError):
        decode_session_token(token[:-4] + "abcd")


def test_expired_token_is_rejected() -> None:
    token = create_session_token("session-123", expires_at=datetime.now(UTC) - timedelta(minutes=5))

    with pytest.raises(TokenError):
        decode_session_token(token)


def test_token_from_another_issuer_is_rejected() -> None:
    settings = get_settings()
    token = jwt.encode(
        {
            "sub": "session-123",
            "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp()),
            "iss": "another-app",
        },
        settings.session_secret,
        algorithm=settings.session_algorithm,
    )

    with pytest.raises(TokenError):
        decode_session_token(token)
