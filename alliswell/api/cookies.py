"""Session and flash cookies."""

from __future__ import annotations

from urllib.parse import quote, unquote

from fastapi import Request
from starlette.responses import Response

from alliswell.core.auth import create_session_token
from alliswell.core.config import get_settings
from alliswell.domain import SessionRecord

FLASH_MAX_AGE_SECONDS = 60


def set_session_cookie(response: Response, record: SessionRecord) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(record.session_id, expires_at=record.expires_at),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def flash(response: Response, message: str) -> None:
    """Carry one message to the next page render."""
    settings = get_settings()
    response.set_cookie(
        settings.flash_cookie_name,
        quote(message),
        max_age=FLASH_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def read_flash(request: Request) -> str | None:
    value = request.cookies.get(get_settings().flash_cookie_name)
    return unquote(value) if value else None


def clear_flash(response: Response) -> None:
    response.delete_cookie(get_settings().flash_cookie_name)
