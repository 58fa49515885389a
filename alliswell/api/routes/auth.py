"""Account routes - register, login, logout."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError
from starlette.responses import Response

from alliswell.api.cookies import clear_session_cookie, flash, set_session_cookie
from alliswell.api.deps import get_auth_service, get_request_context
from alliswell.api.schemas.auth import LoginRequest, RegisterRequest
from alliswell.domain import RequestContext
from alliswell.domain.services.auth_service import (
    AuthService,
    InvalidCredentialsError,
    LogoutError,
    SessionUnavailableError,
    UserExistsError,
)

logger = structlog.get_logger()
router = APIRouter(tags=["authentication"])


def _validation_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"Invalid {field}: {error.get('msg', 'invalid value')}" if field else "Invalid input"


@router.post(
    "/register",
    summary="Register new user",
    description="Create an account from the sign-up form and sign the user in.",
)
async def register(
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    service: AuthService = Depends(get_auth_service),  # noqa: B008
) -> Response:
    try:
        payload = RegisterRequest(name=name, email=email, password=password)
    except ValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    try:
        result = await service.register(
            name=payload.name,
            email=str(payload.email),
            password=payload.password,
        )
    except UserExistsError as exc:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})
    except SessionUnavailableError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)}
        )

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, result.session)
    return response


@router.post(
    "/login",
    summary="User login",
    description="Authenticate with name and password from the login form.",
)
async def login(
    name: str = Form(""),
    password: str = Form(""),
    service: AuthService = Depends(get_auth_service),  # noqa: B008
) -> Response:
    try:
        payload = LoginRequest(name=name, password=password)
        result = await service.login(name=payload.name, password=payload.password)
    except (ValidationError, InvalidCredentialsError):
        response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
        flash(response, InvalidCredentialsError().args[0])
        return response
    except SessionUnavailableError as exc:
        response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
        flash(response, str(exc))
        return response

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, result.session)
    return response


@router.get("/logout", summary="Log out")
async def logout(
    context: RequestContext = Depends(get_request_context),  # noqa: B008
    service: AuthService = Depends(get_auth_service),  # noqa: B008
) -> Response:
    try:
        await service.logout(context.session_id)
    except LogoutError as exc:
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response
