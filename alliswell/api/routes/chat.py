from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from alliswell.api.deps import get_chat_relay, get_crisis_interceptor, require_api_login
from alliswell.api.schemas.chat import (
    ChatRequest,
    ChatResponse,
    CrisisResource,
)
from alliswell.api.schemas.common import ErrorResponse
from alliswell.domain import RequestContext
from alliswell.domain.services.chat_relay import (
    ChatRelay,
    ChatUnavailableError,
    InvalidChatRequestError,
)
from alliswell.domain.services.crisis import CrisisInterceptor

logger = structlog.get_logger()
router = APIRouter(prefix="/api", tags=["Chat"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Relay a chat message",
)
async def chat(
    request: Request,
    context: RequestContext = Depends(require_api_login),  # noqa: B008
    relay: ChatRelay = Depends(get_chat_relay),  # noqa: B008
    interceptor: CrisisInterceptor = Depends(get_crisis_interceptor),  # noqa: B008
) -> ChatResponse | JSONResponse:
    try:
        payload = ChatRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid chat request")

    if not payload.message.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Message is required")

    # Crisis text in the message or the replayed history never reaches the relay
    texts = [payload.message, *(turn.text for turn in payload.history)]
    if any(interceptor.check(text).intercepted for text in texts):
        crisis = interceptor.response()
        await logger.awarning("chat_crisis_response", user_id=context.user.user_id)
        return ChatResponse(
            message=crisis.message,
            crisis=True,
            resources=[CrisisResource(**resource) for resource in crisis.resources],
            timestamp=datetime.now(UTC),
        )

    try:
        reply = await relay.send(payload.message, payload.history_turns(), user=context.user)
    except InvalidChatRequestError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except ChatUnavailableError as exc:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    return ChatResponse(message=reply.message, timestamp=reply.timestamp)
