"""
Chat-completions client used by the chat relay.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint. One request per
call, bounded by a timeout: the relay answers a person waiting in the chat
panel, so a failed call is reported at once instead of being retried.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog

from alliswell.core.config import get_settings

logger = structlog.get_logger()


class CompletionError(Exception):
    """Any failure to obtain a completion."""


class CompletionTimeoutError(CompletionError):
    pass


class CompletionRateLimitError(CompletionError):
    """429 from the provider (rate limit or exhausted quota)."""


class CompletionHTTPError(CompletionError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class CompletionFormatError(CompletionError):
    """The provider answered 200 with a body that has no usable reply."""


@dataclass(slots=True)
class Completion:
    text: str
    model: str
    completion_tokens: int
    latency_ms: int


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> Completion:
        ...


class ChatCompletionsClient:
    """httpx client for an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.endpoint = f"{(base_url or settings.openai_base_url).rstrip('/')}/chat/completions"
        self.model = model or settings.openai_model
        self.timeout = timeout_seconds or settings.chat_timeout_seconds
        self.transport = transport

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float = 0.7,
    ) -> Completion:
        if not self.api_key:
            raise CompletionError("OPENAI_API_KEY not configured")

        started = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "model": self.model,
                        "messages": messages,
                        "max_tokens": max_tokens,
                        "temperature": temperature,
                    },
                )
        except httpx.TimeoutException as exc:
            await logger.awarning("completion_timeout", timeout_seconds=self.timeout)
            raise CompletionTimeoutError("Completion request timed out") from exc
        except httpx.RequestError as exc:
            await logger.awarning("completion_transport_error", error=str(exc))
            raise CompletionError(f"Completion request failed: {exc}") from exc

        latency_ms = int((time.monotonic() - started) * 1000)

        if response.status_code == 429:
            await logger.awarning("completion_rate_limited")
            raise CompletionRateLimitError("Completion provider rate limit reached")
        if response.status_code != 200:
            await logger.awarning("completion_http_error", status_code=response.status_code)
            raise CompletionHTTPError(
                f"Completion provider answered {response.status_code}",
                status_code=response.status_code,
            )
        return self._parse(response, latency_ms)

    def _parse(self, response: httpx.Response, latency_ms: int) -> Completion:
        try:
            body: dict[str, Any] = response.json()
            text = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise CompletionFormatError("Malformed chat completion body") from exc
        if not isinstance(text, str):
            raise CompletionFormatError("Chat completion has no text content")

        usage = body.get("usage") or {}
        return Completion(
            text=text,
            model=body.get("model", self.model),
            completion_tokens=usage.get("completion_tokens", 0),
            latency_ms=latency_ms,
        )
