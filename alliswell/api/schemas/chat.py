"""Pydantic schemas for the chat API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from alliswell.domain import ChatRole, ChatTurn


class ChatTurnPayload(BaseModel):
    """One history entry as sent by the browser."""

    # "model" is what older browser builds send for assistant turns
    role: Literal["user", "assistant", "model"]
    text: str

    def to_domain(self) -> ChatTurn:
        role = ChatRole.USER if self.role == "user" else ChatRole.ASSISTANT
        return ChatTurn(role=role, text=self.text)


class ChatRequest(BaseModel):
    message: str = Field(default="", description="New user message")
    history: list[ChatTurnPayload] = Field(
        default_factory=list, description="Earlier turns in chronological order"
    )

    def history_turns(self) -> list[ChatTurn]:
        return [turn.to_domain() for turn in self.history]


class CrisisResource(BaseModel):
    name: str
    contact: str
    description: str


class ChatResponse(BaseModel):
    """Relay reply, or the crisis response when ``crisis`` is set."""

    success: bool = True
    message: str
    timestamp: datetime
    crisis: bool = False
    resources: list[CrisisResource] | None = None
