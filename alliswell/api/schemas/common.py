from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """JSON error body shared by the chat and assessment APIs."""

    success: bool = False
    error: str
