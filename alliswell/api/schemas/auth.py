"""Pydantic schemas for the account forms."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Fields of the sign-up form."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^\S(.*\S)?$",
        description="Unique display name used to log in",
    )
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 characters)",
    )


class LoginRequest(BaseModel):
    """Fields of the login form."""

    name: str = Field(..., min_length=1, description="Display name")
    password: str = Field(..., min_length=1, description="User password")
