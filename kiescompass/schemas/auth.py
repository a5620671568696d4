"""Request and response models for registration, login, and user admin."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

UserRole = Literal["student", "admin"]

_USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"
_PASSWORD_SYMBOL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def _require_symbol(value: str) -> str:
    if not _PASSWORD_SYMBOL.search(value):
        raise ValueError("Password must contain at least one symbol")
    return value


class RegisterRequest(BaseModel):
    """Payload for ``POST /auth/register``."""

    username: str = Field(
        ...,
        pattern=_USERNAME_PATTERN,
        description="3-20 characters: letters, digits, or underscore",
        examples=["johndoe"],
    )
    email: EmailStr = Field(..., examples=["user@example.com"])
    firstname: str = Field(..., min_length=1, max_length=100, examples=["John"])
    lastname: str = Field(..., min_length=1, max_length=100, examples=["Doe"])
    password: str = Field(..., min_length=8, max_length=72, examples=["password123!"])

    @field_validator("password")
    @classmethod
    def _password_has_symbol(cls, value: str) -> str:
        return _require_symbol(value)


class LoginRequest(BaseModel):
    """Payload for ``POST /auth/login``."""

    username: str = Field(..., min_length=1, examples=["johndoe"])
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Bearer token issued after a successful login."""

    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Public profile of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    firstname: str
    lastname: str
    created_at: datetime
    updated_at: datetime


class AdminUserResponse(UserResponse):
    """Profile enriched with the fields only administrators may see."""

    role: UserRole
    favorite_vkm_ids: list[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """Partial update applied by administrators."""

    username: str | None = Field(None, pattern=_USERNAME_PATTERN)
    email: EmailStr | None = None
    firstname: str | None = Field(None, min_length=1, max_length=100)
    lastname: str | None = Field(None, min_length=1, max_length=100)
    role: UserRole | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement payload."""

    message: str
