"""Tests for password hashing and bearer-token helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from kiescompass.exceptions import UnauthorizedError
from kiescompass.services.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from kiescompass.settings import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(jwt_secret="unit-test-secret", jwt_expires_minutes=10)


def test_password_hash_round_trip() -> None:
    hashed = hash_password("password123!")

    assert hashed != "password123!"
    assert verify_password("password123!", hashed)
    assert not verify_password("password124!", hashed)
    assert not verify_password("password123!", "not-a-bcrypt-hash")


def test_token_carries_identity_claims(settings: AppSettings) -> None:
    issued = datetime.now(timezone.utc)
    token = create_access_token(
        user_id="u1",
        username="alice",
        email="alice@example.com",
        role="admin",
        settings=settings,
        now=issued,
    )

    claims = decode_access_token(token, settings=settings)

    assert claims["sub"] == "u1"
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 600


def test_expired_token_is_rejected(settings: AppSettings) -> None:
    token = create_access_token(
        user_id="u1",
        username="alice",
        email="alice@example.com",
        role="student",
        settings=settings,
        now=datetime.now(timezone.utc) - timedelta(hours=1),
    )

    with pytest.raises(UnauthorizedError, match="expired"):
        decode_access_token(token, settings=settings)


def test_token_signed_with_other_secret_is_rejected(settings: AppSettings) -> None:
    token = jwt.encode({"sub": "u1", "exp": 9999999999}, "other-secret", algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        decode_access_token(token, settings=settings)


def test_token_without_subject_is_rejected(settings: AppSettings) -> None:
    token = jwt.encode({"exp": 9999999999}, settings.jwt_secret, algorithm="HS256")

    with pytest.raises(UnauthorizedError):
        decode_access_token(token, settings=settings)
