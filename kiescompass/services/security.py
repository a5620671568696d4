"""Password hashing and bearer-token helpers.

Tokens carry the user's id as ``sub`` plus a few display claims. Only ``sub``
is trusted on the way back in: the caller dependency re-reads role and
existence from the database on every request.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from kiescompass.exceptions import UnauthorizedError
from kiescompass.settings import AppSettings, get_settings

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password securely."""
    return _pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its hash; malformed hashes never match."""
    try:
        return _pwd_context.verify(password, hashed)
    except ValueError:
        return False


def create_access_token(
    *,
    user_id: str,
    username: str,
    email: str,
    role: str,
    settings: AppSettings | None = None,
    now: datetime | None = None,
) -> str:
    settings = settings or get_settings()
    issued_at = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": user_id,
        "username": username,
        "email": email,
        "role": role,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(minutes=settings.jwt_expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, settings: AppSettings | None = None) -> dict[str, Any]:
    """Decode ``token`` and return its claims.

    Raises:
        UnauthorizedError: When the signature, expiry, or ``sub`` claim is invalid.
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid authentication token") from exc

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise UnauthorizedError("Invalid authentication token")
    return claims


__all__ = [
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
