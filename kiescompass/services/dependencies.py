"""FastAPI dependency wiring for backend services.

Separating dependency factories from service implementation modules keeps the
latter free of web-layer concerns, enabling easier reuse in tests and other
consumers (e.g. CLI utilities).
"""

from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from kiescompass.db.connection import get_db
from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.db.repositories.vkm_repository import VkmRepository
from kiescompass.exceptions import ForbiddenError, UnauthorizedError
from kiescompass.services.auth_service import AuthService, CallerIdentity
from kiescompass.services.catalog_service import CatalogService
from kiescompass.services.favorites_service import FavoritesService
from kiescompass.services.recommendation_service import RecommendationService
from kiescompass.services.security import decode_access_token
from kiescompass.settings import get_settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(session: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(session))


def get_catalog_service(session: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(catalog=VkmRepository(session), users=UserRepository(session))


def get_favorites_service(session: AsyncSession = Depends(get_db)) -> FavoritesService:
    return FavoritesService(users=UserRepository(session), catalog=VkmRepository(session))


def get_recommendation_service(
    session: AsyncSession = Depends(get_db),
) -> RecommendationService:
    """Wire both stores plus the configured default limit."""

    return RecommendationService(
        users=UserRepository(session),
        catalog=VkmRepository(session),
        default_limit=get_settings().recommendation_default_limit,
    )


async def _resolve_caller(
    credentials: HTTPAuthorizationCredentials | None,
    auth_service: AuthService,
) -> CallerIdentity:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")

    claims = decode_access_token(credentials.credentials)
    caller = await auth_service.validate_user(claims["sub"])
    if caller is None:
        raise UnauthorizedError("User no longer exists")
    return caller


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> CallerIdentity:
    """Require a valid bearer token; raises ``UnauthorizedError`` otherwise."""

    return await _resolve_caller(credentials, auth_service)


async def get_optional_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> CallerIdentity | None:
    """Return the caller when a usable token is present, otherwise ``None``.

    A missing, malformed, or expired token simply means an anonymous caller
    on routes where identity only affects favorite annotation.
    """

    if credentials is None:
        return None
    try:
        return await _resolve_caller(credentials, auth_service)
    except UnauthorizedError as exc:
        logger.debug("Ignoring unusable token on optional-auth route: %s", exc.message)
        return None


async def require_admin(caller: CallerIdentity = Depends(get_current_caller)) -> CallerIdentity:
    if not caller.is_admin:
        raise ForbiddenError("Admin access required")
    return caller


__all__ = [
    "CallerIdentity",
    "bearer_scheme",
    "get_auth_service",
    "get_catalog_service",
    "get_current_caller",
    "get_favorites_service",
    "get_optional_caller",
    "get_recommendation_service",
    "require_admin",
]
