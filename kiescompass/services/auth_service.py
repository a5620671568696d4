"""Registration, login, profile lookup, and admin user management."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kiescompass.db.models import User
from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.exceptions import ConflictError, NotFoundError, UnauthorizedError
from kiescompass.schemas.auth import (
    AdminUserResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdate,
)
from kiescompass.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from kiescompass.settings import AppSettings, get_settings
from kiescompass.utils.identifiers import normalize_identifier

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Who is making the request, as resolved from the bearer token."""

    user_id: str
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _admin_view(user: User, favorite_ids: list[str]) -> AdminUserResponse:
    return AdminUserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        firstname=user.firstname,
        lastname=user.lastname,
        role=user.role,
        favorite_vkm_ids=favorite_ids,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class AuthService:
    """Account workflows on top of :class:`UserRepository`."""

    def __init__(self, users: UserRepository, *, settings: AppSettings | None = None) -> None:
        self._users = users
        self._settings = settings or get_settings()

    async def _ensure_unique_credentials(
        self, *, username: str | None, email: str | None, exclude_id: str | None = None
    ) -> None:
        if username and await self._users.exists_by_username(username, exclude_id=exclude_id):
            raise ConflictError("Username already in use")
        if email and await self._users.exists_by_email(email, exclude_id=exclude_id):
            raise ConflictError("Email already in use")

    async def register(self, payload: RegisterRequest) -> UserResponse:
        await self._ensure_unique_credentials(username=payload.username, email=payload.email)

        user = await self._users.create(
            username=payload.username,
            email=payload.email,
            firstname=payload.firstname,
            lastname=payload.lastname,
            password_hash=hash_password(payload.password),
        )
        logger.info("Registered user %s (%s)", user.username, user.id)
        return UserResponse.model_validate(user)

    async def login(self, payload: LoginRequest) -> TokenResponse:
        """Exchange credentials for a bearer token.

        Unknown usernames and wrong passwords produce the same error so the
        response does not reveal which accounts exist.
        """

        user = await self._users.find_by_username(payload.username)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning("Failed login attempt for username=%r", payload.username)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token = create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            settings=self._settings,
        )
        return TokenResponse(access_token=token)

    async def get_profile(self, user_id: str) -> UserResponse:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return UserResponse.model_validate(user)

    async def validate_user(self, user_id: str) -> CallerIdentity | None:
        """Resolve a token subject to a live identity, or ``None`` if the user is gone."""

        user = await self._users.find_by_id(user_id)
        if user is None:
            return None
        return CallerIdentity(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
        )

    # -- Admin ----------------------------------------------------------------

    async def get_all_users(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        firstname: str | None = None,
        lastname: str | None = None,
        role: str | None = None,
    ) -> list[AdminUserResponse]:
        users = await self._users.find_all(
            username=username,
            email=email,
            firstname=firstname,
            lastname=lastname,
            role=role,
        )
        favorites = await self._users.get_favorite_vkm_ids_for_users(user.id for user in users)
        return [_admin_view(user, favorites.get(user.id, [])) for user in users]

    async def get_user_by_id(self, user_id: object) -> AdminUserResponse:
        identifier = normalize_identifier(user_id)
        user = await self._users.find_by_id(identifier)
        if user is None:
            raise NotFoundError("User", identifier)
        return _admin_view(user, await self._users.get_favorite_vkm_ids(identifier))

    async def update_user(self, user_id: object, payload: UserUpdate) -> AdminUserResponse:
        identifier = normalize_identifier(user_id)
        if await self._users.find_by_id(identifier) is None:
            raise NotFoundError("User", identifier)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        await self._ensure_unique_credentials(
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=identifier,
        )

        user = await self._users.update(identifier, changes)
        if user is None:
            raise NotFoundError("User", identifier)
        logger.info("Updated user %s fields=%s", identifier, sorted(changes))
        return _admin_view(user, await self._users.get_favorite_vkm_ids(identifier))

    async def delete_user(self, user_id: object) -> MessageResponse:
        identifier = normalize_identifier(user_id)
        if not await self._users.delete(identifier):
            raise NotFoundError("User", identifier)
        logger.info("Deleted user %s", identifier)
        return MessageResponse(message="User successfully deleted")


__all__ = ["AuthService", "CallerIdentity", "INVALID_CREDENTIALS"]
