"""User store: accounts plus each user's favorite catalog-id set."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from kiescompass.db.models import User, UserFavorite, utcnow
from kiescompass.db.repositories.base import BaseRepository, contains_clause
from kiescompass.utils.identifiers import normalize_identifier, normalize_identifiers

UPDATABLE_FIELDS = frozenset({"username", "email", "firstname", "lastname", "role"})


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository):
    """Query and mutate users and their favorites."""

    async def find_by_id(self, user_id: object) -> User | None:
        return await self._session.get(User, normalize_identifier(user_id))

    async def find_by_username(self, username: str) -> User | None:
        """Case-insensitive exact match on the username."""

        stmt = select(User).where(func.lower(User.username) == username.strip().lower())
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == _normalize_email(email))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        firstname: str | None = None,
        lastname: str | None = None,
        role: str | None = None,
    ) -> list[User]:
        """Return users oldest first.

        Name and email filters match case-insensitive substrings; ``role``
        matches exactly.
        """

        stmt = select(User).order_by(User.created_at, User.id)
        for column, value in (
            (User.username, username),
            (User.email, email),
            (User.firstname, firstname),
            (User.lastname, lastname),
        ):
            if value and value.strip():
                stmt = stmt.where(contains_clause(column, value.strip()))
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def exists_by_username(self, username: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(func.count()).select_from(User).where(
            func.lower(User.username) == username.strip().lower()
        )
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return bool(await self._session.scalar(stmt))

    async def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(func.count()).select_from(User).where(
            User.email == _normalize_email(email)
        )
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return bool(await self._session.scalar(stmt))

    async def create(
        self,
        *,
        username: str,
        email: str,
        firstname: str,
        lastname: str,
        password_hash: str,
        role: str = "student",
    ) -> User:
        user = User(
            username=username.strip(),
            email=email,
            firstname=firstname.strip(),
            lastname=lastname.strip(),
            password_hash=password_hash,
            role=role,
        )
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def update(self, user_id: object, changes: Mapping[str, Any]) -> User | None:
        """Apply a partial update; returns ``None`` when the user is missing."""

        user = await self.find_by_id(user_id)
        if user is None:
            return None

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(user, key, value)

        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def delete(self, user_id: object) -> bool:
        user = await self.find_by_id(user_id)
        if user is None:
            return False
        await self._session.delete(user)
        await self._session.flush()
        return True

    async def touch(self, user_id: object) -> bool:
        """Bump ``updated_at``; ``False`` means no such user exists."""

        result = await self._session.execute(
            update(User)
            .where(User.id == normalize_identifier(user_id))
            .values(updated_at=utcnow())
        )
        return bool(result.rowcount)

    async def toggle_favorite_vkm(self, user_id: object, vkm_id: object) -> bool:
        """Flip membership of ``vkm_id`` in the user's favorite set.

        Returns the membership after the call. The flip is decided by the
        database rather than a prior read: the delete reports whether a row
        existed, and the composite primary key rejects a second insert of
        the same pair. Losing that insert race means another toggle added
        the item in the meantime, so this call removes it again.
        """

        uid = normalize_identifier(user_id)
        item = normalize_identifier(vkm_id)
        match = (UserFavorite.user_id == uid) & (UserFavorite.vkm_id == item)

        removed = await self._session.execute(delete(UserFavorite).where(match))
        if removed.rowcount:
            return False

        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    insert(UserFavorite).values(user_id=uid, vkm_id=item, added_at=utcnow())
                )
        except IntegrityError:
            await self._session.execute(delete(UserFavorite).where(match))
            return False

        return True

    async def get_favorite_vkm_ids(self, user_id: object) -> list[str]:
        """Return the favorite set in the order items were added."""

        stmt = (
            select(UserFavorite.vkm_id)
            .where(UserFavorite.user_id == normalize_identifier(user_id))
            .order_by(UserFavorite.added_at, UserFavorite.vkm_id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_favorite_vkm_ids_for_users(
        self, user_ids: Iterable[object]
    ) -> dict[str, list[str]]:
        """Batch variant of :meth:`get_favorite_vkm_ids` keyed by user id."""

        identifiers = normalize_identifiers(user_ids)
        favorites: dict[str, list[str]] = {uid: [] for uid in identifiers}
        if not identifiers:
            return favorites

        stmt = (
            select(UserFavorite.user_id, UserFavorite.vkm_id)
            .where(UserFavorite.user_id.in_(identifiers))
            .order_by(UserFavorite.added_at, UserFavorite.vkm_id)
        )
        result = await self._session.execute(stmt)
        for uid, vkm_id in result.all():
            favorites[uid].append(vkm_id)
        return favorites
