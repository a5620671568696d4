"""Integration tests for the user store and its favorite-set primitives."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kiescompass.db.models import UserFavorite
from kiescompass.db.repositories.user_repository import UserRepository


@pytest.mark.asyncio
async def test_toggle_adds_then_removes(session: AsyncSession, make_user) -> None:
    user = await make_user()
    repository = UserRepository(session)

    assert await repository.toggle_favorite_vkm(user.id, "vkm-1") is True
    assert await repository.get_favorite_vkm_ids(user.id) == ["vkm-1"]

    assert await repository.toggle_favorite_vkm(user.id, "vkm-1") is False
    assert await repository.get_favorite_vkm_ids(user.id) == []


@pytest.mark.asyncio
async def test_toggle_never_duplicates_an_item(session: AsyncSession, make_user) -> None:
    user = await make_user()
    repository = UserRepository(session)

    for _ in range(3):
        await repository.toggle_favorite_vkm(user.id, "vkm-1")
    await repository.toggle_favorite_vkm(user.id, " vkm-2 ")

    count = await session.scalar(
        select(func.count()).select_from(UserFavorite).where(UserFavorite.vkm_id == "vkm-1")
    )
    assert count == 1
    assert sorted(await repository.get_favorite_vkm_ids(user.id)) == ["vkm-1", "vkm-2"]


@pytest.mark.asyncio
async def test_toggle_keeps_users_independent(session: AsyncSession, make_user) -> None:
    first = await make_user("first")
    second = await make_user("second")
    repository = UserRepository(session)

    await repository.toggle_favorite_vkm(first.id, "vkm-1")

    assert await repository.get_favorite_vkm_ids(second.id) == []
    favorites = await repository.get_favorite_vkm_ids_for_users([first.id, second.id])
    assert favorites == {first.id: ["vkm-1"], second.id: []}


@pytest.mark.asyncio
async def test_touch_reports_missing_users(session: AsyncSession, make_user) -> None:
    user = await make_user()
    repository = UserRepository(session)

    assert await repository.touch(user.id) is True
    assert await repository.touch("does-not-exist") is False


@pytest.mark.asyncio
async def test_username_and_email_lookups_ignore_case(session: AsyncSession, make_user) -> None:
    user = await make_user("JohnDoe")
    repository = UserRepository(session)

    assert (await repository.find_by_username("johndoe")).id == user.id
    assert (await repository.find_by_email("JOHNDOE@Example.com")).id == user.id
    assert user.email == "johndoe@example.com"
    assert await repository.exists_by_username("JOHNDOE") is True
    assert await repository.exists_by_username("JOHNDOE", exclude_id=user.id) is False
    assert await repository.exists_by_email("nobody@example.com") is False


@pytest.mark.asyncio
async def test_find_all_filters(session: AsyncSession, make_user) -> None:
    await make_user("alice")
    await make_user("bob", role="admin")
    repository = UserRepository(session)

    assert [u.username for u in await repository.find_all()] == ["alice", "bob"]
    assert [u.username for u in await repository.find_all(role="admin")] == ["bob"]
    assert [u.username for u in await repository.find_all(username="LIC")] == ["alice"]


@pytest.mark.asyncio
async def test_delete_removes_favorites(session: AsyncSession, make_user) -> None:
    user = await make_user()
    repository = UserRepository(session)
    await repository.toggle_favorite_vkm(user.id, "vkm-1")

    assert await repository.delete(user.id) is True
    assert await repository.delete(user.id) is False

    remaining = await session.scalar(select(func.count()).select_from(UserFavorite))
    assert remaining == 0


@pytest.mark.asyncio
async def test_toggle_losing_insert_removes_the_pair(
    session: AsyncSession, make_user, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A concurrent toggle that added the pair first turns this toggle into a removal."""

    user = await make_user()
    repository = UserRepository(session)
    assert await repository.toggle_favorite_vkm(user.id, "vkm-1") is True

    # Hide the row from the first DELETE, as if the other toggle committed in between.
    original_execute = session.execute
    skipped: list[object] = []

    async def _execute(statement, *args, **kwargs):
        if getattr(statement, "is_delete", False) and not skipped:
            skipped.append(statement)
            return SimpleNamespace(rowcount=0)
        return await original_execute(statement, *args, **kwargs)

    monkeypatch.setattr(session, "execute", _execute)

    assert await repository.toggle_favorite_vkm(user.id, "vkm-1") is False
    assert len(skipped) == 1
    assert await repository.get_favorite_vkm_ids(user.id) == []
