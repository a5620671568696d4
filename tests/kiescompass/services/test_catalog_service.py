"""Tests for catalog listing, lookup, and admin mutations."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.db.repositories.vkm_filters import VkmFilters
from kiescompass.db.repositories.vkm_repository import VkmRepository
from kiescompass.exceptions import NotFoundError
from kiescompass.schemas.vkm import VkmCreate, VkmUpdate
from kiescompass.services.catalog_service import CatalogService
from tests.kiescompass.support.factories import vkm_values


def _service(session: AsyncSession) -> CatalogService:
    return CatalogService(catalog=VkmRepository(session), users=UserRepository(session))


@pytest.mark.asyncio
async def test_listing_annotates_only_the_callers_favorites(
    session: AsyncSession, make_user, make_vkm
) -> None:
    user = await make_user()
    for identifier in ("X", "Y", "Z"):
        await make_vkm(id=identifier, name=f"Module {identifier}")
    await UserRepository(session).toggle_favorite_vkm(user.id, "Y")
    service = _service(session)

    listing = await service.get_all_vkms(VkmFilters(), user.id)
    anonymous = await service.get_all_vkms(VkmFilters())

    assert {entry.id: entry.is_favorited for entry in listing} == {
        "X": False,
        "Y": True,
        "Z": False,
    }
    assert not any(entry.is_favorited for entry in anonymous)


@pytest.mark.asyncio
async def test_lookup_by_id(session: AsyncSession, make_user, make_vkm) -> None:
    user = await make_user()
    await make_vkm(id="X", is_active=None, short_description=None)
    await UserRepository(session).toggle_favorite_vkm(user.id, "X")
    service = _service(session)

    entry = await service.get_vkm_by_id("X", user.id)

    assert entry.is_favorited is True
    assert entry.is_active is True
    assert entry.short_description == ""

    with pytest.raises(NotFoundError) as excinfo:
        await service.get_vkm_by_id("missing")
    assert excinfo.value.message == "VKM with ID missing not found"


@pytest.mark.asyncio
async def test_create_update_deactivate_delete(session: AsyncSession) -> None:
    service = _service(session)
    values = vkm_values()
    values.pop("is_active")

    created = await service.create_vkm(VkmCreate(**values))
    assert created.is_active is True
    assert created.is_favorited is False

    updated = await service.update_vkm(created.id, VkmUpdate(study_credit=30))
    assert updated.study_credit == 30
    assert updated.name == created.name

    deactivated = await service.deactivate_vkm(created.id)
    assert deactivated.is_active is False

    await service.delete_vkm(created.id)
    with pytest.raises(NotFoundError):
        await service.delete_vkm(created.id)
    with pytest.raises(NotFoundError):
        await service.update_vkm(created.id, VkmUpdate(name="Renamed"))
    with pytest.raises(NotFoundError):
        await service.deactivate_vkm(created.id)
