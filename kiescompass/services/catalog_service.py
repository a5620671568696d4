"""Catalog listing, lookup, and admin mutations."""

from __future__ import annotations

import logging

from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.db.repositories.vkm_filters import VkmFilters
from kiescompass.db.repositories.vkm_repository import VkmRepository
from kiescompass.exceptions import NotFoundError
from kiescompass.schemas.vkm import VkmCreate, VkmResponse, VkmUpdate
from kiescompass.services.catalog_presentation import (
    NO_FAVORITES,
    favorite_set,
    vkm_to_response,
    vkms_to_responses,
)
from kiescompass.utils.identifiers import normalize_identifier

logger = logging.getLogger(__name__)


class CatalogService:
    """Read paths annotate ``is_favorited`` for a known caller; admin writes never do."""

    def __init__(self, *, catalog: VkmRepository, users: UserRepository) -> None:
        self._catalog = catalog
        self._users = users

    async def _favorites_for(self, user_id: object | None) -> frozenset[str]:
        if user_id is None:
            return NO_FAVORITES
        return favorite_set(await self._users.get_favorite_vkm_ids(user_id))

    async def get_all_vkms(
        self, filters: VkmFilters | None = None, user_id: object | None = None
    ) -> list[VkmResponse]:
        entries = await self._catalog.find_all(filters)
        return vkms_to_responses(entries, await self._favorites_for(user_id))

    async def get_vkm_by_id(self, vkm_id: object, user_id: object | None = None) -> VkmResponse:
        identifier = normalize_identifier(vkm_id)
        entry = await self._catalog.find_by_id(identifier)
        if entry is None:
            raise NotFoundError("VKM", identifier)
        return vkm_to_response(entry, await self._favorites_for(user_id))

    async def create_vkm(self, payload: VkmCreate) -> VkmResponse:
        entry = await self._catalog.create(payload.model_dump())
        logger.info("Created VKM %s (%s)", entry.id, entry.name)
        return vkm_to_response(entry)

    async def update_vkm(self, vkm_id: object, payload: VkmUpdate) -> VkmResponse:
        identifier = normalize_identifier(vkm_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        entry = await self._catalog.update(identifier, changes)
        if entry is None:
            raise NotFoundError("VKM", identifier)
        logger.info("Updated VKM %s fields=%s", identifier, sorted(changes))
        return vkm_to_response(entry)

    async def delete_vkm(self, vkm_id: object) -> None:
        identifier = normalize_identifier(vkm_id)
        if not await self._catalog.delete(identifier):
            raise NotFoundError("VKM", identifier)
        logger.info("Deleted VKM %s", identifier)

    async def deactivate_vkm(self, vkm_id: object) -> VkmResponse:
        identifier = normalize_identifier(vkm_id)
        entry = await self._catalog.deactivate(identifier)
        if entry is None:
            raise NotFoundError("VKM", identifier)
        logger.info("Deactivated VKM %s", identifier)
        return vkm_to_response(entry)


__all__ = ["CatalogService"]
