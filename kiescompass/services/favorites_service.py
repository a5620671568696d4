"""Favorite toggling and hydration of a user's favorite catalog entries.

The favorite set is owned by the user store and read fresh on every call;
nothing here keeps a copy between requests.
"""

from __future__ import annotations

import logging

from kiescompass.exceptions import NotFoundError
from kiescompass.schemas.vkm import ToggleFavoriteResponse, VkmResponse
from kiescompass.services.catalog_presentation import favorite_set, vkms_to_responses
from kiescompass.services.stores import CatalogStore, FavoriteStore
from kiescompass.utils.identifiers import normalize_identifier

logger = logging.getLogger(__name__)

ADDED_MESSAGE = "VKM added to favorites"
REMOVED_MESSAGE = "VKM removed from favorites"


class FavoritesService:
    """Coordinates the user store and the catalog store for favorites."""

    def __init__(self, *, users: FavoriteStore, catalog: CatalogStore) -> None:
        self._users = users
        self._catalog = catalog

    async def toggle_favorite(self, user_id: object, vkm_id: object) -> ToggleFavoriteResponse:
        """Add ``vkm_id`` to the user's favorites, or remove it if present.

        Raises:
            NotFoundError: The catalog entry or the user does not exist. Both
                checks run before the favorite set is touched.
        """

        uid = normalize_identifier(user_id)
        item = normalize_identifier(vkm_id)

        if await self._catalog.find_by_id(item) is None:
            raise NotFoundError("VKM", item)
        if not await self._users.touch(uid):
            raise NotFoundError("User", uid)

        is_favorited = await self._users.toggle_favorite_vkm(uid, item)
        logger.info(
            "Favorite toggled",
            extra={"user_id": uid, "vkm_id": item, "is_favorited": is_favorited},
        )
        return ToggleFavoriteResponse(
            is_favorited=is_favorited,
            message=ADDED_MESSAGE if is_favorited else REMOVED_MESSAGE,
        )

    async def get_user_favorites(self, user_id: object) -> list[VkmResponse]:
        """Return the user's favorite entries, all marked ``is_favorited``.

        Ids pointing at entries deleted since they were favorited are skipped.
        """

        favorites = favorite_set(await self._users.get_favorite_vkm_ids(user_id))
        if not favorites:
            return []

        entries = await self._catalog.find_by_ids(sorted(favorites))
        return vkms_to_responses(entries, favorites)


__all__ = ["ADDED_MESSAGE", "FavoritesService", "REMOVED_MESSAGE"]
