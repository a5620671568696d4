"""Recommendation list for the current caller."""

from __future__ import annotations

import logging

from kiescompass.exceptions import ValidationError
from kiescompass.schemas.vkm import VkmResponse
from kiescompass.services.catalog_presentation import (
    NO_FAVORITES,
    favorite_set,
    vkms_to_responses,
)
from kiescompass.services.stores import CatalogStore, FavoriteStore
from kiescompass.settings import DEFAULT_RECOMMENDATION_LIMIT

logger = logging.getLogger(__name__)


class RecommendationService:
    """Bounded, deterministically ordered list of active catalog entries.

    Ordering is ascending study credit, then descending id. The caller only
    influences the ``is_favorited`` annotation, never which entries are
    chosen or their order.
    """

    def __init__(
        self,
        *,
        users: FavoriteStore,
        catalog: CatalogStore,
        default_limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    ) -> None:
        self._users = users
        self._catalog = catalog
        self._default_limit = default_limit

    async def get_recommendations(
        self, user_id: object | None, limit: int | None = None
    ) -> list[VkmResponse]:
        if limit is None:
            limit = self._default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError(
                "limit must be a positive integer", field="limit", value=limit
            )

        entries = await self._catalog.get_recommendations(user_id, limit)

        if user_id is None:
            favorites = NO_FAVORITES
        else:
            favorites = favorite_set(await self._users.get_favorite_vkm_ids(user_id))

        logger.debug(
            "Resolved %d recommendations (limit=%d, anonymous=%s)",
            len(entries),
            limit,
            user_id is None,
        )
        return vkms_to_responses(entries, favorites)


__all__ = ["RecommendationService"]
