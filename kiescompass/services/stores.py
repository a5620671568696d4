"""Store interfaces the catalog, favorites, and recommendation services need.

The SQLAlchemy repositories satisfy these structurally; tests substitute
in-memory doubles.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CatalogStore(Protocol):
    """Minimal catalog surface used by the favorites and recommendation services."""

    async def find_by_id(self, vkm_id: object) -> Any | None:
        """Return the entry or ``None``."""

    async def find_by_ids(self, vkm_ids: Iterable[object]) -> Sequence[Any]:
        """Return entries for known ids; unknown ids are dropped."""

    async def get_recommendations(self, user_id: object | None, limit: int) -> Sequence[Any]:
        """Return up to ``limit`` active entries in recommendation order."""


@runtime_checkable
class FavoriteStore(Protocol):
    """User-side operations that read or flip the favorite set."""

    async def touch(self, user_id: object) -> bool:
        """Bump the user's ``updated_at``; ``False`` when the user is missing."""

    async def toggle_favorite_vkm(self, user_id: object, vkm_id: object) -> bool:
        """Flip membership atomically and return the new membership."""

    async def get_favorite_vkm_ids(self, user_id: object) -> Sequence[str]:
        """Return the ids currently in the user's favorite set."""


__all__ = ["CatalogStore", "FavoriteStore"]
