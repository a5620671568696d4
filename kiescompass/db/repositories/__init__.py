"""Repository package for database access layer."""

from kiescompass.db.repositories.base import BaseRepository
from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.db.repositories.vkm_filters import (
    VkmFilters,
    effectively_active_clause,
    is_effectively_active,
    normalize_vkm_filters,
)
from kiescompass.db.repositories.vkm_repository import VkmRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "VkmFilters",
    "VkmRepository",
    "effectively_active_clause",
    "is_effectively_active",
    "normalize_vkm_filters",
]
