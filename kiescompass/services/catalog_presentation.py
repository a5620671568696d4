"""Conversion of catalog rows into API payloads."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from kiescompass.db.repositories.vkm_filters import is_effectively_active
from kiescompass.schemas.vkm import VkmResponse
from kiescompass.utils.identifiers import normalize_identifier

NO_FAVORITES: frozenset[str] = frozenset()


def vkm_to_response(entry: Any, favorite_ids: frozenset[str] = NO_FAVORITES) -> VkmResponse:
    """Build a :class:`VkmResponse` with ``is_favorited`` derived from ``favorite_ids``."""

    identifier = normalize_identifier(entry.id)
    return VkmResponse(
        id=identifier,
        name=entry.name,
        short_description=entry.short_description or "",
        description=entry.description,
        content=entry.content,
        study_credit=entry.study_credit,
        location=entry.location,
        contact_id=entry.contact_id,
        level=entry.level,
        learning_outcomes=entry.learning_outcomes or "",
        is_active=is_effectively_active(entry),
        created_at=entry.created_at,
        updated_at=entry.updated_at,
        is_favorited=identifier in favorite_ids,
    )


def vkms_to_responses(
    entries: Iterable[Any], favorite_ids: frozenset[str] = NO_FAVORITES
) -> list[VkmResponse]:
    return [vkm_to_response(entry, favorite_ids) for entry in entries]


def favorite_set(ids: Iterable[object]) -> frozenset[str]:
    """Return the canonical favorite set used for membership checks."""

    return frozenset(normalize_identifier(value) for value in ids)


__all__ = ["NO_FAVORITES", "favorite_set", "vkm_to_response", "vkms_to_responses"]
