"""Catalog filter types and the single definition of an "active" entry.

Entries imported before the ``is_active`` column existed carry ``NULL``.
Those count as active everywhere: in listings filtered on ``is_active=true``,
in recommendations, and in any Python-side check. Both the in-memory
predicate and its SQL twin live here so the two can never drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, or_

from kiescompass.db.models import Vkm
from kiescompass.db.repositories.base import contains_clause


@dataclass(frozen=True, slots=True)
class VkmFilters:
    """Normalized catalog search filters. ``None`` means "no constraint"."""

    name: str | None = None
    short_description: str | None = None
    description: str | None = None
    content: str | None = None
    learning_outcomes: str | None = None
    location: str | None = None
    level: str | None = None
    study_credit: int | None = None
    contact_id: str | None = None
    is_active: bool | None = None


_TEXT_FILTERS = (
    "name",
    "short_description",
    "description",
    "content",
    "learning_outcomes",
    "location",
)
_EXACT_FILTERS = ("level", "contact_id")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def normalize_vkm_filters(
    *,
    name: str | None = None,
    short_description: str | None = None,
    description: str | None = None,
    content: str | None = None,
    learning_outcomes: str | None = None,
    location: str | None = None,
    level: str | None = None,
    study_credit: int | None = None,
    contact_id: str | None = None,
    is_active: bool | None = None,
) -> VkmFilters:
    """Return sanitized filters; blank strings are treated as absent."""

    return VkmFilters(
        name=_clean(name),
        short_description=_clean(short_description),
        description=_clean(description),
        content=_clean(content),
        learning_outcomes=_clean(learning_outcomes),
        location=_clean(location),
        level=_clean(level),
        study_credit=study_credit,
        contact_id=_clean(contact_id),
        is_active=is_active,
    )


def is_effectively_active(entry: Any) -> bool:
    """Return ``True`` unless the entry has been explicitly deactivated."""

    return getattr(entry, "is_active", None) is not False


def effectively_active_clause() -> Any:
    """SQL counterpart of :func:`is_effectively_active`."""

    return or_(Vkm.is_active.is_(True), Vkm.is_active.is_(None))


def active_status_clause(value: bool) -> Any:
    """Match entries whose flag equals ``value`` or was never set."""

    return or_(Vkm.is_active == value, Vkm.is_active.is_(None))


def apply_vkm_filters(statement: Select[Any], filters: VkmFilters | None) -> Select[Any]:
    """Narrow ``statement`` by every populated field of ``filters``."""

    if filters is None:
        return statement

    for field in _TEXT_FILTERS:
        value = getattr(filters, field)
        if value is not None:
            statement = statement.where(contains_clause(getattr(Vkm, field), value))

    for field in _EXACT_FILTERS:
        value = getattr(filters, field)
        if value is not None:
            statement = statement.where(getattr(Vkm, field) == value)

    if filters.study_credit is not None:
        statement = statement.where(Vkm.study_credit == filters.study_credit)

    if filters.is_active is not None:
        statement = statement.where(active_status_clause(filters.is_active))

    return statement


__all__ = [
    "VkmFilters",
    "active_status_clause",
    "apply_vkm_filters",
    "effectively_active_clause",
    "is_effectively_active",
    "normalize_vkm_filters",
]
