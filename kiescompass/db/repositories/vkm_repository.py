"""Catalog store backed by the ``vkm`` table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete, select

from kiescompass.db.models import Vkm
from kiescompass.db.repositories.base import BaseRepository
from kiescompass.db.repositories.vkm_filters import (
    VkmFilters,
    apply_vkm_filters,
    effectively_active_clause,
)
from kiescompass.schemas.vkm import MAX_DB_INT
from kiescompass.utils.identifiers import normalize_identifier, normalize_identifiers

# Columns an update payload may touch; anything else is ignored.
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "short_description",
        "description",
        "content",
        "study_credit",
        "location",
        "contact_id",
        "level",
        "learning_outcomes",
        "is_active",
    }
)


class VkmRepository(BaseRepository):
    """Query and mutate catalog entries."""

    async def find_all(self, filters: VkmFilters | None = None) -> list[Vkm]:
        """Return entries matching ``filters`` ordered by name."""

        stmt = apply_vkm_filters(select(Vkm), filters).order_by(Vkm.name, Vkm.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_id(self, vkm_id: object) -> Vkm | None:
        return await self._session.get(Vkm, normalize_identifier(vkm_id))

    async def find_by_legacy_id(self, legacy_id: int) -> Vkm | None:
        """Return the entry imported from CSV row ``legacy_id``, if any."""

        stmt = select(Vkm).where(Vkm.legacy_id == legacy_id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_ids(self, vkm_ids: Iterable[object]) -> list[Vkm]:
        """Batch lookup; ids with no matching row are silently dropped."""

        identifiers = normalize_identifiers(vkm_ids)
        if not identifiers:
            return []

        stmt = select(Vkm).where(Vkm.id.in_(identifiers)).order_by(Vkm.name, Vkm.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, data: Mapping[str, Any]) -> Vkm:
        """Insert a new, active catalog entry."""

        values = {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}
        values["is_active"] = True
        if data.get("legacy_id") is not None:
            values["legacy_id"] = data["legacy_id"]
        entry = Vkm(**values)
        self._session.add(entry)
        await self._session.flush()
        await self._session.refresh(entry)
        return entry

    async def update(self, vkm_id: object, changes: Mapping[str, Any]) -> Vkm | None:
        """Apply a partial update; returns ``None`` when the entry is missing."""

        entry = await self.find_by_id(vkm_id)
        if entry is None:
            return None

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(entry, key, value)

        await self._session.flush()
        await self._session.refresh(entry)
        return entry

    async def delete(self, vkm_id: object) -> bool:
        result = await self._session.execute(
            delete(Vkm).where(Vkm.id == normalize_identifier(vkm_id))
        )
        return bool(result.rowcount)

    async def deactivate(self, vkm_id: object) -> Vkm | None:
        """Soft delete: flip ``is_active`` to ``False`` and keep the row."""

        return await self.update(vkm_id, {"is_active": False})

    async def get_recommendations(self, user_id: object | None, limit: int) -> list[Vkm]:
        """Return up to ``limit`` active entries, lowest study credit first.

        Ties on credit are broken by descending id so the order is stable
        across calls. ``user_id`` is accepted for interface parity with a
        personalised ranking and does not affect the result. A ``limit``
        beyond what the database accepts is clamped; no catalog is that big.
        """

        stmt = (
            select(Vkm)
            .where(effectively_active_clause())
            .order_by(Vkm.study_credit.asc(), Vkm.id.desc())
            .limit(min(limit, MAX_DB_INT))
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
