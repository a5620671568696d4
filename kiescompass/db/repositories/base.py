"""Base repository utilities shared across all repository implementations."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

LIKE_ESCAPE_CHAR = "\\"


def escape_like(value: str) -> str:
    """Escape ``LIKE`` wildcards so ``value`` matches literally."""

    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def contains_clause(column: Any, value: str) -> Any:
    """Return a case-insensitive literal substring predicate for ``column``.

    User input is treated as plain text rather than a pattern: ``%`` and
    ``_`` typed by a student searching the catalog match themselves.
    """

    return column.ilike(f"%{escape_like(value)}%", escape=LIKE_ESCAPE_CHAR)


class BaseRepository:
    """Base repository providing common functionality for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session
