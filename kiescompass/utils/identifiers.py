"""Identifier handling shared by repositories and services.

Catalog and user identifiers are opaque strings everywhere outside the
database layer. Any value that may arrive in another shape (``uuid.UUID``,
integers from legacy imports, padded path parameters) goes through
:func:`normalize_identifier` before it is compared or stored.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

__all__ = ["new_identifier", "normalize_identifier", "normalize_identifiers"]


def new_identifier() -> str:
    """Return a new opaque identifier for users and catalog entries."""

    return uuid.uuid4().hex


def normalize_identifier(value: object) -> str:
    """Return the canonical string form of ``value``."""

    if isinstance(value, uuid.UUID):
        return value.hex
    return str(value).strip()


def normalize_identifiers(values: Iterable[object]) -> list[str]:
    """Normalize ``values`` and drop duplicates while keeping first-seen order."""

    seen: set[str] = set()
    normalized: list[str] = []
    for value in values:
        candidate = normalize_identifier(value)
        if candidate and candidate not in seen:
            seen.add(candidate)
            normalized.append(candidate)
    return normalized
